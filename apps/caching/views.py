from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema

from .serializers import ClearCacheInputSerializer, ClearCacheResponseSerializer
from .store import clear_prefix


@extend_schema(
    request=ClearCacheInputSerializer,
    responses={200: ClearCacheResponseSerializer},
    description="Drop every cached entry under a prefix (staff only).",
    tags=['cache'],
)
@api_view(['POST'])
@permission_classes([IsAdminUser])
def clear_cache(request):
    """Clear a cache prefix - thin HTTP handler."""
    serializer = ClearCacheInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    prefix = serializer.validated_data['prefix']

    try:
        generation = clear_prefix(prefix)
    except Exception as e:
        return Response(
            {'error': f'Cache unavailable: {e}'},
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    return Response({'prefix': prefix, 'generation': generation})
