from django.http import HttpResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from .serializers import (
    # Input serializers
    ProgressQuerySerializer,
    DailyProgressQuerySerializer,
    VerifyVoucherInputSerializer,
    # Response serializers
    ProgressSummarySerializer,
    DailyProgressSerializer,
    VoucherSerializer,
    ErrorSerializer,
)
from .services import (
    get_progress_summary,
    get_daily_progress,
    issue_voucher,
    get_voucher,
    verify_voucher_payload,
    render_voucher_qr,
    UserNotFoundError,
    NotEligibleError,
    InvalidVoucherPayloadError,
    VoucherStorageError,
)


def _storage_unavailable(e):
    return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)


@extend_schema(
    parameters=[
        OpenApiParameter('as_of', OpenApiTypes.DATE, description='Evaluate progress at this day (YYYY-MM-DD)'),
    ],
    responses={200: ProgressSummarySerializer},
    description="Get the tourist's trip progress, streak and voucher eligibility.",
    tags=['rewards'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def progress_summary(request):
    """Get current user's progress summary - thin HTTP handler."""
    query_serializer = ProgressQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    data = get_progress_summary(
        user_id=request.user.id,
        as_of=query_serializer.validated_data.get('as_of'),
    )

    return Response(data)


@extend_schema(
    parameters=[
        OpenApiParameter('limit', OpenApiTypes.INT, description='Number of days (1-365)', default=30),
    ],
    responses={200: DailyProgressSerializer(many=True)},
    description="Get the tourist's recent daily rewards, newest first.",
    tags=['rewards'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def daily_progress(request):
    """Get current user's daily progress - thin HTTP handler."""
    query_serializer = DailyProgressQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    data = get_daily_progress(
        user_id=request.user.id,
        limit=query_serializer.validated_data['limit'],
    )

    return Response(data)


@extend_schema(
    methods=['GET'],
    responses={200: VoucherSerializer, 404: ErrorSerializer, 503: ErrorSerializer},
    description="Get the tourist's voucher while it is valid.",
    tags=['rewards'],
)
@extend_schema(
    methods=['POST'],
    request=None,
    responses={200: VoucherSerializer, 403: ErrorSerializer, 503: ErrorSerializer},
    description="Issue the tourist's physical-coin voucher. Returns the existing one if already issued.",
    tags=['rewards'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def voucher(request):
    """Get or issue the current user's voucher - thin HTTP handler."""
    if request.method == 'POST':
        try:
            data = issue_voucher(user_id=request.user.id)
        except NotEligibleError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except UserNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except VoucherStorageError as e:
            return _storage_unavailable(e)
        return Response(VoucherSerializer(data).data)

    try:
        data = get_voucher(user_id=request.user.id)
    except VoucherStorageError as e:
        return _storage_unavailable(e)

    if data is None:
        return Response({'error': 'No valid voucher'}, status=status.HTTP_404_NOT_FOUND)

    return Response(VoucherSerializer(data).data)


@extend_schema(
    responses={(200, 'image/png'): OpenApiTypes.BINARY, 404: ErrorSerializer},
    description="Get the voucher QR code as a PNG image.",
    tags=['rewards'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def voucher_qr(request):
    """Render the current user's voucher QR code."""
    try:
        data = get_voucher(user_id=request.user.id)
    except VoucherStorageError as e:
        return _storage_unavailable(e)

    if data is None:
        return Response({'error': 'No valid voucher'}, status=status.HTTP_404_NOT_FOUND)

    return HttpResponse(render_voucher_qr(data), content_type='image/png')


@extend_schema(
    request=VerifyVoucherInputSerializer,
    responses={200: VoucherSerializer, 400: ErrorSerializer, 503: ErrorSerializer},
    description="Verify a scanned voucher payload at a collection point (staff only).",
    tags=['rewards'],
)
@api_view(['POST'])
@permission_classes([IsAdminUser])
def verify_voucher(request):
    """Verify a voucher payload - thin HTTP handler."""
    serializer = VerifyVoucherInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        data = verify_voucher_payload(serializer.validated_data['payload'])
    except InvalidVoucherPayloadError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except VoucherStorageError as e:
        return _storage_unavailable(e)

    return Response(VoucherSerializer(data).data)
