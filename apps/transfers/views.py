from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from .serializers import (
    # Input serializers
    TransferInputSerializer,
    HistoryQuerySerializer,
    DailyQuerySerializer,
    # Response serializers
    QuotaCheckSerializer,
    RecordedTransferSerializer,
    TransferHistoryResponseSerializer,
    DailyDistributionSerializer,
    QuotaErrorSerializer,
    ErrorSerializer,
)
from .services import (
    validate_transfer as check_quota,
    record_transfer,
    get_user_transfer_history,
    get_daily_distribution,
    InvalidAmountError,
    UserNotFoundError,
    RestaurantNotFoundError,
    QuotaExceededError,
    TransferConflictError,
)


@extend_schema(
    request=TransferInputSerializer,
    responses={200: QuotaCheckSerializer},
    description="Check whether a transfer would be accepted, without recording it.",
    tags=['transfers'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def validate_transfer(request):
    """Quota pre-flight - thin HTTP handler."""
    serializer = TransferInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    check = check_quota(
        user_id=request.user.id,
        restaurant_id=data['restaurant_id'],
        amount=data['amount'],
    )

    return Response(check.as_dict())


@extend_schema(
    request=TransferInputSerializer,
    responses={
        201: RecordedTransferSerializer,
        400: QuotaErrorSerializer,
        404: ErrorSerializer,
        409: ErrorSerializer,
    },
    description="Give coins to a restaurant. Enforces the daily and per-restaurant caps.",
    tags=['transfers'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create_transfer(request):
    """Record a transfer - thin HTTP handler."""
    serializer = TransferInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        recorded = record_transfer(
            user_id=request.user.id,
            restaurant_id=data['restaurant_id'],
            amount=data['amount'],
            settlement_hash=data.get('settlement_hash'),
        )
    except InvalidAmountError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except QuotaExceededError as e:
        return Response(
            {'error': str(e), 'quota': e.check.as_dict() if e.check else None},
            status=status.HTTP_400_BAD_REQUEST
        )
    except (UserNotFoundError, RestaurantNotFoundError) as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except TransferConflictError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    output = RecordedTransferSerializer({
        'transfer': recorded.transfer,
        'daily_reward': recorded.daily_reward,
    })
    return Response(output.data, status=status.HTTP_201_CREATED)


@extend_schema(
    parameters=[
        OpenApiParameter('page', OpenApiTypes.INT, description='Page number (>= 1)', default=1),
        OpenApiParameter('limit', OpenApiTypes.INT, description='Page size (1-100)', default=20),
    ],
    responses={200: TransferHistoryResponseSerializer},
    description="Get the authenticated tourist's transfers, newest first.",
    tags=['transfers'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def transfer_history(request):
    """Get current user's transfer history - thin HTTP handler."""
    query_serializer = HistoryQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    data = get_user_transfer_history(
        user_id=request.user.id,
        page=params['page'],
        limit=params['limit'],
    )

    return Response(data)


@extend_schema(
    parameters=[
        OpenApiParameter('date', OpenApiTypes.DATE, description='Day (YYYY-MM-DD), defaults to today'),
    ],
    responses={200: DailyDistributionSerializer},
    description="Coins received, given and remaining on a day, with restaurants visited.",
    tags=['transfers'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def daily_distribution(request):
    """Get current user's daily distribution - thin HTTP handler."""
    query_serializer = DailyQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    data = get_daily_distribution(
        user_id=request.user.id,
        day=query_serializer.validated_data.get('date'),
    )

    return Response(data)
