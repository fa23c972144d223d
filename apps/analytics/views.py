from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from .analytics import DashboardQueries
from .serializers import (
    # Input serializers
    DashboardQuerySerializer,
    OriginsQuerySerializer,
    TrendsQuerySerializer,
    ComparisonQuerySerializer,
    # Response serializers
    DailyStatsSerializer,
    TotalStatsSerializer,
    OriginStatsSerializer,
    TrendsResponseSerializer,
    ComparisonResponseSerializer,
    CacheClearedSerializer,
    ErrorSerializer,
)
from .exceptions import AnalyticsServiceError, RestaurantNotFoundError

DATE_RANGE_PARAMETERS = [
    OpenApiParameter('month', OpenApiTypes.STR, description='Month (YYYY-MM)'),
    OpenApiParameter('start_date', OpenApiTypes.DATE, description='Start date (YYYY-MM-DD)'),
    OpenApiParameter('end_date', OpenApiTypes.DATE, description='End date (YYYY-MM-DD)'),
]

ORIGIN_PARAMETER = OpenApiParameter(
    'origin_country', OpenApiTypes.STR, description='Only transfers from this origin country'
)


def _error_response(e):
    if isinstance(e, RestaurantNotFoundError):
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)


@extend_schema(
    parameters=DATE_RANGE_PARAMETERS + [ORIGIN_PARAMETER],
    responses={
        200: DailyStatsSerializer(many=True),
        400: ErrorSerializer,
        404: ErrorSerializer,
    },
    description="Get a restaurant's coins, tourists and transactions per day.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def daily_stats(request, restaurant_id):
    """Get daily statistics - thin HTTP handler."""
    query_serializer = DashboardQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = DashboardQueries.daily_stats(
            restaurant_id,
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
            origin_country=params.get('origin_country'),
        )
    except AnalyticsServiceError as e:
        return _error_response(e)

    return Response(data)


@extend_schema(
    parameters=DATE_RANGE_PARAMETERS + [ORIGIN_PARAMETER],
    responses={
        200: TotalStatsSerializer,
        400: ErrorSerializer,
        404: ErrorSerializer,
    },
    description="Get a restaurant's totals with its overall ranking position and percentile.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def total_stats(request, restaurant_id):
    """Get total statistics - thin HTTP handler."""
    query_serializer = DashboardQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = DashboardQueries.total_stats(
            restaurant_id,
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
            origin_country=params.get('origin_country'),
        )
    except AnalyticsServiceError as e:
        return _error_response(e)

    return Response(data)


@extend_schema(
    parameters=DATE_RANGE_PARAMETERS + [
        OpenApiParameter('limit', OpenApiTypes.INT, description='Number of countries (1-100)'),
    ],
    responses={
        200: OriginStatsSerializer(many=True),
        400: ErrorSerializer,
        404: ErrorSerializer,
    },
    description="Get a restaurant's coins per tourist origin country.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def origin_breakdown(request, restaurant_id):
    """Get origin breakdown - thin HTTP handler."""
    query_serializer = OriginsQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = DashboardQueries.origin_breakdown(
            restaurant_id,
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
            limit=params.get('limit'),
        )
    except AnalyticsServiceError as e:
        return _error_response(e)

    return Response(data)


@extend_schema(
    parameters=DATE_RANGE_PARAMETERS + [
        OpenApiParameter('period', OpenApiTypes.STR, description="'daily', 'weekly' or 'monthly'", default='daily'),
    ],
    responses={
        200: TrendsResponseSerializer,
        400: ErrorSerializer,
        404: ErrorSerializer,
    },
    description="Get a restaurant's per-period coin series with growth rates.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def performance_trends(request, restaurant_id):
    """Get performance trends - thin HTTP handler."""
    query_serializer = TrendsQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = DashboardQueries.performance_trends(
            restaurant_id,
            period=params['period'],
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
        )
    except AnalyticsServiceError as e:
        return _error_response(e)

    return Response({
        'period': params['period'],
        'data': data,
    })


@extend_schema(
    parameters=[
        OpenApiParameter('compare_with', OpenApiTypes.STR, description="'similar', 'top' or 'nearby'", default='similar'),
        OpenApiParameter('limit', OpenApiTypes.INT, description='Number of results (1-50)', default=10),
    ],
    responses={
        200: ComparisonResponseSerializer,
        400: ErrorSerializer,
        404: ErrorSerializer,
    },
    description="Benchmark a restaurant against similar, top or nearby restaurants.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def restaurant_comparison(request, restaurant_id):
    """Get restaurant comparison - thin HTTP handler."""
    query_serializer = ComparisonQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = DashboardQueries.restaurant_comparison(
            restaurant_id,
            compare_with=params['compare_with'],
            limit=params['limit'],
        )
    except AnalyticsServiceError as e:
        return _error_response(e)

    return Response({
        'compare_with': params['compare_with'],
        'limit': params['limit'],
        'results': data,
    })


@extend_schema(
    request=None,
    responses={200: CacheClearedSerializer},
    description="Drop a restaurant's cached dashboards. Staff only.",
    tags=['analytics'],
)
@api_view(['DELETE'])
@permission_classes([IsAdminUser])
def clear_dashboard_cache(request, restaurant_id):
    """Clear a restaurant's dashboard cache - thin HTTP handler."""
    cleared = DashboardQueries.clear_restaurant_cache(restaurant_id)
    return Response({'cleared': cleared})
