from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from .serializers import (
    # Input serializers
    RankingQuerySerializer,
    NearbyQuerySerializer,
    StatisticsQuerySerializer,
    # Response serializers
    RankingResponseSerializer,
    RestaurantStatisticsSerializer,
    RefreshResponseSerializer,
    ErrorSerializer,
)
from .services import (
    get_overall_ranking,
    get_origin_ranking,
    get_nearby_ranking,
    refresh_rankings,
    get_restaurant_statistics,
    InvalidRankingQueryError,
    RestaurantNotFoundError,
)

PAGE_PARAMETERS = [
    OpenApiParameter('page', OpenApiTypes.INT, description='Page number (>= 1)', default=1),
    OpenApiParameter('limit', OpenApiTypes.INT, description='Page size (1-100)', default=20),
]

GEO_PARAMETERS = [
    OpenApiParameter('latitude', OpenApiTypes.FLOAT, description='Latitude of the search point'),
    OpenApiParameter('longitude', OpenApiTypes.FLOAT, description='Longitude of the search point'),
    OpenApiParameter('radius', OpenApiTypes.FLOAT, description='Radius in km (0.1-50)', default=5),
]


@extend_schema(
    parameters=PAGE_PARAMETERS + GEO_PARAMETERS,
    responses={200: RankingResponseSerializer, 400: ErrorSerializer},
    description="Restaurants ranked by total coins received, optionally within a radius.",
    tags=['rankings'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def overall_ranking(request):
    """Get the overall ranking - thin HTTP handler."""
    query_serializer = RankingQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = get_overall_ranking(
            page=params['page'],
            limit=params['limit'],
            geo=query_serializer.geo_filter(),
        )
    except InvalidRankingQueryError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(data)


@extend_schema(
    parameters=PAGE_PARAMETERS + GEO_PARAMETERS,
    responses={200: RankingResponseSerializer, 400: ErrorSerializer},
    description="Restaurants ranked by coins received from tourists of one country.",
    tags=['rankings'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def origin_ranking(request, country):
    """Get the ranking for one origin country - thin HTTP handler."""
    query_serializer = RankingQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = get_origin_ranking(
            country=country,
            page=params['page'],
            limit=params['limit'],
            geo=query_serializer.geo_filter(),
        )
    except InvalidRankingQueryError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(data)


@extend_schema(
    parameters=PAGE_PARAMETERS + GEO_PARAMETERS,
    responses={200: RankingResponseSerializer, 400: ErrorSerializer},
    description="Restaurants within a radius of a point, ranked by coins received.",
    tags=['rankings'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def nearby_ranking(request):
    """Get the nearby ranking - thin HTTP handler."""
    query_serializer = NearbyQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = get_nearby_ranking(
            latitude=params['latitude'],
            longitude=params['longitude'],
            radius_km=params['radius'],
            page=params['page'],
            limit=params['limit'],
        )
    except InvalidRankingQueryError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(data)


@extend_schema(
    parameters=[
        OpenApiParameter('as_of', OpenApiTypes.DATE, description='Last day of the trend windows'),
    ],
    responses={200: RestaurantStatisticsSerializer, 404: ErrorSerializer},
    description="Totals, origin breakdown, rank and trends of one restaurant.",
    tags=['rankings'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def restaurant_statistics(request, restaurant_id):
    """Get a restaurant's statistics - thin HTTP handler."""
    query_serializer = StatisticsQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    try:
        data = get_restaurant_statistics(
            restaurant_id=restaurant_id,
            as_of=query_serializer.validated_data.get('as_of'),
        )
    except RestaurantNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(data)


@extend_schema(
    request=None,
    responses={200: RefreshResponseSerializer},
    description="Drop every cached ranking and pre-warm the first page. Staff only.",
    tags=['rankings'],
)
@api_view(['POST'])
@permission_classes([IsAdminUser])
def refresh(request):
    """Force a ranking refresh - thin HTTP handler."""
    return Response(refresh_rankings())
