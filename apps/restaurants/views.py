from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.transfers.serializers import HistoryQuerySerializer, TransferHistoryResponseSerializer
from apps.transfers.services import get_restaurant_transfer_history
from .serializers import (
    RestaurantSerializer,
    RestaurantListSerializer,
    RestaurantCreateSerializer,
)
from .services import (
    register_restaurant,
    search_restaurants,
    DuplicateRestaurantError,
    InvalidCoordinatesError,
)


class RestaurantPagination(PageNumberPagination):
    """Custom pagination for restaurants."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class RestaurantViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for restaurants.

    list: Get all restaurants (searchable by name/address)
    retrieve: Get a specific restaurant
    create: Onboard a restaurant (staff only)
    transfers: Paginated coin ledger of a restaurant
    """

    serializer_class = RestaurantSerializer
    permission_classes = [AllowAny]
    pagination_class = RestaurantPagination

    def get_queryset(self):
        return search_restaurants(search=self.request.query_params.get('search'))

    def get_serializer_class(self):
        if self.action == 'list':
            return RestaurantListSerializer
        return RestaurantSerializer

    @extend_schema(
        request=RestaurantCreateSerializer,
        responses={201: RestaurantSerializer},
        tags=['restaurants'],
    )
    def create(self, request, *args, **kwargs):
        """Onboard a new restaurant."""
        serializer = RestaurantCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            restaurant = register_restaurant(**serializer.validated_data)
        except (DuplicateRestaurantError, InvalidCoordinatesError) as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response(
            RestaurantSerializer(restaurant).data,
            status=status.HTTP_201_CREATED
        )

    def get_permissions(self):
        if self.action == 'create':
            return [IsAdminUser()]
        return super().get_permissions()

    @extend_schema(
        parameters=[
            OpenApiParameter('page', OpenApiTypes.INT, description='Page number (>= 1)', default=1),
            OpenApiParameter('limit', OpenApiTypes.INT, description='Page size (1-100)', default=20),
        ],
        responses={200: TransferHistoryResponseSerializer},
        description="Get a restaurant's transfer ledger, newest first.",
        tags=['restaurants'],
    )
    @action(detail=True, methods=['get'])
    def transfers(self, request, pk=None):
        """Get restaurant transfer history - thin HTTP handler."""
        query_serializer = HistoryQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)
        params = query_serializer.validated_data

        restaurant = self.get_object()
        data = get_restaurant_transfer_history(
            restaurant_id=restaurant.id,
            page=params['page'],
            limit=params['limit'],
        )

        return Response(data)
