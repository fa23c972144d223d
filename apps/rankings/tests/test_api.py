import pytest
from uuid import uuid4
from django.urls import reverse
from rest_framework import status
from apps.conftest import noon, trip_day
from apps.restaurants.models import Restaurant
from apps.transfers.services import record_transfer


@pytest.fixture
def ranked(restaurant, second_restaurant, third_restaurant):
    """Barcelona leads, then Taberna Sol, then Casa Madrid."""
    Restaurant.objects.filter(id=third_restaurant.id).update(total_coins_received=30)
    Restaurant.objects.filter(id=second_restaurant.id).update(total_coins_received=20)
    Restaurant.objects.filter(id=restaurant.id).update(total_coins_received=10)
    return [third_restaurant, second_restaurant, restaurant]


# =============================================================================
# Rankings
# =============================================================================

@pytest.mark.django_db
class TestOverallRanking:
    """Tests for GET /api/rankings/overall/"""

    def test_overall_public(self, api_client, ranked):
        response = api_client.get(reverse('rankings:overall'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['type'] == 'overall'
        assert [row['restaurant_id'] for row in response.data['results']] == [r.id for r in ranked]
        assert response.data['pagination']['total'] == 3

    def test_overall_with_radius(self, api_client, ranked):
        response = api_client.get(
            reverse('rankings:overall'),
            {'latitude': 40.416775, 'longitude': -3.703790, 'radius': 2},
        )

        assert response.status_code == status.HTTP_200_OK
        assert [row['name'] for row in response.data['results']] == ['Taberna Sol', 'Casa Madrid']
        assert response.data['filters']['radius_km'] == 2.0

    def test_latitude_without_longitude(self, api_client):
        response = api_client.get(reverse('rankings:overall'), {'latitude': 40.4})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_radius_out_of_range(self, api_client):
        response = api_client.get(
            reverse('rankings:overall'),
            {'latitude': 40.4, 'longitude': -3.7, 'radius': 80},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_limit_out_of_range(self, api_client):
        response = api_client.get(reverse('rankings:overall'), {'limit': 0})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestOriginRanking:
    """Tests for GET /api/rankings/origin/<country>/"""

    def test_origin_ranking(self, api_client, tourist, other_tourist, restaurant, second_restaurant):
        record_transfer(user_id=tourist.id, restaurant_id=second_restaurant.id, amount=2, at=noon(trip_day(0)))
        record_transfer(user_id=other_tourist.id, restaurant_id=restaurant.id, amount=3, at=noon(trip_day(0)))

        response = api_client.get(reverse('rankings:origin', kwargs={'country': 'Germany'}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['type'] == 'origin'
        assert response.data['results'][0]['restaurant_id'] == second_restaurant.id
        assert response.data['results'][0]['total_coins'] == 2
        assert response.data['results'][1]['total_coins'] == 0


@pytest.mark.django_db
class TestNearbyRanking:
    """Tests for GET /api/rankings/nearby/"""

    def test_nearby(self, api_client, ranked):
        response = api_client.get(
            reverse('rankings:nearby'),
            {'latitude': 40.416775, 'longitude': -3.703790},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['type'] == 'nearby'
        assert response.data['filters']['radius_km'] == 5.0
        assert len(response.data['results']) == 2
        assert all(row['distance_km'] is not None for row in response.data['results'])

    def test_nearby_requires_point(self, api_client):
        response = api_client.get(reverse('rankings:nearby'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'latitude' in response.data


# =============================================================================
# Statistics
# =============================================================================

@pytest.mark.django_db
class TestRestaurantStatistics:
    """Tests for GET /api/rankings/restaurants/<id>/statistics/"""

    def test_statistics(self, api_client, tourist, restaurant):
        record_transfer(user_id=tourist.id, restaurant_id=restaurant.id, amount=3, at=noon(trip_day(0)))

        url = reverse('rankings:statistics', kwargs={'restaurant_id': restaurant.id})
        response = api_client.get(url, {'as_of': '2025-06-01'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_coins'] == 3
        assert response.data['rank'] == 1
        assert response.data['origin_breakdown'][0]['country'] == 'Germany'
        assert response.data['origin_breakdown'][0]['percentage'] == 100.0
        assert set(response.data['trends']) == {'daily', 'weekly', 'monthly'}

    def test_statistics_not_found(self, api_client):
        url = reverse('rankings:statistics', kwargs={'restaurant_id': uuid4()})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Refresh
# =============================================================================

@pytest.mark.django_db
class TestRefresh:
    """Tests for POST /api/rankings/refresh/"""

    def test_refresh_by_staff(self, staff_client, ranked):
        response = staff_client.post(reverse('rankings:refresh'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert 'timestamp' in response.data

    def test_refresh_forbidden_for_tourist(self, tourist_client):
        response = tourist_client.post(reverse('rankings:refresh'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_refresh_requires_authentication(self, api_client):
        response = api_client.post(reverse('rankings:refresh'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
