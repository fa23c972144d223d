import pytest
from datetime import date
from uuid import uuid4
from django.urls import reverse
from rest_framework import status
from apps.conftest import noon
from apps.transfers.models import Transfer
from apps.transfers.services import record_transfer


# =============================================================================
# Pre-flight
# =============================================================================

@pytest.mark.django_db
class TestValidateTransfer:
    """Tests for POST /api/transfers/validate/"""

    def test_validate_allowed(self, tourist_client, restaurant):
        url = reverse('transfers:validate')
        response = tourist_client.post(url, {'restaurant_id': str(restaurant.id), 'amount': 2}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['allowed'] is True
        assert response.data['daily_remaining'] == 10
        assert Transfer.objects.count() == 0

    def test_validate_over_restaurant_cap(self, tourist_client, restaurant):
        url = reverse('transfers:validate')
        tourist_client.post(reverse('transfers:create'), {'restaurant_id': str(restaurant.id), 'amount': 3}, format='json')

        response = tourist_client.post(url, {'restaurant_id': str(restaurant.id), 'amount': 1}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['allowed'] is False
        assert 'Restaurant limit' in response.data['reason']

    def test_validate_requires_authentication(self, api_client, restaurant):
        url = reverse('transfers:validate')
        response = api_client.post(url, {'restaurant_id': str(restaurant.id), 'amount': 1}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Recording
# =============================================================================

@pytest.mark.django_db
class TestCreateTransfer:
    """Tests for POST /api/transfers/"""

    def test_create_transfer(self, tourist_client, tourist, restaurant):
        url = reverse('transfers:create')
        response = tourist_client.post(url, {'restaurant_id': str(restaurant.id), 'amount': 2}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['transfer']['amount'] == 2
        assert response.data['transfer']['restaurant_name'] == 'Casa Madrid'
        assert response.data['transfer']['origin_country'] == 'Germany'
        assert response.data['daily_reward']['coins_given'] == 2
        assert response.data['daily_reward']['coins_remaining'] == 8

        restaurant.refresh_from_db()
        assert restaurant.total_coins_received == 2

    def test_create_over_quota(self, tourist_client, restaurant):
        url = reverse('transfers:create')
        tourist_client.post(url, {'restaurant_id': str(restaurant.id), 'amount': 3}, format='json')

        response = tourist_client.post(url, {'restaurant_id': str(restaurant.id), 'amount': 1}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'Restaurant limit' in response.data['error']
        assert response.data['quota']['restaurant_given_today'] == 3
        assert Transfer.objects.count() == 1

    @pytest.mark.parametrize('amount', [0, 4])
    def test_create_invalid_amount(self, tourist_client, restaurant, amount):
        url = reverse('transfers:create')
        response = tourist_client.post(url, {'restaurant_id': str(restaurant.id), 'amount': amount}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_create_missing_fields(self, tourist_client):
        url = reverse('transfers:create')
        response = tourist_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'restaurant_id' in response.data
        assert 'amount' in response.data

    def test_create_unknown_restaurant(self, tourist_client):
        url = reverse('transfers:create')
        response = tourist_client.post(url, {'restaurant_id': str(uuid4()), 'amount': 1}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_create_duplicate_settlement_hash(self, tourist_client, restaurant, second_restaurant):
        url = reverse('transfers:create')
        tourist_client.post(
            url,
            {'restaurant_id': str(restaurant.id), 'amount': 1, 'settlement_hash': '0xfeed'},
            format='json',
        )

        response = tourist_client.post(
            url,
            {'restaurant_id': str(second_restaurant.id), 'amount': 1, 'settlement_hash': '0xfeed'},
            format='json',
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_create_requires_authentication(self, api_client, restaurant):
        url = reverse('transfers:create')
        response = api_client.post(url, {'restaurant_id': str(restaurant.id), 'amount': 1}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Reads
# =============================================================================

@pytest.mark.django_db
class TestTransferReads:
    """Tests for GET /api/transfers/history/ and /api/transfers/daily/"""

    def test_history_only_own_transfers(self, tourist_client, tourist, other_tourist, restaurant):
        record_transfer(user_id=tourist.id, restaurant_id=restaurant.id, amount=1)
        record_transfer(user_id=other_tourist.id, restaurant_id=restaurant.id, amount=2)

        response = tourist_client.get(reverse('transfers:history'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['pagination']['total'] == 1
        assert response.data['results'][0]['amount'] == 1

    def test_history_invalid_limit(self, tourist_client):
        response = tourist_client.get(reverse('transfers:history'), {'limit': 500})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_daily_for_given_date(self, tourist_client, tourist, restaurant):
        day = date(2025, 6, 2)
        record_transfer(user_id=tourist.id, restaurant_id=restaurant.id, amount=3, at=noon(day))

        response = tourist_client.get(reverse('transfers:daily'), {'date': '2025-06-02'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['coins_given'] == 3
        assert response.data['coins_remaining'] == 7
        assert response.data['restaurants_visited'][0]['restaurant_name'] == 'Casa Madrid'

    def test_daily_defaults_to_today(self, tourist_client):
        response = tourist_client.get(reverse('transfers:daily'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['coins_given'] == 0
        assert response.data['coins_received'] == 10
