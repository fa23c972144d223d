import pytest
from django.urls import reverse
from rest_framework import status
from apps.conftest import noon, trip_day
from apps.transfers.services import record_transfer


@pytest.fixture
def completed_trip(tourist, make_restaurant):
    """Tourist who gave every coin on each of the four trip days."""
    restaurants = [make_restaurant() for _ in range(4)]
    for offset in range(4):
        for restaurant, amount in zip(restaurants, (3, 3, 3, 1)):
            record_transfer(
                user_id=tourist.id,
                restaurant_id=restaurant.id,
                amount=amount,
                at=noon(trip_day(offset)),
            )
    return tourist


# =============================================================================
# Progress
# =============================================================================

@pytest.mark.django_db
class TestProgress:
    """Tests for GET /api/rewards/progress/ and /api/rewards/progress/daily/"""

    def test_progress_summary(self, tourist_client, completed_trip):
        response = tourist_client.get(reverse('rewards:progress'), {'as_of': '2025-06-04'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['completed_days'] == 4
        assert response.data['is_eligible_for_voucher'] is True

    def test_progress_invalid_date(self, tourist_client):
        response = tourist_client.get(reverse('rewards:progress'), {'as_of': 'yesterday'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_progress_requires_authentication(self, api_client):
        response = api_client.get(reverse('rewards:progress'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_daily_progress(self, tourist_client, completed_trip):
        response = tourist_client.get(reverse('rewards:daily-progress'), {'limit': 2})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2
        assert response.data[0]['date'] == trip_day(3)


# =============================================================================
# Voucher
# =============================================================================

@pytest.mark.django_db
class TestVoucher:
    """Tests for /api/rewards/voucher/ endpoints."""

    def test_issue_voucher(self, tourist_client, completed_trip):
        response = tourist_client.post(reverse('rewards:voucher'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['voucher_id'].startswith('SMILE_')
        assert response.data['is_valid'] is True

    def test_issue_twice_returns_same_voucher(self, tourist_client, completed_trip):
        first = tourist_client.post(reverse('rewards:voucher'))
        second = tourist_client.post(reverse('rewards:voucher'))

        assert first.data['voucher_id'] == second.data['voucher_id']

    def test_issue_marks_progress(self, tourist_client, completed_trip):
        tourist_client.post(reverse('rewards:voucher'))

        response = tourist_client.get(reverse('rewards:progress'))

        assert response.data['has_generated_voucher'] is True

    def test_issue_not_eligible(self, tourist_client, tourist):
        response = tourist_client.post(reverse('rewards:voucher'))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert 'error' in response.data

    def test_get_voucher(self, tourist_client, completed_trip):
        issued = tourist_client.post(reverse('rewards:voucher'))

        response = tourist_client.get(reverse('rewards:voucher'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['voucher_id'] == issued.data['voucher_id']

    def test_get_voucher_missing(self, tourist_client):
        response = tourist_client.get(reverse('rewards:voucher'))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_voucher_qr_png(self, tourist_client, completed_trip):
        tourist_client.post(reverse('rewards:voucher'))

        response = tourist_client.get(reverse('rewards:voucher-qr'))

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'image/png'
        assert response.content.startswith(b'\x89PNG')

    def test_voucher_qr_missing(self, tourist_client):
        response = tourist_client.get(reverse('rewards:voucher-qr'))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_verify_staff_only(self, tourist_client, completed_trip):
        issued = tourist_client.post(reverse('rewards:voucher'))

        response = tourist_client.post(
            reverse('rewards:voucher-verify'),
            {'payload': issued.data['qr_payload']},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_verify_by_staff(self, tourist_client, staff_client, completed_trip):
        issued = tourist_client.post(reverse('rewards:voucher'))

        response = staff_client.post(
            reverse('rewards:voucher-verify'),
            {'payload': issued.data['qr_payload']},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['voucher_id'] == issued.data['voucher_id']

    def test_verify_bad_payload(self, staff_client):
        response = staff_client.post(
            reverse('rewards:voucher-verify'),
            {'payload': 'not-a-voucher'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
