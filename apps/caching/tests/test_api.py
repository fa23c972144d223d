import pytest
from django.urls import reverse
from rest_framework import status


@pytest.mark.django_db
class TestClearCache:
    """Tests for POST /api/cache/clear/"""

    def test_clear_by_staff(self, staff_client):
        response = staff_client.post(reverse('caching:clear'), {'prefix': 'ranking'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'prefix': 'ranking', 'generation': 1}

    def test_clear_unknown_prefix(self, staff_client):
        response = staff_client.post(reverse('caching:clear'), {'prefix': 'menus'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'prefix' in response.data

    def test_clear_voucher_prefix_refused(self, staff_client):
        response = staff_client.post(reverse('caching:clear'), {'prefix': 'voucher'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'prefix' in response.data

    def test_clear_forbidden_for_tourist(self, tourist_client):
        response = tourist_client.post(reverse('caching:clear'), {'prefix': 'ranking'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestHealthCheck:
    """Tests for GET /api/health/"""

    def test_health(self, api_client):
        response = api_client.get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'status': 'ok', 'checks': {'database': 'ok', 'cache': 'ok'}}
