import pytest
from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from decimal import Decimal
from django.core.cache import cache
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.restaurants.models import Restaurant


# Four-day trip: arrival on day 0, departure on day 3
TRIP_ARRIVAL = date(2025, 6, 1)
TRIP_DEPARTURE = date(2025, 6, 4)


def noon(day):
    """Aware datetime at noon UTC on the given day."""
    return datetime.combine(day, time(12, 0), tzinfo=dt_timezone.utc)


def trip_day(offset):
    return TRIP_ARRIVAL + timedelta(days=offset)


@pytest.fixture(autouse=True)
def clear_cache():
    """Every test starts with an empty cache, generation counters included."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def tourist(db):
    """Tourist from Germany on a four-day trip."""
    return User.objects.create_user(
        wallet_address='0xTOURIST000000000000000000000000000000001',
        origin_country='Germany',
        arrival_date=TRIP_ARRIVAL,
        departure_date=TRIP_DEPARTURE,
        display_name='Test Tourist',
    )


@pytest.fixture
def other_tourist(db):
    """Tourist from France on the same trip dates."""
    return User.objects.create_user(
        wallet_address='0xTOURIST000000000000000000000000000000002',
        origin_country='France',
        arrival_date=TRIP_ARRIVAL,
        departure_date=TRIP_DEPARTURE,
    )


@pytest.fixture
def third_tourist(db):
    """Tourist from Japan on the same trip dates."""
    return User.objects.create_user(
        wallet_address='0xTOURIST000000000000000000000000000000003',
        origin_country='Japan',
        arrival_date=TRIP_ARRIVAL,
        departure_date=TRIP_DEPARTURE,
    )


@pytest.fixture
def staff_user(db):
    """Operator account without a trip."""
    return User.objects.create_user(
        wallet_address='0xSTAFF',
        password='StaffPass123!',
        origin_country='Spain',
        is_staff=True,
    )


@pytest.fixture
def tourist_client(tourist):
    """Return API client authenticated as the tourist."""
    return _client_for(tourist)


@pytest.fixture
def other_tourist_client(other_tourist):
    """Return API client authenticated as the other tourist."""
    return _client_for(other_tourist)


@pytest.fixture
def staff_client(staff_user):
    """Return API client authenticated as staff."""
    return _client_for(staff_user)


# =============================================================================
# Restaurants
# =============================================================================

@pytest.fixture
def make_restaurant(db):
    """Factory creating restaurants with unique place refs and wallets."""
    counter = {'n': 0}

    def _make(name=None, latitude='40.416775', longitude='-3.703790', total_coins_received=0):
        counter['n'] += 1
        n = counter['n']
        return Restaurant.objects.create(
            place_ref=f'place-{n}',
            name=name or f'Restaurant {n}',
            address=f'Calle {n}, Madrid',
            latitude=Decimal(latitude),
            longitude=Decimal(longitude),
            wallet_address=f'0xRESTAURANT{n:030d}',
            total_coins_received=total_coins_received,
        )

    return _make


@pytest.fixture
def restaurant(make_restaurant):
    """Restaurant in central Madrid."""
    return make_restaurant(name='Casa Madrid')


@pytest.fixture
def second_restaurant(make_restaurant):
    """Restaurant about 1 km from the first one."""
    return make_restaurant(name='Taberna Sol', latitude='40.425775', longitude='-3.703790')


@pytest.fixture
def third_restaurant(make_restaurant):
    """Restaurant in Barcelona, far from the others."""
    return make_restaurant(name='Bar Barcelona', latitude='41.385064', longitude='2.173403')


@pytest.fixture
def fourth_restaurant(make_restaurant):
    return make_restaurant(name='Mesón Retiro', latitude='40.415260', longitude='-3.684416')
