"""
Service layer tests for rankings app.

Tests:
- Overall, origin and nearby rankings (order, tiebreak, pagination, radius)
- Restaurant statistics drill-down (breakdown, rank, trends)
- Manual refresh
"""

import pytest
from uuid import uuid4

from apps.conftest import noon, trip_day
from apps.rankings.services import (
    get_overall_ranking,
    get_origin_ranking,
    get_nearby_ranking,
    refresh_rankings,
    get_restaurant_statistics,
    growth_rate,
    haversine_km,
)
from apps.rankings.services.exceptions import (
    InvalidRankingQueryError,
    RestaurantNotFoundError,
)
from apps.restaurants.models import Restaurant
from apps.transfers.services import record_transfer


MADRID = (40.416775, -3.703790)


def give(user, restaurant, amount, day=None):
    record_transfer(
        user_id=user.id,
        restaurant_id=restaurant.id,
        amount=amount,
        at=noon(day or trip_day(0)),
    )


# ============================================================================
# GEO TESTS
# ============================================================================

class TestGeo:

    def test_haversine_madrid_barcelona(self):
        distance = haversine_km(40.416775, -3.703790, 41.385064, 2.173403)

        assert 495 < distance < 515

    def test_haversine_same_point(self):
        assert haversine_km(*MADRID, *MADRID) == 0.0

    @pytest.mark.parametrize('current, previous, expected', [
        (4, 2, 100.0),
        (1, 3, -66.67),
        (5, 0, 0.0),
        (0, 0, 0.0),
    ])
    def test_growth_rate(self, current, previous, expected):
        assert growth_rate(current, previous) == expected


# ============================================================================
# RANKING TESTS
# ============================================================================

@pytest.mark.django_db
class TestOverallRanking:
    """Test the overall ranking by coin counter."""

    def test_order_with_id_tiebreak(self, make_restaurant):
        top = make_restaurant(name='Top', total_coins_received=9)
        tied = sorted(
            [make_restaurant(total_coins_received=5), make_restaurant(total_coins_received=5)],
            key=lambda r: r.id,
        )
        empty = make_restaurant(total_coins_received=0)

        ranking = get_overall_ranking()

        assert ranking['type'] == 'overall'
        assert ranking['filters'] == {}
        assert [row['restaurant_id'] for row in ranking['results']] == [
            top.id, tied[0].id, tied[1].id, empty.id
        ]
        assert [row['rank'] for row in ranking['results']] == [1, 2, 3, 4]
        assert ranking['results'][0]['total_coins'] == 9
        assert ranking['results'][0]['distance_km'] is None

    def test_pagination_continues_ranks(self, make_restaurant):
        for total in (5, 4, 3, 2, 1):
            make_restaurant(total_coins_received=total)

        ranking = get_overall_ranking(page=2, limit=2)

        assert [row['rank'] for row in ranking['results']] == [3, 4]
        assert [row['total_coins'] for row in ranking['results']] == [3, 2]
        assert ranking['pagination']['total'] == 5
        assert ranking['pagination']['total_pages'] == 3
        assert ranking['pagination']['has_next'] is True
        assert ranking['pagination']['has_prev'] is True

    def test_results_are_cached(self, make_restaurant):
        restaurant = make_restaurant(total_coins_received=1)
        get_overall_ranking()

        Restaurant.objects.filter(id=restaurant.id).update(total_coins_received=7)

        assert get_overall_ranking()['results'][0]['total_coins'] == 1

    def test_invalid_page(self):
        with pytest.raises(InvalidRankingQueryError):
            get_overall_ranking(page=0)
        with pytest.raises(InvalidRankingQueryError):
            get_overall_ranking(limit=101)

    def test_invalid_radius(self):
        with pytest.raises(InvalidRankingQueryError):
            get_overall_ranking(geo={'latitude': 40.0, 'longitude': -3.0, 'radius_km': 100})


@pytest.mark.django_db
class TestOriginRanking:
    """Test the ranking by tourists' origin country."""

    def test_origin_ranking(self, tourist, other_tourist, restaurant, second_restaurant, third_restaurant):
        give(tourist, restaurant, 3)
        give(tourist, second_restaurant, 1)
        give(other_tourist, second_restaurant, 3)

        ranking = get_origin_ranking(country='germany')

        assert ranking['type'] == 'origin'
        assert ranking['filters'] == {'country': 'germany'}
        rows = ranking['results']
        assert [row['restaurant_id'] for row in rows] == [
            restaurant.id, second_restaurant.id, third_restaurant.id
        ]
        assert [row['total_coins'] for row in rows] == [3, 1, 0]

    def test_origin_ranking_blank_country(self):
        with pytest.raises(InvalidRankingQueryError):
            get_origin_ranking(country='  ')

    def test_origin_ranking_with_radius(self, tourist, restaurant, third_restaurant):
        give(tourist, restaurant, 1)
        give(tourist, third_restaurant, 3)

        ranking = get_origin_ranking(
            country='Germany',
            geo={'latitude': MADRID[0], 'longitude': MADRID[1], 'radius_km': 10},
        )

        assert [row['restaurant_id'] for row in ranking['results']] == [restaurant.id]
        assert ranking['filters']['radius_km'] == 10.0


@pytest.mark.django_db
class TestNearbyRanking:
    """Test the radius-filtered ranking."""

    def test_radius_filter_before_pagination(
        self, restaurant, second_restaurant, third_restaurant, fourth_restaurant
    ):
        Restaurant.objects.filter(id=fourth_restaurant.id).update(total_coins_received=50)
        Restaurant.objects.filter(id=third_restaurant.id).update(total_coins_received=40)
        Restaurant.objects.filter(id=second_restaurant.id).update(total_coins_received=10)
        Restaurant.objects.filter(id=restaurant.id).update(total_coins_received=5)

        ranking = get_nearby_ranking(latitude=MADRID[0], longitude=MADRID[1], radius_km=1.5, limit=1)

        assert ranking['type'] == 'nearby'
        assert ranking['pagination']['total'] == 2
        row = ranking['results'][0]
        assert row['restaurant_id'] == second_restaurant.id
        assert row['rank'] == 1
        assert 0.9 < row['distance_km'] < 1.1

    def test_second_page_of_nearby(self, restaurant, second_restaurant):
        Restaurant.objects.filter(id=second_restaurant.id).update(total_coins_received=10)

        ranking = get_nearby_ranking(
            latitude=MADRID[0], longitude=MADRID[1], radius_km=1.5, page=2, limit=1
        )

        row = ranking['results'][0]
        assert row['restaurant_id'] == restaurant.id
        assert row['rank'] == 2
        assert row['distance_km'] == 0.0

    def test_empty_area(self, restaurant):
        ranking = get_nearby_ranking(latitude=0.0, longitude=0.0, radius_km=5)

        assert ranking['results'] == []
        assert ranking['pagination']['total'] == 0


@pytest.mark.django_db
class TestRefreshRankings:

    def test_refresh_drops_cached_pages(self, make_restaurant):
        restaurant = make_restaurant(total_coins_received=1)
        get_overall_ranking()
        Restaurant.objects.filter(id=restaurant.id).update(total_coins_received=7)

        result = refresh_rankings()

        assert result['success'] is True
        assert get_overall_ranking()['results'][0]['total_coins'] == 7


# ============================================================================
# STATISTICS TESTS
# ============================================================================

@pytest.mark.django_db
class TestRestaurantStatistics:
    """Test the single-restaurant drill-down."""

    @pytest.fixture
    def visited(self, tourist, other_tourist, third_tourist, restaurant, second_restaurant):
        """Casa Madrid: 2 coins on day 0, then 1 + 2 + 1 from three countries on day 1."""
        give(tourist, restaurant, 2, day=trip_day(0))
        give(tourist, restaurant, 1, day=trip_day(1))
        give(other_tourist, restaurant, 2, day=trip_day(1))
        give(third_tourist, restaurant, 1, day=trip_day(1))
        give(tourist, second_restaurant, 1, day=trip_day(1))
        return restaurant

    def test_totals(self, visited):
        stats = get_restaurant_statistics(restaurant_id=visited.id, as_of=trip_day(1))

        assert stats['total_coins'] == 6
        assert stats['total_transactions'] == 4
        assert stats['unique_tourists'] == 3
        assert stats['unique_countries'] == 3
        assert stats['average_coins_per_transaction'] == 1.5

    def test_origin_breakdown(self, visited):
        stats = get_restaurant_statistics(restaurant_id=visited.id, as_of=trip_day(1))

        breakdown = stats['origin_breakdown']
        assert [row['country'] for row in breakdown] == ['Germany', 'France', 'Japan']
        assert [row['coins'] for row in breakdown] == [3, 2, 1]
        assert [row['percentage'] for row in breakdown] == [50.0, 33.33, 16.67]
        assert sum(row['percentage'] for row in breakdown) == pytest.approx(100.0, abs=0.01)

    def test_rank_and_percentile(self, visited, second_restaurant, third_restaurant):
        stats = get_restaurant_statistics(restaurant_id=visited.id, as_of=trip_day(1))

        assert stats['rank'] == 1
        assert stats['total_restaurants'] == 3
        assert stats['percentile'] == 100

        runner_up = get_restaurant_statistics(restaurant_id=second_restaurant.id, as_of=trip_day(1))
        assert runner_up['rank'] == 2
        assert runner_up['percentile'] == 67

    def test_daily_trend(self, visited):
        stats = get_restaurant_statistics(restaurant_id=visited.id, as_of=trip_day(1))

        daily = stats['trends']['daily']
        assert len(daily) == 30
        assert daily[-1]['period'] == trip_day(1)
        assert daily[-1]['coins'] == 4
        assert daily[-1]['unique_tourists'] == 3
        assert daily[-1]['growth_rate'] == 100.0
        assert daily[-2]['coins'] == 2
        assert daily[0]['coins'] == 0

    def test_weekly_and_monthly_trends(self, visited):
        stats = get_restaurant_statistics(restaurant_id=visited.id, as_of=trip_day(1))

        weekly = stats['trends']['weekly']
        monthly = stats['trends']['monthly']
        assert len(weekly) == 12
        assert len(monthly) == 12
        # 2025-06-01 is a Sunday, 2025-06-02 starts the next ISO week
        assert weekly[-1]['period'] == trip_day(1)
        assert [weekly[-2]['coins'], weekly[-1]['coins']] == [2, 4]
        assert weekly[-1]['growth_rate'] == 100.0
        assert monthly[-1]['coins'] == 6
        assert monthly[-1]['growth_rate'] == 0.0

    def test_restaurant_without_transfers(self, restaurant):
        stats = get_restaurant_statistics(restaurant_id=restaurant.id)

        assert stats['total_coins'] == 0
        assert stats['average_coins_per_transaction'] == 0.0
        assert stats['origin_breakdown'] == []

    def test_unknown_restaurant(self):
        with pytest.raises(RestaurantNotFoundError):
            get_restaurant_statistics(restaurant_id=uuid4())
