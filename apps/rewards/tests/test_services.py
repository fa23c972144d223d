"""
Service layer tests for rewards app.

Tests:
- Trip progress (completed days, streak, eligibility rules)
- Voucher issuance (eligibility, idempotency, expiry)
- Voucher verification and QR rendering
"""

import pytest
from datetime import timedelta
from uuid import uuid4
from django.core import signing

from apps.conftest import TRIP_ARRIVAL, TRIP_DEPARTURE, noon, trip_day
from apps.rewards.services import (
    get_progress_summary,
    get_daily_progress,
    issue_voucher,
    get_voucher,
    verify_voucher_payload,
    render_voucher_qr,
)
from apps.rewards.services.exceptions import (
    InvalidVoucherPayloadError,
    NotEligibleError,
    UserNotFoundError,
)
from apps.rewards.services.vouchers import VOUCHER_SALT
from apps.transfers.services import record_transfer


@pytest.fixture
def spend_day(make_restaurant):
    """Give the tourist's whole daily budget (3 + 3 + 3 + 1) on a day."""
    restaurants = [make_restaurant() for _ in range(4)]

    def _spend(user, day, amounts=(3, 3, 3, 1)):
        for restaurant, amount in zip(restaurants, amounts):
            record_transfer(
                user_id=user.id,
                restaurant_id=restaurant.id,
                amount=amount,
                at=noon(day),
            )

    return _spend


@pytest.fixture
def completed_trip(tourist, spend_day):
    """Tourist who gave every coin on each of the four trip days."""
    for offset in range(4):
        spend_day(tourist, trip_day(offset))
    return tourist


DEPARTURE_NOON = noon(TRIP_DEPARTURE)


# ============================================================================
# PROGRESS TESTS
# ============================================================================

@pytest.mark.django_db
class TestProgressSummary:
    """Test trip progress and eligibility."""

    def test_completed_trip_is_eligible(self, completed_trip):
        summary = get_progress_summary(user_id=completed_trip.id, as_of=TRIP_DEPARTURE)

        assert summary['total_trip_days'] == 3
        assert summary['completed_days'] == 4
        assert summary['remaining_days'] == 0
        assert summary['current_streak'] == 4
        assert summary['completion_percentage'] == 100.0
        assert summary['is_eligible_for_voucher'] is True
        assert summary['has_generated_voucher'] is False
        assert summary['days_until_departure'] == 0

    def test_not_eligible_before_departure(self, tourist, spend_day):
        for offset in range(3):
            spend_day(tourist, trip_day(offset))

        summary = get_progress_summary(user_id=tourist.id, as_of=trip_day(2))

        assert summary['completed_days'] == 3
        assert summary['current_streak'] == 3
        assert summary['days_until_departure'] == 1
        assert summary['is_eligible_for_voucher'] is False

    def test_missing_day_breaks_eligibility(self, tourist, spend_day):
        for offset in (0, 2, 3):
            spend_day(tourist, trip_day(offset))
        spend_day(tourist, trip_day(1), amounts=(3, 3, 3))

        summary = get_progress_summary(user_id=tourist.id, as_of=TRIP_DEPARTURE)

        assert summary['completed_days'] == 3
        assert summary['current_streak'] == 2
        assert summary['is_eligible_for_voucher'] is False

    def test_streak_zero_when_today_incomplete(self, tourist, spend_day):
        spend_day(tourist, trip_day(0))

        summary = get_progress_summary(user_id=tourist.id, as_of=trip_day(1))

        assert summary['completed_days'] == 1
        assert summary['current_streak'] == 0

    def test_completion_percentage_rounded(self, tourist, spend_day):
        spend_day(tourist, trip_day(0))

        summary = get_progress_summary(user_id=tourist.id, as_of=trip_day(0))

        assert summary['completion_percentage'] == 33.33

    def test_user_without_trip(self, staff_user):
        summary = get_progress_summary(user_id=staff_user.id)

        assert summary['total_trip_days'] == 0
        assert summary['completion_percentage'] == 0.0
        assert summary['is_eligible_for_voucher'] is False

    def test_unknown_user(self):
        with pytest.raises(UserNotFoundError):
            get_progress_summary(user_id=uuid4())

    def test_transfer_commit_refreshes_summary(
        self, tourist, spend_day, django_capture_on_commit_callbacks
    ):
        before = get_progress_summary(user_id=tourist.id, as_of=trip_day(0))

        with django_capture_on_commit_callbacks(execute=True):
            spend_day(tourist, trip_day(0))

        after = get_progress_summary(user_id=tourist.id, as_of=trip_day(0))
        assert before['completed_days'] == 0
        assert after['completed_days'] == 1

    def test_daily_progress_newest_first(self, tourist, spend_day):
        spend_day(tourist, trip_day(0))
        spend_day(tourist, trip_day(1), amounts=(3, 2))

        days = get_daily_progress(user_id=tourist.id)

        assert [d['date'] for d in days] == [trip_day(1), trip_day(0)]
        assert days[0]['coins_given'] == 5
        assert days[0]['completion_percentage'] == 50.0
        assert days[1]['all_coins_given'] is True


# ============================================================================
# VOUCHER TESTS
# ============================================================================

@pytest.mark.django_db
class TestVouchers:
    """Test voucher issuance, lookup and verification."""

    def test_issue_voucher(self, completed_trip):
        voucher = issue_voucher(user_id=completed_trip.id, as_of=DEPARTURE_NOON)

        assert voucher['voucher_id'].startswith('SMILE_')
        assert voucher['user_id'] == str(completed_trip.id)
        assert voucher['generated_at'] == DEPARTURE_NOON
        assert voucher['expires_at'] == DEPARTURE_NOON + timedelta(days=30)
        assert voucher['is_valid'] is True

    def test_issue_voucher_idempotent(self, completed_trip):
        first = issue_voucher(user_id=completed_trip.id, as_of=DEPARTURE_NOON)
        second = issue_voucher(user_id=completed_trip.id, as_of=DEPARTURE_NOON)

        assert first['voucher_id'] == second['voucher_id']

    def test_summary_keeps_voucher_valid_at_as_of(self, completed_trip):
        first = issue_voucher(user_id=completed_trip.id, as_of=DEPARTURE_NOON)

        summary = get_progress_summary(user_id=completed_trip.id, as_of=DEPARTURE_NOON)
        second = issue_voucher(user_id=completed_trip.id, as_of=DEPARTURE_NOON)

        assert summary['has_generated_voucher'] is True
        assert get_voucher(user_id=completed_trip.id, as_of=DEPARTURE_NOON) is not None
        assert second['voucher_id'] == first['voucher_id']

    def test_not_eligible_raises_every_time(self, tourist, spend_day):
        spend_day(tourist, TRIP_ARRIVAL)

        for _ in range(2):
            with pytest.raises(NotEligibleError):
                issue_voucher(user_id=tourist.id, as_of=DEPARTURE_NOON)

        assert get_voucher(user_id=tourist.id) is None

    def test_expired_voucher_is_dropped(self, completed_trip):
        issue_voucher(user_id=completed_trip.id, as_of=DEPARTURE_NOON)
        after_expiry = DEPARTURE_NOON + timedelta(days=31)

        assert get_voucher(user_id=completed_trip.id, as_of=after_expiry) is None
        assert get_voucher(user_id=completed_trip.id, as_of=DEPARTURE_NOON) is None

    def test_verify_payload(self, completed_trip):
        voucher = issue_voucher(user_id=completed_trip.id, as_of=DEPARTURE_NOON)

        verified = verify_voucher_payload(voucher['qr_payload'], as_of=DEPARTURE_NOON)

        assert verified['voucher_id'] == voucher['voucher_id']

    def test_verify_tampered_payload(self, completed_trip):
        voucher = issue_voucher(user_id=completed_trip.id, as_of=DEPARTURE_NOON)

        with pytest.raises(InvalidVoucherPayloadError):
            verify_voucher_payload(voucher['qr_payload'] + 'x', as_of=DEPARTURE_NOON)

    def test_verify_unknown_voucher(self, completed_trip):
        issue_voucher(user_id=completed_trip.id, as_of=DEPARTURE_NOON)
        forged = signing.dumps(
            {'voucher_id': 'SMILE_OTHER', 'user_id': str(completed_trip.id)},
            salt=VOUCHER_SALT,
        )

        with pytest.raises(InvalidVoucherPayloadError):
            verify_voucher_payload(forged, as_of=DEPARTURE_NOON)

    def test_render_qr_png(self, completed_trip):
        voucher = issue_voucher(user_id=completed_trip.id, as_of=DEPARTURE_NOON)

        png = render_voucher_qr(voucher)

        assert png.startswith(b'\x89PNG')
