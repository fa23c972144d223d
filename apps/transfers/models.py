# ==========================================
# apps/transfers/models.py
# ==========================================

from django.conf import settings
from django.db import models
import secrets
import uuid


def pending_settlement_hash():
    """Placeholder used until a signer supplies the real settlement hash."""
    return f'pending_{secrets.token_hex(16)}'


class TransferQuerySet(models.QuerySet):

    def update(self, **kwargs):
        raise TypeError('Transfers are append-only')

    def delete(self):
        raise TypeError('Transfers are append-only')


class Transfer(models.Model):
    """
    One coin gift from a tourist to a restaurant.

    The ledger is append-only: rows are never updated or deleted, and
    every aggregate in the system (restaurant counters, daily rewards,
    rankings) can be rebuilt from it.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    settlement_hash = models.CharField(
        max_length=128, unique=True, default=pending_settlement_hash, editable=False
    )
    from_address = models.CharField(max_length=128)
    to_address = models.CharField(max_length=128)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='transfers'
    )
    restaurant = models.ForeignKey(
        'restaurants.Restaurant',
        on_delete=models.PROTECT,
        related_name='transfers'
    )
    amount = models.PositiveSmallIntegerField()
    transferred_at = models.DateTimeField()
    # Calendar day in settings.TIME_ZONE; all quota arithmetic keys on this
    transfer_date = models.DateField()
    # Copied from the user at write time so origin rankings need no join
    origin_country = models.CharField(max_length=64)

    objects = TransferQuerySet.as_manager()

    class Meta:
        db_table = 'transfers'
        ordering = ['-transferred_at']
        indexes = [
            models.Index(fields=['user', 'transfer_date'], name='transfers_user_day_idx'),
            models.Index(fields=['user', 'restaurant', 'transfer_date'], name='transfers_user_rest_day_idx'),
            models.Index(fields=['restaurant', 'transfer_date'], name='transfers_rest_day_idx'),
            models.Index(fields=['origin_country'], name='transfers_origin_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                check=models.Q(amount__gte=1) & models.Q(amount__lte=3),
                name='transfer_amount_between_1_and_3',
            ),
        ]

    def __str__(self):
        return f"{self.user_id} -> {self.restaurant_id}: {self.amount}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise TypeError('Transfers are append-only')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise TypeError('Transfers are append-only')


class DailyReward(models.Model):
    """Per-tourist, per-day aggregate of the daily coin budget."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='daily_rewards'
    )
    reward_date = models.DateField()
    coins_received = models.PositiveSmallIntegerField(default=10)
    coins_given = models.PositiveSmallIntegerField(default=0)
    all_coins_given = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'daily_rewards'
        ordering = ['-reward_date']
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'reward_date'],
                name='daily_reward_unique_user_day',
            ),
        ]
        indexes = [
            models.Index(fields=['user', 'all_coins_given'], name='daily_rewards_complete_idx'),
        ]

    def __str__(self):
        return f"{self.user_id} {self.reward_date}: {self.coins_given}/{self.coins_received}"

    @property
    def coins_remaining(self):
        return max(self.coins_received - self.coins_given, 0)
