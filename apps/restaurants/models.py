# ==========================================
# apps/restaurants/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
import uuid


class Restaurant(models.Model):
    """Restaurant that tourists can give Smile Coins to."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    place_ref = models.CharField(max_length=255, unique=True)
    name = models.CharField(max_length=200, db_index=True)
    address = models.CharField(max_length=500, blank=True)
    latitude = models.DecimalField(
        max_digits=9, decimal_places=6,
        validators=[MinValueValidator(Decimal('-90')), MaxValueValidator(Decimal('90'))]
    )
    longitude = models.DecimalField(
        max_digits=9, decimal_places=6,
        validators=[MinValueValidator(Decimal('-180')), MaxValueValidator(Decimal('180'))]
    )
    wallet_address = models.CharField(max_length=128, unique=True)

    # Denormalized from the transfer ledger; only the recorder increments it
    total_coins_received = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'restaurants'
        indexes = [
            models.Index(fields=['-total_coins_received', 'id'], name='restaurants_ranking_idx'),
            models.Index(fields=['latitude', 'longitude'], name='restaurants_coords_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return self.name
