# ==========================================
# apps/restaurants/admin.py
# ==========================================

from django.contrib import admin
from apps.restaurants.models import Restaurant


@admin.register(Restaurant)
class RestaurantAdmin(admin.ModelAdmin):
    """Admin interface for restaurants."""

    list_display = [
        'name',
        'place_ref',
        'address',
        'total_coins_received',
        'created_at',
    ]
    search_fields = [
        'name',
        'place_ref',
        'address',
        'wallet_address',
    ]
    # The counter mirrors the ledger and must not be edited by hand
    readonly_fields = [
        'total_coins_received',
        'created_at',
        'updated_at',
    ]
    ordering = ['-total_coins_received', 'name']
