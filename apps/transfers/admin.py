# ==========================================
# apps/transfers/admin.py
# ==========================================

from django.contrib import admin
from apps.transfers.models import Transfer, DailyReward


@admin.register(Transfer)
class TransferAdmin(admin.ModelAdmin):
    """Read-only view of the append-only ledger."""

    list_display = [
        'transferred_at',
        'user',
        'restaurant',
        'amount',
        'origin_country',
        'settlement_hash',
    ]
    list_filter = ['transfer_date', 'origin_country']
    search_fields = ['settlement_hash', 'from_address', 'to_address']
    date_hierarchy = 'transfer_date'
    list_select_related = ['user', 'restaurant']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(DailyReward)
class DailyRewardAdmin(admin.ModelAdmin):
    """Daily budgets derived by the transfer recorder."""

    list_display = [
        'user',
        'reward_date',
        'coins_received',
        'coins_given',
        'all_coins_given',
    ]
    list_filter = ['all_coins_given', 'reward_date']
    readonly_fields = [
        'user',
        'reward_date',
        'coins_received',
        'coins_given',
        'all_coins_given',
        'created_at',
        'updated_at',
    ]
    list_select_related = ['user']
