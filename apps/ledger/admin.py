# ==========================================
# apps/ledger/admin.py
# ==========================================

from django.contrib import admin
from apps.ledger.models import Workout, Settlement


@admin.register(Workout)
class WorkoutAdmin(admin.ModelAdmin):
    """
    Admin interface for workouts.

    Read-only: editing a status here would bypass the pot adjustment, so
    corrections go through the API (or a pot recalculation afterwards).
    """

    list_display = ['user', 'date', 'status', 'updated_at']
    list_filter = ['status', 'date']
    search_fields = ['user__email', 'user__display_name']
    readonly_fields = ['user', 'date', 'status', 'created_at', 'updated_at']
    date_hierarchy = 'date'
    ordering = ['-date']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('user')


@admin.register(Settlement)
class SettlementAdmin(admin.ModelAdmin):
    """Settlements are immutable audit records."""

    list_display = ['pair', 'week_start', 'winner', 'loser', 'amount', 'created_at']
    list_filter = ['week_start']
    search_fields = ['pair__id', 'winner__email', 'loser__email']
    readonly_fields = ['pair', 'week_start', 'winner', 'loser', 'amount', 'created_at']
    date_hierarchy = 'week_start'
    ordering = ['-week_start']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('pair', 'winner', 'loser')
