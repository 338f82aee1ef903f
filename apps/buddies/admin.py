# ==========================================
# apps/buddies/admin.py
# ==========================================

from django.contrib import admin
from apps.buddies.models import Pair, Invitation, PauseRequest
from apps.ledger.models import Settlement
from apps.ledger.services import recalculate_pot


class SettlementInline(admin.TabularInline):
    """Read-only settlement history of a pair."""
    model = Settlement
    extra = 0
    fields = ['week_start', 'winner', 'loser', 'amount', 'created_at']
    readonly_fields = fields
    can_delete = False
    ordering = ['-week_start']

    def has_add_permission(self, request, obj=None):
        return False


class PauseRequestInline(admin.TabularInline):
    model = PauseRequest
    extra = 0
    fields = ['requested_by', 'action', 'status', 'created_at', 'responded_at']
    readonly_fields = ['created_at', 'responded_at']


@admin.register(Pair)
class PairAdmin(admin.ModelAdmin):
    """Admin interface for buddy pairs."""

    list_display = [
        'id',
        'user_a',
        'user_b',
        'pot_balance',
        'is_paused',
        'created_at',
    ]
    list_filter = ['is_paused', 'created_at']
    search_fields = ['id', 'user_a__email', 'user_b__email']
    # Pot and pause state only change through the services
    readonly_fields = ['id', 'pot_balance', 'is_paused', 'created_at', 'updated_at']
    inlines = [SettlementInline, PauseRequestInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Buddies', {
            'fields': ('id', 'user_a', 'user_b', 'is_paused')
        }),
        ('Pot', {
            'fields': ('pot_balance',)
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['recalculate_pots']

    @admin.action(description='Recalculate pots from workout history')
    def recalculate_pots(self, request, queryset):
        changed = 0
        for pair in queryset:
            if recalculate_pot(pair_id=pair.id).changed:
                changed += 1
        self.message_user(request, f"Recalculated {queryset.count()} pot(s), {changed} changed")

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user_a', 'user_b')


@admin.register(Invitation)
class InvitationAdmin(admin.ModelAdmin):
    """Admin interface for buddy invitations."""

    list_display = ['invitee_email', 'invitee_name', 'inviter', 'status', 'created_at', 'responded_at']
    list_filter = ['status', 'created_at']
    search_fields = ['invitee_email', 'invitee_name', 'inviter__email']
    readonly_fields = ['created_at', 'responded_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('inviter')


@admin.register(PauseRequest)
class PauseRequestAdmin(admin.ModelAdmin):

    list_display = ['pair', 'requested_by', 'action', 'status', 'created_at', 'responded_at']
    list_filter = ['action', 'status']
    search_fields = ['requested_by__email', 'pair__id']
    readonly_fields = ['created_at', 'responded_at']
    ordering = ['-created_at']
