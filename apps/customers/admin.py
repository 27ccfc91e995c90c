# ==========================================
# apps/customers/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Customer, RewardsTransaction
from .services import can_redeem_points


class RewardsTransactionInline(admin.TabularInline):
    """Inline admin for a customer's rewards ledger."""
    model = RewardsTransaction
    extra = 0
    fields = [
        'created_at',
        'order',
        'points_earned',
        'points_redeemed',
        'discount_amount',
        'balance_after',
        'note',
    ]
    readonly_fields = fields
    ordering = ['-created_at']

    def has_add_permission(self, request, obj=None):
        """Ledger rows are written by the rewards service."""
        return False


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """Admin interface for loyalty customers."""

    list_display = [
        'name',
        'phone',
        'email',
        'rewards_points',
        'redeem_badge',
        'created_at',
    ]

    search_fields = [
        'name',
        'phone',
        'email',
    ]

    readonly_fields = [
        'name_normalized',
        'created_at',
        'updated_at',
    ]

    inlines = [RewardsTransactionInline]
    ordering = ['name']

    fieldsets = (
        ('Customer', {
            'fields': ('name', 'name_normalized', 'phone', 'email')
        }),
        ('Rewards', {
            'fields': ('rewards_points',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def redeem_badge(self, obj):
        """Show whether the customer can redeem a reward."""
        if can_redeem_points(obj.rewards_points):
            return format_html(
                '<span style="background: {}; color: {}; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">{}</span>',
                '#6B8E5E', 'white', 'Can redeem'
            )
        return '-'
    redeem_badge.short_description = 'Reward'


@admin.register(RewardsTransaction)
class RewardsTransactionAdmin(admin.ModelAdmin):
    list_display = [
        'customer',
        'order',
        'points_earned',
        'points_redeemed',
        'balance_after',
        'note',
        'created_at',
    ]
    list_filter = ['created_at']
    search_fields = ['customer__name', 'order__receipt_id', 'note']
    readonly_fields = [
        'customer',
        'order',
        'points_earned',
        'points_redeemed',
        'discount_amount',
        'order_subtotal',
        'balance_after',
        'note',
        'created_at',
    ]
    date_hierarchy = 'created_at'
