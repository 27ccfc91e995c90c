# ==========================================
# apps/orders/admin.py
# ==========================================

from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html
from .models import Order, OrderItem, PaymentStatus, OrderStatus


BADGE_STYLE = (
    'background: {}; color: {}; padding: 3px 8px; '
    'border-radius: 10px; font-size: 11px;'
)


class OrderItemInline(admin.TabularInline):
    """Inline admin for order lines."""
    model = OrderItem
    extra = 0
    fields = ['position', 'name', 'category', 'quantity', 'unit_price', 'total']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        """Lines are written by the order service so totals stay consistent."""
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin interface for orders.

    Money and points fields are read-only: edit orders through the API so
    they are re-priced and the customer's points are reconciled.
    """

    list_display = [
        'receipt_id',
        'customer_name',
        'delivery_date',
        'delivery_time',
        'final_total',
        'payment_status_badge',
        'status',
        'created_at',
    ]

    list_filter = [
        'payment_status',
        'status',
        'payment_method',
        'is_delivery',
        'delivery_date',
    ]

    search_fields = [
        'receipt_id',
        'customer_name',
        'customer_contact',
    ]

    readonly_fields = [
        'receipt_id',
        'customer',
        'item_subtotal',
        'discount_percent',
        'discount_amount',
        'rewards_discount_amount',
        'pre_tax_subtotal',
        'tax_rate',
        'tax',
        'delivery_fee',
        'final_total',
        'points_earned',
        'points_redeemed',
        'customer_rewards_balance',
        'created_by',
        'created_at',
        'updated_at',
    ]

    inlines = [OrderItemInline]
    date_hierarchy = 'delivery_date'
    ordering = ['-created_at']

    fieldsets = (
        ('Customer', {
            'fields': ('receipt_id', 'customer', 'customer_name', 'customer_contact')
        }),
        ('Pickup / Delivery', {
            'fields': (
                'delivery_date',
                'delivery_time',
                'is_delivery',
                'delivery_address',
                'delivery_fee',
            )
        }),
        ('Totals', {
            'fields': (
                'payment_method',
                'item_subtotal',
                'discount_percent',
                'discount_amount',
                'rewards_discount_amount',
                'pre_tax_subtotal',
                'tax_rate',
                'tax',
                'final_total',
            )
        }),
        ('Rewards', {
            'fields': ('points_earned', 'points_redeemed', 'customer_rewards_balance'),
            'classes': ('collapse',),
        }),
        ('Status', {
            'fields': ('payment_status', 'status')
        }),
        ('Metadata', {
            'fields': ('created_by', 'created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def payment_status_badge(self, obj):
        """Display payment status as colored badge."""
        if obj.is_paid:
            return format_html('<span style="' + BADGE_STYLE + '">Paid</span>', '#6B8E5E', 'white')
        return format_html('<span style="' + BADGE_STYLE + '">Unpaid</span>', '#E5C49A', '#2C1810')
    payment_status_badge.short_description = 'Payment'
    payment_status_badge.admin_order_field = 'payment_status'

    actions = [
        'mark_paid',
        'mark_completed',
    ]

    @admin.action(description='Mark selected orders as paid')
    def mark_paid(self, request, queryset):
        count = queryset.update(payment_status=PaymentStatus.PAID, updated_at=timezone.now())
        self.message_user(request, f'Marked {count} order(s) as paid.')

    @admin.action(description='Mark selected orders as completed')
    def mark_completed(self, request, queryset):
        count = queryset.update(status=OrderStatus.COMPLETED, updated_at=timezone.now())
        self.message_user(request, f'Completed {count} order(s).')

    def get_queryset(self, request):
        """Optimize query with select_related."""
        qs = super().get_queryset(request)
        return qs.select_related('customer', 'created_by')
