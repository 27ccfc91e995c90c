from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count
from django.utils.html import format_html
from .models import User


@admin.register(User)
class StaffAdmin(BaseUserAdmin):
    """
    Staff accounts. There is no public sign-up; managers add counter
    staff here and deactivate them when they leave.
    """

    list_display = ['email', 'display_name', 'role', 'is_active', 'orders_taken', 'last_login']
    list_filter = ['is_active', 'is_staff']
    search_fields = ['email', 'display_name']
    ordering = ['display_name', 'email']
    readonly_fields = ['joined_at', 'last_login']

    fieldsets = (
        (None, {'fields': ('email', 'display_name', 'password')}),
        ('Access', {'fields': ('is_active', 'is_staff', 'is_superuser')}),
        ('History', {'fields': ('joined_at', 'last_login'), 'classes': ('collapse',)}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'password1', 'password2', 'is_staff'),
        }),
    )
    filter_horizontal = []

    actions = ['deactivate_staff']

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(order_count=Count('orders_taken'))

    @admin.display(description='Role', ordering='is_staff')
    def role(self, obj):
        if obj.is_superuser:
            return format_html('<strong>{}</strong>', 'Owner')
        return 'Manager' if obj.is_staff else 'Counter'

    @admin.display(description='Orders taken', ordering='order_count')
    def orders_taken(self, obj):
        return obj.order_count

    @admin.action(description='Deactivate selected staff')
    def deactivate_staff(self, request, queryset):
        """Owners are never deactivated from here."""
        count = queryset.filter(is_superuser=False).update(is_active=False)
        self.message_user(request, f'Deactivated {count} staff member(s).')
