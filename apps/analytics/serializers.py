"""
Serializers for analytics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - API documentation and output formatting

Input Serializers:
    TrendsQuerySerializer - Validates the year filter
    CalendarQuerySerializer - Validates calendar view, date and search

Response Serializers:
    TrendsResponseSerializer - Trends dashboard
    CalendarResponseSerializer - Calendar screen for one view
"""

from rest_framework import serializers
from apps.orders.serializers import OrderListSerializer
from .analytics import ALL_YEARS
from .order_calendar import VIEWS, MONTH


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class TrendsQuerySerializer(serializers.Serializer):
    """
    Validate trends query parameters.

    Query Parameters:
        year (str): 'All Years' (default) or a four digit year
        limit (int): Number of top items (1-50, default 10)

    Note:
        The year itself is parsed by ``parse_year`` so that the error text
        matches the one raised elsewhere.
    """

    year = serializers.CharField(required=False, allow_blank=True, default=ALL_YEARS)
    limit = serializers.IntegerField(required=False, default=10, min_value=1, max_value=50)


class CalendarQuerySerializer(serializers.Serializer):
    """
    Validate calendar query parameters.

    Query Parameters:
        view (str): Day, Week, Month or Year (default Month)
        date (date): Anchor date (default today)
        search (str): Customer or item name filter
    """

    view = serializers.CharField(required=False, allow_blank=True, default=MONTH)
    date = serializers.DateField(required=False)
    search = serializers.CharField(required=False, allow_blank=True, default='')


# =============================================================================
# Response Serializers (Trends)
# =============================================================================

class TrendsSummarySerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_items_sold = serializers.IntegerField()
    unique_customers = serializers.IntegerField()


class MonthlySalesSerializer(serializers.Serializer):
    month = serializers.CharField()
    sales = serializers.DecimalField(max_digits=12, decimal_places=2)
    orders = serializers.IntegerField()


class CategoryBreakdownSerializer(serializers.Serializer):
    category = serializers.CharField()
    items = serializers.IntegerField()
    revenue = serializers.DecimalField(max_digits=12, decimal_places=2)
    percentage = serializers.FloatField()


class TopItemSerializer(serializers.Serializer):
    name = serializers.CharField()
    category = serializers.CharField(allow_blank=True)
    quantity = serializers.IntegerField()
    revenue = serializers.DecimalField(max_digits=12, decimal_places=2)


class TrendsResponseSerializer(serializers.Serializer):
    """Response for the trends dashboard."""

    year = serializers.CharField()
    available_years = serializers.ListField(child=serializers.CharField())
    summary = TrendsSummarySerializer()
    monthly_sales = MonthlySalesSerializer(many=True)
    category_breakdown = CategoryBreakdownSerializer(many=True)
    top_items = TopItemSerializer(many=True)


# =============================================================================
# Response Serializers (Calendar)
# =============================================================================

class PeriodStatsSerializer(serializers.Serializer):
    start = serializers.DateField()
    end = serializers.DateField()
    total_orders = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_items = serializers.IntegerField()
    active_days = serializers.IntegerField()


class CalendarOrderSerializer(serializers.Serializer):
    time_label = serializers.CharField()
    order = OrderListSerializer()


class CalendarDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    orders = CalendarOrderSerializer(many=True)


class GridCellSerializer(serializers.Serializer):
    date = serializers.DateField()
    is_current_month = serializers.BooleanField()
    order_count = serializers.IntegerField()


class YearMonthSerializer(serializers.Serializer):
    month = serializers.IntegerField()
    label = serializers.CharField()
    order_count = serializers.IntegerField()
    revenue = serializers.DecimalField(max_digits=12, decimal_places=2)
    paid = serializers.IntegerField()
    unpaid = serializers.IntegerField()


class CalendarResponseSerializer(serializers.Serializer):
    """
    Response for the calendar screen.

    Only the block for the requested view is present:
    Day -> orders, Week -> days, Month -> grid, Year -> months.
    """

    view = serializers.ChoiceField(choices=VIEWS)
    date = serializers.DateField()
    previous = serializers.DateField()
    next = serializers.DateField()
    stats = PeriodStatsSerializer()
    orders = CalendarOrderSerializer(many=True, required=False)
    days = CalendarDaySerializer(many=True, required=False)
    grid = GridCellSerializer(many=True, required=False)
    months = YearMonthSerializer(many=True, required=False)


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
