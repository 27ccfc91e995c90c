"""
Analytics Module
=================

Sales trends for the bakery, computed from orders and their lines.

Classes:
    TrendsQueries: Static methods for the trends dashboard.

Key Features:
    - Summary totals (orders, revenue, items sold, unique customers)
    - Monthly sales, always twelve months JAN..DEC
    - Category breakdown with each category's share of items sold
    - Top selling puffs
    - Years available for filtering

Every query takes an optional ``year``. ``None`` means all years; otherwise
only orders whose pickup/delivery date falls in that year are counted.

Example:
    Getting the dashboard for one year::

        from apps.analytics.analytics import TrendsQueries

        data = TrendsQueries.trends(year=2025)
        print(f"Revenue: ${data['summary']['total_revenue']}")

Note:
    This module is read-only and doesn't modify any data. All methods
    are static and can be called without instantiation.
"""

from django.db.models import Sum, Count
from django.db.models.functions import ExtractMonth
from decimal import Decimal
from apps.orders.models import Order, OrderItem
from .exceptions import InvalidPeriodError


ALL_YEARS = 'All Years'

MONTH_LABELS = [
    'JAN', 'FEB', 'MAR', 'APR', 'MAY', 'JUN',
    'JUL', 'AUG', 'SEP', 'OCT', 'NOV', 'DEC',
]


def parse_year(value):
    """
    Parse the year filter.

    Args:
        value: 'All Years', '' / None, or a four digit year

    Returns:
        int year, or None for all years

    Raises:
        InvalidPeriodError: If the value is not a year
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() == ALL_YEARS.lower():
        return None
    if len(text) != 4 or not text.isdigit():
        raise InvalidPeriodError(f"Invalid year: '{value}'. Use YYYY or '{ALL_YEARS}'")
    return int(text)


class TrendsQueries:
    """
    Aggregate queries behind the trends dashboard.

    Methods:
        summary: Headline totals.
        monthly_sales: Sales and order counts per calendar month.
        category_breakdown: Items, revenue and share per puff category.
        top_items: Best selling puffs by quantity.
        available_years: Years that have orders, for the year filter.
        trends: Everything above in one payload.

    Note:
        All methods return plain dictionaries or lists, not Django objects,
        making them suitable for JSON serialization in API responses.
    """

    @staticmethod
    def orders(year=None):
        """Orders counted for the given year (all orders when None)."""
        queryset = Order.objects.all()
        if year is not None:
            queryset = queryset.filter(delivery_date__year=year)
        return queryset

    @staticmethod
    def items(year=None):
        """Order lines counted for the given year."""
        queryset = OrderItem.objects.all()
        if year is not None:
            queryset = queryset.filter(order__delivery_date__year=year)
        return queryset

    @staticmethod
    def summary(year=None):
        """
        Headline totals.

        Args:
            year (int, optional): Restrict to orders delivered in this year.

        Returns:
            dict: A dictionary containing:
                - total_orders (int): Number of orders.
                - total_revenue (Decimal): Sum of final totals.
                - total_items_sold (int): Sum of line quantities.
                - unique_customers (int): Distinct customer names.
        """
        orders = TrendsQueries.orders(year)
        totals = orders.aggregate(
            total_orders=Count('id'),
            total_revenue=Sum('final_total'),
        )
        items_sold = TrendsQueries.items(year).aggregate(sold=Sum('quantity'))['sold']

        return {
            'total_orders': totals['total_orders'],
            'total_revenue': totals['total_revenue'] or Decimal('0.00'),
            'total_items_sold': items_sold or 0,
            'unique_customers': orders.order_by().values('customer_name').distinct().count(),
        }

    @staticmethod
    def monthly_sales(year=None):
        """
        Sales per calendar month.

        Always returns twelve rows, JAN..DEC, with months that have no
        orders filled with zeros. With all years, the same month of
        different years is added together.

        Returns:
            list[dict]: ``{'month': 'JAN', 'sales': Decimal, 'orders': int}``
        """
        rows = (
            TrendsQueries.orders(year)
            .annotate(month=ExtractMonth('delivery_date'))
            .values('month')
            .annotate(sales=Sum('final_total'), orders=Count('id'))
            .order_by('month')
        )
        by_month = {row['month']: row for row in rows}

        result = []
        for index, label in enumerate(MONTH_LABELS, start=1):
            row = by_month.get(index)
            result.append({
                'month': label,
                'sales': row['sales'] if row and row['sales'] is not None else Decimal('0.00'),
                'orders': row['orders'] if row else 0,
            })
        return result

    @staticmethod
    def category_breakdown(year=None):
        """
        Items sold and revenue per puff category.

        ``percentage`` is the category's share of all items sold, capped
        at 100.

        Returns:
            list[dict]: Categories sorted by items sold (highest first).
        """
        rows = list(
            TrendsQueries.items(year)
            .values('category')
            .annotate(items=Sum('quantity'), revenue=Sum('total'))
            .order_by('-items', 'category')
        )
        total_items = sum(row['items'] or 0 for row in rows)

        return [
            {
                'category': row['category'] or 'Uncategorized',
                'items': row['items'] or 0,
                'revenue': row['revenue'] or Decimal('0.00'),
                'percentage': (
                    min(round((row['items'] or 0) * 100 / total_items, 1), 100.0)
                    if total_items else 0.0
                ),
            }
            for row in rows
        ]

    @staticmethod
    def top_items(year=None, limit=10):
        """
        Best selling puffs.

        Args:
            year (int, optional): Restrict to orders delivered in this year.
            limit (int): Number of puffs to return. Defaults to 10.

        Returns:
            list[dict]: ``{'name', 'category', 'quantity', 'revenue'}``
            sorted by quantity (highest first).
        """
        rows = (
            TrendsQueries.items(year)
            .values('name', 'category')
            .annotate(sold=Sum('quantity'), revenue=Sum('total'))
            .order_by('-sold', 'name')[:limit]
        )
        return [
            {
                'name': row['name'],
                'category': row['category'],
                'quantity': row['sold'] or 0,
                'revenue': row['revenue'] or Decimal('0.00'),
            }
            for row in rows
        ]

    @staticmethod
    def available_years():
        """'All Years' followed by every year with orders, newest first."""
        years = Order.objects.dates('delivery_date', 'year', order='DESC')
        return [ALL_YEARS] + [str(day.year) for day in years]

    @staticmethod
    def trends(year=None, limit=10):
        """Everything the trends dashboard shows, in one payload."""
        return {
            'year': str(year) if year is not None else ALL_YEARS,
            'available_years': TrendsQueries.available_years(),
            'summary': TrendsQueries.summary(year),
            'monthly_sales': TrendsQueries.monthly_sales(year),
            'category_breakdown': TrendsQueries.category_breakdown(year),
            'top_items': TrendsQueries.top_items(year, limit=limit),
        }
