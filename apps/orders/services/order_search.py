"""Order history search."""

from typing import Optional

from django.db.models import QuerySet

from ..models import Order


def filter_orders(
    queryset: Optional[QuerySet] = None,
    *,
    customer_name: Optional[str] = None,
    contact: Optional[str] = None,
    receipt_id: Optional[str] = None,
    delivery_date=None,
) -> QuerySet:
    """
    Filter the order history.

    Name, contact and receipt id match case-insensitive substrings; the date
    must match exactly. All given filters must match.

    Args:
        queryset: Orders to filter (defaults to all orders)
        customer_name: Part of the customer name
        contact: Part of the phone or email
        receipt_id: Part of the receipt id
        delivery_date: Pickup/delivery date

    Returns:
        Filtered QuerySet, newest first
    """
    if queryset is None:
        queryset = Order.objects.all()

    queryset = queryset.select_related('customer', 'created_by').prefetch_related('items')

    if customer_name:
        queryset = queryset.filter(customer_name__icontains=customer_name.strip())
    if contact:
        queryset = queryset.filter(customer_contact__icontains=contact.strip())
    if receipt_id:
        queryset = queryset.filter(receipt_id__icontains=receipt_id.strip())
    if delivery_date:
        queryset = queryset.filter(delivery_date=delivery_date)

    return queryset.order_by('-created_at')
