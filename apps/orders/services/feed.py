"""
Live order list.

Clients keep their order list fresh by polling the feed with the version
they last saw. The version changes whenever an order is added, edited or
deleted, so an unchanged version means the client is already current.
"""

import hashlib

from django.db.models import Count, Max
from django.utils import timezone

from ..models import Order


def snapshot_version() -> str:
    """Version string derived from the order count and latest update."""
    stats = Order.objects.aggregate(count=Count('id'), latest=Max('updated_at'))
    latest = stats['latest'].isoformat() if stats['latest'] else ''
    raw = f"{stats['count']}:{latest}"
    return hashlib.sha1(raw.encode('utf-8')).hexdigest()[:16]


def orders_snapshot() -> dict:
    """
    All orders, newest first, with the current version.

    Returns:
        dict with version, synced_at, count and orders
    """
    orders = list(
        Order.objects
        .select_related('customer')
        .prefetch_related('items')
        .order_by('-created_at')
    )
    return {
        'version': snapshot_version(),
        'synced_at': timezone.now(),
        'count': len(orders),
        'orders': orders,
    }
