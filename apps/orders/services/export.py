"""CSV backup of the order history."""

from decimal import Decimal
from typing import Iterable

import pandas as pd
from django.utils import timezone

from ..models import Order


CSV_HEADERS = [
    'Receipt ID',
    'Customer Name',
    'Contact Info',
    'Pickup Date',
    'Pickup Time',
    'Payment Method',
    'Delivery Required',
    'Delivery Address',
    'Delivery Fee',
    'Items Count',
    'Items Details',
    'Puff Subtotal',
    'Discount Percent',
    'Discount Amount',
    'Pre-Tax Subtotal',
    'Tax Rate',
    'Tax Amount',
    'Final Total',
    'Status',
    'Order Date',
    'Order ID',
]


def _money(value) -> str:
    return f"{Decimal(value or 0):.2f}"


def export_filename(day=None) -> str:
    day = day or timezone.localdate()
    return f"pastry-orders-backup-{day.isoformat()}.csv"


def items_details(order: Order) -> str:
    return '; '.join(
        f"{item.quantity}x {item.name} ({item.category}) "
        f"@ ${_money(item.unit_price)} = ${_money(item.total)}"
        for item in order.items.all()
    )


def order_row(order: Order) -> list:
    items = list(order.items.all())
    return [
        order.receipt_id,
        order.customer_name,
        order.customer_contact,
        order.delivery_date.isoformat(),
        order.delivery_time,
        order.payment_method,
        'Yes' if order.is_delivery else 'No',
        order.delivery_address,
        _money(order.delivery_fee),
        len(items),
        items_details(order),
        _money(order.item_subtotal),
        f"{order.discount_percent}%",
        _money(order.discount_amount),
        _money(order.pre_tax_subtotal),
        f"{Decimal(order.tax_rate) * 100:.2f}%",
        _money(order.tax),
        _money(order.final_total),
        order.status,
        order.created_at.isoformat() if order.created_at else '',
        str(order.id),
    ]


def export_orders_csv(orders: Iterable[Order]) -> str:
    """
    Write orders to CSV text with a header row.

    Args:
        orders: Orders to export (items should be prefetched)

    Returns:
        CSV document as a string
    """
    frame = pd.DataFrame([order_row(order) for order in orders], columns=CSV_HEADERS)
    return frame.to_csv(index=False, lineterminator='\n')
