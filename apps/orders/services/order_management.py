"""Order management service - create, edit, delete and settle orders."""

import logging
import secrets
import string
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction

from apps.customers.services import (
    InsufficientPointsError,
    can_redeem_points,
    process_order_rewards,
    resolve_customer_for_order,
    reverse_order_rewards,
)
from ..menu import category_for, default_price
from ..models import (
    NOT_PROVIDED,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from .exceptions import InvalidOrderError, OrderNotFoundError
from .pricing import line_total, price_order

logger = logging.getLogger(__name__)


RECEIPT_ID_LENGTH = 26
RECEIPT_ID_ALPHABET = string.digits + string.ascii_lowercase

# Payment methods staff can pick when taking a new order
ORDER_PAYMENT_METHODS = [
    PaymentMethod.VENMO,
    PaymentMethod.ZELLE,
    PaymentMethod.CASH,
    PaymentMethod.CHECK,
]

EDITABLE_FIELDS = {
    'customer_name',
    'customer_contact',
    'delivery_date',
    'delivery_time',
    'payment_method',
    'items',
    'is_delivery',
    'delivery_address',
    'delivery_fee',
    'discount_percent',
    'payment_status',
    'redeem_points',
}


def generate_receipt_id() -> str:
    """Random 26-character lowercase base-36 receipt id."""
    while True:
        receipt_id = ''.join(
            secrets.choice(RECEIPT_ID_ALPHABET) for _ in range(RECEIPT_ID_LENGTH)
        )
        if not Order.objects.filter(receipt_id=receipt_id).exists():
            return receipt_id


def _contact_or_placeholder(contact: Optional[str]) -> str:
    contact = (contact or '').strip()
    return contact or NOT_PROVIDED


def _delivery_address(is_delivery: bool, address: Optional[str]) -> str:
    """Empty for pickup; a delivery with no address gets a placeholder."""
    if not is_delivery:
        return ''
    address = (address or '').strip() or settings.BAKERY_DEFAULT_DELIVERY_ADDRESS
    return address or NOT_PROVIDED


def prepare_items(items) -> List[dict]:
    """
    Validate order lines and fill in menu defaults.

    A missing category is taken from the menu; a missing unit price falls
    back to the menu price for the puff or its category.
    """
    prepared = []
    for position, item in enumerate(items or []):
        name = (item.get('name') or '').strip()
        if not name:
            raise InvalidOrderError("Every item needs a puff type")

        category = (item.get('category') or '').strip() or category_for(name) or ''

        quantity = int(item.get('quantity') or 0)
        if quantity < 1:
            raise InvalidOrderError(f"Quantity for {name} must be at least 1")

        unit_price = item.get('unit_price')
        if unit_price is None or unit_price == '':
            unit_price = default_price(name=name, category=category)
        unit_price = Decimal(str(unit_price))
        if unit_price < 0:
            raise InvalidOrderError(f"Price for {name} cannot be negative")

        prepared.append({
            'name': name,
            'category': category,
            'quantity': quantity,
            'unit_price': unit_price,
            'total': line_total(quantity, unit_price),
            'position': position,
        })

    if not prepared:
        raise InvalidOrderError("Add at least one item to the order")

    return prepared


def _validate_required(*, customer_name, delivery_date, delivery_time, payment_method):
    if not (customer_name or '').strip():
        raise InvalidOrderError("Customer name is required")
    if not delivery_date:
        raise InvalidOrderError("Pickup date is required")
    if not (delivery_time or '').strip():
        raise InvalidOrderError("Pickup time is required")
    if not payment_method:
        raise InvalidOrderError("Payment method is required")


def _save_items(order: Order, items: List[dict]):
    OrderItem.objects.bulk_create([
        OrderItem(order=order, **item) for item in items
    ])


def _apply_totals(order: Order, totals):
    order.item_subtotal = totals.item_subtotal
    order.discount_percent = totals.discount_percent
    order.discount_amount = totals.discount_amount
    order.rewards_discount_amount = totals.rewards_discount_amount
    order.pre_tax_subtotal = totals.pre_tax_subtotal
    order.tax_rate = totals.tax_rate
    order.tax = totals.tax
    order.delivery_fee = totals.delivery_fee
    order.final_total = totals.final_total
    order.points_earned = totals.points_earned if order.customer_id else 0
    order.points_redeemed = totals.points_redeemed


def _check_redemption(customer, redeem_points: bool):
    if not redeem_points:
        return
    balance = customer.rewards_points if customer else 0
    if not can_redeem_points(balance):
        raise InsufficientPointsError(
            f"Not enough points to redeem a reward ({balance} available)"
        )


def _apply_rewards(order: Order, totals):
    """Credit the order's points to its customer and store the new balance."""
    if not order.customer_id:
        order.customer_rewards_balance = None
        return

    result = process_order_rewards(
        customer=order.customer,
        order_subtotal=totals.discounted_subtotal,
        order=order,
        use_redemption=totals.points_redeemed > 0,
    )
    order.customer_rewards_balance = result['new_points_balance']
    # The balance was written through a locked copy of the row
    order.customer.refresh_from_db(fields=['rewards_points', 'updated_at'])


@transaction.atomic
def create_order(
    *,
    customer_name: str,
    delivery_date,
    delivery_time: str,
    payment_method: str,
    items,
    customer_contact: str = '',
    is_delivery: bool = False,
    delivery_address: str = '',
    delivery_fee=None,
    discount_percent=0,
    payment_status: str = PaymentStatus.UNPAID,
    redeem_points: bool = False,
    created_by=None,
) -> Order:
    """
    Create an order, link it to a customer and credit rewards points.

    Args:
        customer_name: Customer name (required)
        delivery_date: Pickup or delivery date (required)
        delivery_time: Pickup or delivery time, "HH:MM" (required)
        payment_method: venmo, zelle, cash or check (required)
        items: Lines with name, category, quantity and unit_price
        customer_contact: Phone or email
        is_delivery: Whether the order is delivered
        delivery_address: Address for deliveries
        delivery_fee: Delivery fee (defaults to BAKERY_DEFAULT_DELIVERY_FEE)
        discount_percent: 0, 5, 10, 15, 20, 25 or 30
        payment_status: PAID or UNPAID
        redeem_points: Redeem 100 points for 10% off
        created_by: Staff user taking the order

    Returns:
        The saved Order with its items

    Raises:
        InvalidOrderError: If required fields are missing or invalid
        InsufficientPointsError: If redemption was requested without
            enough points
    """
    _validate_required(
        customer_name=customer_name,
        delivery_date=delivery_date,
        delivery_time=delivery_time,
        payment_method=payment_method,
    )
    if payment_method not in ORDER_PAYMENT_METHODS:
        raise InvalidOrderError(f"Unknown payment method: {payment_method}")
    if payment_status not in PaymentStatus.values:
        raise InvalidOrderError(f"Unknown payment status: {payment_status}")

    prepared_items = prepare_items(items)
    customer_name = customer_name.strip()
    customer_contact = _contact_or_placeholder(customer_contact)

    customer = resolve_customer_for_order(name=customer_name, contact=customer_contact)
    _check_redemption(customer, redeem_points)

    totals = price_order(
        items=prepared_items,
        payment_method=payment_method,
        discount_percent=discount_percent,
        is_delivery=is_delivery,
        delivery_fee=delivery_fee,
        redeem_points=redeem_points,
        points_balance=customer.rewards_points if customer else 0,
    )

    order = Order(
        receipt_id=generate_receipt_id(),
        customer=customer,
        customer_name=customer_name,
        customer_contact=customer_contact,
        delivery_date=delivery_date,
        delivery_time=delivery_time.strip(),
        payment_method=payment_method,
        is_delivery=is_delivery,
        delivery_address=_delivery_address(is_delivery, delivery_address),
        payment_status=payment_status,
        status=OrderStatus.PENDING,
        created_by=created_by,
    )
    _apply_totals(order, totals)
    order.save()
    _save_items(order, prepared_items)

    _apply_rewards(order, totals)
    order.save(update_fields=['customer_rewards_balance', 'updated_at'])

    logger.info(
        "Created order %s for %s: $%s (%s items)",
        order.receipt_id, order.customer_name, order.final_total, len(prepared_items),
    )
    return order


def get_order_by_id(order_id: UUID) -> Order:
    """
    Fetch an order with its items.

    Raises:
        OrderNotFoundError: If no such order exists
    """
    try:
        return (
            Order.objects
            .select_related('customer', 'created_by')
            .prefetch_related('items')
            .get(id=order_id)
        )
    except Order.DoesNotExist:
        raise OrderNotFoundError("Order not found")


def get_order_by_receipt_id(receipt_id: str) -> Order:
    """
    Fetch an order by the id printed on its receipt.

    Raises:
        OrderNotFoundError: If no such order exists
    """
    try:
        return (
            Order.objects
            .select_related('customer', 'created_by')
            .prefetch_related('items')
            .get(receipt_id__iexact=(receipt_id or '').strip())
        )
    except Order.DoesNotExist:
        raise OrderNotFoundError("Order not found")


def _lock_order(order_id: UUID) -> Order:
    try:
        return Order.objects.select_for_update().get(id=order_id)
    except Order.DoesNotExist:
        raise OrderNotFoundError("Order not found")


@transaction.atomic
def update_order(*, order_id: UUID, **changes) -> Order:
    """
    Edit an order and re-price it.

    The receipt id never changes. When the name or contact changes, the
    customer is looked up again. Points are reconciled by reversing the
    order's previous effect on its old customer and applying the new figures
    to the (possibly different) customer.

    Redemption is only changed when ``redeem_points`` is passed; otherwise a
    previously redeemed reward stays applied.

    Raises:
        OrderNotFoundError: If the order does not exist
        InvalidOrderError: If an edited field is invalid
        InsufficientPointsError: If redemption was requested without
            enough points
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise InvalidOrderError(f"Cannot edit: {', '.join(sorted(unknown))}")

    order = _lock_order(order_id)
    old_customer = order.customer
    old_points_earned = order.points_earned
    old_points_redeemed = order.points_redeemed

    customer_name = changes.get('customer_name', order.customer_name)
    customer_contact = _contact_or_placeholder(
        changes.get('customer_contact', order.customer_contact)
    )
    delivery_date = changes.get('delivery_date', order.delivery_date)
    delivery_time = changes.get('delivery_time', order.delivery_time)
    payment_method = changes.get('payment_method', order.payment_method) or NOT_PROVIDED
    is_delivery = changes.get('is_delivery', order.is_delivery)
    delivery_address = changes.get('delivery_address', order.delivery_address)
    discount_percent = changes.get('discount_percent', order.discount_percent)
    payment_status = changes.get('payment_status', order.payment_status)

    if 'delivery_fee' in changes:
        delivery_fee = changes['delivery_fee']
    else:
        delivery_fee = order.delivery_fee if order.is_delivery else None

    _validate_required(
        customer_name=customer_name,
        delivery_date=delivery_date,
        delivery_time=delivery_time,
        payment_method=payment_method,
    )
    if payment_method not in PaymentMethod.values:
        raise InvalidOrderError(f"Unknown payment method: {payment_method}")
    if payment_status not in PaymentStatus.values:
        raise InvalidOrderError(f"Unknown payment status: {payment_status}")

    if 'items' in changes:
        prepared_items = prepare_items(changes['items'])
    else:
        prepared_items = [
            {
                'name': item.name,
                'category': item.category,
                'quantity': item.quantity,
                'unit_price': item.unit_price,
                'total': item.total,
                'position': item.position,
            }
            for item in order.items.all()
        ]

    customer_name = customer_name.strip()
    identity_changed = (
        customer_name != order.customer_name
        or customer_contact != order.customer_contact
    )

    # Undo what this order did to the old customer's balance
    if old_customer is not None:
        reverse_order_rewards(
            customer=old_customer,
            points_earned=old_points_earned,
            points_redeemed=old_points_redeemed,
            order=order,
            note='Order edited',
        )

    if identity_changed:
        customer = resolve_customer_for_order(name=customer_name, contact=customer_contact)
    else:
        customer = old_customer
    if customer is not None:
        customer.refresh_from_db()

    redeem_points = changes.get('redeem_points')
    if redeem_points is None:
        redeem_points = old_points_redeemed > 0 and customer is not None
    else:
        _check_redemption(customer, redeem_points)

    totals = price_order(
        items=prepared_items,
        payment_method=payment_method,
        discount_percent=discount_percent,
        is_delivery=is_delivery,
        delivery_fee=delivery_fee,
        redeem_points=redeem_points,
        points_balance=customer.rewards_points if customer else 0,
    )

    order.customer = customer
    order.customer_name = customer_name
    order.customer_contact = customer_contact
    order.delivery_date = delivery_date
    order.delivery_time = delivery_time.strip()
    order.payment_method = payment_method
    order.is_delivery = is_delivery
    order.delivery_address = _delivery_address(is_delivery, delivery_address)
    order.payment_status = payment_status
    _apply_totals(order, totals)

    if 'items' in changes:
        order.items.all().delete()
        _save_items(order, prepared_items)

    _apply_rewards(order, totals)
    order.save()

    logger.info(
        "Updated order %s: $%s, %s points earned",
        order.receipt_id, order.final_total, order.points_earned,
    )
    return order


@transaction.atomic
def delete_order(*, order_id: UUID) -> None:
    """
    Delete an order and take back the points it earned.

    Points redeemed on the order are returned to the customer. The balance
    never goes below zero.

    Raises:
        OrderNotFoundError: If the order does not exist
    """
    order = _lock_order(order_id)

    if order.customer_id:
        reverse_order_rewards(
            customer=order.customer,
            points_earned=order.points_earned,
            points_redeemed=order.points_redeemed,
            order=order,
            note=f'Order {order.receipt_id} deleted',
        )

    receipt_id = order.receipt_id
    order.delete()
    logger.info("Deleted order %s", receipt_id)


@transaction.atomic
def set_payment_status(*, order_id: UUID, payment_status: str) -> Order:
    """
    Mark an order PAID or UNPAID.

    Raises:
        OrderNotFoundError: If the order does not exist
        InvalidOrderError: If the status is unknown
    """
    if payment_status not in PaymentStatus.values:
        raise InvalidOrderError(f"Unknown payment status: {payment_status}")

    order = _lock_order(order_id)
    order.payment_status = payment_status
    order.save(update_fields=['payment_status', 'updated_at'])

    logger.info("Order %s marked %s", order.receipt_id, payment_status)
    return order


@transaction.atomic
def complete_order(*, order_id: UUID) -> Order:
    """Mark an order as picked up or delivered."""
    order = _lock_order(order_id)
    order.status = OrderStatus.COMPLETED
    order.save(update_fields=['status', 'updated_at'])

    logger.info("Order %s completed", order.receipt_id)
    return order
