"""
Order pricing.

Every money field of an order is derived here from its lines and options, in
this order:

    1. item subtotal       = sum of unit_price x quantity
    2. discount            = item subtotal x discount percent
    3. rewards discount    = 10% of the discounted subtotal (when redeeming)
    4. pre-tax subtotal    = item subtotal - discount - rewards discount
    5. tax                 = pre-tax subtotal x tax rate (0% for cash)
    6. final total         = pre-tax subtotal + delivery fee + tax

All arithmetic is done in Decimal and amounts are rounded to cents
(ROUND_HALF_UP) as they are produced.

Example::

    from apps.orders.services.pricing import price_order

    totals = price_order(
        items=[{'quantity': 4, 'unit_price': Decimal('3.00')}],
        discount_percent='10%',
        payment_method='venmo',
    )
    totals.final_total   # Decimal('11.69')
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Mapping, Optional

from django.conf import settings

from apps.customers.services.rewards import (
    calculate_points_earned,
    calculate_redemption_discount,
    can_redeem_points,
    points_for_redemption,
)
from ..models import PaymentMethod
from .exceptions import InvalidOrderError


CENT = Decimal('0.01')
ZERO = Decimal('0.00')

DISCOUNT_OPTIONS = (0, 5, 10, 15, 20, 25, 30)


def to_cents(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class OrderTotals:
    """Computed money fields of an order."""

    item_subtotal: Decimal
    discount_percent: int
    discount_amount: Decimal
    discounted_subtotal: Decimal
    rewards_discount_amount: Decimal
    points_redeemed: int
    pre_tax_subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    delivery_fee: Decimal
    final_total: Decimal
    points_earned: int

    def as_dict(self):
        return {
            'item_subtotal': self.item_subtotal,
            'discount_percent': self.discount_percent,
            'discount_amount': self.discount_amount,
            'discounted_subtotal': self.discounted_subtotal,
            'rewards_discount_amount': self.rewards_discount_amount,
            'points_redeemed': self.points_redeemed,
            'pre_tax_subtotal': self.pre_tax_subtotal,
            'tax_rate': self.tax_rate,
            'tax': self.tax,
            'delivery_fee': self.delivery_fee,
            'final_total': self.final_total,
            'points_earned': self.points_earned,
        }


def parse_discount_percent(value) -> int:
    """
    Parse a discount percent given as 10, "10" or "10%".

    Raises:
        InvalidOrderError: If the value is not one of the offered discounts
    """
    if value is None or value == '':
        return 0

    text = str(value).strip().rstrip('%').strip()
    try:
        percent = Decimal(text)
    except ArithmeticError:
        raise InvalidOrderError(f"Invalid discount: {value}")

    if percent != percent.to_integral_value() or int(percent) not in DISCOUNT_OPTIONS:
        raise InvalidOrderError(
            f"Discount must be one of {', '.join(f'{d}%' for d in DISCOUNT_OPTIONS)}"
        )
    return int(percent)


def tax_rate_for(payment_method: str) -> Decimal:
    """Cash sales are not taxed; everything else uses BAKERY_TAX_RATE."""
    if payment_method == PaymentMethod.CASH:
        return Decimal('0')
    return Decimal(str(settings.BAKERY_TAX_RATE))


def line_total(quantity, unit_price) -> Decimal:
    return to_cents(Decimal(str(unit_price)) * int(quantity))


def price_order(
    *,
    items: Iterable[Mapping],
    payment_method: str,
    discount_percent=0,
    is_delivery: bool = False,
    delivery_fee=None,
    redeem_points: bool = False,
    points_balance: int = 0,
) -> OrderTotals:
    """
    Compute all money fields of an order.

    Args:
        items: Lines with 'quantity' (>= 1) and 'unit_price' (>= 0)
        payment_method: venmo, zelle, cash or check
        discount_percent: One of 0, 5, 10, 15, 20, 25, 30 (10, "10" or "10%")
        is_delivery: Whether the order is delivered
        delivery_fee: Fee for delivery (defaults to BAKERY_DEFAULT_DELIVERY_FEE)
        redeem_points: Whether the customer asked to redeem points
        points_balance: The customer's current balance

    Returns:
        OrderTotals

    Raises:
        InvalidOrderError: If a line or the discount is invalid
    """
    percent = parse_discount_percent(discount_percent)

    item_subtotal = ZERO
    for item in items:
        quantity = int(item.get('quantity') or 0)
        unit_price = Decimal(str(item.get('unit_price') or 0))
        if quantity < 1:
            raise InvalidOrderError("Quantity must be at least 1")
        if unit_price < 0:
            raise InvalidOrderError("Unit price cannot be negative")
        item_subtotal += line_total(quantity, unit_price)

    discount_amount = to_cents(item_subtotal * percent / 100)
    discounted_subtotal = item_subtotal - discount_amount

    rewards_discount_amount = ZERO
    points_redeemed = 0
    if redeem_points and can_redeem_points(points_balance):
        rewards_discount_amount = calculate_redemption_discount(discounted_subtotal)
        points_redeemed = points_for_redemption()

    pre_tax_subtotal = discounted_subtotal - rewards_discount_amount

    tax_rate = tax_rate_for(payment_method)
    tax = to_cents(pre_tax_subtotal * tax_rate)

    if is_delivery:
        if delivery_fee is None:
            delivery_fee = settings.BAKERY_DEFAULT_DELIVERY_FEE
        fee = to_cents(delivery_fee)
        if fee < 0:
            raise InvalidOrderError("Delivery fee cannot be negative")
    else:
        fee = ZERO

    return OrderTotals(
        item_subtotal=item_subtotal,
        discount_percent=percent,
        discount_amount=discount_amount,
        discounted_subtotal=discounted_subtotal,
        rewards_discount_amount=rewards_discount_amount,
        points_redeemed=points_redeemed,
        pre_tax_subtotal=pre_tax_subtotal,
        tax_rate=tax_rate,
        tax=tax,
        delivery_fee=fee,
        final_total=pre_tax_subtotal + fee + tax,
        points_earned=calculate_points_earned(pre_tax_subtotal),
    )
