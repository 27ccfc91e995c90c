"""
Loyalty program service.

Customers earn points on every order and can trade a block of points for a
percentage discount on a later order. With the default rules:

    - 1 point per dollar of pre-tax subtotal (rounded down)
    - 100 points buy 10% off the order subtotal
    - New balance = (current balance - redeemed points) + earned points

The rules come from settings (``REWARDS_*``) so they can be tuned without a
code change.
"""

import logging
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction

from ..models import Customer, RewardsTransaction
from .exceptions import CustomerNotFoundError, InvalidPointsBalanceError

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def points_per_dollar() -> int:
    return settings.REWARDS_POINTS_PER_DOLLAR


def points_for_redemption() -> int:
    return settings.REWARDS_POINTS_FOR_REDEMPTION


def redemption_discount_percent() -> Decimal:
    return Decimal(str(settings.REWARDS_REDEMPTION_DISCOUNT_PERCENT))


def calculate_points_earned(subtotal) -> int:
    """Points earned for a subtotal, rounded down to whole points."""
    subtotal = Decimal(str(subtotal))
    if subtotal <= 0:
        return 0
    return int((subtotal * points_per_dollar()).to_integral_value(rounding=ROUND_DOWN))


def calculate_redemption_discount(subtotal) -> Decimal:
    """Discount granted by one redemption, rounded to cents."""
    subtotal = Decimal(str(subtotal))
    return (subtotal * redemption_discount_percent()).quantize(CENT, rounding=ROUND_HALF_UP)


def can_redeem_points(points: int) -> bool:
    return points >= points_for_redemption()


def _lock_customer(customer_id: UUID) -> Customer:
    try:
        return Customer.objects.select_for_update().get(id=customer_id)
    except Customer.DoesNotExist:
        raise CustomerNotFoundError("Customer not found")


@transaction.atomic
def update_customer_points(*, customer_id: UUID, new_balance: int) -> Customer:
    """
    Set a customer's points balance.

    Raises:
        CustomerNotFoundError: If the customer does not exist
        InvalidPointsBalanceError: If the balance is negative
    """
    if new_balance < 0:
        raise InvalidPointsBalanceError("Points balance cannot be negative")

    customer = _lock_customer(customer_id)
    old_balance = customer.rewards_points
    customer.rewards_points = new_balance
    customer.save(update_fields=['rewards_points', 'updated_at'])

    logger.info(
        "Customer %s points updated: %s -> %s",
        customer.name, old_balance, new_balance,
    )
    return customer


def record_rewards_transaction(
    *,
    customer: Customer,
    order=None,
    points_earned: int = 0,
    points_redeemed: int = 0,
    discount_amount: Decimal = Decimal('0.00'),
    order_subtotal: Decimal = Decimal('0.00'),
    balance_after: int = 0,
    note: str = '',
) -> RewardsTransaction:
    """Append a row to the customer's rewards ledger."""
    return RewardsTransaction.objects.create(
        customer=customer,
        order=order,
        points_earned=points_earned,
        points_redeemed=points_redeemed,
        discount_amount=discount_amount,
        order_subtotal=order_subtotal,
        balance_after=balance_after,
        note=note,
    )


@transaction.atomic
def process_order_rewards(
    *,
    customer: Customer,
    order_subtotal,
    order=None,
    use_redemption: bool = False,
) -> dict:
    """
    Apply an order to a customer's points balance.

    A redemption is only applied when requested and the balance allows it.
    Points are earned on the subtotal after the redemption discount.

    Args:
        customer: The customer placing the order
        order_subtotal: Order subtotal before the rewards discount
        order: The saved Order, linked from the ledger row
        use_redemption: Whether the customer asked to redeem points

    Returns:
        dict with points_earned, points_redeemed, discount_amount and
        new_points_balance. Customers that are not saved yet get the figures
        without anything being persisted.
    """
    order_subtotal = Decimal(str(order_subtotal))

    if customer.pk and not customer._state.adding:
        customer = _lock_customer(customer.pk)
        persist = True
    else:
        persist = False

    discount_amount = Decimal('0.00')
    points_redeemed = 0
    adjusted_subtotal = order_subtotal

    if use_redemption:
        if can_redeem_points(customer.rewards_points):
            discount_amount = calculate_redemption_discount(order_subtotal)
            points_redeemed = points_for_redemption()
            adjusted_subtotal = order_subtotal - discount_amount
        else:
            logger.info(
                "Redemption requested for %s with only %s points; ignored",
                customer.name, customer.rewards_points,
            )

    points_earned = calculate_points_earned(adjusted_subtotal)
    new_balance = customer.rewards_points - points_redeemed + points_earned

    if persist:
        customer.rewards_points = new_balance
        customer.save(update_fields=['rewards_points', 'updated_at'])
        record_rewards_transaction(
            customer=customer,
            order=order,
            points_earned=points_earned,
            points_redeemed=points_redeemed,
            discount_amount=discount_amount,
            order_subtotal=order_subtotal,
            balance_after=new_balance,
        )
        logger.info(
            "Order rewards for %s: +%s -%s => %s points",
            customer.name, points_earned, points_redeemed, new_balance,
        )

    return {
        'points_earned': points_earned,
        'points_redeemed': points_redeemed,
        'discount_amount': discount_amount,
        'new_points_balance': new_balance,
    }


@transaction.atomic
def reverse_order_rewards(
    *,
    customer: Customer,
    points_earned: int,
    points_redeemed: int,
    order=None,
    note: str = 'Order reversed',
) -> int:
    """
    Undo the points effect of an order that was edited or deleted.

    Earned points are taken back and redeemed points returned. The balance
    never goes below zero.

    Returns:
        The customer's new balance
    """
    customer = _lock_customer(customer.pk)

    new_balance = max(0, customer.rewards_points - points_earned + points_redeemed)
    customer.rewards_points = new_balance
    customer.save(update_fields=['rewards_points', 'updated_at'])

    record_rewards_transaction(
        customer=customer,
        order=order,
        points_earned=-points_earned,
        points_redeemed=-points_redeemed,
        balance_after=new_balance,
        note=note,
    )
    logger.info(
        "Reversed order rewards for %s: -%s +%s => %s points",
        customer.name, points_earned, points_redeemed, new_balance,
    )
    return new_balance


def get_customer_rewards_history(*, customer_id: UUID, limit: int = 50):
    """Most recent rewards transactions for a customer, newest first."""
    if not Customer.objects.filter(id=customer_id).exists():
        raise CustomerNotFoundError("Customer not found")

    return list(
        RewardsTransaction.objects
        .filter(customer_id=customer_id)
        .select_related('order')
        .order_by('-created_at')[:limit]
    )


def rewards_preview(
    *,
    customer: Customer,
    order_subtotal,
    use_redemption: bool = False,
    points_balance: Optional[int] = None,
) -> dict:
    """
    Figures the order form shows next to a recognised customer.

    Args:
        customer: The customer
        order_subtotal: Subtotal after the percentage discount
        use_redemption: Whether the redemption toggle is on
        points_balance: Balance to use instead of the stored one

    Returns:
        dict with current_points, can_redeem, redemption_discount,
        points_to_earn, points_needed, progress_percent and new_balance
    """
    order_subtotal = Decimal(str(order_subtotal))
    current = customer.rewards_points if points_balance is None else points_balance
    threshold = points_for_redemption()

    can_redeem = can_redeem_points(current)
    redeeming = use_redemption and can_redeem
    discount = calculate_redemption_discount(order_subtotal)

    discounted_subtotal = order_subtotal - discount if redeeming else order_subtotal
    points_to_earn = calculate_points_earned(discounted_subtotal)
    new_balance = current - (threshold if redeeming else 0) + points_to_earn

    return {
        'current_points': current,
        'can_redeem': can_redeem,
        'use_redemption': redeeming,
        'redemption_discount': discount,
        'points_to_earn': points_to_earn,
        'points_needed': max(0, threshold - current),
        'progress_percent': min(round(current * 100 / threshold, 1), 100.0) if threshold else 100.0,
        'new_balance': new_balance,
    }
