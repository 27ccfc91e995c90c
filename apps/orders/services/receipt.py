"""Receipt payload for an order."""

from decimal import Decimal

from ..models import Order, PaymentMethod


def _money(value) -> str:
    return f"{Decimal(value):.2f}"


def _percent(rate: Decimal) -> str:
    percent = (Decimal(rate) * 100).normalize()
    # normalize() turns 10 into 1E+1
    return f"{percent:f}"


def tax_label(order: Order) -> str:
    if order.payment_method == PaymentMethod.CASH:
        return "Tax (0% for Cash)"
    return f"Tax ({_percent(order.tax_rate)}%)"


def build_receipt(order: Order) -> dict:
    """
    Everything the receipt screen prints for an order.

    The calculation steps are numbered 1..n with no gaps; discount, rewards
    and delivery fee steps only appear when they apply.
    """
    items = list(order.items.all())

    lines = [
        {
            'text': f"{item.quantity}x {item.name} ({item.category}) @ ${_money(item.unit_price)}",
            'total': _money(item.total),
        }
        for item in items
    ]

    steps = [('Puff Subtotal', order.item_subtotal)]
    if order.discount_amount > 0:
        steps.append((f"Discount ({order.discount_percent}%)", -order.discount_amount))
    if order.rewards_discount_amount > 0:
        steps.append(
            (f"Rewards Discount ({order.points_redeemed} points)", -order.rewards_discount_amount)
        )
    if order.discount_amount > 0 or order.rewards_discount_amount > 0:
        steps.append(('Subtotal After Discount', order.pre_tax_subtotal))
    if order.is_delivery and order.delivery_fee > 0:
        steps.append(('Delivery Fee', order.delivery_fee))
    steps.append((tax_label(order), order.tax))
    steps.append(('Final Total', order.final_total))

    return {
        'receipt_id': order.receipt_id,
        'customer': {
            'name': order.customer_name,
            'contact': order.customer_contact,
            'rewards_balance': order.customer_rewards_balance,
            'points_earned': order.points_earned,
            'points_redeemed': order.points_redeemed,
        },
        'delivery': {
            'date': order.delivery_date,
            'time': order.delivery_time,
            'payment_method': order.payment_method,
            'is_delivery': order.is_delivery,
            'address': order.delivery_address if order.is_delivery else '',
            'fee': _money(order.delivery_fee) if order.is_delivery else _money(0),
        },
        'items': lines,
        'steps': [
            {'number': number, 'label': label, 'amount': _money(amount)}
            for number, (label, amount) in enumerate(steps, start=1)
        ],
        'final_total': _money(order.final_total),
        'is_paid': order.is_paid,
    }
