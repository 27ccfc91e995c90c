"""
Rebuild customer records and point balances from the order history.

Older orders were saved with only a typed name and contact, so customers and
their balances can drift from what the orders say. Reconciliation groups the
orders by normalized customer name, recomputes each balance and then updates
or creates the matching customer.
"""

import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.orders.models import Order

from ..models import Customer
from .matching import find_similar_customers, normalize_name, split_contact
from .rewards import calculate_points_earned, record_rewards_transaction

logger = logging.getLogger(__name__)


MATCH_EXACT = 'exact'
MATCH_FUZZY = 'fuzzy'
MATCH_NONE = 'none'

STATUS_EXISTS = 'exists'
STATUS_NEEDS_UPDATE = 'needs_update'
STATUS_NEW = 'new'


def build_order_ledger(orders: Iterable[Order]) -> Dict[str, dict]:
    """
    Group orders by normalized customer name and total them up.

    Orders without a customer name are skipped. The first spelling of a name
    becomes the display name, and the contact of that first order provides
    the phone or email.

    Args:
        orders: Orders to aggregate

    Returns:
        OrderedDict of normalized name -> entry:
        {
            'name': str,
            'phone': str,
            'email': str,
            'order_ids': [UUID],
            'total_spent': Decimal,
            'total_orders': int,
            'points_earned': int,
            'points_redeemed': int,
            'net_points': int,
        }
    """
    ledger = OrderedDict()

    for order in orders:
        name = (order.customer_name or '').strip()
        if not name:
            continue

        key = normalize_name(name)
        entry = ledger.get(key)
        if entry is None:
            phone, email = split_contact(order.customer_contact)
            entry = ledger[key] = {
                'name': name,
                'phone': phone,
                'email': email,
                'order_ids': [],
                'total_spent': Decimal('0.00'),
                'total_orders': 0,
                'points_earned': 0,
                'points_redeemed': 0,
                'net_points': 0,
            }

        entry['order_ids'].append(order.id)
        entry['total_spent'] += order.final_total or Decimal('0.00')
        entry['total_orders'] += 1
        entry['points_earned'] += calculate_points_earned(
            order.pre_tax_subtotal or order.final_total or 0
        )
        entry['points_redeemed'] += order.points_redeemed or 0

    for entry in ledger.values():
        entry['net_points'] = max(0, entry['points_earned'] - entry['points_redeemed'])

    return ledger


def _index_customers(customers: List[Customer]) -> Dict[str, Customer]:
    # Oldest customer wins when two share a normalized name
    index = {}
    for customer in sorted(customers, key=lambda c: c.created_at):
        if customer.name_normalized and customer.name_normalized not in index:
            index[customer.name_normalized] = customer
    return index


def match_existing_customer(
    *,
    entry: dict,
    index: Dict[str, Customer],
    threshold: Optional[int] = None,
) -> Tuple[Optional[Customer], str]:
    """
    Find the existing customer a ledger entry belongs to.

    An exact normalized-name match wins. Otherwise the best fuzzy match at or
    above the threshold is used.

    Args:
        entry: Ledger entry from build_order_ledger
        index: Existing customers keyed by normalized name
        threshold: Minimum fuzzy score (defaults to CUSTOMER_MATCH_THRESHOLD)

    Returns:
        (customer, match_type) where match_type is 'exact', 'fuzzy' or 'none'
    """
    if threshold is None:
        threshold = settings.CUSTOMER_MATCH_THRESHOLD

    key = normalize_name(entry['name'])
    customer = index.get(key)
    if customer:
        return customer, MATCH_EXACT

    similar = find_similar_customers(
        name=entry['name'],
        threshold=threshold,
        customers=index.values(),
    )
    if similar:
        customer, score = similar[0]
        logger.info(
            "Fuzzy matched '%s' to customer '%s' (score %s)",
            entry['name'], customer.name, score,
        )
        return customer, MATCH_FUZZY

    return None, MATCH_NONE


def _load_ledger_and_index():
    customers = list(Customer.objects.all())
    orders = Order.objects.only(
        'id', 'customer_name', 'customer_contact', 'final_total',
        'pre_tax_subtotal', 'points_redeemed',
    ).order_by('created_at')
    return build_order_ledger(orders), _index_customers(customers)


def _new_group(entry: dict, customer: Optional[Customer], match_type: str) -> dict:
    return {
        'customer': customer,
        'match_type': match_type,
        'name': customer.name if customer is not None else entry['name'],
        'names': [],
        'phone': '',
        'email': '',
        'order_ids': [],
        'total_spent': Decimal('0.00'),
        'total_orders': 0,
        'points_earned': 0,
        'points_redeemed': 0,
        'net_points': 0,
    }


def _add_to_group(group: dict, entry: dict) -> None:
    group['names'].append(entry['name'])
    group['phone'] = group['phone'] or entry['phone']
    group['email'] = group['email'] or entry['email']
    group['order_ids'].extend(entry['order_ids'])
    group['total_spent'] += entry['total_spent']
    group['total_orders'] += entry['total_orders']
    group['points_earned'] += entry['points_earned']
    group['points_redeemed'] += entry['points_redeemed']
    group['net_points'] += entry['net_points']


def plan_reconciliation(
    *,
    ledger: Dict[str, dict],
    index: Dict[str, Customer],
    threshold: Optional[int] = None,
) -> List[dict]:
    """
    Group ledger entries by the customer they belong to.

    Spellings that match the same existing customer share one group, and
    their points are added up. Names with no existing customer are matched
    against the new customers planned so far, so similar spellings of a
    new name become a single customer.

    Returns:
        Groups in ledger order, each with ``customer`` (None for a new
        customer), ``match_type``, ``names``, contact details, ``order_ids``,
        totals and the summed ``net_points``
    """
    groups = OrderedDict()
    # Unsaved stand-ins for planned customers, keyed by normalized name
    planned = {}

    for key, entry in ledger.items():
        customer, match_type = match_existing_customer(
            entry=entry, index=index, threshold=threshold
        )
        if customer is not None:
            group_key = ('existing', customer.pk)
            if group_key not in groups:
                groups[group_key] = _new_group(entry, customer, match_type)
        else:
            stand_in, _ = match_existing_customer(
                entry=entry, index=planned, threshold=threshold
            )
            if stand_in is None:
                stand_in = Customer(name=entry['name'], name_normalized=key)
                planned[key] = stand_in
                groups[('new', key)] = _new_group(entry, None, MATCH_NONE)
            group_key = ('new', stand_in.name_normalized)

        _add_to_group(groups[group_key], entry)

    return list(groups.values())


def preview_customer_migration(*, threshold: Optional[int] = None) -> dict:
    """
    Show what migrate_all_customers would do without changing anything.

    Returns:
        dict with existing_customers, customers_from_orders, needs_migration,
        needs_update and preview rows sorted by total spent (highest first)
    """
    ledger, index = _load_ledger_and_index()
    groups = plan_reconciliation(ledger=ledger, index=index, threshold=threshold)

    preview = []
    needs_migration = 0
    needs_update = 0

    for group in groups:
        customer = group['customer']
        if customer is None:
            needs_migration += 1
            row_status = STATUS_NEW
            current_points = None
        else:
            current_points = customer.rewards_points
            if current_points != group['net_points']:
                needs_update += 1
                row_status = STATUS_NEEDS_UPDATE
            else:
                row_status = STATUS_EXISTS

        preview.append({
            'name': group['name'],
            'names': group['names'],
            'status': row_status,
            'match_type': group['match_type'],
            'current_points': current_points,
            'calculated_points': group['net_points'],
            'total_spent': group['total_spent'],
            'total_orders': group['total_orders'],
        })

    preview.sort(key=lambda row: row['total_spent'], reverse=True)

    return {
        'existing_customers': len(index),
        'customers_from_orders': len(ledger),
        'needs_migration': needs_migration,
        'needs_update': needs_update,
        'preview': preview,
    }


def _apply_entry(entry: dict, customer: Optional[Customer]) -> str:
    """
    Update or create one customer from a reconciliation group.

    Returns 'updated', 'migrated' or ''.
    """
    outcome = ''

    if customer is not None:
        customer = Customer.objects.select_for_update().get(pk=customer.pk)
        if customer.rewards_points != entry['net_points']:
            old_points = customer.rewards_points
            update_fields = ['rewards_points', 'updated_at']
            customer.rewards_points = entry['net_points']
            if entry['phone'] and not customer.phone:
                customer.phone = entry['phone']
                update_fields.append('phone')
            if entry['email'] and not customer.email:
                customer.email = entry['email']
                update_fields.append('email')
            customer.save(update_fields=update_fields)

            record_rewards_transaction(
                customer=customer,
                points_earned=entry['net_points'] - old_points,
                balance_after=entry['net_points'],
                note='Balance reconciled from order history',
            )
            logger.info(
                "Updated %s: %s -> %s points",
                customer.name, old_points, entry['net_points'],
            )
            outcome = 'updated'
    else:
        customer = Customer.objects.create(
            name=entry['name'],
            phone=entry['phone'],
            email=entry['email'],
            rewards_points=entry['net_points'],
        )
        record_rewards_transaction(
            customer=customer,
            points_earned=entry['net_points'],
            balance_after=entry['net_points'],
            note='Created from order history',
        )
        logger.info(
            "Created customer %s with %s points",
            customer.name, entry['net_points'],
        )
        outcome = 'migrated'

    Order.objects.filter(
        id__in=entry['order_ids'],
        customer__isnull=True,
    ).update(customer=customer, updated_at=timezone.now())

    return outcome


def migrate_all_customers(*, threshold: Optional[int] = None) -> dict:
    """
    Bring every customer's record and balance in line with the order history.

    Order names are first grouped by the customer they belong to (see
    plan_reconciliation). Existing customers whose balance differs from
    their group's total are set to it, and missing phone/email details are
    filled in. Groups with no matching customer become new customers.
    Orders not yet linked to a customer are linked.

    Each customer is processed in its own transaction. A failure is recorded
    in ``errors`` and the run continues with the next customer.

    Returns:
        dict with migrated (created count), updated, errors and summary
        (one row per customer group)
    """
    results = {
        'migrated': 0,
        'updated': 0,
        'errors': [],
        'summary': [],
    }

    logger.info("Starting customer reconciliation")

    try:
        ledger, index = _load_ledger_and_index()
        groups = plan_reconciliation(ledger=ledger, index=index, threshold=threshold)
    except Exception as e:
        logger.exception("Customer reconciliation failed")
        results['errors'].append(f"Migration failed: {e}")
        return results

    for group in groups:
        results['summary'].append({
            key: value for key, value in group.items() if key != 'customer'
        })
        try:
            with transaction.atomic():
                outcome = _apply_entry(group, group['customer'])
        except Exception as e:
            message = f"Failed to process {group['name']}: {e}"
            logger.error(message)
            results['errors'].append(message)
            continue

        if outcome == 'updated':
            results['updated'] += 1
        elif outcome == 'migrated':
            results['migrated'] += 1

    logger.info(
        "Customer reconciliation finished: %s migrated, %s updated, %s errors",
        results['migrated'], results['updated'], len(results['errors']),
    )
    return results
