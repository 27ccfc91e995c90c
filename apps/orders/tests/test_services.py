import io
import re
import pandas as pd
import pytest
import uuid
from datetime import date
from decimal import Decimal
from apps.customers.models import Customer, RewardsTransaction
from apps.customers.services import InsufficientPointsError
from apps.orders.models import Order, OrderItem, OrderStatus, PaymentStatus
from apps.orders.services import (
    CSV_HEADERS,
    InvalidOrderError,
    OrderNotFoundError,
    build_receipt,
    complete_order,
    create_order,
    delete_order,
    export_filename,
    export_orders_csv,
    filter_orders,
    generate_receipt_id,
    get_order_by_receipt_id,
    orders_snapshot,
    set_payment_status,
    snapshot_version,
    update_order,
)


# =============================================================================
# Create
# =============================================================================

@pytest.mark.django_db
class TestCreateOrder:
    """Tests for create_order()."""

    def test_totals_and_items(self, order):
        assert order.item_subtotal == Decimal('12.00')
        assert order.discount_percent == 10
        assert order.pre_tax_subtotal == Decimal('10.80')
        assert order.tax == Decimal('0.89')
        assert order.final_total == Decimal('11.69')
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.UNPAID

        item = order.items.get()
        assert item.category == 'Savory'
        assert item.unit_price == Decimal('3.00')
        assert item.total == Decimal('12.00')

    def test_receipt_id_format(self, order):
        assert re.fullmatch(r'[0-9a-z]{26}', order.receipt_id)

    def test_generate_receipt_id_is_unique(self, order):
        assert generate_receipt_id() != order.receipt_id

    def test_new_customer_created_from_contact(self, order):
        customer = order.customer

        assert customer is not None
        assert customer.name == 'Priya Sharma'
        assert customer.phone == '5125550142'
        assert customer.rewards_points == 10
        assert order.points_earned == 10
        assert order.customer_rewards_balance == 10

    def test_rewards_transaction_links_order(self, order):
        tx = RewardsTransaction.objects.get(order=order)

        assert tx.points_earned == 10
        assert tx.order_subtotal == Decimal('10.80')

    def test_existing_customer_reused(self, order, order_data):
        second = create_order(**order_data)

        assert second.customer_id == order.customer_id
        assert Customer.objects.count() == 1
        assert second.customer_rewards_balance == 20
        assert second.customer.rewards_points == 20

    def test_no_contact_no_customer(self, cash_order):
        assert cash_order.customer is None
        assert cash_order.customer_contact == 'Not provided'
        assert cash_order.points_earned == 0
        assert cash_order.customer_rewards_balance is None
        assert cash_order.tax == Decimal('0.00')
        assert cash_order.final_total == Decimal('5.50')

    def test_redeem_points(self, redeemed_order, rich_customer):
        assert redeemed_order.customer == rich_customer
        assert redeemed_order.rewards_discount_amount == Decimal('3.30')
        assert redeemed_order.points_redeemed == 100
        assert redeemed_order.points_earned == 29
        assert redeemed_order.final_total == Decimal('32.15')
        assert redeemed_order.customer_rewards_balance == 79

        rich_customer.refresh_from_db()
        assert rich_customer.rewards_points == 79

    def test_redeem_without_enough_points(self, poor_customer, order_data):
        order_data.update(
            customer_name='Sam Patel',
            customer_contact='7375550110',
            redeem_points=True,
        )

        with pytest.raises(InsufficientPointsError):
            create_order(**order_data)
        assert Order.objects.count() == 0

    def test_menu_price_override(self, order_data):
        order_data['items'] = [
            {'name': 'Butter Chicken Puffs', 'quantity': 2, 'unit_price': Decimal('2.50')},
        ]
        order = create_order(**order_data)

        assert order.item_subtotal == Decimal('5.00')

    def test_delivery_without_address(self, order_data):
        order_data['is_delivery'] = True
        order = create_order(**order_data)

        assert order.delivery_address == 'Not provided'
        assert order.delivery_fee == Decimal('5.00')

    def test_pickup_clears_address(self, order_data):
        order_data['delivery_address'] = '100 Congress Ave'
        order = create_order(**order_data)

        assert order.delivery_address == ''

    def test_requires_items(self, order_data):
        order_data['items'] = []

        with pytest.raises(InvalidOrderError, match='at least one item'):
            create_order(**order_data)

    def test_requires_name(self, order_data):
        order_data['customer_name'] = '  '

        with pytest.raises(InvalidOrderError):
            create_order(**order_data)

    def test_unknown_payment_method(self, order_data):
        order_data['payment_method'] = 'bitcoin'

        with pytest.raises(InvalidOrderError):
            create_order(**order_data)

    def test_invalid_discount(self, order_data):
        order_data['discount_percent'] = '12%'

        with pytest.raises(InvalidOrderError):
            create_order(**order_data)
        assert Customer.objects.count() == 0


# =============================================================================
# Update
# =============================================================================

@pytest.mark.django_db
class TestUpdateOrder:
    """Tests for update_order()."""

    def test_change_items_reprices_and_reconciles_points(self, order):
        updated = update_order(
            order_id=order.id,
            items=[{'name': 'Butter Chicken Puffs', 'quantity': 8}],
        )

        assert updated.receipt_id == order.receipt_id
        assert updated.item_subtotal == Decimal('24.00')
        assert updated.pre_tax_subtotal == Decimal('21.60')
        assert updated.points_earned == 21
        assert updated.customer_rewards_balance == 21
        assert OrderItem.objects.filter(order=order).count() == 1

        updated.customer.refresh_from_db()
        assert updated.customer.rewards_points == 21

    def test_unchanged_fields_keep_points(self, order):
        update_order(order_id=order.id, delivery_time='15:30')

        order.customer.refresh_from_db()
        assert order.customer.rewards_points == 10

    def test_returned_order_carries_current_balance(self, order):
        updated = update_order(
            order_id=order.id,
            items=[{'name': 'Butter Chicken Puffs', 'quantity': 8}],
        )

        assert updated.customer.rewards_points == 21
        assert updated.customer_rewards_balance == 21

    def test_redemption_kept_when_not_passed(self, redeemed_order, rich_customer):
        updated = update_order(order_id=redeemed_order.id, delivery_time='11:00')

        assert updated.points_redeemed == 100
        assert updated.final_total == Decimal('32.15')
        rich_customer.refresh_from_db()
        assert rich_customer.rewards_points == 79

    def test_redemption_removed(self, redeemed_order, rich_customer):
        updated = update_order(order_id=redeemed_order.id, redeem_points=False)

        assert updated.points_redeemed == 0
        assert updated.rewards_discount_amount == Decimal('0.00')
        assert updated.points_earned == 33
        rich_customer.refresh_from_db()
        assert rich_customer.rewards_points == 150 + 33

    def test_move_order_to_another_customer(self, order, rich_customer):
        previous = order.customer

        updated = update_order(
            order_id=order.id,
            customer_name='Grace Kim',
            customer_contact='grace.kim@example.com',
        )

        assert updated.customer == rich_customer
        previous.refresh_from_db()
        rich_customer.refresh_from_db()
        assert previous.rewards_points == 0
        assert rich_customer.rewards_points == 160

    def test_change_discount(self, order):
        updated = update_order(order_id=order.id, discount_percent=0)

        assert updated.discount_amount == Decimal('0.00')
        assert updated.final_total == Decimal('12.99')

    def test_reversal_recorded(self, order):
        update_order(order_id=order.id, discount_percent=0)

        assert RewardsTransaction.objects.filter(order=order, note='Order edited').count() == 1

    def test_unknown_field(self, order):
        with pytest.raises(InvalidOrderError):
            update_order(order_id=order.id, receipt_id='abc')

    def test_not_found(self, db):
        with pytest.raises(OrderNotFoundError):
            update_order(order_id=uuid.uuid4(), delivery_time='10:00')


# =============================================================================
# Delete / Status
# =============================================================================

@pytest.mark.django_db
class TestDeleteAndStatus:
    """Tests for delete_order(), set_payment_status() and complete_order()."""

    def test_delete_takes_back_points(self, order):
        customer = order.customer

        delete_order(order_id=order.id)

        assert not Order.objects.filter(id=order.id).exists()
        customer.refresh_from_db()
        assert customer.rewards_points == 0

    def test_delete_returns_redeemed_points(self, redeemed_order, rich_customer):
        delete_order(order_id=redeemed_order.id)

        rich_customer.refresh_from_db()
        assert rich_customer.rewards_points == 150

    def test_delete_never_goes_negative(self, order):
        customer = order.customer
        customer.rewards_points = 3
        customer.save()

        delete_order(order_id=order.id)

        customer.refresh_from_db()
        assert customer.rewards_points == 0

    def test_delete_not_found(self, db):
        with pytest.raises(OrderNotFoundError):
            delete_order(order_id=uuid.uuid4())

    def test_mark_paid(self, order):
        updated = set_payment_status(order_id=order.id, payment_status=PaymentStatus.PAID)

        assert updated.is_paid is True

    def test_invalid_payment_status(self, order):
        with pytest.raises(InvalidOrderError):
            set_payment_status(order_id=order.id, payment_status='MAYBE')

    def test_complete(self, order):
        updated = complete_order(order_id=order.id)

        assert updated.status == OrderStatus.COMPLETED


# =============================================================================
# Search
# =============================================================================

@pytest.mark.django_db
class TestOrderSearch:
    """Tests for filter_orders() and get_order_by_receipt_id()."""

    def test_by_receipt_id_case_insensitive(self, order):
        assert get_order_by_receipt_id(order.receipt_id.upper()) == order

    def test_by_receipt_id_not_found(self, db):
        with pytest.raises(OrderNotFoundError):
            get_order_by_receipt_id('nope')

    def test_filter_by_name(self, order, cash_order):
        results = list(filter_orders(customer_name='tom'))
        assert results == [cash_order]

    def test_filter_by_contact(self, order, cash_order):
        results = list(filter_orders(contact='555-0142'))
        assert results == [order]

    def test_filter_by_date(self, order, cash_order):
        results = list(filter_orders(delivery_date=date(2025, 7, 1)))
        assert results == [cash_order]

    def test_no_filters_newest_first(self, order, cash_order):
        assert list(filter_orders()) == [cash_order, order]


# =============================================================================
# Receipt
# =============================================================================

@pytest.mark.django_db
class TestReceipt:
    """Tests for build_receipt()."""

    def test_discounted_order_steps(self, order):
        receipt = build_receipt(order)

        assert [s['label'] for s in receipt['steps']] == [
            'Puff Subtotal',
            'Discount (10%)',
            'Subtotal After Discount',
            'Tax (8.25%)',
            'Final Total',
        ]
        assert [s['number'] for s in receipt['steps']] == [1, 2, 3, 4, 5]
        assert [s['amount'] for s in receipt['steps']] == ['12.00', '-1.20', '10.80', '0.89', '11.69']
        assert receipt['items'] == [
            {'text': '4x Butter Chicken Puffs (Savory) @ $3.00', 'total': '12.00'},
        ]
        assert receipt['final_total'] == '11.69'
        assert receipt['customer']['rewards_balance'] == 10

    def test_cash_order_steps(self, cash_order):
        receipt = build_receipt(cash_order)

        assert [s['label'] for s in receipt['steps']] == [
            'Puff Subtotal',
            'Tax (0% for Cash)',
            'Final Total',
        ]
        assert receipt['delivery']['address'] == ''
        assert receipt['delivery']['fee'] == '0.00'

    def test_rewards_and_delivery_steps(self, rich_customer):
        order = create_order(
            customer_name='Grace Kim',
            customer_contact='grace.kim@example.com',
            delivery_date=date(2025, 6, 20),
            delivery_time='10:00',
            payment_method='venmo',
            items=[{'name': 'Nutella Hazelnut Puffs', 'quantity': 10}],
            is_delivery=True,
            delivery_address='100 Congress Ave',
            redeem_points=True,
        )

        labels = [s['label'] for s in build_receipt(order)['steps']]

        assert labels == [
            'Puff Subtotal',
            'Rewards Discount (100 points)',
            'Subtotal After Discount',
            'Delivery Fee',
            'Tax (8.25%)',
            'Final Total',
        ]


# =============================================================================
# Export
# =============================================================================

@pytest.mark.django_db
class TestExport:
    """Tests for the CSV backup."""

    def test_export(self, order):
        content = export_orders_csv(Order.objects.prefetch_related('items'))
        frame = pd.read_csv(io.StringIO(content), dtype=str, keep_default_na=False)

        assert frame.columns.tolist() == CSV_HEADERS
        assert len(frame) == 1

        row = frame.iloc[0]
        assert row['Receipt ID'] == order.receipt_id
        assert row['Pickup Date'] == '2025-06-14'
        assert row['Delivery Required'] == 'No'
        assert row['Items Count'] == '1'
        assert row['Items Details'] == '4x Butter Chicken Puffs (Savory) @ $3.00 = $12.00'
        assert row['Discount Percent'] == '10%'
        assert row['Tax Rate'] == '8.25%'
        assert row['Final Total'] == '11.69'
        assert row['Order ID'] == str(order.id)

    def test_export_empty(self, db):
        content = export_orders_csv(Order.objects.none())
        assert content.strip() == ','.join(CSV_HEADERS)

    def test_export_filename(self):
        assert export_filename(date(2025, 6, 14)) == 'pastry-orders-backup-2025-06-14.csv'


# =============================================================================
# Live Feed
# =============================================================================

@pytest.mark.django_db
class TestFeed:
    """Tests for the versioned order snapshot."""

    def test_version_stable_without_changes(self, order):
        assert snapshot_version() == snapshot_version()

    def test_version_changes_on_create(self, order, order_data):
        before = snapshot_version()
        create_order(**order_data)

        assert snapshot_version() != before

    def test_version_changes_on_edit(self, order):
        before = snapshot_version()
        set_payment_status(order_id=order.id, payment_status=PaymentStatus.PAID)

        assert snapshot_version() != before

    def test_version_changes_on_delete(self, order, cash_order):
        before = snapshot_version()
        delete_order(order_id=cash_order.id)

        assert snapshot_version() != before

    def test_snapshot(self, order, cash_order):
        snapshot = orders_snapshot()

        assert snapshot['count'] == 2
        assert snapshot['orders'] == [cash_order, order]
        assert snapshot['version'] == snapshot_version()
