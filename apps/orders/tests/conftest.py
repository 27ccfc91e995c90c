import pytest
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.customers.models import Customer
from apps.orders.models import PaymentMethod
from apps.orders.services import create_order


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create a counter staff member."""
    return User.objects.create_user(
        email='counter@example.com',
        password='TestPass123!',
        display_name='Counter Staff',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return API client authenticated as counter staff."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


# =============================================================================
# Customers
# =============================================================================

@pytest.fixture
def rich_customer(db):
    """Customer with enough points to redeem a reward."""
    return Customer.objects.create(
        name='Grace Kim',
        email='grace.kim@example.com',
        rewards_points=150,
    )


@pytest.fixture
def poor_customer(db):
    """Customer without enough points to redeem."""
    return Customer.objects.create(
        name='Sam Patel',
        phone='7375550110',
        rewards_points=40,
    )


# =============================================================================
# Orders
# =============================================================================

@pytest.fixture
def order_data():
    """Valid data for a pickup order: 4 savory puffs, 10% off, paid by Venmo."""
    return {
        'customer_name': 'Priya Sharma',
        'customer_contact': '(512) 555-0142',
        'delivery_date': date(2025, 6, 14),
        'delivery_time': '14:05',
        'payment_method': PaymentMethod.VENMO,
        'items': [
            {'name': 'Butter Chicken Puffs', 'quantity': 4},
        ],
        'discount_percent': '10%',
    }


@pytest.fixture
def order(db, user, order_data):
    """
    Saved pickup order for a new customer.

    item subtotal 12.00, discount 1.20, pre-tax 10.80, tax 0.89,
    final total 11.69, 10 points earned.
    """
    return create_order(created_by=user, **order_data)


@pytest.fixture
def redeemed_order(db, rich_customer):
    """
    Order where Grace redeems 100 points.

    10 sweet puffs = 33.00, rewards discount 3.30, pre-tax 29.70, tax 2.45,
    final total 32.15, 29 points earned, balance 150 - 100 + 29 = 79.
    """
    return create_order(
        customer_name='Grace Kim',
        customer_contact='grace.kim@example.com',
        delivery_date=date(2025, 6, 20),
        delivery_time='10:00',
        payment_method=PaymentMethod.ZELLE,
        items=[{'name': 'Nutella Hazelnut Puffs', 'quantity': 10}],
        redeem_points=True,
    )


@pytest.fixture
def cash_order(db):
    """Cash order with no contact, so no customer account."""
    return create_order(
        customer_name='Tom Becker',
        delivery_date=date(2025, 7, 1),
        delivery_time='09:30',
        payment_method=PaymentMethod.CASH,
        items=[{'name': 'Potato Masala Puffs', 'quantity': 2}],
    )
