import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.customers.models import Customer
from apps.orders.models import Order, PaymentMethod


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def user(db):
    """Create a counter staff member."""
    return User.objects.create_user(
        email='counter@example.com',
        password='TestPass123!',
        display_name='Counter Staff',
    )


@pytest.fixture
def staff_user(db):
    """Create a manager with admin rights."""
    return User.objects.create_user(
        email='manager@example.com',
        password='TestPass123!',
        display_name='Manager',
        is_staff=True,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return API client authenticated as counter staff."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def staff_client(api_client, staff_user):
    """Return API client authenticated as the manager."""
    refresh = RefreshToken.for_user(staff_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


# =============================================================================
# Customers
# =============================================================================

@pytest.fixture
def customer(db):
    """Customer with a phone number and a few points."""
    return Customer.objects.create(
        name='Priya Sharma',
        phone='5125550142',
        rewards_points=40,
    )


@pytest.fixture
def email_customer(db):
    """Customer known only by email."""
    return Customer.objects.create(
        name='Marcus Lee',
        email='marcus.lee@example.com',
        rewards_points=0,
    )


@pytest.fixture
def rich_customer(db):
    """Customer with enough points to redeem a reward."""
    return Customer.objects.create(
        name='Grace Kim',
        email='grace.kim@example.com',
        rewards_points=150,
    )


# =============================================================================
# Orders (as saved before customers were linked)
# =============================================================================

@pytest.fixture
def make_legacy_order(db):
    """Factory for orders that only carry a typed name and contact."""
    counter = {'n': 0}

    def _make(name, contact='Not provided', pre_tax=Decimal('20.00'),
              final=None, points_redeemed=0, customer=None):
        counter['n'] += 1
        return Order.objects.create(
            receipt_id=f'legacy{counter["n"]:020d}',
            customer=customer,
            customer_name=name,
            customer_contact=contact,
            delivery_date=date(2025, 3, counter['n'] % 28 + 1),
            delivery_time='12:00',
            payment_method=PaymentMethod.CASH,
            item_subtotal=pre_tax,
            pre_tax_subtotal=pre_tax,
            final_total=final if final is not None else pre_tax,
            points_redeemed=points_redeemed,
        )

    return _make
