import pytest
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.orders.models import PaymentStatus
from apps.orders.services import create_order


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def analytics_user(db):
    """Create the analytics test user."""
    return User.objects.create_user(
        email='analytics_user@example.com',
        password='TestPass123!',
        display_name='Analytics User',
    )


@pytest.fixture
def analytics_user_client(api_client, analytics_user):
    """Return API client authenticated as analytics user."""
    refresh = RefreshToken.for_user(analytics_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def sales_history(db):
    """
    Four orders over two years.

    2024-12-10  Priya   4 Butter Chicken (venmo)           12.99  PAID
    2025-01-15  Priya   2 Nutella (cash)                    6.60  PAID
    2025-01-20  Tom     3 Chickpea Masala + 1 Butter (cash) 11.25  UNPAID
    2025-03-05  Marcus  6 Butter Chicken (cash)            18.00  UNPAID
    """
    return [
        create_order(
            customer_name='Priya Sharma',
            customer_contact='5125550142',
            delivery_date=date(2024, 12, 10),
            delivery_time='14:05',
            payment_method='venmo',
            items=[{'name': 'Butter Chicken Puffs', 'quantity': 4}],
            payment_status=PaymentStatus.PAID,
        ),
        create_order(
            customer_name='Priya Sharma',
            customer_contact='5125550142',
            delivery_date=date(2025, 1, 15),
            delivery_time='09:30',
            payment_method='cash',
            items=[{'name': 'Nutella Hazelnut Puffs', 'quantity': 2}],
            payment_status=PaymentStatus.PAID,
        ),
        create_order(
            customer_name='Tom Becker',
            delivery_date=date(2025, 1, 20),
            delivery_time='16:45',
            payment_method='cash',
            items=[
                {'name': 'Chickpea Masala Puffs', 'quantity': 3},
                {'name': 'Butter Chicken Puffs', 'quantity': 1},
            ],
        ),
        create_order(
            customer_name='Marcus Lee',
            customer_contact='marcus.lee@example.com',
            delivery_date=date(2025, 3, 5),
            delivery_time='11:00',
            payment_method='cash',
            items=[{'name': 'Butter Chicken Puffs', 'quantity': 6}],
        ),
    ]
