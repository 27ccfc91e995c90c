import pytest
from rest_framework.test import APIClient
from apps.accounts.models import User
from apps.accounts.services import issue_tokens

PASSWORD = 'TestPass123!'


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def counter_staff(db):
    return User.objects.create_user(
        email='counter@example.com',
        password=PASSWORD,
        display_name='Counter Staff',
    )


@pytest.fixture
def manager(db):
    return User.objects.create_user(
        email='manager@example.com',
        password=PASSWORD,
        is_staff=True,
    )


@pytest.fixture
def former_staff(db):
    """Deactivated account that still has a password."""
    return User.objects.create_user(
        email='former@example.com',
        password=PASSWORD,
        is_active=False,
    )


@pytest.fixture
def counter_client(api_client, counter_staff):
    """API client carrying the counter staff member's access token."""
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_tokens(counter_staff)['access']}")
    return api_client
