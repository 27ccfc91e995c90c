import pytest
import uuid
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.customers.models import Customer


# =============================================================================
# Customer List / Create Tests
# =============================================================================

@pytest.mark.django_db
class TestCustomerList:
    """Tests for GET /api/customers/"""

    def test_list_customers(self, authenticated_client, customer, email_customer):
        url = reverse('customers:customer-list')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        names = [c['name'] for c in response.data['results']]
        assert names == ['Marcus Lee', 'Priya Sharma']

    def test_fuzzy_search(self, authenticated_client, customer, email_customer):
        url = reverse('customers:customer-list')
        response = authenticated_client.get(url, {'search': 'pria sharma'})

        assert response.status_code == status.HTTP_200_OK
        assert [c['name'] for c in response.data['results']] == ['Priya Sharma']

    def test_list_unauthenticated(self, api_client):
        url = reverse('customers:customer-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestCustomerCreate:
    """Tests for POST /api/customers/"""

    def test_create_customer(self, authenticated_client):
        url = reverse('customers:customer-list')
        data = {
            'name': 'Daniel Ortiz',
            'phone': '(512) 555-0199',
        }
        response = authenticated_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['name'] == 'Daniel Ortiz'
        assert response.data['phone'] == '5125550199'
        assert response.data['rewards_points'] == 0
        assert response.data['can_redeem'] is False

    def test_create_blank_name(self, authenticated_client):
        url = reverse('customers:customer-list')
        response = authenticated_client.post(url, {'name': '   '})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_invalid_email(self, authenticated_client):
        url = reverse('customers:customer-list')
        response = authenticated_client.post(url, {'name': 'Someone', 'email': 'not-an-email'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'email' in response.data


# =============================================================================
# Customer Detail Tests
# =============================================================================

@pytest.mark.django_db
class TestCustomerDetail:
    """Tests for GET/PATCH /api/customers/{id}/"""

    def test_retrieve(self, authenticated_client, rich_customer):
        url = reverse('customers:customer-detail', args=[rich_customer.id])
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['rewards_points'] == 150
        assert response.data['can_redeem'] is True

    def test_retrieve_not_found(self, authenticated_client):
        url = reverse('customers:customer-detail', args=[uuid.uuid4()])
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_patch_contact(self, authenticated_client, customer):
        url = reverse('customers:customer-detail', args=[customer.id])
        response = authenticated_client.patch(url, {'email': 'Priya@Example.com'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == 'priya@example.com'
        assert response.data['phone'] == '5125550142'

    def test_patch_not_found(self, authenticated_client):
        url = reverse('customers:customer-detail', args=[uuid.uuid4()])
        response = authenticated_client.patch(url, {'name': 'Someone'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert 'error' in response.data

    def test_delete_not_allowed(self, authenticated_client, customer):
        url = reverse('customers:customer-detail', args=[customer.id])
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert Customer.objects.filter(id=customer.id).exists()


# =============================================================================
# Lookup Tests
# =============================================================================

@pytest.mark.django_db
class TestCustomerLookup:
    """Tests for GET /api/customers/lookup/"""

    def test_lookup_found_by_phone(self, authenticated_client, customer):
        url = reverse('customers:customer-lookup')
        response = authenticated_client.get(url, {'contact': '512-555-0142'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['found'] is True
        assert response.data['customer']['name'] == 'Priya Sharma'
        assert response.data['is_new'] is False

    def test_lookup_new_customer(self, authenticated_client, customer):
        url = reverse('customers:customer-lookup')
        response = authenticated_client.get(url, {'name': 'Sam Patel', 'contact': '7375550110'})

        assert response.data['found'] is False
        assert response.data['customer'] is None
        assert response.data['is_new'] is True

    def test_lookup_name_without_contact_is_not_new(self, authenticated_client, db):
        url = reverse('customers:customer-lookup')
        response = authenticated_client.get(url, {'name': 'Sam Patel', 'contact': 'Not provided'})

        assert response.data['found'] is False
        assert response.data['is_new'] is False

    def test_lookup_short_input(self, authenticated_client, customer):
        url = reverse('customers:customer-lookup')
        response = authenticated_client.get(url, {'name': 'P'})

        assert response.data['found'] is False


# =============================================================================
# Rewards Tests
# =============================================================================

@pytest.mark.django_db
class TestCustomerRewards:
    """Tests for the rewards history and preview endpoints."""

    def test_rewards_history(self, authenticated_client, customer):
        from apps.customers.services import process_order_rewards
        process_order_rewards(customer=customer, order_subtotal=Decimal('25.00'))

        url = reverse('customers:customer-rewards', args=[customer.id])
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['points_earned'] == 25
        assert response.data[0]['balance_after'] == 65
        assert response.data[0]['receipt_id'] is None

    def test_rewards_history_not_found(self, authenticated_client):
        url = reverse('customers:customer-rewards', args=[uuid.uuid4()])
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_rewards_preview(self, authenticated_client, rich_customer):
        url = reverse('customers:customer-rewards-preview', args=[rich_customer.id])
        response = authenticated_client.get(url, {'subtotal': '40.00', 'redeem': 'true'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['use_redemption'] is True
        assert response.data['redemption_discount'] == '4.00'
        assert response.data['points_to_earn'] == 36
        assert response.data['new_balance'] == 86

    def test_rewards_preview_requires_subtotal(self, authenticated_client, rich_customer):
        url = reverse('customers:customer-rewards-preview', args=[rich_customer.id])
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'subtotal' in response.data


# =============================================================================
# Reconciliation Tests
# =============================================================================

@pytest.mark.django_db
class TestMigrationEndpoints:
    """Tests for the staff-only reconciliation endpoints."""

    def test_preview_requires_staff(self, authenticated_client):
        url = reverse('customers:migration-preview')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_preview(self, staff_client, customer, make_legacy_order):
        make_legacy_order('Priya Sharma', pre_tax=Decimal('25.00'))
        make_legacy_order('Tom Becker', pre_tax=Decimal('10.00'))

        url = reverse('customers:migration-preview')
        response = staff_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['customers_from_orders'] == 2
        assert response.data['needs_migration'] == 1
        assert response.data['needs_update'] == 1

    def test_run_requires_staff(self, authenticated_client):
        url = reverse('customers:migration-run')
        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_run(self, staff_client, customer, make_legacy_order):
        make_legacy_order('Priya Sharma', pre_tax=Decimal('25.00'))
        make_legacy_order('Tom Becker', contact='tom@example.com', pre_tax=Decimal('10.00'))

        url = reverse('customers:migration-run')
        response = staff_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['migrated'] == 1
        assert response.data['updated'] == 1
        assert response.data['errors'] == []

        customer.refresh_from_db()
        assert customer.rewards_points == 25
        assert Customer.objects.filter(name='Tom Becker', email='tom@example.com').exists()
