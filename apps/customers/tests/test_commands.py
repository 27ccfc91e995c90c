import pytest
from io import StringIO
from decimal import Decimal
from django.core.management import call_command
from apps.customers.models import Customer


@pytest.mark.django_db
class TestReconcileCustomersCommand:
    """Tests for manage.py reconcile_customers"""

    def test_dry_run_changes_nothing(self, customer, make_legacy_order):
        make_legacy_order('Priya Sharma', pre_tax=Decimal('25.00'))
        make_legacy_order('Tom Becker', pre_tax=Decimal('10.00'))
        out = StringIO()

        call_command('reconcile_customers', '--dry-run', stdout=out)

        output = out.getvalue()
        assert 'New customers: 1' in output
        assert 'Balances to update: 1' in output
        assert 'No changes made' in output
        customer.refresh_from_db()
        assert customer.rewards_points == 40
        assert not Customer.objects.filter(name='Tom Becker').exists()

    def test_run(self, customer, make_legacy_order):
        make_legacy_order('Priya Sharma', pre_tax=Decimal('25.00'))
        out = StringIO()

        call_command('reconcile_customers', stdout=out)

        assert 'updated 1 balance(s)' in out.getvalue()
        customer.refresh_from_db()
        assert customer.rewards_points == 25
