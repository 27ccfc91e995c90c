"""
Management command to rebuild customers and point balances from the orders.

Groups every order by customer name, recomputes each customer's balance
(1 point per dollar of pre-tax subtotal, minus points redeemed) and then
updates existing customers or creates missing ones.

Usage:
    python manage.py reconcile_customers
    python manage.py reconcile_customers --dry-run
"""

from django.core.management.base import BaseCommand
from apps.customers.services import (
    preview_customer_migration,
    migrate_all_customers,
)


class Command(BaseCommand):
    help = 'Rebuild customer records and rewards balances from the order history'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be updated without making changes',
        )
        parser.add_argument(
            '--threshold',
            type=int,
            default=None,
            help='Fuzzy name match threshold (0-100)',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        threshold = options['threshold']

        preview = preview_customer_migration(threshold=threshold)

        self.stdout.write(
            f"\nExisting customers: {preview['existing_customers']}"
            f"\nCustomers found in orders: {preview['customers_from_orders']}"
            f"\nNew customers: {preview['needs_migration']}"
            f"\nBalances to update: {preview['needs_update']}\n"
        )

        for row in preview['preview']:
            current = row['current_points'] if row['current_points'] is not None else '-'
            self.stdout.write(
                f"  - {row['name']} | {row['status']} ({row['match_type']}) | "
                f"{current} -> {row['calculated_points']} pts | "
                f"${row['total_spent']:.2f} over {row['total_orders']} order(s)"
            )

        if dry_run:
            self.stdout.write(
                self.style.WARNING('\n--dry-run mode: No changes made.')
            )
            return

        results = migrate_all_customers(threshold=threshold)

        for error in results['errors']:
            self.stdout.write(self.style.ERROR(f'  {error}'))

        self.stdout.write(
            self.style.SUCCESS(
                f"\nCreated {results['migrated']} customer(s), "
                f"updated {results['updated']} balance(s)."
            )
        )
