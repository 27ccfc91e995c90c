"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data
    python manage.py create_sample_data --clear --orders 120

This creates:
- 2 staff accounts (manager, counter)
- Orders spread over the current and previous year, taken through the
  order service so customers, points and rewards history are filled in
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from datetime import timedelta
import random

from django.utils import timezone

from apps.accounts.models import User
from apps.customers.models import Customer, RewardsTransaction
from apps.orders.menu import PUFF_TYPES, CATEGORY_PRICES
from apps.orders.models import Order, PaymentStatus
from apps.orders.services import create_order, complete_order


SAMPLE_CUSTOMERS = [
    ('Priya Sharma', '(512) 555-0142'),
    ('Marcus Lee', 'marcus.lee@example.com'),
    ('Elena Garcia', '512-555-0178'),
    ('Tom Becker', ''),
    ('Aisha Khan', 'aisha.k@example.com'),
    ('Daniel Ortiz', '5125550199'),
    ('Grace Kim', 'grace.kim@example.com'),
    ('Sam Patel', '(737) 555-0110'),
]

PICKUP_TIMES = ['09:30', '11:00', '12:15', '14:05', '16:45', '18:00']


class Command(BaseCommand):
    help = 'Create sample staff, customers and orders'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing orders and customers before creating new sample data',
        )
        parser.add_argument(
            '--orders',
            type=int,
            default=80,
            help='Number of orders to create',
        )
        parser.add_argument(
            '--seed',
            type=int,
            default=None,
            help='Random seed for repeatable data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        rng = random.Random(options['seed'])

        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        count = self.create_orders(users, options['orders'], rng)

        self.stdout.write(self.style.SUCCESS(f'Created {count} sample order(s)!'))
        self.stdout.write('')
        self.stdout.write('Staff accounts:')
        self.stdout.write('  manager@example.com / manager123 (staff)')
        self.stdout.write('  counter@example.com / counter123')

    def clear_data(self):
        """Clear orders, customers and rewards history."""
        RewardsTransaction.objects.all().delete()
        Order.objects.all().delete()
        Customer.objects.all().delete()

    def create_users(self):
        """Create staff accounts."""
        self.stdout.write('  Creating staff accounts...')

        manager, _ = User.objects.get_or_create(
            email='manager@example.com',
            defaults={
                'display_name': 'Bakery Manager',
                'is_staff': True,
            }
        )
        manager.set_password('manager123')
        manager.save()

        counter, _ = User.objects.get_or_create(
            email='counter@example.com',
            defaults={
                'display_name': 'Counter Staff',
            }
        )
        counter.set_password('counter123')
        counter.save()

        return [manager, counter]

    def create_orders(self, users, count, rng):
        """Create orders over the last two calendar years."""
        self.stdout.write('  Creating orders...')

        today = timezone.localdate()
        start = today.replace(year=today.year - 1, month=1, day=1)
        span = (today - start).days

        created = 0
        for _ in range(count):
            name, contact = rng.choice(SAMPLE_CUSTOMERS)
            items = []
            for _ in range(rng.randint(1, 3)):
                category = rng.choice(list(PUFF_TYPES))
                items.append({
                    'name': rng.choice(PUFF_TYPES[category]),
                    'category': category,
                    'quantity': rng.randint(2, 12),
                    'unit_price': CATEGORY_PRICES[category],
                })

            is_delivery = rng.random() < 0.25
            order = create_order(
                created_by=rng.choice(users),
                customer_name=name,
                customer_contact=contact,
                delivery_date=start + timedelta(days=rng.randint(0, span)),
                delivery_time=rng.choice(PICKUP_TIMES),
                payment_method=rng.choice(['venmo', 'zelle', 'cash', 'check']),
                items=items,
                is_delivery=is_delivery,
                delivery_address='100 Congress Ave, Austin TX' if is_delivery else '',
                discount_percent=rng.choice([0, 0, 0, 5, 10]),
                payment_status=rng.choice([PaymentStatus.PAID, PaymentStatus.UNPAID]),
            )
            if order.delivery_date < today:
                complete_order(order_id=order.id)
            created += 1

        return created
