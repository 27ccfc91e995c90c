from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class Customer(models.Model):
    """Bakery customer enrolled in the loyalty program."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200)
    # Lower-cased, whitespace-collapsed, punctuation-free name used for matching
    name_normalized = models.CharField(max_length=200, db_index=True, editable=False)

    # Phone is stored as digits only, email lower-cased
    phone = models.CharField(max_length=32, blank=True, db_index=True)
    email = models.EmailField(max_length=255, blank=True, db_index=True)

    rewards_points = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        ordering = ['name']
        indexes = [
            models.Index(fields=['name_normalized'], name='customers_name_norm_idx'),
            models.Index(fields=['-rewards_points'], name='customers_points_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.rewards_points} pts)"

    def save(self, *args, **kwargs):
        """Keep the normalized name in sync with the display name."""
        from .services.matching import normalize_name

        self.name_normalized = normalize_name(self.name)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'name' in update_fields:
            kwargs['update_fields'] = list(set(update_fields) | {'name_normalized'})
        super().save(*args, **kwargs)

    @property
    def contact(self):
        """Phone if known, otherwise email."""
        return self.phone or self.email


class RewardsTransaction(models.Model):
    """Ledger row for every change an order makes to a points balance."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    customer = models.ForeignKey(
        Customer,
        on_delete=models.CASCADE,
        related_name='rewards_transactions'
    )
    order = models.ForeignKey(
        'orders.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='rewards_transactions'
    )

    points_earned = models.IntegerField(default=0)
    points_redeemed = models.IntegerField(default=0)
    discount_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    order_subtotal = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00')
    )
    balance_after = models.PositiveIntegerField(default=0)
    note = models.CharField(max_length=200, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'rewards_transactions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['customer', 'created_at'], name='rewards_tx_customer_idx'),
        ]

    def __str__(self):
        return f"{self.customer.name}: +{self.points_earned} / -{self.points_redeemed}"
