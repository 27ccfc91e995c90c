from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


NOT_PROVIDED = 'Not provided'


class PaymentMethod(models.TextChoices):
    VENMO = 'venmo', 'Venmo'
    ZELLE = 'zelle', 'Zelle'
    CASH = 'cash', 'Cash'
    CHECK = 'check', 'Check'
    NOT_PROVIDED = NOT_PROVIDED, 'Not provided'


class PaymentStatus(models.TextChoices):
    UNPAID = 'UNPAID', 'Unpaid'
    PAID = 'PAID', 'Paid'


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'


class Order(models.Model):
    """Puff order taken at the counter, by phone or for delivery."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Short random id printed on the receipt
    receipt_id = models.CharField(max_length=32, unique=True, db_index=True)

    # Customer (nullable when only a name was given and nobody matched)
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders'
    )
    customer_name = models.CharField(max_length=200)
    customer_contact = models.CharField(max_length=255, default=NOT_PROVIDED)

    # Pickup or delivery slot
    delivery_date = models.DateField()
    delivery_time = models.CharField(max_length=20)

    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH
    )

    # Delivery
    is_delivery = models.BooleanField(default=False)
    delivery_address = models.CharField(max_length=500, blank=True)
    delivery_fee = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    # Money
    item_subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    discount_percent = models.PositiveSmallIntegerField(default=0)
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    rewards_discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    pre_tax_subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    tax_rate = models.DecimalField(max_digits=6, decimal_places=4, default=Decimal('0.0000'))
    tax = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    final_total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    # Loyalty
    points_earned = models.PositiveIntegerField(default=0)
    points_redeemed = models.PositiveIntegerField(default=0)
    customer_rewards_balance = models.PositiveIntegerField(null=True, blank=True)

    payment_status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING
    )

    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders_taken'
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        indexes = [
            models.Index(fields=['delivery_date'], name='orders_delivery_date_idx'),
            models.Index(fields=['customer_name'], name='orders_customer_name_idx'),
            models.Index(fields=['payment_status'], name='orders_payment_status_idx'),
            models.Index(fields=['-created_at'], name='orders_created_at_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"#{self.receipt_id} - {self.customer_name} (${self.final_total})"

    @property
    def is_paid(self):
        return self.payment_status == PaymentStatus.PAID

    @property
    def discounted_subtotal(self):
        return self.item_subtotal - self.discount_amount

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items.all())


class OrderItem(models.Model):
    """One line of an order: a puff type, how many and at what price."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='items'
    )

    name = models.CharField(max_length=200)
    category = models.CharField(max_length=50, blank=True)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    total = models.DecimalField(max_digits=10, decimal_places=2)
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        db_table = 'order_items'
        indexes = [
            models.Index(fields=['name'], name='order_items_name_idx'),
        ]
        ordering = ['order', 'position']

    def __str__(self):
        return f"{self.quantity}x {self.name}"
