from rest_framework import serializers
from apps.accounts.serializers import StaffMinimalSerializer
from apps.customers.serializers import CustomerMinimalSerializer
from .models import Order, OrderItem, PaymentMethod, PaymentStatus
from .services.order_management import ORDER_PAYMENT_METHODS


# =============================================================================
# Input Serializers
# =============================================================================

class OrderFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for the order history.

    Query Parameters:
        customer_name (str): Part of the customer name
        contact (str): Part of the phone or email
        receipt_id (str): Part of the receipt id
        delivery_date (date): Exact pickup/delivery date
    """

    customer_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    contact = serializers.CharField(max_length=255, required=False, allow_blank=True)
    receipt_id = serializers.CharField(max_length=32, required=False, allow_blank=True)
    delivery_date = serializers.DateField(required=False)


class OrderItemInputSerializer(serializers.Serializer):
    """One order line. A missing price falls back to the menu price."""

    name = serializers.CharField(max_length=200)
    category = serializers.CharField(max_length=50, required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(
        max_digits=8,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
    )


class OrderCreateSerializer(serializers.Serializer):
    """Validate input for taking a new order."""

    customer_name = serializers.CharField(max_length=200)
    customer_contact = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    delivery_date = serializers.DateField()
    delivery_time = serializers.CharField(max_length=20)
    payment_method = serializers.ChoiceField(choices=ORDER_PAYMENT_METHODS)
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    is_delivery = serializers.BooleanField(required=False, default=False)
    delivery_address = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    delivery_fee = serializers.DecimalField(
        max_digits=8,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
        default=None,
    )
    discount_percent = serializers.CharField(max_length=4, required=False, default='0')
    payment_status = serializers.ChoiceField(
        choices=PaymentStatus.choices,
        required=False,
        default=PaymentStatus.UNPAID,
    )
    redeem_points = serializers.BooleanField(required=False, default=False)


class OrderUpdateSerializer(serializers.Serializer):
    """
    Validate input for editing an order.

    Only the fields sent are changed. Leaving out redeem_points keeps the
    order's current redemption.
    """

    customer_name = serializers.CharField(max_length=200, required=False)
    customer_contact = serializers.CharField(max_length=255, required=False, allow_blank=True)
    delivery_date = serializers.DateField(required=False)
    delivery_time = serializers.CharField(max_length=20, required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)
    items = OrderItemInputSerializer(many=True, required=False, allow_empty=False)
    is_delivery = serializers.BooleanField(required=False)
    delivery_address = serializers.CharField(max_length=500, required=False, allow_blank=True)
    delivery_fee = serializers.DecimalField(
        max_digits=8,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
    )
    discount_percent = serializers.CharField(max_length=4, required=False)
    payment_status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    redeem_points = serializers.BooleanField(required=False, allow_null=True)


class OrderQuoteSerializer(serializers.Serializer):
    """Validate input for pricing a draft order."""

    items = OrderItemInputSerializer(many=True, allow_empty=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    discount_percent = serializers.CharField(max_length=4, required=False, default='0')
    is_delivery = serializers.BooleanField(required=False, default=False)
    delivery_fee = serializers.DecimalField(
        max_digits=8,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
        default=None,
    )
    redeem_points = serializers.BooleanField(required=False, default=False)
    customer = serializers.UUIDField(required=False, allow_null=True)


class PaymentStatusInputSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(
        choices=PaymentStatus.choices,
        required=False,
        default=PaymentStatus.PAID,
    )


class FeedQuerySerializer(serializers.Serializer):
    version = serializers.CharField(max_length=64, required=False, allow_blank=True)


# =============================================================================
# Output Serializers
# =============================================================================

class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ['id', 'name', 'category', 'quantity', 'unit_price', 'total', 'position']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Main serializer for orders."""

    customer = CustomerMinimalSerializer(read_only=True)
    created_by = StaffMinimalSerializer(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    is_paid = serializers.BooleanField(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id',
            'receipt_id',
            'customer',
            'customer_name',
            'customer_contact',
            'delivery_date',
            'delivery_time',
            'payment_method',
            'is_delivery',
            'delivery_address',
            'delivery_fee',
            'items',
            'item_subtotal',
            'discount_percent',
            'discount_amount',
            'rewards_discount_amount',
            'pre_tax_subtotal',
            'tax_rate',
            'tax',
            'final_total',
            'points_earned',
            'points_redeemed',
            'customer_rewards_balance',
            'payment_status',
            'is_paid',
            'status',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for the history list."""

    item_count = serializers.SerializerMethodField()
    is_paid = serializers.BooleanField(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id',
            'receipt_id',
            'customer_name',
            'customer_contact',
            'delivery_date',
            'delivery_time',
            'is_delivery',
            'item_count',
            'final_total',
            'payment_status',
            'is_paid',
            'status',
            'created_at',
        ]
        read_only_fields = fields

    def get_item_count(self, obj):
        return sum(item.quantity for item in obj.items.all())


class OrderTotalsSerializer(serializers.Serializer):
    item_subtotal = serializers.DecimalField(max_digits=10, decimal_places=2)
    discount_percent = serializers.IntegerField()
    discount_amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    discounted_subtotal = serializers.DecimalField(max_digits=10, decimal_places=2)
    rewards_discount_amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    points_redeemed = serializers.IntegerField()
    pre_tax_subtotal = serializers.DecimalField(max_digits=10, decimal_places=2)
    tax_rate = serializers.DecimalField(max_digits=6, decimal_places=4)
    tax = serializers.DecimalField(max_digits=10, decimal_places=2)
    delivery_fee = serializers.DecimalField(max_digits=8, decimal_places=2)
    final_total = serializers.DecimalField(max_digits=10, decimal_places=2)
    points_earned = serializers.IntegerField()


class MenuCategorySerializer(serializers.Serializer):
    category = serializers.CharField()
    default_price = serializers.DecimalField(max_digits=8, decimal_places=2)
    items = serializers.ListField(child=serializers.CharField())


class FeedSerializer(serializers.Serializer):
    version = serializers.CharField()
    synced_at = serializers.DateTimeField()
    count = serializers.IntegerField()
    orders = OrderSerializer(many=True)


class ReceiptStepSerializer(serializers.Serializer):
    number = serializers.IntegerField()
    label = serializers.CharField()
    amount = serializers.CharField()


class ReceiptLineSerializer(serializers.Serializer):
    text = serializers.CharField()
    total = serializers.CharField()


class ReceiptCustomerSerializer(serializers.Serializer):
    name = serializers.CharField()
    contact = serializers.CharField()
    rewards_balance = serializers.IntegerField(allow_null=True)
    points_earned = serializers.IntegerField()
    points_redeemed = serializers.IntegerField()


class ReceiptDeliverySerializer(serializers.Serializer):
    date = serializers.DateField()
    time = serializers.CharField()
    payment_method = serializers.CharField()
    is_delivery = serializers.BooleanField()
    address = serializers.CharField(allow_blank=True)
    fee = serializers.CharField()


class ReceiptSerializer(serializers.Serializer):
    receipt_id = serializers.CharField()
    customer = ReceiptCustomerSerializer()
    delivery = ReceiptDeliverySerializer()
    items = ReceiptLineSerializer(many=True)
    steps = ReceiptStepSerializer(many=True)
    final_total = serializers.CharField()
    is_paid = serializers.BooleanField()


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
