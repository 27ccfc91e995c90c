from rest_framework import serializers
from .models import Customer, RewardsTransaction


# =============================================================================
# Input Serializers
# =============================================================================

class CustomerFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for the customer list.

    Query Parameters:
        search (str): Fuzzy name search
    """

    search = serializers.CharField(max_length=200, required=False, allow_blank=True)


class CustomerLookupSerializer(serializers.Serializer):
    """
    Validate query parameters for the order form lookup.

    Query Parameters:
        name (str): Customer name as typed
        contact (str): Phone or email as typed
    """

    name = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    contact = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class CustomerCreateSerializer(serializers.Serializer):
    """Validate input for creating or editing a customer."""

    name = serializers.CharField(max_length=200)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    email = serializers.EmailField(max_length=255, required=False, allow_blank=True)


class RewardsPreviewInputSerializer(serializers.Serializer):
    """
    Validate query parameters for the rewards preview.

    Query Parameters:
        subtotal (decimal): Order subtotal after the percentage discount
        redeem (bool): Whether the redemption toggle is on
    """

    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    redeem = serializers.BooleanField(required=False, default=False)


# =============================================================================
# Output Serializers
# =============================================================================

class CustomerSerializer(serializers.ModelSerializer):
    """Full customer details."""

    can_redeem = serializers.SerializerMethodField()

    class Meta:
        model = Customer
        fields = [
            'id',
            'name',
            'phone',
            'email',
            'rewards_points',
            'can_redeem',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_can_redeem(self, obj):
        from .services import can_redeem_points
        return can_redeem_points(obj.rewards_points)


class CustomerMinimalSerializer(serializers.ModelSerializer):
    """Minimal customer info for nested serialization."""

    class Meta:
        model = Customer
        fields = ['id', 'name', 'rewards_points']
        read_only_fields = fields


class CustomerLookupResultSerializer(serializers.Serializer):
    found = serializers.BooleanField()
    customer = CustomerSerializer(allow_null=True)
    is_new = serializers.BooleanField()


class RewardsTransactionSerializer(serializers.ModelSerializer):
    """Rewards ledger row."""

    receipt_id = serializers.SerializerMethodField()

    class Meta:
        model = RewardsTransaction
        fields = [
            'id',
            'order',
            'receipt_id',
            'points_earned',
            'points_redeemed',
            'discount_amount',
            'order_subtotal',
            'balance_after',
            'note',
            'created_at',
        ]
        read_only_fields = fields

    def get_receipt_id(self, obj):
        return obj.order.receipt_id if obj.order else None


class RewardsPreviewSerializer(serializers.Serializer):
    current_points = serializers.IntegerField()
    can_redeem = serializers.BooleanField()
    use_redemption = serializers.BooleanField()
    redemption_discount = serializers.DecimalField(max_digits=10, decimal_places=2)
    points_to_earn = serializers.IntegerField()
    points_needed = serializers.IntegerField()
    progress_percent = serializers.FloatField()
    new_balance = serializers.IntegerField()


class MigrationPreviewRowSerializer(serializers.Serializer):
    name = serializers.CharField()
    names = serializers.ListField(child=serializers.CharField())
    status = serializers.ChoiceField(choices=['exists', 'needs_update', 'new'])
    match_type = serializers.ChoiceField(choices=['exact', 'fuzzy', 'none'])
    current_points = serializers.IntegerField(allow_null=True)
    calculated_points = serializers.IntegerField()
    total_spent = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_orders = serializers.IntegerField()


class MigrationPreviewSerializer(serializers.Serializer):
    existing_customers = serializers.IntegerField()
    customers_from_orders = serializers.IntegerField()
    needs_migration = serializers.IntegerField()
    needs_update = serializers.IntegerField()
    preview = MigrationPreviewRowSerializer(many=True)


class MigrationSummaryRowSerializer(serializers.Serializer):
    name = serializers.CharField()
    names = serializers.ListField(child=serializers.CharField())
    match_type = serializers.CharField()
    phone = serializers.CharField(allow_blank=True)
    email = serializers.CharField(allow_blank=True)
    total_spent = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_orders = serializers.IntegerField()
    points_earned = serializers.IntegerField()
    points_redeemed = serializers.IntegerField()
    net_points = serializers.IntegerField()


class MigrationResultSerializer(serializers.Serializer):
    migrated = serializers.IntegerField()
    updated = serializers.IntegerField()
    errors = serializers.ListField(child=serializers.CharField())
    summary = MigrationSummaryRowSerializer(many=True)


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
