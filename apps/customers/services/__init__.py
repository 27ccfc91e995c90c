"""Services for customers and loyalty rewards."""

from .exceptions import (
    CustomersServiceError,
    CustomerNotFoundError,
    InvalidCustomerError,
    InsufficientPointsError,
    InvalidPointsBalanceError,
)
from .matching import (
    normalize_name,
    normalize_phone,
    normalize_email,
    split_contact,
    find_customer,
    lookup_customer,
    find_similar_customers,
    EXACT_MATCH_THRESHOLD,
    HIGH_SIMILARITY_THRESHOLD,
    MEDIUM_SIMILARITY_THRESHOLD,
    NOT_PROVIDED,
)
from .customer_management import (
    create_customer,
    get_customer_by_id,
    update_customer_contact,
    resolve_customer_for_order,
)
from .rewards import (
    calculate_points_earned,
    calculate_redemption_discount,
    can_redeem_points,
    process_order_rewards,
    reverse_order_rewards,
    update_customer_points,
    record_rewards_transaction,
    get_customer_rewards_history,
    rewards_preview,
)
from .reconciliation import (
    build_order_ledger,
    match_existing_customer,
    plan_reconciliation,
    preview_customer_migration,
    migrate_all_customers,
)

__all__ = [
    # Exceptions
    'CustomersServiceError',
    'CustomerNotFoundError',
    'InvalidCustomerError',
    'InsufficientPointsError',
    'InvalidPointsBalanceError',
    # Matching
    'normalize_name',
    'normalize_phone',
    'normalize_email',
    'split_contact',
    'find_customer',
    'lookup_customer',
    'find_similar_customers',
    'EXACT_MATCH_THRESHOLD',
    'HIGH_SIMILARITY_THRESHOLD',
    'MEDIUM_SIMILARITY_THRESHOLD',
    'NOT_PROVIDED',
    # Customer Management
    'create_customer',
    'get_customer_by_id',
    'update_customer_contact',
    'resolve_customer_for_order',
    # Rewards
    'calculate_points_earned',
    'calculate_redemption_discount',
    'can_redeem_points',
    'process_order_rewards',
    'reverse_order_rewards',
    'update_customer_points',
    'record_rewards_transaction',
    'get_customer_rewards_history',
    'rewards_preview',
    # Reconciliation
    'build_order_ledger',
    'match_existing_customer',
    'plan_reconciliation',
    'preview_customer_migration',
    'migrate_all_customers',
]
