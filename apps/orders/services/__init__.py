"""Services for orders business logic."""

from .exceptions import (
    OrdersServiceError,
    OrderNotFoundError,
    InvalidOrderError,
)
from .pricing import (
    OrderTotals,
    DISCOUNT_OPTIONS,
    parse_discount_percent,
    tax_rate_for,
    price_order,
)
from .order_management import (
    generate_receipt_id,
    prepare_items,
    create_order,
    update_order,
    delete_order,
    set_payment_status,
    complete_order,
    get_order_by_id,
    get_order_by_receipt_id,
)
from .order_search import (
    filter_orders,
)
from .feed import (
    snapshot_version,
    orders_snapshot,
)
from .receipt import (
    build_receipt,
)
from .export import (
    CSV_HEADERS,
    export_filename,
    export_orders_csv,
)

__all__ = [
    # Exceptions
    'OrdersServiceError',
    'OrderNotFoundError',
    'InvalidOrderError',
    # Pricing
    'OrderTotals',
    'DISCOUNT_OPTIONS',
    'parse_discount_percent',
    'tax_rate_for',
    'price_order',
    # Order Management
    'generate_receipt_id',
    'prepare_items',
    'create_order',
    'update_order',
    'delete_order',
    'set_payment_status',
    'complete_order',
    'get_order_by_id',
    'get_order_by_receipt_id',
    # Order Search
    'filter_orders',
    # Live Feed
    'snapshot_version',
    'orders_snapshot',
    # Receipt
    'build_receipt',
    # Export
    'CSV_HEADERS',
    'export_filename',
    'export_orders_csv',
]
