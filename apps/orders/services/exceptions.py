"""Domain exceptions for orders services."""


class OrdersServiceError(Exception):
    """Base exception for all orders service errors."""
    pass


class OrderNotFoundError(OrdersServiceError):
    """Order does not exist."""
    pass


class InvalidOrderError(OrdersServiceError):
    """Order data is incomplete or invalid."""
    pass
