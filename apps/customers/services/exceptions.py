"""Domain exceptions for customers and rewards services."""


class CustomersServiceError(Exception):
    """Base exception for all customers service errors."""
    pass


class CustomerNotFoundError(CustomersServiceError):
    """Customer does not exist."""
    pass


class InvalidCustomerError(CustomersServiceError):
    """Customer data is missing required fields."""
    pass


class InsufficientPointsError(CustomersServiceError):
    """Customer does not have enough points to redeem."""
    pass


class InvalidPointsBalanceError(CustomersServiceError):
    """Points balance would become negative."""
    pass

