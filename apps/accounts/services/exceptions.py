"""Errors raised while signing staff in and out."""


class AccountsServiceError(Exception):
    """Base exception for staff account services."""


class InvalidCredentialsError(AccountsServiceError):
    """Unknown email or wrong password."""


class InactiveAccountError(AccountsServiceError):
    """The staff member has been deactivated by a manager."""


class InvalidTokenError(AccountsServiceError):
    """A refresh token is malformed or expired."""
