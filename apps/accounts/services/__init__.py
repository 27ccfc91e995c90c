"""Staff account services: sign in, sign out, token issue."""

from .exceptions import (
    AccountsServiceError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
)
from .staff_sessions import issue_tokens, sign_in, sign_out

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidTokenError',
    # Sessions
    'issue_tokens',
    'sign_in',
    'sign_out',
]
