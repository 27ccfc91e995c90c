"""Signing staff members in and out of the order desk."""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .exceptions import InvalidCredentialsError, InactiveAccountError, InvalidTokenError

User = get_user_model()

logger = logging.getLogger(__name__)


def issue_tokens(user) -> dict:
    """Refresh and access JWTs for ``user``."""
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


@transaction.atomic
def sign_in(*, email: str, password: str) -> dict:
    """
    Check a staff member's credentials and issue tokens.

    The row is locked while ``last_login`` is written so two devices
    signing in at once don't overwrite each other.

    Returns:
        dict with ``user`` and ``tokens``

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: Account deactivated
    """
    user = (
        User.objects
        .select_for_update()
        .filter(email__iexact=email.strip())
        .first()
    )
    if user is None or not user.check_password(password):
        logger.info("Sign-in failed for %s", email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        logger.info("Sign-in refused for deactivated account %s", user.email)
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    logger.info("%s signed in", user.email)
    return {'user': user, 'tokens': issue_tokens(user)}


def sign_out(*, user, refresh_token: str = '') -> None:
    """
    Sign a staff member out.

    Tokens are stateless, so this only checks that a refresh token, when
    the client sends one, is one we issued.

    Raises:
        InvalidTokenError: The refresh token is malformed or expired
    """
    if refresh_token:
        try:
            RefreshToken(refresh_token)
        except TokenError as e:
            raise InvalidTokenError(str(e))

    logger.info("%s signed out", user.email)
