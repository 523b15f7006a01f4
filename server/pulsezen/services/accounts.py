"""Email/password account flows and JWT issuance."""

import logging
import re

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from pulsezen.models import AuthLog
from pulsezen.utils import AuthenticationError, RegistrationError

User = get_user_model()

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"

_PASSWORD_RULES = [
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"\d"), "Password must contain at least one number"),
]


def validate_password_strength(password):
    """
    Check the mobile app's password rules.

    Returns `(valid, message)`; `message` is None when the password is valid.
    """
    password = password or ""
    if len(password) < 8:
        return False, "Password must be at least 8 characters long"
    for pattern, message in _PASSWORD_RULES:
        if not pattern.search(password):
            return False, message
    return True, None


def issue_tokens(user, device=None):
    """Return a simplejwt refresh/access pair, bound to `device` when given."""
    refresh = RefreshToken.for_user(user)
    refresh["email"] = user.email
    if device is not None:
        refresh["device_id"] = str(device.id)
    access = refresh.access_token
    return {
        "access": str(access),
        "refresh": str(refresh),
    }


def register_user(email, password, first_name="", last_name="", ip_address=None):
    email = (email or "").strip().lower()
    valid, message = validate_password_strength(password)
    if not valid:
        raise RegistrationError(message, details={"password": [message]})

    if User.objects.filter(email=email).exists():
        logger.info("Registration rejected for existing email from %s", ip_address)
        raise RegistrationError("Email already registered", details={"email": ["Email already registered"]})

    try:
        with transaction.atomic():
            user = User(
                email=email,
                username=email,
                first_name=first_name or "",
                last_name=last_name or "",
            )
            user.set_password(password)
            user.save()
    except IntegrityError:
        raise RegistrationError("Email already registered", details={"email": ["Email already registered"]})

    logger.info("User %s registered", user.id)
    return user, issue_tokens(user)


def authenticate_user(email, password, ip_address=None, user_agent=None):
    """
    Verify email/password credentials and return `(user, tokens)`.

    Unknown, inactive and soft-deleted accounts get the same error as a wrong
    password. Attempts against a known account are written to the auth log.
    """
    email = (email or "").strip().lower()
    user = User.objects.filter(email=email).first()
    if user is None:
        logger.info("Password login for unknown email from %s", ip_address)
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    if not user.is_active or user.is_deleted:
        AuthLog.log_blocked(
            user,
            "email",
            "Account inactive",
            ip_address=ip_address,
            user_agent=user_agent,
        )
        logger.warning("Password login blocked for inactive user %s", user.id)
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    if not user.check_password(password or ""):
        AuthLog.log_failure(
            user,
            "email",
            "Invalid password",
            ip_address=ip_address,
            user_agent=user_agent,
        )
        logger.warning("Password login failed for user %s", user.id)
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    AuthLog.log_success(user, "email", ip_address=ip_address, user_agent=user_agent)
    logger.info("Password login succeeded for user %s", user.id)
    return user, issue_tokens(user)


def delete_account(user):
    """Soft-delete `user` and blacklist its outstanding refresh tokens."""
    user.soft_delete()
    for token in OutstandingToken.objects.filter(user=user):
        BlacklistedToken.objects.get_or_create(token=token)
    logger.info("User %s soft-deleted", user.id)
