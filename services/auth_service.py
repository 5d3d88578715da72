import logging
import re
from dataclasses import dataclass

from flask import session
from flask_login import current_user, login_user, logout_user

from services import data_client
from services.errors import (
    AppError,
    AuthorizationError,
    InvalidCredentialsError,
    RemoteCallError,
    ValidationError,
)
from utils.password_utils import verify_password

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# UI hint only; protected pages always re-check through load_admin_session()
ADMIN_FLAG = "admin_authenticated"


@dataclass(frozen=True)
class AdminSession:
    """An authenticated session whose email is on the admin allow-list."""
    user_id: int
    email: str


def validate_email(email):
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def check_credentials(email, password):
    """Return the active User for these credentials without signing in."""
    user = data_client.get_user_by_email(email)

    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError()

    if user.is_active is False:
        raise InvalidCredentialsError()

    return user


def sign_out():
    logout_user()
    session.clear()


def authenticate_admin(email, password):
    """Sign in and require the email to be on the admin allow-list.

    The session is only started once the allow-list check passes, and any
    later failure signs it out again.
    """
    email = (email or "").strip()
    if not validate_email(email):
        raise ValidationError("Please enter a valid email address")
    if not password:
        raise ValidationError("Email and password are required")

    logger.info(f"Attempting admin login with email: {email}")
    user = check_credentials(email, password)

    try:
        is_admin = data_client.is_admin_email(user.email)
    except RemoteCallError as e:
        sign_out()
        raise RemoteCallError("Error verifying admin status") from e

    if not is_admin:
        logger.warning(f"No admin user found with email: {email}")
        sign_out()
        raise AuthorizationError()

    try:
        login_user(user)
        data_client.touch_last_sign_in(user)
    except AppError:
        sign_out()
        raise

    session[ADMIN_FLAG] = True
    logger.info(f"Login successful for admin: {user.email}")
    return AdminSession(user_id=user.id, email=user.email)


def load_admin_session():
    """Rebuild the admin session for this request, or None.

    A signed-in user who is no longer on the allow-list is signed out.
    """
    if not current_user.is_authenticated:
        session.pop(ADMIN_FLAG, None)
        return None

    if not data_client.is_admin_email(current_user.email):
        logger.warning(f"{current_user.email} is signed in but not an admin")
        sign_out()
        return None

    return AdminSession(user_id=current_user.id, email=current_user.email)
