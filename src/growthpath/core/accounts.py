"""Accounts and the signed-in session.

Credentials and tokens are handled by the managed backend's auth service;
this module only creates the profile rows and resolves bearer tokens into a
Session that is passed explicitly to whatever needs the current user.
"""

from __future__ import annotations

import re
import secrets
from dataclasses import dataclass
from datetime import date

import structlog

from growthpath.db.backend import get_backend
from growthpath.db.students_repository import insert_student
from growthpath.db.users_repository import ROLES, UserRecord, get_user_by_id, insert_user

logger = structlog.get_logger(__name__)

MIN_PASSWORD_LENGTH = 6
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AccountError(Exception):
    """Sign-up input rejected or account creation failed."""

    pass


class AuthenticationError(Exception):
    """Credentials or token not accepted."""

    pass


@dataclass
class Session:
    """The signed-in user and the token that proved it."""

    user: UserRecord
    access_token: str

    @property
    def role(self) -> str:
        return self.user.role

    @property
    def is_student(self) -> bool:
        return self.user.role == "student"

    @property
    def is_instructor(self) -> bool:
        return self.user.role == "instructor"


def generate_student_number() -> str:
    """Random enrolment number, e.g. STU048213."""
    return f"STU{secrets.randbelow(10**6):06d}"


def sign_up(email: str, password: str, full_name: str, role: str) -> UserRecord:
    """Register a new account and create its profile rows.

    Students also get a fresh `students` row.

    Raises:
        AccountError: If input is invalid or the backend refuses the account.
        BackendError: If writing profile rows fails.
    """
    if role not in ROLES:
        raise AccountError(f"Role must be one of: {', '.join(ROLES)}")
    if not EMAIL_PATTERN.match(email):
        raise AccountError("Invalid email format")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AccountError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not full_name.strip():
        raise AccountError("Full name is required")

    try:
        response = get_backend().auth.sign_up(
            {
                "email": email,
                "password": password,
                "options": {"data": {"full_name": full_name, "role": role}},
            }
        )
    except Exception as e:
        logger.error("accounts.sign_up_failed", email=email, error=str(e))
        raise AccountError(f"Failed to create account: {e}") from e

    if response.user is None:
        raise AccountError("Failed to create account")

    user = insert_user(response.user.id, email, full_name.strip(), role)
    if role == "student":
        insert_student(user.id, generate_student_number(), date.today().isoformat())

    logger.info("accounts.signed_up", user_id=user.id, role=role)
    return user


def sign_in(email: str, password: str) -> Session:
    """Password sign-in.

    Raises:
        AuthenticationError: If the backend rejects the credentials or the
            account has no profile row.
    """
    try:
        response = get_backend().auth.sign_in_with_password(
            {"email": email, "password": password}
        )
    except Exception as e:
        logger.warning("accounts.sign_in_failed", email=email, error=str(e))
        raise AuthenticationError("Invalid email or password") from e

    if response.user is None or response.session is None:
        raise AuthenticationError("Invalid email or password")

    user = get_user_by_id(response.user.id)
    if user is None:
        raise AuthenticationError("Account profile not found")

    return Session(user=user, access_token=response.session.access_token)


def resolve_session(access_token: str) -> Session:
    """Turn a bearer token into a Session.

    Raises:
        AuthenticationError: If the token is missing, expired or unknown.
    """
    if not access_token:
        raise AuthenticationError("Not authenticated")

    try:
        response = get_backend().auth.get_user(access_token)
    except Exception as e:
        raise AuthenticationError("Invalid or expired token") from e

    if response is None or response.user is None:
        raise AuthenticationError("Invalid or expired token")

    user = get_user_by_id(response.user.id)
    if user is None:
        raise AuthenticationError("Account profile not found")

    return Session(user=user, access_token=access_token)
