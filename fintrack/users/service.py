"""Credential store: registration, authentication and the password lifecycle.

Identity lookups used for authentication skip inactive users. Plaintext
passwords and reset tokens are never persisted or logged; only the argon2
hash and the sha256 digest of the reset token reach the database.
"""

from datetime import timedelta
from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fintrack.config import settings
from fintrack.core.clock import to_epoch_seconds, utcnow
from fintrack.core.exceptions import (
    DuplicateEmail,
    InvalidCredentials,
    InvalidResetToken,
    NotFound,
    ValidationError,
)
from fintrack.core.validation import validate_fields
from fintrack.security.passwords import (
    generate_reset_token,
    hash_password,
    hash_reset_token,
    verify_password,
)
from fintrack.users import crud, schemas
from fintrack.users.models import User

# tolerance between the password write and the token issued right after it
PASSWORD_CHANGE_SKEW = timedelta(seconds=1)

# verified against when the email is unknown so both failure paths hash
_DUMMY_PASSWORD_HASH = hash_password("fintrack-dummy-password")


def _get_user_or_404(db: Session, user_id: int, include_inactive: bool = False) -> User:
    user = crud.get_user_by_id(db, user_id, include_inactive=include_inactive)
    if not user:
        raise NotFound("User not found")
    return user


def _set_password(user: User, new_password: str) -> None:
    user.hashed_password = hash_password(new_password)
    user.password_changed_at = utcnow() - PASSWORD_CHANGE_SKEW


# =========================
# Registration / login
# =========================
def register_user(db: Session, name: str, email: str, password: str) -> User:
    data = validate_fields(
        schemas.UserRegister,
        {"name": name, "email": email, "password": password},
    )

    # inactive accounts still own their address
    if crud.get_user_by_email(db, data.email, include_inactive=True):
        raise DuplicateEmail()

    try:
        user = crud.create_user(db, data.name, data.email, hash_password(data.password))
    except IntegrityError:
        db.rollback()
        raise DuplicateEmail()

    logger.info(f"User registered: id={user.id}")
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    user = crud.get_user_by_email(db, email or "")
    stored_hash = user.hashed_password if user else _DUMMY_PASSWORD_HASH
    password_ok = verify_password(password, stored_hash)
    # same error whether the account is missing or the password is wrong
    if not user or not password_ok:
        logger.warning("Authentication denied")
        raise InvalidCredentials()

    logger.info(f"User authenticated: id={user.id}")
    return user


# =========================
# Password lifecycle
# =========================
def change_password(db: Session, user_id: int, current_password: str, new_password: str) -> User:
    user = _get_user_or_404(db, user_id)

    if not verify_password(current_password, user.hashed_password):
        logger.warning(f"Password change denied for user id={user_id}")
        raise InvalidCredentials("Current password is incorrect")

    data = validate_fields(
        schemas.PasswordChange,
        {"current_password": current_password, "new_password": new_password},
    )
    _set_password(user, data.new_password)
    db.commit()
    db.refresh(user)

    logger.info(f"Password changed for user id={user.id}")
    return user


def changed_password_after(user: User, token_timestamp: int) -> bool:
    if not user.password_changed_at:
        return False
    return token_timestamp < to_epoch_seconds(user.password_changed_at)


def token_issued_before_password_change(db: Session, user_id: int, token_timestamp: int) -> bool:
    """True if a token issued at token_timestamp predates the last password change."""
    user = _get_user_or_404(db, user_id, include_inactive=True)
    return changed_password_after(user, token_timestamp)


def issue_reset_token(db: Session, user_id: int) -> str:
    """Store a hashed single-use reset token and return the plaintext once."""
    user = _get_user_or_404(db, user_id)

    token, digest = generate_reset_token()
    user.password_reset_token = digest
    user.password_reset_expires = utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    db.commit()

    logger.info(f"Password reset token issued for user id={user.id}")
    return token


def forgot_password(db: Session, email: str) -> Optional[str]:
    user = crud.get_user_by_email(db, email)
    if not user:
        logger.info("Password reset requested for unknown email")
        return None
    return issue_reset_token(db, user.id)


def reset_password(db: Session, token: str, new_password: str) -> User:
    data = validate_fields(schemas.ResetPassword, {"password": new_password})

    user = crud.get_user_by_reset_token(db, hash_reset_token(token or ""))
    if (
        not user
        or not user.password_reset_expires
        or user.password_reset_expires <= utcnow()
    ):
        raise InvalidResetToken()

    _set_password(user, data.password)
    user.password_reset_token = None
    user.password_reset_expires = None
    db.commit()
    db.refresh(user)

    logger.info(f"Password reset for user id={user.id}")
    return user


# =========================
# Profile
# =========================
def get_profile(db: Session, user_id: int) -> User:
    return _get_user_or_404(db, user_id)


def update_profile(db: Session, user_id: int, fields: dict) -> User:
    user = _get_user_or_404(db, user_id)
    data = validate_fields(schemas.UserUpdate, fields).model_dump(exclude_unset=True)

    if "name" in data and data["name"] is None:
        raise ValidationError("name: Please add a name")
    if "email" in data:
        if data["email"] is None:
            raise ValidationError("email: Please add an email")
        other = crud.get_user_by_email(db, data["email"], include_inactive=True)
        if other and other.id != user.id:
            raise DuplicateEmail()

    for key, value in data.items():
        setattr(user, key, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateEmail()
    db.refresh(user)

    logger.info(f"Profile updated for user id={user.id}")
    return user


def delete_account(db: Session, user_id: int) -> None:
    """Hard delete; owned expenses and budgets go with the account."""
    user = _get_user_or_404(db, user_id)
    crud.delete_user(db, user)
    logger.info(f"User deleted: id={user_id}")


def set_active(db: Session, user_id: int, active: bool) -> User:
    user = _get_user_or_404(db, user_id, include_inactive=True)
    user.is_active = active
    db.commit()
    db.refresh(user)

    logger.info(f"User id={user.id} {'activated' if active else 'deactivated'}")
    return user
