import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from config import RESET_TOKEN_TTL_MINUTES, TOKEN_TTL_HOURS
from models.db_models import AuthToken, User
from services import storage_service

logger = logging.getLogger(__name__)

_SCRYPT_PARAMS = {"n": 2 ** 14, "r": 8, "p": 1, "dklen": 64}


def hash_password(password: str) -> str:
    """Returns "<hex hash>.<hex salt>"."""
    salt = secrets.token_hex(16)
    digest = hashlib.scrypt(password.encode(), salt=salt.encode(), **_SCRYPT_PARAMS)
    return f"{digest.hex()}.{salt}"


def verify_password(supplied: str, stored: str) -> bool:
    try:
        hashed, salt = stored.split(".")
    except ValueError:
        return False
    digest = hashlib.scrypt(supplied.encode(), salt=salt.encode(), **_SCRYPT_PARAMS)
    return hmac.compare_digest(digest.hex(), hashed)


def register_user(db: Session, username: str, email: str, password: str, full_name: str, role: str = "user") -> User:
    user = storage_service.create_user(
        db,
        username=username,
        email=email,
        password=hash_password(password),
        full_name=full_name,
        role=role,
        is_active=True,
    )
    logger.info(f"Registered user {username} ({role})")
    return user


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    user = storage_service.get_user_by_username(db, username)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password):
        return None
    return user


def issue_token(db: Session, user: User) -> AuthToken:
    expires_at = datetime.utcnow() + timedelta(hours=TOKEN_TTL_HOURS)
    return storage_service.create_auth_token(db, user.id, secrets.token_hex(32), expires_at)


def resolve_token(db: Session, token: str) -> Optional[User]:
    """User behind a bearer token, or None if the token is unknown, expired or the user is inactive."""
    record = storage_service.get_auth_token(db, token)
    if not record:
        return None
    if record.expires_at < datetime.utcnow():
        storage_service.delete_auth_token(db, token)
        return None
    user = storage_service.get_user(db, record.user_id)
    if not user or not user.is_active:
        return None
    return user


def revoke_token(db: Session, token: str) -> None:
    storage_service.delete_auth_token(db, token)


def request_password_reset(db: Session, email: str) -> Optional[str]:
    """Creates a reset token for the account with this email; None when there is no such account."""
    user = storage_service.get_user_by_email(db, email)
    if not user:
        return None
    token = secrets.token_hex(32)
    expires_at = datetime.utcnow() + timedelta(minutes=RESET_TOKEN_TTL_MINUTES)
    storage_service.create_password_reset(db, user.id, token, expires_at)
    logger.info(f"Password reset requested for user {user.id}")
    return token


def reset_password(db: Session, token: str, new_password: str) -> bool:
    reset = storage_service.get_password_reset(db, token)
    if not reset or reset.expires_at < datetime.utcnow():
        return False
    storage_service.update_user(db, reset.user_id, password=hash_password(new_password))
    storage_service.mark_password_reset_used(db, reset.id)
    return True


def ensure_admin(db: Session, username: str, email: str, password: str) -> User:
    user = storage_service.get_user_by_username(db, username)
    if user:
        return user
    return register_user(db, username, email, password, full_name="Administrator", role="admin")
