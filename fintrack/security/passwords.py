import hashlib
import secrets

from passlib.context import CryptContext

from fintrack.config import settings

pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__rounds=settings.ARGON2_ROUNDS,
    argon2__memory_cost=settings.ARGON2_MEMORY_COST,
)


def hash_password(plain_password: str) -> str:
    """Return Argon2 hash for plain_password."""
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, stored_hash: str) -> bool:
    """Verify a candidate password against a stored Argon2 hash."""
    if not plain_password or not stored_hash:
        return False
    try:
        return pwd_context.verify(plain_password, stored_hash)
    except (ValueError, TypeError):
        # unrecognised or corrupt hash
        return False


def generate_reset_token() -> tuple[str, str]:
    """Return (plaintext, digest). Only the digest is ever stored."""
    token = secrets.token_hex(32)
    return token, hash_reset_token(token)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
