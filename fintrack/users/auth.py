from datetime import timedelta
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from sqlalchemy.orm import Session

from fintrack.config import settings
from fintrack.core.clock import to_epoch_seconds, utcnow
from fintrack.core.exceptions import Unauthenticated
from fintrack.database import get_db
from fintrack.users import crud
from fintrack.users.models import User
from fintrack.users.service import changed_password_after

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    now = utcnow()
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload: Dict[str, Any] = {
        "sub": str(user.id),
        "iat": to_epoch_seconds(now),
        "exp": to_epoch_seconds(expire),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"require": ["sub", "iat", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Token has expired")
    except jwt.InvalidTokenError:
        raise Unauthenticated("Invalid token")

    try:
        payload["sub"] = int(payload["sub"])
        payload["iat"] = int(payload["iat"])
    except (TypeError, ValueError):
        raise Unauthenticated("Invalid token")
    return payload


def resolve_identity(db: Session, token: Optional[str]) -> User:
    """Turn a bearer token into an active identity or raise Unauthenticated."""
    if not token:
        raise Unauthenticated()

    payload = decode_token(token)
    user = crud.get_user_by_id(db, payload["sub"])
    if not user:
        logger.warning(f"Token for missing or inactive user id={payload['sub']}")
        raise Unauthenticated("User no longer exists")

    if changed_password_after(user, payload["iat"]):
        logger.warning(f"Stale token rejected for user id={user.id}")
        raise Unauthenticated("Password recently changed, please log in again")

    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    token = credentials.credentials if credentials else None
    return resolve_identity(db, token)
