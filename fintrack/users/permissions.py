from typing import List, Set

from fastapi import Depends
from loguru import logger

from fintrack.core.exceptions import Forbidden
from fintrack.users.auth import get_current_user
from fintrack.users.models import User


def authorize_owner(acting_user_id: int, owner_id: int) -> None:
    """Ownership guard: only the owner may mutate a record."""
    if acting_user_id != owner_id:
        logger.warning(f"User {acting_user_id} denied access to a record owned by {owner_id}")
        raise Forbidden(f"User {acting_user_id} is not authorized to modify this record")


def role_required(allowed_roles: List[str]):
    allowed_set: Set[str] = set(r.strip().lower() for r in (allowed_roles or []))

    def wrapper(current_user: User = Depends(get_current_user)) -> User:
        role = (current_user.role or "user").strip().lower()

        # Admin bypass
        if role == "admin":
            return current_user

        if role not in allowed_set:
            raise Forbidden("Insufficient permissions")

        return current_user

    return wrapper
