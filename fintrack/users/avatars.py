import os
import re
import time
from pathlib import Path

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fintrack.config import settings
from fintrack.core.exceptions import NotFound, PayloadTooLarge, UnsupportedMediaType
from fintrack.users import crud

AVATAR_SUBDIR = "avatars"
PUBLIC_PREFIX = "/uploads"
SAFE_EXTENSION = re.compile(r"^\.[a-z0-9]{1,5}$")


def avatar_dir() -> Path:
    path = Path(settings.UPLOAD_DIR) / AVATAR_SUBDIR
    path.mkdir(parents=True, exist_ok=True)
    return path


def store_avatar(
    db: Session,
    user_id: int,
    file_bytes: bytes,
    mime_type: str | None,
    filename: str | None = None,
) -> str:
    """Persist an avatar image and point the user's profile at it.

    Returns the public reference path, e.g. /uploads/avatars/user-3-1700000000000.png
    """
    if not mime_type or not mime_type.lower().startswith("image"):
        raise UnsupportedMediaType()
    if len(file_bytes) > settings.AVATAR_MAX_BYTES:
        raise PayloadTooLarge(f"Image must be at most {settings.AVATAR_MAX_BYTES // (1024 * 1024)}MB")

    user = crud.get_user_by_id(db, user_id)
    if not user:
        raise NotFound("User not found")

    ext = os.path.splitext(filename or "")[1].lower()
    if not SAFE_EXTENSION.match(ext):
        ext = ""
    # user id plus millisecond clock keeps names unique per upload
    stored_name = f"user-{user_id}-{int(time.time() * 1000)}{ext}"
    stored_path = avatar_dir() / stored_name
    stored_path.write_bytes(file_bytes)

    avatar_url = f"{PUBLIC_PREFIX}/{AVATAR_SUBDIR}/{stored_name}"
    user.avatar = avatar_url
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        # unreferenced once the commit fails
        stored_path.unlink(missing_ok=True)
        logger.error(f"Avatar for user id={user_id} discarded after failed commit")
        raise
    db.refresh(user)

    logger.info(f"Avatar stored for user id={user_id}: {stored_name}")
    return avatar_url
