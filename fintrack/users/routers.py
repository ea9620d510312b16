from fastapi import APIRouter, Depends, File, UploadFile, status
from loguru import logger
from sqlalchemy.orm import Session

from fintrack.config import settings
from fintrack.core.responses import Envelope, envelope
from fintrack.database import get_db
from fintrack.users import avatars, schemas, service
from fintrack.users.auth import create_access_token, get_current_user
from fintrack.users.models import User
from fintrack.users.permissions import role_required

auth_router = APIRouter()
router = APIRouter(dependencies=[Depends(get_current_user)])


def _auth_payload(user: User) -> dict:
    return {"token": create_access_token(user), "user": user}


# ===========================
# Auth Endpoints
# ===========================

@auth_router.post(
    "/register",
    response_model=Envelope[schemas.AuthPayload],
    status_code=status.HTTP_201_CREATED,
)
def register(user: schemas.UserRegister, db: Session = Depends(get_db)):
    new_user = service.register_user(db, user.name, user.email, user.password)
    return envelope(_auth_payload(new_user))


@auth_router.post("/login", response_model=Envelope[schemas.AuthPayload])
def login(credentials: schemas.UserLogin, db: Session = Depends(get_db)):
    user = service.authenticate_user(db, credentials.email, credentials.password)
    return envelope(_auth_payload(user))


@auth_router.post("/logout", response_model=Envelope[dict])
def logout(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards its copy."""
    logger.info(f"User logged out: id={current_user.id}")
    return envelope({})


@auth_router.post("/forgot-password", response_model=Envelope[schemas.ResetTokenPayload])
def forgot_password(body: schemas.ForgotPassword, db: Session = Depends(get_db)):
    token = service.forgot_password(db, body.email)
    data = {"message": "If that email is registered, a reset token has been issued"}
    if token and settings.EXPOSE_RESET_TOKEN:
        data["reset_token"] = token
    return envelope(data)


@auth_router.put("/reset-password/{token}", response_model=Envelope[schemas.AuthPayload])
def reset_password(token: str, body: schemas.ResetPassword, db: Session = Depends(get_db)):
    user = service.reset_password(db, token, body.password)
    return envelope(_auth_payload(user))


# ===========================
# Current user
# ===========================

@router.get("/me", response_model=Envelope[schemas.UserDisplaySchema])
def get_current_user_info(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(service.get_profile(db, current_user.id))


@router.put("/me", response_model=Envelope[schemas.UserDisplaySchema])
def update_current_user(
    updated_user: schemas.UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = service.update_profile(db, current_user.id, updated_user.model_dump(exclude_unset=True))
    return envelope(user)


@router.delete("/me", response_model=Envelope[dict])
def delete_current_user(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service.delete_account(db, current_user.id)
    return envelope({})


@router.put("/me/password", response_model=Envelope[schemas.AuthPayload])
def update_password(
    body: schemas.PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = service.change_password(db, current_user.id, body.current_password, body.new_password)
    # the old token is now stale, hand back a fresh one
    return envelope(_auth_payload(user))


@router.post("/me/avatar", response_model=Envelope[schemas.AvatarPayload])
def upload_avatar(
    avatar: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # one byte past the ceiling is enough to flag an oversize file
    contents = avatar.file.read(settings.AVATAR_MAX_BYTES + 1)
    avatar_url = avatars.store_avatar(
        db,
        current_user.id,
        contents,
        avatar.content_type,
        avatar.filename,
    )
    db.refresh(current_user)
    return envelope({"avatar_url": avatar_url, "user": current_user})


# ===========================
# Admin
# ===========================

@router.put("/{user_id}/active", response_model=Envelope[schemas.UserDisplaySchema])
def set_user_active(
    user_id: int,
    body: schemas.ActiveUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required(["admin"])),
):
    return envelope(service.set_active(db, user_id, body.active))
