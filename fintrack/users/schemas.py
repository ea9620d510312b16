import re
from datetime import datetime
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator

from fintrack.config import settings

PHONE_PATTERN = re.compile(r"^[+]?[\d\s-]{8,}$")


def clean_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Please add a name")
    if len(v) > 50:
        raise ValueError("Name cannot exceed 50 characters")
    return v


def clean_email(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if len(v) > 100:
        raise ValueError("Email cannot exceed 100 characters")
    return v.strip().lower()


def check_password(v: str) -> str:
    if len(v) < settings.PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters")
    return v


# -------- AUTH --------
class UserRegister(BaseModel):
    name: str
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return clean_name(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return clean_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return check_password(v)


class UserLogin(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return clean_email(v)


class ForgotPassword(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return clean_email(v)


class ResetPassword(BaseModel):
    password: str

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return check_password(v)


# -------- PROFILE --------
class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return clean_name(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return clean_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v is None:
            return v
        v = v.strip()
        if v and not PHONE_PATTERN.match(v):
            raise ValueError(f"{v} is not a valid phone number!")
        return v or None


class PasswordChange(BaseModel):
    current_password: str = Field(validation_alias=AliasChoices("currentPassword", "current_password"))
    new_password: str = Field(validation_alias=AliasChoices("newPassword", "new_password"))

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v):
        return check_password(v)


class ActiveUpdate(BaseModel):
    active: bool


class UserDisplaySchema(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    avatar: str = ""
    role: Literal["user", "admin"] = "user"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AuthPayload(BaseModel):
    token: str
    user: UserDisplaySchema


class AvatarPayload(BaseModel):
    avatar_url: str = Field(serialization_alias="avatarUrl")
    user: UserDisplaySchema


class ResetTokenPayload(BaseModel):
    message: str
    reset_token: Optional[str] = Field(default=None, serialization_alias="resetToken")
