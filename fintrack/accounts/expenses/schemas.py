from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from fintrack.accounts.categories import Category, Period
from fintrack.core.clock import to_naive_utc


# =========================
# Base
# =========================
class ExpenseBase(BaseModel):
    amount: float = Field(gt=0, allow_inf_nan=False)
    description: str = Field(min_length=1, max_length=500)
    category: Category
    date: Optional[datetime] = None
    is_recurring: bool = Field(default=False, validation_alias="isRecurring")
    recurring_interval: Optional[Period] = Field(default=None, validation_alias="recurringInterval")

    @field_validator("description")
    @classmethod
    def strip_description(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Please add a description")
        return v

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)

    class Config:
        populate_by_name = True


# =========================
# Create
# =========================
class ExpenseCreate(ExpenseBase):
    pass


# =========================
# Update
# =========================
class ExpenseUpdate(BaseModel):
    amount: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    category: Optional[Category] = None
    date: Optional[datetime] = None
    is_recurring: Optional[bool] = Field(default=None, validation_alias="isRecurring")
    recurring_interval: Optional[Period] = Field(default=None, validation_alias="recurringInterval")

    @field_validator("description")
    @classmethod
    def strip_description(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Please add a description")
        return v

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)

    class Config:
        populate_by_name = True


# =========================
# Output
# =========================
class ExpenseOut(BaseModel):
    id: int
    user_id: int
    amount: float
    description: str
    category: Category
    date: datetime
    is_recurring: bool
    recurring_interval: Optional[Period] = None
    created_at: datetime

    class Config:
        from_attributes = True
