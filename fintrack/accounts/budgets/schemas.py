from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from fintrack.accounts.categories import Category, Period


class BudgetCreate(BaseModel):
    category: Category
    amount: float = Field(gt=0, allow_inf_nan=False)
    period: Period = Period.MONTHLY


class BudgetUpdate(BaseModel):
    category: Optional[Category] = None
    amount: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    period: Optional[Period] = None


class BudgetOut(BaseModel):
    id: int
    user_id: int
    category: Category
    amount: float
    period: Period
    created_at: datetime

    class Config:
        from_attributes = True
