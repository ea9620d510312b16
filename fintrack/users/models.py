from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from fintrack.accounts.budgets.models import Budget
from fintrack.accounts.expenses.models import Expense
from fintrack.core.clock import utcnow
from fintrack.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    phone = Column(String(30), nullable=True)
    avatar = Column(String, default="", nullable=False)
    role = Column(String(20), default="user", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    password_changed_at = Column(DateTime, nullable=True)
    password_reset_token = Column(String(64), nullable=True, index=True)
    password_reset_expires = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    expenses = relationship(
        Expense,
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    budgets = relationship(
        Budget,
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
