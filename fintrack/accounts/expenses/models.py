from sqlalchemy import Boolean, Column, DateTime, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from fintrack.accounts.categories import Category, Period
from fintrack.core.clock import utcnow
from fintrack.database import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    amount = Column(Float, nullable=False)
    description = Column(String(500), nullable=False)
    category = Column(Enum(Category, values_callable=lambda e: [m.value for m in e]), nullable=False)
    date = Column(DateTime, default=utcnow, nullable=False)

    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_interval = Column(Enum(Period, values_callable=lambda e: [m.value for m in e]), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    owner = relationship("User", back_populates="expenses")
