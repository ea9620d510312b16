from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from fintrack.accounts.categories import Category, Period
from fintrack.core.clock import utcnow
from fintrack.database import Base


class Budget(Base):
    __tablename__ = "budgets"
    __table_args__ = (
        # one budget per category per user
        UniqueConstraint("user_id", "category", name="uq_budget_user_category"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    category = Column(Enum(Category, values_callable=lambda e: [m.value for m in e]), nullable=False)
    amount = Column(Float, nullable=False)
    period = Column(
        Enum(Period, values_callable=lambda e: [m.value for m in e]),
        default=Period.MONTHLY,
        nullable=False,
    )

    created_at = Column(DateTime, default=utcnow, nullable=False)

    owner = relationship("User", back_populates="budgets")
