from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query

from fintrack.accounts.categories import Category
from fintrack.accounts.repository import OwnedRepository
from fintrack.core.exceptions import DuplicateCategory, FinanceTrackerError

from . import models, schemas


# postgres reports the constraint name, sqlite the column list
UNIQUE_CATEGORY_MARKERS = (
    "uq_budget_user_category",
    "budgets.user_id, budgets.category",
)


class BudgetRepository(OwnedRepository[models.Budget]):
    model = models.Budget
    create_schema = schemas.BudgetCreate
    update_schema = schemas.BudgetUpdate
    label = "budget"

    def apply_filters(self, query: Query, category: Optional[Category] = None) -> Query:
        if category:
            query = query.filter(models.Budget.category == category)
        return query

    def integrity_error(self, exc: IntegrityError) -> FinanceTrackerError:
        message = str(exc.orig)
        if any(marker in message for marker in UNIQUE_CATEGORY_MARKERS):
            return DuplicateCategory()
        return super().integrity_error(exc)


budget_repository = BudgetRepository()
