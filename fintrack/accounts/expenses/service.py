from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.orm import Query

from fintrack.accounts.categories import Category
from fintrack.accounts.repository import OwnedRepository
from fintrack.core.exceptions import ValidationError

from . import models, schemas


class ExpenseRepository(OwnedRepository[models.Expense]):
    model = models.Expense
    create_schema = schemas.ExpenseCreate
    update_schema = schemas.ExpenseUpdate
    label = "expense"

    def apply_filters(
        self,
        query: Query,
        category: Optional[Category] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Query:
        if category:
            query = query.filter(models.Expense.category == category)

        if start_date:
            query = query.filter(models.Expense.date >= datetime.combine(start_date, time.min))

        if end_date:
            # Move to next day midnight, then use <
            end_dt = datetime.combine(end_date, time.min) + timedelta(days=1)
            query = query.filter(models.Expense.date < end_dt)

        return query

    def check_state(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        if values.get("is_recurring"):
            if not values.get("recurring_interval"):
                raise ValidationError("recurring_interval: required for recurring expenses")
            return {}
        # an interval only means something on a recurring expense
        if values.get("recurring_interval") is not None:
            return {"recurring_interval": None}
        return {}


expense_repository = ExpenseRepository()
