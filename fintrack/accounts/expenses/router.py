from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fintrack.accounts.categories import Category
from fintrack.core.responses import Envelope, ListEnvelope, envelope, list_envelope
from fintrack.database import get_db
from fintrack.users.auth import get_current_user
from fintrack.users.models import User

from . import schemas
from .service import expense_repository

# every route below resolves the caller before touching the repository
router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=ListEnvelope[schemas.ExpenseOut])
def list_expenses(
    category: Optional[Category] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expenses = expense_repository.list(
        db,
        current_user.id,
        category=category,
        start_date=start_date,
        end_date=end_date,
    )
    return list_envelope(expenses)


@router.post("", response_model=Envelope[schemas.ExpenseOut], status_code=status.HTTP_201_CREATED)
def create_expense(
    expense: schemas.ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(expense_repository.create(db, current_user.id, expense.model_dump(exclude_unset=True)))


@router.get("/{expense_id}", response_model=Envelope[schemas.ExpenseOut])
def get_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(expense_repository.get(db, current_user.id, expense_id))


@router.put("/{expense_id}", response_model=Envelope[schemas.ExpenseOut])
def update_expense(
    expense_id: int,
    expense: schemas.ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(expense_repository.update(
        db, current_user.id, expense_id, expense.model_dump(exclude_unset=True)
    ))


@router.delete("/{expense_id}", response_model=Envelope[dict])
def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expense_repository.delete(db, current_user.id, expense_id)
    return envelope({})
