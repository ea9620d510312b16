from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fintrack.accounts.categories import Category
from fintrack.core.responses import Envelope, ListEnvelope, envelope, list_envelope
from fintrack.database import get_db
from fintrack.users.auth import get_current_user
from fintrack.users.models import User

from . import schemas
from .service import budget_repository

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=ListEnvelope[schemas.BudgetOut])
def list_budgets(
    category: Optional[Category] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return list_envelope(budget_repository.list(db, current_user.id, category=category))


@router.post("", response_model=Envelope[schemas.BudgetOut], status_code=status.HTTP_201_CREATED)
def create_budget(
    budget: schemas.BudgetCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(budget_repository.create(db, current_user.id, budget.model_dump(exclude_unset=True)))


@router.get("/{budget_id}", response_model=Envelope[schemas.BudgetOut])
def get_budget(
    budget_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(budget_repository.get(db, current_user.id, budget_id))


@router.put("/{budget_id}", response_model=Envelope[schemas.BudgetOut])
def update_budget(
    budget_id: int,
    budget: schemas.BudgetUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope(budget_repository.update(
        db, current_user.id, budget_id, budget.model_dump(exclude_unset=True)
    ))


@router.delete("/{budget_id}", response_model=Envelope[dict])
def delete_budget(
    budget_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    budget_repository.delete(db, current_user.id, budget_id)
    return envelope({})
