"""Owner-scoped CRUD shared by every resource a user owns.

Reads are filtered by owner, so a record that belongs to someone else is
indistinguishable from one that does not exist. Mutations additionally pass
through the ownership guard before anything is written, and any integrity
failure is rolled back so a rejected update never partially applies.
"""

from typing import Any, Dict, Generic, List, Mapping, Type, TypeVar

from loguru import logger
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from fintrack.core.exceptions import FinanceTrackerError, NotFound, ValidationError
from fintrack.core.validation import validate_fields
from fintrack.users.permissions import authorize_owner

ModelT = TypeVar("ModelT")


class OwnedRepository(Generic[ModelT]):
    model: Type[ModelT]
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    label: str = "record"

    # =========================
    # Hooks
    # =========================
    def apply_filters(self, query: Query, **filters) -> Query:
        return query

    def check_state(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Cross-field rules over the full post-change values; returns extra changes."""
        return {}

    def integrity_error(self, exc: IntegrityError) -> FinanceTrackerError:
        return ValidationError(f"Could not save {self.label}")

    # =========================
    # Helpers
    # =========================
    def _owned(self, db: Session, owner_id: int) -> Query:
        return db.query(self.model).filter(self.model.user_id == owner_id)

    def _commit(self, db: Session) -> None:
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise self.integrity_error(exc) from exc

    def _reject_nulls(self, changes: Mapping[str, Any]) -> None:
        columns = self.model.__table__.columns
        for key, value in changes.items():
            if value is None and key in columns and not columns[key].nullable:
                raise ValidationError(f"{key}: field may not be empty")

    def _current_values(self, record: ModelT) -> Dict[str, Any]:
        return {column.name: getattr(record, column.name) for column in self.model.__table__.columns}

    # =========================
    # Operations
    # =========================
    def list(self, db: Session, owner_id: int, **filters) -> List[ModelT]:
        query = self.apply_filters(self._owned(db, owner_id), **filters)
        return query.order_by(self.model.id.asc()).all()

    def get(self, db: Session, owner_id: int, record_id: int) -> ModelT:
        record = self._owned(db, owner_id).filter(self.model.id == record_id).first()
        if not record:
            raise NotFound(f"No {self.label} found with id of {record_id}")
        return record

    def create(self, db: Session, owner_id: int, fields: Mapping[str, Any]) -> ModelT:
        data = validate_fields(self.create_schema, fields).model_dump(exclude_none=True)
        data.update(self.check_state(data))

        # owner always comes from the authenticated caller
        data["user_id"] = owner_id
        record = self.model(**data)
        db.add(record)
        self._commit(db)
        db.refresh(record)

        logger.info(f"{self.label.capitalize()} {record.id} created by user {owner_id}")
        return record

    def update(self, db: Session, owner_id: int, record_id: int, fields: Mapping[str, Any]) -> ModelT:
        record = self.get(db, owner_id, record_id)
        authorize_owner(owner_id, record.user_id)

        changes = validate_fields(self.update_schema, fields).model_dump(exclude_unset=True)
        self._reject_nulls(changes)

        merged = {**self._current_values(record), **changes}
        changes.update(self.check_state(merged))

        for key, value in changes.items():
            setattr(record, key, value)
        self._commit(db)
        db.refresh(record)

        logger.info(f"{self.label.capitalize()} {record.id} updated by user {owner_id}")
        return record

    def delete(self, db: Session, owner_id: int, record_id: int) -> None:
        record = self.get(db, owner_id, record_id)
        authorize_owner(owner_id, record.user_id)

        db.delete(record)
        self._commit(db)
        logger.info(f"{self.label.capitalize()} {record_id} deleted by user {owner_id}")
