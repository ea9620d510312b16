from typing import Optional

from sqlalchemy.orm import Session

from fintrack.users.models import User


def _scoped(db: Session, include_inactive: bool):
    query = db.query(User)
    if not include_inactive:
        query = query.filter(User.is_active == True)  # noqa: E712
    return query


def get_user_by_id(db: Session, user_id: int, include_inactive: bool = False) -> Optional[User]:
    return _scoped(db, include_inactive).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str, include_inactive: bool = False) -> Optional[User]:
    return _scoped(db, include_inactive).filter(User.email == email.strip().lower()).first()


def get_user_by_reset_token(db: Session, token_hash: str, include_inactive: bool = False) -> Optional[User]:
    return _scoped(db, include_inactive).filter(User.password_reset_token == token_hash).first()


def create_user(db: Session, name: str, email: str, hashed_password: str, role: str = "user") -> User:
    new_user = User(
        name=name,
        email=email.strip().lower(),
        hashed_password=hashed_password,
        role=role,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    return new_user


def delete_user(db: Session, user: User) -> None:
    db.delete(user)
    db.commit()
