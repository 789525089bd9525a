from typing import Optional, Protocol

from sqlalchemy.orm import Session

from app.models.user import User


class CredentialStore(Protocol):
    def find_by_email(self, email: str) -> Optional[User]: ...

    def find_by_id(self, user_id: int) -> Optional[User]: ...

    def create(self, user: User) -> User: ...

    def save(self, user: User) -> User: ...


class SqlAlchemyCredentialStore:
    """User persistence backed by a SQLAlchemy session.

    ``create`` and ``save`` each end in a single commit, so every state
    transition of a user record is written as one update.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def create(self, user: User) -> User:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def save(self, user: User) -> User:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
