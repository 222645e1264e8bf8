# app/repositories/user_repo.py
import uuid

from sqlmodel import Session, col, select

from app.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Used by the auth gate (lookup / auto-provision) and the admin API.
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def list_users(self, session: Session, skip: int = 0, limit: int = 50) -> list[User]:
        """Paginated user listing, oldest first."""
        stmt = select(User).order_by(col(User.created_at)).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
