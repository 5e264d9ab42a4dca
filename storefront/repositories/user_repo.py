# storefront/repositories/user_repo.py
from sqlmodel import Session, select

from storefront.models.user import User


class UserRepository:
    """
    Persistence for accounts. Emails are stored lower-cased, so lookups
    normalize the address the same way.
    """

    def get_by_id(self, session: Session, user_id: int) -> User | None:
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Account registered under `email` (case-insensitive), if any."""
        stmt = select(User).where(User.email == email.strip().lower())
        return session.exec(stmt).first()

    def create(self, session: Session, user: User) -> User:
        """
        Insert the account and reload it with its generated id.

        Raises IntegrityError if the email is already taken.
        """
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
