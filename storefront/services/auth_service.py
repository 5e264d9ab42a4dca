# storefront/services/auth_service.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.core.config import Settings
from storefront.core.errors import AuthError, ConflictError
from storefront.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import LoginRequest, SignupRequest

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """
    Business logic for signup, login and token verification.

    Responsibilities:
      - hash passwords (bcrypt) and check them on login
      - issue and verify bearer tokens (JWT, no server-side revocation)
      - keep login failures indistinguishable (no user enumeration)
    """

    def __init__(
        self,
        session: Session,
        settings: Settings,
        repo: UserRepository | None = None,
    ):
        self.session = session
        self.settings = settings
        self.repo = repo or UserRepository()

    def _issue_token(self, user: User) -> str:
        return create_access_token(user.id, self.settings)

    def signup(self, payload: SignupRequest) -> tuple[str, User]:
        """
        Register a new user and return (token, user).

        Raises:
            ConflictError: if the email is already registered.
        """
        if self.repo.get_by_email(self.session, payload.email):
            raise ConflictError("User already exists with this email")

        user = User(
            name=payload.name,
            email=payload.email,
            password_hash=hash_password(payload.password, self.settings.BCRYPT_ROUNDS),
        )
        try:
            user = self.repo.create(self.session, user)
        except IntegrityError:
            # lost a race against a concurrent signup with the same email
            self.session.rollback()
            raise ConflictError("User already exists with this email")

        logger.info("User %s signed up", user.id)
        return self._issue_token(user), user

    def login(self, payload: LoginRequest) -> tuple[str, User]:
        """
        Check credentials and return (token, user).

        Raises:
            AuthError: same message for unknown email and wrong password.
        """
        user = self.repo.get_by_email(self.session, payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            raise AuthError(INVALID_CREDENTIALS)

        logger.info("User %s logged in", user.id)
        return self._issue_token(user), user

    def verify_token(self, token: str) -> int:
        """
        Validate signature and expiry, return the bound user id.

        Raises:
            AuthError: if the token is invalid, expired or has no usable subject.
        """
        claims = decode_access_token(token, self.settings)
        sub = claims.get("sub")
        try:
            return int(sub)
        except (TypeError, ValueError):
            raise AuthError("Invalid or expired token")

    def get_authenticated_user(self, token: str) -> User:
        user_id = self.verify_token(token)
        user = self.repo.get_by_id(self.session, user_id)
        if user is None:
            raise AuthError("Invalid token: user not found")
        return user
