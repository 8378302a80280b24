"""Identity service: account creation, authentication and profile lookup."""

import logging
from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from recipes_api.config import Settings
from recipes_api.exceptions import (
    AuthFailedError,
    EmailInUseError,
    InvalidEmailError,
    MissingFieldsError,
    NotFoundError,
    StorageError,
)
from recipes_api.models.mixins import parse_id
from recipes_api.models.user import User
from recipes_api.services.auth import PasswordHasher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Public view of a user. The password hash is never part of it."""

    id: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(id=user.id, email=user.email)


def is_valid_email(email: str) -> bool:
    """Check that an email address is well formed (no DNS lookup)."""
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


class IdentityService:
    """Service for user identity operations."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.hasher = PasswordHasher(settings)

    def get_user_by_email(self, email: str) -> User | None:
        """Get a user by email."""
        try:
            return self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up user by email: {e}")
            raise StorageError() from e

    def create_account(self, email: str | None, password: str | None) -> Identity:
        """Create a new user.

        The lookup below gives a friendly error for the common case; the
        unique constraint on users.email is what rejects concurrent duplicates.
        """
        if not email or not password:
            raise MissingFieldsError()
        if not is_valid_email(email):
            raise InvalidEmailError(details={"email": email})
        if self.get_user_by_email(email) is not None:
            raise EmailInUseError()

        user = User(email=email, password_hash=self.hasher.hash(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise EmailInUseError() from None
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create user: {e}")
            raise StorageError("Unable to create user") from e

        self.db.refresh(user)
        logger.info(f"Created user {user.id}")
        return Identity.from_user(user)

    def authenticate(self, email: str | None, password: str | None) -> Identity:
        """Authenticate a user by email and password.

        Unknown email and wrong password fail identically.
        """
        if not email or not password:
            raise MissingFieldsError()

        user = self.get_user_by_email(email)
        if user is None:
            self.hasher.dummy_verify()
            logger.info("Failed login: unknown email")
            raise AuthFailedError()
        if not self.hasher.verify(password, user.password_hash):
            logger.info(f"Failed login: bad password for user {user.id}")
            raise AuthFailedError()
        return Identity.from_user(user)

    def get_profile(self, user_id: str) -> Identity:
        """Get a user by id."""
        user_id = parse_id(user_id)
        try:
            user = self.db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load user {user_id}: {e}")
            raise StorageError() from e
        if user is None:
            raise NotFoundError("User", user_id)
        return Identity.from_user(user)
