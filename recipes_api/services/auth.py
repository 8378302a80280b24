"""Authentication service for JWT and password handling.

Tokens are stateless HMAC-signed JWTs carrying the subject id and email. They
are never persisted and cannot be revoked before they expire.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from recipes_api.config import Settings
from recipes_api.exceptions import (
    ForbiddenError,
    InvalidIdError,
    SigningError,
    TokenExpiredError,
    UnauthenticatedError,
)
from recipes_api.models.mixins import parse_id

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a session token."""

    subject_id: str
    subject_email: str | None
    issued_at: datetime | None
    expires_at: datetime


class PasswordHasher:
    """Salted hashing of password plus the server-side salt.

    bcrypt_sha256 pre-hashes its input, so bcrypt's 72 byte limit never
    truncates the password or drops the salt.
    """

    def __init__(self, settings: Settings):
        self.salt = settings.password_salt
        self.context = CryptContext(
            schemes=["bcrypt_sha256"],
            deprecated="auto",
            bcrypt_sha256__rounds=settings.bcrypt_rounds,
        )

    def hash(self, password: str) -> str:
        """Hash a password."""
        return self.context.hash(password + self.salt)

    def verify(self, password: str, hashed_password: str) -> bool:
        """Verify a password against its hash in constant time."""
        return self.context.verify(password + self.salt, hashed_password)

    def dummy_verify(self) -> None:
        """Spend the same time as a real verify when there is no user to check."""
        self.context.dummy_verify()


class TokenIssuer:
    """Mints signed, time-limited session tokens."""

    def __init__(self, settings: Settings, clock: Clock = utc_now):
        self.secret = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.lifetime = timedelta(minutes=settings.jwt_expiration_minutes)
        self.clock = clock

    def issue(self, subject_id: str, subject_email: str) -> str:
        """Create a JWT access token for the given identity.

        Raises SigningError if no secret is configured or signing fails.
        """
        if not self.secret:
            logger.error("Cannot sign token: no JWT secret configured")
            raise SigningError()

        issued_at = self.clock()
        to_encode = {
            "sub": subject_id,
            "email": subject_email,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        try:
            return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)
        except JWTError as e:
            logger.error(f"Failed to sign token for user {subject_id}: {e}")
            raise SigningError() from e


class TokenVerifier:
    """Verifies session tokens and gates access to an owner's resources."""

    def __init__(self, settings: Settings, clock: Clock = utc_now):
        self.secret = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.clock = clock

    def verify(self, raw_token: str | None) -> TokenClaims:
        """Check presence, algorithm, signature and expiry of a token."""
        if not raw_token:
            raise UnauthenticatedError("No token on request")
        if not self.secret:
            logger.error("Cannot verify token: no JWT secret configured")
            raise UnauthenticatedError()

        try:
            header = jwt.get_unverified_header(raw_token)
        except JWTError:
            raise UnauthenticatedError() from None

        # Reject "none" and any algorithm other than the configured HMAC one
        if header.get("alg") != self.algorithm:
            logger.warning(f"Rejected token signed with unexpected algorithm {header.get('alg')!r}")
            raise UnauthenticatedError()

        # Expiry is checked below against our own clock, after the signature
        try:
            payload = jwt.decode(
                raw_token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            raise UnauthenticatedError() from None

        subject_id = payload.get("sub")
        expires_at = payload.get("exp")
        if not subject_id or not isinstance(expires_at, int | float):
            raise UnauthenticatedError()

        expires_at = datetime.fromtimestamp(expires_at, UTC)
        if self.clock() >= expires_at:
            raise TokenExpiredError()

        issued_at = payload.get("iat")
        return TokenClaims(
            subject_id=subject_id,
            subject_email=payload.get("email"),
            issued_at=datetime.fromtimestamp(issued_at, UTC) if issued_at is not None else None,
            expires_at=expires_at,
        )

    def authorize(self, raw_token: str | None, claimed_owner_id: str) -> str:
        """Allow the request only if the token's subject owns the addressed resources.

        Returns the subject id for downstream use.
        """
        claims = self.verify(raw_token)

        try:
            owner_id = parse_id(claimed_owner_id)
        except InvalidIdError:
            owner_id = None

        if owner_id != claims.subject_id:
            logger.warning(
                f"Forbidden: token subject {claims.subject_id} addressed owner {claimed_owner_id}"
            )
            raise ForbiddenError()
        return claims.subject_id
