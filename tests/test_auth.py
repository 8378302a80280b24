"""Token issuer, token verifier and password hashing tests."""

import base64
import json
import uuid
from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from recipes_api.config import Settings
from recipes_api.exceptions import (
    ForbiddenError,
    SigningError,
    TokenExpiredError,
    UnauthenticatedError,
)
from recipes_api.services.auth import PasswordHasher, TokenIssuer, TokenVerifier

USER_ID = "0123456789abcdef0123456789abcdef"
OTHER_ID = "fedcba9876543210fedcba9876543210"
EMAIL = "cook@example.com"


@pytest.fixture
def token_settings():
    return Settings(jwt_secret="unit-test-secret", bcrypt_rounds=4)


@pytest.fixture
def issuer(token_settings):
    return TokenIssuer(token_settings)


@pytest.fixture
def verifier(token_settings):
    return TokenVerifier(token_settings)


def _b64(data: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(data).encode()).rstrip(b"=").decode()


# --- Round trip ---


def test_issued_token_authorizes_its_subject(issuer, verifier):
    """Test a freshly issued token passes the gate for its own subject."""
    token = issuer.issue(USER_ID, EMAIL)
    assert verifier.authorize(token, USER_ID) == USER_ID


def test_authorize_accepts_dashed_owner_id(issuer, verifier):
    """Test the path owner id may use the dashed UUID form."""
    token = issuer.issue(USER_ID, EMAIL)
    assert verifier.authorize(token, str(uuid.UUID(USER_ID))) == USER_ID


def test_verify_returns_claims(issuer, verifier):
    """Test the verified claims carry subject, email and a 30 minute lifetime."""
    claims = verifier.verify(issuer.issue(USER_ID, EMAIL))
    assert claims.subject_id == USER_ID
    assert claims.subject_email == EMAIL
    assert claims.expires_at - claims.issued_at == timedelta(minutes=30)


def test_token_for_other_owner_is_forbidden(issuer, verifier):
    """Test a valid token addressed at someone else's resources is forbidden."""
    token = issuer.issue(USER_ID, EMAIL)
    with pytest.raises(ForbiddenError):
        verifier.authorize(token, OTHER_ID)


def test_malformed_owner_id_is_forbidden(issuer, verifier):
    """Test a path owner that cannot be an id never matches the subject."""
    token = issuer.issue(USER_ID, EMAIL)
    with pytest.raises(ForbiddenError):
        verifier.authorize(token, "not-an-id")


# --- Rejections ---


@pytest.mark.parametrize("raw_token", [None, ""])
def test_missing_token_is_unauthenticated(verifier, raw_token):
    """Test requests without a token are rejected."""
    with pytest.raises(UnauthenticatedError):
        verifier.authorize(raw_token, USER_ID)


@pytest.mark.parametrize("raw_token", ["garbage", "a.b.c", "...."])
def test_malformed_token_is_unauthenticated(verifier, raw_token):
    """Test malformed tokens are rejected."""
    with pytest.raises(UnauthenticatedError):
        verifier.authorize(raw_token, USER_ID)


def test_expired_token(token_settings, verifier):
    """Test a token past its expiry fails even though its signature is valid."""
    past = datetime.now(UTC) - timedelta(minutes=31)
    token = TokenIssuer(token_settings, clock=lambda: past).issue(USER_ID, EMAIL)
    with pytest.raises(TokenExpiredError):
        verifier.authorize(token, USER_ID)


def test_token_from_other_secret(verifier):
    """Test a token signed with a different secret is rejected."""
    token = TokenIssuer(Settings(jwt_secret="someone-else")).issue(USER_ID, EMAIL)
    with pytest.raises(UnauthenticatedError):
        verifier.authorize(token, USER_ID)


def test_expired_token_from_other_secret(verifier):
    """Test signature failure is reported before expiry."""
    past = datetime.now(UTC) - timedelta(hours=2)
    token = TokenIssuer(Settings(jwt_secret="someone-else"), clock=lambda: past).issue(
        USER_ID, EMAIL
    )
    with pytest.raises(UnauthenticatedError):
        verifier.authorize(token, USER_ID)


def test_token_with_other_hmac_algorithm(verifier):
    """Test a token signed with the right secret but another algorithm is rejected."""
    exp = datetime.now(UTC) + timedelta(minutes=5)
    token = jwt.encode({"sub": USER_ID, "exp": exp}, "unit-test-secret", algorithm="HS512")
    with pytest.raises(UnauthenticatedError):
        verifier.authorize(token, USER_ID)


def test_unsigned_token(verifier):
    """Test an alg=none token is rejected."""
    exp = int((datetime.now(UTC) + timedelta(minutes=5)).timestamp())
    token = f"{_b64({'alg': 'none', 'typ': 'JWT'})}.{_b64({'sub': USER_ID, 'exp': exp})}."
    with pytest.raises(UnauthenticatedError):
        verifier.authorize(token, USER_ID)


def test_token_without_subject(verifier):
    """Test a correctly signed token with no subject is rejected."""
    exp = datetime.now(UTC) + timedelta(minutes=5)
    token = jwt.encode({"email": EMAIL, "exp": exp}, "unit-test-secret", algorithm="HS256")
    with pytest.raises(UnauthenticatedError):
        verifier.authorize(token, USER_ID)


def test_tampered_payload(issuer, verifier):
    """Test swapping the payload of a signed token breaks the signature."""
    header, _, signature = issuer.issue(USER_ID, EMAIL).split(".")
    exp = int((datetime.now(UTC) + timedelta(minutes=5)).timestamp())
    forged = f"{header}.{_b64({'sub': OTHER_ID, 'exp': exp})}.{signature}"
    with pytest.raises(UnauthenticatedError):
        verifier.authorize(forged, OTHER_ID)


# --- Configuration ---


def test_issue_without_secret():
    """Test signing with no secret configured is an explicit error."""
    with pytest.raises(SigningError):
        TokenIssuer(Settings(jwt_secret="")).issue(USER_ID, EMAIL)


def test_verify_without_secret(issuer):
    """Test a verifier with no secret rejects everything."""
    token = issuer.issue(USER_ID, EMAIL)
    with pytest.raises(UnauthenticatedError):
        TokenVerifier(Settings(jwt_secret="")).authorize(token, USER_ID)


def test_asymmetric_algorithm_setting_rejected():
    """Test only HMAC algorithms can be configured."""
    with pytest.raises(ValueError):
        Settings(jwt_algorithm="RS256")


def test_production_requires_real_secret():
    """Test production refuses the placeholder secret."""
    with pytest.raises(ValueError):
        Settings(environment="production", jwt_secret="change-me-in-production")


def test_production_requires_salt():
    """Test production refuses an empty password salt."""
    with pytest.raises(ValueError):
        Settings(environment="production", jwt_secret="real-secret", password_salt="")


# --- Passwords ---


def test_password_hash_roundtrip():
    """Test hashing then verifying a password."""
    hasher = PasswordHasher(Settings(password_salt="pepper", bcrypt_rounds=4))
    hashed = hasher.hash("pw1")
    assert hashed != "pw1"
    assert hasher.verify("pw1", hashed)
    assert not hasher.verify("pw2", hashed)


def test_password_hash_uses_server_salt():
    """Test a hash made with one server salt does not verify under another."""
    hashed = PasswordHasher(Settings(password_salt="pepper", bcrypt_rounds=4)).hash("pw1")
    other = PasswordHasher(Settings(password_salt="paprika", bcrypt_rounds=4))
    assert not other.verify("pw1", hashed)


def test_password_hashes_are_salted_per_call():
    """Test hashing the same password twice gives different hashes."""
    hasher = PasswordHasher(Settings(bcrypt_rounds=4))
    assert hasher.hash("pw1") != hasher.hash("pw1")


def test_long_passwords_are_not_truncated():
    """Test passwords sharing their first 72 bytes still differ."""
    hasher = PasswordHasher(Settings(password_salt="pepper", bcrypt_rounds=4))
    hashed = hasher.hash("A" * 72 + "correct")
    assert hasher.verify("A" * 72 + "correct", hashed)
    assert not hasher.verify("A" * 72 + "WRONG", hashed)


def test_server_salt_applies_to_long_passwords():
    """Test the server salt still counts when the password fills 72 bytes."""
    hashed = PasswordHasher(Settings(password_salt="pepper", bcrypt_rounds=4)).hash("B" * 100)
    other = PasswordHasher(Settings(password_salt="paprika", bcrypt_rounds=4))
    assert not other.verify("B" * 100, hashed)


# --- Expiry boundary ---


def test_token_rejected_exactly_at_expiry(token_settings):
    """Test a token is expired once the clock reaches its expiry time."""
    issued = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
    token = TokenIssuer(token_settings, clock=lambda: issued).issue(USER_ID, EMAIL)
    expires = issued + timedelta(minutes=30)

    with pytest.raises(TokenExpiredError):
        TokenVerifier(token_settings, clock=lambda: expires).authorize(token, USER_ID)


def test_token_accepted_just_before_expiry(token_settings):
    """Test a token is valid up to the second before it expires."""
    issued = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
    token = TokenIssuer(token_settings, clock=lambda: issued).issue(USER_ID, EMAIL)
    almost = issued + timedelta(minutes=30) - timedelta(seconds=1)

    verifier = TokenVerifier(token_settings, clock=lambda: almost)
    assert verifier.authorize(token, USER_ID) == USER_ID


def test_token_with_non_numeric_expiry(verifier):
    """Test a signed token whose expiry is not a timestamp is rejected."""
    token = jwt.encode({"sub": USER_ID, "exp": "never"}, "unit-test-secret", algorithm="HS256")
    with pytest.raises(UnauthenticatedError):
        verifier.authorize(token, USER_ID)
