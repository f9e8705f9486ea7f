# accounthub/core/security.py
"""
Security module for authentication.
Handles password hashing, JWT token creation and verification.
"""
import datetime as dt
import uuid
from dataclasses import dataclass

import jwt  # PyJWT
from passlib.context import CryptContext

from accounthub.config import settings

# Password hashing context
# Argon2 is a modern, salted password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    """
    Verify a plain text password against a hashed password.

    When no hash is available (unknown user) a dummy verification still runs,
    so a missing account costs the same work as a wrong password.

    Args:
        plain: Plain text password to verify
        hashed: Hashed password from database, or None

    Returns:
        True if password matches, False otherwise
    """
    if hashed is None:
        pwd_context.dummy_verify()
        return False
    return pwd_context.verify(plain, hashed)


def create_access_token(user_id: str, username: str, expires_in: dt.timedelta | None = None) -> str:
    """
    Create a signed JWT bound to a user.

    Args:
        user_id: Unique user identifier (UUID string)
        username: Login name, embedded for clients
        expires_in: Token lifetime; defaults to SIGN_LIFETIME_MINUTES

    Returns:
        Encoded JWT token string

    Token payload includes:
        - user_id: owning user
        - username: owning user's login name
        - jti: random token id, so two logins never mint the same token
        - iat / exp: issue and expiry timestamps
    """
    if expires_in is None:
        expires_in = dt.timedelta(minutes=settings.sign_lifetime_minutes)
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "user_id": user_id,
        "username": username,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALG)


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or malformed
    """
    return jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALG])


@dataclass
class TokenVerification:
    """Outcome of verify_token: either claims or the reason verification failed."""
    valid: bool
    claims: dict | None = None
    error: str | None = None


def verify_token(token: str) -> TokenVerification:
    """
    Check signature and expiry of a token before any of its claims are used.
    """
    try:
        claims = decode_access_token(token)
    except jwt.InvalidTokenError as e:
        return TokenVerification(valid=False, error=str(e))
    if not claims.get("user_id"):
        return TokenVerification(valid=False, error="Token has no user_id claim")
    return TokenVerification(valid=True, claims=claims)
