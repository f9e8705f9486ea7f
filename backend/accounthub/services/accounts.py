# accounthub/services/accounts.py
"""
Account and session lifecycle: registration, credential checks,
token issuance and logout.
"""
import logging
import uuid

from tortoise.exceptions import IntegrityError

from accounthub.core.errors import AuthError, ValidationError
from accounthub.core.security import create_access_token, hash_password, verify_password
from accounthub.models import Session, User

logger = logging.getLogger("uvicorn.error")

NEW_USER_ROLES = ["user"]


async def username_taken(username: str) -> bool:
    return await User.filter(username=username).exists()


def parse_uuid(value) -> uuid.UUID | None:
    """Return value as a UUID, or None when it is not one."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


async def create_user(
    username: str,
    email: str,
    password: str,
    full_name: str | None = None,
    roles: list[str] | None = None,
) -> User:
    """
    Create a user with a hashed password.

    Raises:
        ValidationError: username already taken
    """
    if await username_taken(username):
        raise ValidationError("USERNAME_EXISTS", "Username already exists")
    try:
        user = await User.create(
            username=username,
            email=email,
            password_hash=hash_password(password),
            full_name=full_name,
            roles=list(roles if roles is not None else NEW_USER_ROLES),
        )
    except IntegrityError:
        # a concurrent registration took the name after the check above
        raise ValidationError("USERNAME_EXISTS", "Username already exists")
    logger.info("[auth] registered user=%s id=%s", user.username, user.id)
    return user


async def authenticate_credentials(username: str, password: str) -> User:
    """
    Look the user up by exact username and check the password.

    Unknown user and wrong password fail the same way for the caller;
    only the log line tells them apart.

    Raises:
        AuthError: AUTH_INVALID_CREDENTIALS
    """
    user = await User.get_or_none(username=username)
    if user is None:
        verify_password(password, None)
        logger.info("[auth] login failed: unknown user %r", username)
        raise AuthError("AUTH_INVALID_CREDENTIALS", "Invalid credentials")
    if not verify_password(password, user.password_hash):
        logger.info("[auth] login failed: wrong password for %r", username)
        raise AuthError("AUTH_INVALID_CREDENTIALS", "Invalid credentials")
    return user


async def issue_session(user: User) -> str:
    """Mint a signed token for `user` and persist the matching Session."""
    token = create_access_token(str(user.id), user.username)
    await Session.create(token=token, user=user)
    return token


async def delete_session(token: str, user_id) -> int:
    """
    Delete the session matching both token and owner.

    Returns:
        int: Number of rows deleted (0 when already gone)
    """
    uid = parse_uuid(user_id)
    if uid is None:
        return 0
    return await Session.filter(token=token, user_id=uid).delete()


async def delete_user_sessions(user_id) -> int:
    uid = parse_uuid(user_id)
    if uid is None:
        return 0
    return await Session.filter(user_id=uid).delete()


async def find_session(token: str) -> Session | None:
    if not token:
        return None
    return await Session.get_or_none(token=token)
