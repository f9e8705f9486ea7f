# accounthub/api/v1/deps.py
from dataclasses import dataclass

from fastapi import Depends, Header, Request

from accounthub.core.errors import AuthError, ForbiddenError
from accounthub.core.registry import ClientRegistry
from accounthub.core.security import verify_token
from accounthub.models.user import User
from accounthub.services.accounts import parse_uuid


@dataclass
class AuthContext:
    """The verified bearer token and the user it belongs to."""
    token: str
    claims: dict
    user: User


async def get_auth_context(
    authorization: str | None = Header(default=None),
) -> AuthContext:
    """
    FastAPI dependency validating the `Authorization: Bearer <token>` header.

    Signature and expiry are checked before the user_id claim is trusted.

    Raises:
        AuthError (401): AUTH_REQUIRED if no bearer token is present
        AuthError (401): AUTH_INVALID_TOKEN if token is invalid or expired
        AuthError (401): AUTH_USER_NOT_FOUND if the token's user no longer exists
    """
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise AuthError("AUTH_REQUIRED", "Bearer token required")

    result = verify_token(token)
    if not result.valid:
        raise AuthError("AUTH_INVALID_TOKEN", result.error or "Invalid token")

    uid = parse_uuid(result.claims["user_id"])
    user = await User.get_or_none(id=uid) if uid else None
    if not user:
        raise AuthError("AUTH_USER_NOT_FOUND", "User not found")
    return AuthContext(token=token, claims=result.claims, user=user)


async def get_current_user(ctx: AuthContext = Depends(get_auth_context)) -> User:
    """
    FastAPI dependency returning the authenticated user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": str(user.id)}
    """
    return ctx.user


async def require_admin(current: User = Depends(get_current_user)) -> User:
    """
    FastAPI dependency ensuring the current user holds the "admin" role.

    Raises:
        ForbiddenError (403): FORBIDDEN_ADMIN_ONLY
    """
    if not current.has_role("admin"):
        raise ForbiddenError("FORBIDDEN_ADMIN_ONLY", "Admin role required")
    return current


def get_client_registry(request: Request) -> ClientRegistry:
    """The registry owned by this application instance."""
    return request.app.state.clients
