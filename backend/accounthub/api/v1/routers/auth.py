# accounthub/api/v1/routers/auth.py
from fastapi import APIRouter, Depends

from accounthub.api.v1.deps import AuthContext, get_auth_context, get_current_user
from accounthub.core.errors import ValidationError
from accounthub.models.user import User
from accounthub.schemas.auth import LoginRequest, RegisterRequest, TokenOut
from accounthub.schemas.user import UserOut
from accounthub.services.accounts import (
    authenticate_credentials,
    create_user,
    delete_session,
    issue_session,
)

router = APIRouter(tags=["auth"])


def _require(body, fields: list[str]) -> None:
    missing = [f for f in fields if not getattr(body, f)]
    if missing:
        raise ValidationError("VALIDATION_ERROR", f"Missing required fields: {', '.join(missing)}")


@router.post("/auth", response_model=TokenOut)
async def login(body: LoginRequest):
    """
    Authenticate with username and password and receive a session token.

    Returns:
        dict: {"token": "<jwt>"}; the token is also stored as a Session

    Raises:
        ValidationError (400): username or password missing
        AuthError (401): AUTH_INVALID_CREDENTIALS, whether the user is unknown
            or the password is wrong
    """
    _require(body, ["username", "password"])
    user = await authenticate_credentials(body.username, body.password)
    token = await issue_session(user)
    return {"token": token}


@router.post("/register", response_model=UserOut)
async def register(body: RegisterRequest):
    """
    Register a new user account.

    Args:
        body: username, email, password (required) and fullName (optional)

    Returns:
        dict: The created user (without password)

    Error codes (400):
        - VALIDATION_ERROR: a required field is missing
        - USERNAME_EXISTS: username already taken
    """
    _require(body, ["username", "email", "password"])
    user = await create_user(
        username=body.username,
        email=body.email,
        password=body.password,
        full_name=body.fullName,
    )
    return user.to_public()


@router.post("/logout")
async def logout(ctx: AuthContext = Depends(get_auth_context)):
    """
    Delete the session of the presented bearer token.

    Token and user id come from the verified token, never from the body.
    Logging out twice is not an error; the second call deletes nothing.
    """
    deleted = await delete_session(ctx.token, ctx.user.id)
    return {"success": True, "deleted": deleted}


@router.get("/selfUserData", response_model=UserOut)
async def self_user_data(user: User = Depends(get_current_user)):
    return user.to_public()
