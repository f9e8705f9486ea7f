# accounthub/core/errors.py
"""
Application error taxonomy.

Every error is an HTTPException carrying a {"code", "message"} detail, so
route handlers can raise them directly and FastAPI renders the response.
"""
from fastapi import HTTPException, status


class AppError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "INTERNAL_ERROR"

    def __init__(self, code: str | None = None, message: str = ""):
        self.code = code or self.default_code
        self.message = message
        super().__init__(status_code=self.status_code, detail={"code": self.code, "message": message})


class ValidationError(AppError):
    """Missing or invalid request fields."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "VALIDATION_ERROR"


class AuthError(AppError):
    """Bad credentials, or a missing, invalid or expired token."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "AUTH_REQUIRED"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_code = "FORBIDDEN"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"


class DatabaseError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "DATABASE_ERROR"
