# accounthub/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.

Required fields are declared optional and checked in the route, so a
missing field yields the app's own 400 VALIDATION_ERROR listing every
missing name.
"""
from typing import Optional
from pydantic import BaseModel

class LoginRequest(BaseModel):
    """
    Request model for /auth.
    """
    username: Optional[str] = None
    password: Optional[str] = None  # Plain text, compared against the stored hash

class RegisterRequest(BaseModel):
    """
    Request model for /register.
    """
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    fullName: Optional[str] = None

class TokenOut(BaseModel):
    token: str  # Signed session token, sent back as "Authorization: Bearer <token>"
