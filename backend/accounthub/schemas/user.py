# accounthub/schemas/user.py
from typing import List, Optional
from pydantic import BaseModel, Field

class UserOut(BaseModel):
    """
    Public view of a user. The password hash is never part of it.
    """
    id: str = Field(alias="_id")
    username: str
    email: Optional[str] = None
    fullName: Optional[str] = None
    roles: List[str] = []
    avatar: Optional[str] = None
    createdAt: Optional[str] = None

    class Config:
        """Pydantic configuration: allow both field name and alias for population."""
        populate_by_name = True

class SessionOut(BaseModel):
    token: str
    createdAt: Optional[str] = None
