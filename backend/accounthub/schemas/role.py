# accounthub/schemas/role.py
from typing import List, Optional
from pydantic import BaseModel

class RoleIn(BaseModel):
    name: str
    permissions: List[str] = []
    description: Optional[str] = None

class RoleOut(BaseModel):
    name: str
    permissions: List[str]
    description: Optional[str] = None
