# accounthub/api/v1/routers/roles.py
from typing import List

from fastapi import APIRouter, Depends

from accounthub.api.v1.deps import get_current_user, require_admin
from accounthub.core.errors import ValidationError
from accounthub.models import Role
from accounthub.schemas.role import RoleIn, RoleOut

router = APIRouter(prefix="/roles", tags=["roles"])


@router.get("", response_model=List[RoleOut], dependencies=[Depends(get_current_user)])
async def list_roles():
    rows = await Role.all().order_by("name")
    return [r.to_public() for r in rows]


@router.post("", response_model=RoleOut, dependencies=[Depends(require_admin)])
async def create_role(body: RoleIn):
    """
    Create a role (admin only).

    Raises:
        ValidationError (400): ROLE_EXISTS
        ForbiddenError (403): caller is not an admin
    """
    if await Role.filter(name=body.name).exists():
        raise ValidationError("ROLE_EXISTS", "Role already exists")
    role = await Role.create(
        name=body.name,
        permissions=body.permissions,
        description=body.description,
    )
    return role.to_public()
