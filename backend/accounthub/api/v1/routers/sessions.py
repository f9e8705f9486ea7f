# accounthub/api/v1/routers/sessions.py
from typing import List

from fastapi import APIRouter, Depends

from accounthub.api.v1.deps import get_current_user
from accounthub.models import Session
from accounthub.models.user import User
from accounthub.schemas.user import SessionOut
from accounthub.services.accounts import delete_user_sessions

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("", response_model=List[SessionOut])
async def list_sessions(user: User = Depends(get_current_user)):
    """Sessions owned by the caller, oldest first."""
    rows = await Session.filter(user_id=user.id).order_by("created_at")
    return [
        {"token": s.token, "createdAt": s.created_at.isoformat() if s.created_at else None}
        for s in rows
    ]


@router.delete("")
async def delete_all_sessions(user: User = Depends(get_current_user)):
    """Log the caller out everywhere."""
    deleted = await delete_user_sessions(user.id)
    return {"success": True, "deleted": deleted}
