# accounthub/api/v1/routers/users.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from accounthub.api.v1.deps import get_client_registry, get_current_user
from accounthub.core.errors import NotFoundError
from accounthub.core.registry import ClientRegistry
from accounthub.schemas.user import UserOut
from accounthub.services.users import find_user, merge_filters, parse_select, query_users

router = APIRouter(tags=["users"], dependencies=[Depends(get_current_user)])


@router.get("/userData", response_model=UserOut)
async def user_data(
    user_id: Optional[str] = Query(default=None, alias="_id"),
    username: Optional[str] = Query(default=None),
):
    """
    Fetch a single user by `_id` or `username`.

    Raises:
        ValidationError (400): neither selector given
        NotFoundError (404): USER_NOT_FOUND
    """
    user = await find_user(user_id=user_id, username=username)
    if not user:
        raise NotFoundError("USER_NOT_FOUND", "User not found")
    return user.to_public()


@router.get("/users", response_model=List[UserOut])
async def list_users(
    ids: List[str] = Query(default=[], alias="_id"),
    username: List[str] = Query(default=[]),
    email: List[str] = Query(default=[]),
    fullName: List[str] = Query(default=[]),
    roles: List[str] = Query(default=[]),
    select: Optional[str] = Query(default=None, description="JSON object of field filters"),
):
    """
    List users matching every supplied filter.

    `_id` may repeat or be comma-separated. `select` is a JSON object over the
    same fields; list values mean "any of". No filters returns every user.
    """
    filters = merge_filters(
        {"_id": ids, "username": username, "email": email, "fullName": fullName, "roles": roles},
        parse_select(select),
    )
    users = await query_users(filters)
    return [u.to_public() for u in users]


@router.get("/onlineUsers")
async def online_users(registry: ClientRegistry = Depends(get_client_registry)):
    """User ids with at least one authenticated socket on /main."""
    return {"userIds": registry.connected_user_ids()}
