# accounthub/services/users.py
"""
User lookup and filtering for /userData and /users.

Filter semantics for /users: every supplied field must match (AND).
- _id:       any of the listed ids (malformed ids never match)
- username, email, fullName: exact match; a list means any of
- roles:     user holds the role; a list means holds any of them
"""
import json
from typing import Any, Dict, Iterable, List, Optional

from accounthub.core.errors import ValidationError
from accounthub.models import User
from accounthub.services.accounts import parse_uuid

# query/select key -> model column
FILTER_FIELDS = {
    "_id": "id",
    "username": "username",
    "email": "email",
    "fullName": "full_name",
    "roles": "roles",
}


async def find_user(user_id: str | None = None, username: str | None = None) -> Optional[User]:
    """
    Fetch one user by _id or username (id wins when both are given).

    Raises:
        ValidationError: neither selector given
    """
    if user_id:
        uid = parse_uuid(user_id)
        return await User.get_or_none(id=uid) if uid else None
    if username:
        return await User.get_or_none(username=username)
    raise ValidationError("VALIDATION_ERROR", "_id or username is required")


def parse_select(raw: str | None) -> Dict[str, Any]:
    """
    Parse the `select` query parameter: a JSON object keyed by filter field.

    Raises:
        ValidationError: not JSON, not an object, or an unknown key
    """
    if not raw:
        return {}
    try:
        select = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationError("VALIDATION_ERROR", "select must be a JSON object")
    if not isinstance(select, dict):
        raise ValidationError("VALIDATION_ERROR", "select must be a JSON object")
    unknown = sorted(set(select) - set(FILTER_FIELDS))
    if unknown:
        raise ValidationError("VALIDATION_ERROR", f"unknown select fields: {', '.join(unknown)}")
    return select


def _as_list(value) -> List[Any]:
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def _split_ids(values: Iterable[str]) -> List[str]:
    # ?_id=a&_id=b and ?_id=a,b are both accepted
    out: List[str] = []
    for v in values:
        out.extend(part.strip() for part in str(v).split(",") if part.strip())
    return out


def merge_filters(query: Dict[str, List[str]], select: Dict[str, Any]) -> Dict[str, List[Any]]:
    """
    Combine query-string filters and `select` into {field: [accepted values]}.
    A field present in both must satisfy both, so the accepted values intersect.
    """
    merged: Dict[str, List[Any]] = {}
    for key, values in query.items():
        if key not in FILTER_FIELDS or not values:
            continue
        merged[key] = _split_ids(values) if key == "_id" else list(values)
    for key, value in select.items():
        values = _as_list(value)
        if key in merged:
            merged[key] = [v for v in merged[key] if v in values]
        else:
            merged[key] = values
    return merged


async def query_users(filters: Dict[str, List[Any]]) -> List[User]:
    """Run the merged filters; an empty filter set returns every user."""
    qs = User.all().order_by("created_at")
    for key, values in filters.items():
        if not values:
            return []
        if key == "roles":
            continue  # JSON membership is checked below, portably across backends
        if key == "_id":
            ids = [u for u in (parse_uuid(v) for v in values) if u is not None]
            if not ids:
                return []
            qs = qs.filter(id__in=ids)
        else:
            qs = qs.filter(**{f"{FILTER_FIELDS[key]}__in": values})

    users = await qs
    wanted_roles = filters.get("roles")
    if wanted_roles is not None:
        users = [u for u in users if any(u.has_role(r) for r in wanted_roles)]
    return users
