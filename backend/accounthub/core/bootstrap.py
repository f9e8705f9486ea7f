# accounthub/core/bootstrap.py
"""
Bootstrap module for application initialization.
Runs the one-time setup process gated by the "server" config entry:
default roles and a default admin account are created on first startup.
"""
import logging
import sys
from typing import Awaitable, Callable, Sequence

from accounthub.config import settings
from accounthub.core.security import hash_password
from accounthub.models import Config, Role, User

logger = logging.getLogger("uvicorn.error")

SERVER_CONFIG_KEY = "server"

DEFAULT_ROLES = [
    {"name": "admin", "permissions": ["users:read", "users:write", "roles:read", "roles:write"],
     "description": "Full administrative access"},
    {"name": "user", "permissions": ["users:read", "roles:read"],
     "description": "Regular account"},
]

SetupStep = Callable[[], Awaitable[None]]


async def ensure_server_config() -> Config:
    """Create the "server" config entry with setup=False if it does not exist yet."""
    config, created = await Config.get_or_create(
        key=SERVER_CONFIG_KEY, defaults={"value": {"setup": False}}
    )
    if created:
        logger.info("[bootstrap] Created server config entry")
    return config


async def is_setup_complete() -> bool:
    config = await Config.get_or_none(key=SERVER_CONFIG_KEY)
    if config is None:
        return False
    return bool((config.value or {}).get("setup", False))


async def ensure_default_roles() -> None:
    """Create the built-in roles that are missing."""
    for role in DEFAULT_ROLES:
        _, created = await Role.get_or_create(
            name=role["name"],
            defaults={"permissions": role["permissions"], "description": role["description"]},
        )
        if created:
            logger.info("[bootstrap] Created role %s", role["name"])


async def ensure_default_admin() -> None:
    """
    If no admin exists in the database, create a default admin from settings.
    Only takes effect under the following conditions:
      - Currently no user holds the "admin" role
      - And ADMIN_PASSWORD is set (to avoid using default weak password)
    """
    users = await User.all()
    if any(u.has_role("admin") for u in users):
        return  # Skip creation if admin already exists

    if not settings.admin_password:
        logger.warning("[bootstrap] No admin present, but ADMIN_PASSWORD not set -> skip creating default admin.")
        return

    # If username is already taken, create a non-conflicting name
    admin_username = base_username = settings.admin_username
    suffix = 1
    while await User.filter(username=admin_username).exists():
        suffix += 1
        admin_username = f"{base_username}{suffix}"

    u = await User.create(
        username=admin_username,
        email=settings.admin_email,
        password_hash=hash_password(settings.admin_password),
        roles=["admin"],
    )
    logger.warning("[bootstrap] Created default admin -> username=%s email=%s id=%s",
                   u.username, u.email, u.id)


SETUP_STEPS: list[SetupStep] = [
    ensure_default_roles,
    ensure_default_admin,
]


async def check_setup(steps: Sequence[SetupStep] | None = None) -> bool:
    """
    Run the setup process once.

    If the server config says setup is complete, nothing runs. Otherwise each
    step runs in order; the first failure exits the process with status 1.
    The flag is persisted only after every step succeeded.

    Returns:
        bool: True if setup ran during this call
    """
    if steps is None:
        steps = SETUP_STEPS
    await ensure_server_config()
    if await is_setup_complete():
        return False

    logger.warning("[bootstrap] Server setup is not complete, running setup process.")
    try:
        for step in steps:
            logger.info("[bootstrap] Running setup step %s", getattr(step, "__name__", step))
            await step()
    except Exception:
        logger.exception("[bootstrap] Server setup failed.")
        sys.exit(1)

    config = await Config.get(key=SERVER_CONFIG_KEY)
    config.value = {**(config.value or {}), "setup": True}
    await config.save()
    logger.info("[bootstrap] Server setup complete.")
    return True
