# accounthub/core/db.py
"""
Database configuration and connection management.
Handles Tortoise ORM setup and the connect-with-retry loop run at startup.
"""
import asyncio
import logging

from tortoise import Tortoise, connections
from tortoise.exceptions import ConfigurationError

from accounthub.config import settings

logger = logging.getLogger("uvicorn.error")

# Database connection URL (see config._database_url)
DB_URL = settings.database_url

# Tortoise ORM configuration dictionary
TORTOISE_ORM = {
    "connections": {"default": DB_URL},
    "apps": {
        "models": {
            "models": [
                "accounthub.models.user",      # User model
                "accounthub.models.session",   # Session model
                "accounthub.models.role",      # Role model
                "accounthub.models.config",    # Config model
            ],
            "default_connection": "default",
        },
    },
}


async def init_db():
    """
    Initialize Tortoise ORM and make sure the database actually answers.

    Tortoise opens connections lazily, so a trivial query is issued to
    surface an unreachable server here rather than on the first request.
    """
    await Tortoise.init(config=TORTOISE_ORM)
    await connections.get("default").execute_query("SELECT 1")


async def connect_db(delay: float | None = None) -> int:
    """
    Connect to the database, retrying forever with a fixed delay.

    Args:
        delay: Seconds to wait between attempts (defaults to DB_RETRY_DELAY)

    Returns:
        int: Number of attempts it took to connect
    """
    if delay is None:
        delay = settings.db_retry_delay
    attempt = 0
    while True:
        attempt += 1
        logger.info("[db] Trying to connect to DB (attempt %d)...", attempt)
        try:
            await init_db()
        except ConfigurationError:
            raise
        except Exception as e:
            # drivers raise their own types, e.g. asyncpg CannotConnectNowError
            logger.error("[db] Failed to connect to DB, retrying in %.1fs: %r", delay, e)
            await close_db()
            await asyncio.sleep(delay)
            continue
        logger.info("[db] Connected to DB")
        return attempt


async def close_db():
    """
    Close all database connections.

    Called on shutdown and between failed connection attempts.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
