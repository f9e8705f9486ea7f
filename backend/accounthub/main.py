# accounthub/main.py
import os
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from tortoise.exceptions import BaseORMException

from accounthub.config import settings
from accounthub.core.db import connect_db, close_db
from accounthub.core.errors import DatabaseError
from accounthub.core.bootstrap import check_setup
from accounthub.core.registry import ClientRegistry

from accounthub.api.v1.routers import auth, users, sessions, roles
from accounthub.api.v1.routers.ws_main import router as ws_main_router

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# Connected /main sockets, owned by this app instance
app.state.clients = ClientRegistry()

# CORS; regenerated_token must be readable by browser clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["regenerated_token"],
)


@app.exception_handler(RequestValidationError)
async def on_request_validation_error(request: Request, exc: RequestValidationError):
    # Malformed input is the client's fault: 400, not FastAPI's default 422
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": {"code": "VALIDATION_ERROR", "message": str(exc.errors())}},
    )


@app.exception_handler(BaseORMException)
async def on_database_error(request: Request, exc: BaseORMException):
    logger.error("[db] query failed on %s %s: %r", request.method, request.url.path, exc)
    error = DatabaseError(message=str(exc))
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


@app.on_event("startup")
async def on_startup():
    # Blocks until the database answers; never gives up
    await connect_db()
    # First boot only: default roles and admin, then the setup flag is stored
    await check_setup()
    os.makedirs(settings.upload_path, exist_ok=True)

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# REST
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(sessions.router)
app.include_router(roles.router)

# WebSocket
app.include_router(ws_main_router)

# Uploaded content, read-only
app.mount("/storage", StaticFiles(directory=settings.upload_path, check_dir=False), name="storage")

@app.get("/healthz")
def healthz():
    return {"ok": True}
