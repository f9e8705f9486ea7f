# accounthub/api/v1/routers/ws_main.py
import json
import logging

from fastapi import APIRouter, WebSocket
from starlette.websockets import WebSocketDisconnect

from accounthub.core.registry import ClientRegistry, SocketConnection
from accounthub.core.security import verify_token
from accounthub.models.user import User
from accounthub.services.accounts import find_session, parse_uuid

logger = logging.getLogger("uvicorn.error")

router = APIRouter()


async def _fail(socket, error: str) -> bool:
    logger.info("[ws] authenticate failed socket=%s: %s", socket.id, error)
    await socket.emit("authenticateFailed", {"error": error})
    return False


async def authenticate_socket(socket, token, registry: ClientRegistry) -> bool:
    """
    Socket-level login with a token previously issued by /auth.

    Steps, stopping at the first failure:
      1. the token must belong to a stored Session   -> "Session not found"
      2. signature and expiry must verify            -> PyJWT error text
      3. the token's user must still exist           -> "User not found"
    On success the socket is attached to the user and receives "authenticated".
    Failures are reported to the client only; the socket stays open.

    Returns:
        bool: True if the socket was attached
    """
    if isinstance(token, dict):
        token = token.get("token")
    session = await find_session(token) if isinstance(token, str) else None
    if session is None:
        return await _fail(socket, "Session not found")

    result = verify_token(token)
    if not result.valid:
        return await _fail(socket, result.error)

    uid = parse_uuid(result.claims["user_id"])
    user = await User.get_or_none(id=uid) if uid else None
    if user is None:
        return await _fail(socket, "User not found")

    await registry.attach(socket, user.to_public())
    await socket.emit("authenticated")
    return True


@router.websocket("/main")
async def ws_main(ws: WebSocket):
    """
    Presence channel.

    Message flow:
    1. Client connects; the server assigns a socket id
    2. Client sends: {"event": "authenticate", "data": "<token>"}
    3. Server replies "authenticated" or "authenticateFailed" {"error": ...}
    4. Authenticated sockets receive "userConnected" / "userDisconnect" broadcasts

    Malformed frames get an "error" event; the connection stays open.
    On disconnect the socket is removed from the registry.
    """
    await ws.accept()
    registry: ClientRegistry = ws.app.state.clients
    socket = SocketConnection(ws)
    logger.info("[ws] Client connected: %s", socket.id)
    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            if raw is None:
                # binary frames carry no event
                await socket.emit("error", {"error": "Malformed message"})
                continue
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                await socket.emit("error", {"error": "Malformed message"})
                continue
            if not isinstance(msg, dict):
                await socket.emit("error", {"error": "Malformed message"})
                continue

            event = msg.get("event")
            if event == "authenticate":
                await authenticate_socket(socket, msg.get("data"), registry)
            else:
                await socket.emit("error", {"error": f"Unknown event: {event}"})
    except WebSocketDisconnect:
        logger.info("[ws] Client disconnected: %s", socket.id)
    finally:
        await registry.detach(socket)
