# accounthub/core/registry.py
"""
Connected-client registry for the /main WebSocket channel.
Tracks which live socket belongs to which authenticated user and fans
events out to every registered socket.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from starlette.websockets import WebSocket, WebSocketState

logger = logging.getLogger("uvicorn.error")


class SocketConnection:
    """
    A live WebSocket plus a generated session id.

    Frames are JSON objects of the form {"event": name, "data": payload}.
    The router is responsible for ws.accept(); this class only sends and closes.
    """

    def __init__(self, ws: WebSocket, socket_id: str | None = None):
        self.ws = ws
        self.id = socket_id or uuid.uuid4().hex

    @property
    def connected(self) -> bool:
        return (
            self.ws.client_state == WebSocketState.CONNECTED
            and self.ws.application_state == WebSocketState.CONNECTED
        )

    async def emit(self, event: str, data: Any = None):
        await self.ws.send_json({"event": event, "data": data})

    async def disconnect(self):
        # Safe to call on a socket the peer already closed
        if self.connected:
            await self.ws.close()


@dataclass
class ConnectedClient:
    """Registry entry: one authenticated socket."""
    id: str
    socket: Any
    user_id: str
    user: Dict[str, Any] = field(default_factory=dict)


class ClientRegistry:
    """
    Ordered collection of ConnectedClient entries.

    Invariants:
    - at most one entry per socket id
    - a user may own any number of entries (one per device)

    Mutations only happen on the event loop, between awaits, so no lock is held.
    """

    def __init__(self):
        self.clients: List[ConnectedClient] = []

    def __len__(self) -> int:
        return len(self.clients)

    def _find(self, socket_id: str) -> Optional[ConnectedClient]:
        return next((c for c in self.clients if c.id == socket_id), None)

    # -------- attach / detach --------
    async def attach(self, socket, user: Dict[str, Any]) -> ConnectedClient:
        """
        Register `socket` as belonging to `user` (a serialized user dict with "_id").

        An existing entry for the same socket id is replaced; its connection is
        closed first unless it is the same connection authenticating again.
        Every registered socket, the new one included, then receives
        "userConnected".
        """
        prior = self._find(socket.id)
        if prior is not None:
            if prior.socket is not socket:
                await prior.socket.disconnect()
            self.clients = [c for c in self.clients if c.id != socket.id]

        entry = ConnectedClient(
            id=socket.id,
            socket=socket,
            user_id=str(user["_id"]),
            user=user,
        )
        self.clients.append(entry)
        logger.info("[ws] attached socket=%s user=%s", entry.id, entry.user_id)

        await self.broadcast("userConnected", {"user": user})
        return entry

    async def detach(self, socket) -> bool:
        """
        Remove the entry for `socket` and announce it with "userDisconnect".

        Returns:
            bool: True if an entry existed
        """
        entry = self._find(socket.id)
        if entry is None:
            return False

        await entry.socket.disconnect()
        self.clients = [c for c in self.clients if c.id != socket.id]
        logger.info("[ws] detached socket=%s user=%s", entry.id, entry.user_id)

        await self.broadcast("userDisconnect", {"socketId": socket.id})
        return True

    # -------- lookups --------
    def find_user_id_by_socket(self, socket_id: str) -> Optional[str]:
        entry = self._find(socket_id)
        return entry.user_id if entry else None

    def sockets_for_user(self, user_id: str) -> list:
        return [c.socket for c in self.clients if c.user_id == str(user_id)]

    def connected_user_ids(self) -> List[str]:
        """Distinct user ids with at least one socket, in registration order."""
        seen: List[str] = []
        for c in self.clients:
            if c.user_id not in seen:
                seen.append(c.user_id)
        return seen

    # -------- publish --------
    async def broadcast(self, event: str, *args):
        """
        Send the same event to every registered socket, one after another.

        Args:
            event: Event name
            *args: Payload; a single argument is sent as-is, several as a list

        Note: A socket that fails to receive (closed underneath us) is logged
        and skipped; the remaining sockets still get the event.
        """
        data = args[0] if len(args) == 1 else (list(args) if args else None)
        for client in list(self.clients):
            try:
                await client.socket.emit(event, data)
            except Exception as e:
                logger.warning("[ws] broadcast %s to socket=%s failed: %r", event, client.id, e)
