"""
Socket.IO fan-out of content changes.

Clients connect (optionally passing ``{"token": <JWT>}`` as auth), then emit
``join-user`` or ``join-admin``. Only sessions whose token carries the admin
role may enter the ``admin`` room. Every member of a room receives every event
sent to it. Delivery is at-most-once: no acknowledgement, no replay, so
clients must still reconcile through the REST list endpoints.
"""
import functools
import logging
from typing import Any, Callable, Dict, Optional, Sequence

import anyio.from_thread
import socketio

logger = logging.getLogger(__name__)

ROOM_USER = "user"
ROOM_ADMIN = "admin"
CONTENT_ROOMS = (ROOM_USER, ROOM_ADMIN)
ADMIN_ROOMS = (ROOM_ADMIN,)


class Broadcaster:
    def __init__(
        self,
        cors_origins: Sequence[str],
        decode_token: Callable[[str], Dict[str, Any]],
        message_queue: Optional[str] = None,
    ):
        manager = socketio.AsyncRedisManager(message_queue) if message_queue else None
        self.sio = socketio.AsyncServer(
            async_mode="asgi",
            cors_allowed_origins=list(cors_origins),
            client_manager=manager,
            logger=False,
            engineio_logger=False,
        )
        self._decode_token = decode_token

        self.sio.on("connect", self.on_connect)
        self.sio.on("join-user", self.on_join_user)
        self.sio.on("join-admin", self.on_join_admin)
        self.sio.on("disconnect", self.on_disconnect)

    # -- socket handlers --------------------------------------------------

    def _claims_from_auth(self, auth: Any) -> Optional[Dict[str, Any]]:
        token = auth.get("token") if isinstance(auth, dict) else None
        if not token:
            return None
        try:
            return self._decode_token(token)
        except Exception as e:
            logger.info(f"Socket auth token rejected: {e}")
            return None

    async def on_connect(self, sid: str, environ: Dict[str, Any], auth: Any = None) -> None:
        claims = self._claims_from_auth(auth)
        await self.sio.save_session(sid, {"claims": claims})
        logger.info(f"Client connected: {sid} (role={claims.get('role') if claims else 'anonymous'})")

    async def on_join_user(self, sid: str, *args: Any) -> None:
        await self.sio.enter_room(sid, ROOM_USER)
        logger.info(f"User joined: {sid}")

    async def on_join_admin(self, sid: str, *args: Any) -> None:
        session = await self.sio.get_session(sid)
        claims = session.get("claims") or {}
        if claims.get("role") != "admin":
            await self.sio.emit("join-error", {"message": "Admin access required"}, to=sid)
            logger.warning(f"Rejected admin room join: {sid}")
            return
        await self.sio.enter_room(sid, ROOM_ADMIN)
        logger.info(f"Admin joined: {sid}")

    async def on_disconnect(self, sid: str, *args: Any) -> None:
        logger.info(f"Client disconnected: {sid}")

    # -- publishing -------------------------------------------------------

    async def emit(self, event: str, data: Any, rooms: Sequence[str] = CONTENT_ROOMS) -> None:
        await self.sio.emit(event, data, to=list(rooms))

    def publish(self, event: str, data: Any, rooms: Sequence[str] = CONTENT_ROOMS) -> None:
        """Emit from a sync request handler (worker thread). Never raises."""
        try:
            anyio.from_thread.run(functools.partial(self.emit, event, data, rooms))
        except Exception as e:
            logger.warning(f"Real-time emit of '{event}' failed: {e}")
