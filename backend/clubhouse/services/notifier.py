"""
Realtime match-change notifications over WebSocket.

Fire-and-forget cache-invalidation hints: after any match mutation the API
broadcasts {"type": "matches_changed", ...} to every connected dashboard.
There is no delivery, ordering or persistence guarantee; clients keep their
own periodic refresh (and the auto-update call) as the source of truth.

The notifier is created and torn down by the application's startup/shutdown
hooks and handed to routes through the get_notifier dependency.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Set

from fastapi import Request, WebSocket

from clubhouse.config import utc_now

logger = logging.getLogger(__name__)

MATCHES_CHANGED = "matches_changed"


class MatchNotifier:
    """Tracks dashboard WebSocket connections and broadcasts change events."""

    def __init__(self) -> None:
        self.active_connections: Set[WebSocket] = set()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._tasks: Set[asyncio.Task] = set()

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Remember the server's event loop so sync handlers can publish."""
        self._loop = loop

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.active_connections.add(websocket)
        logger.info("Dashboard connected (total connections: %d)", len(self.active_connections))

    def disconnect(self, websocket: WebSocket) -> None:
        self.active_connections.discard(websocket)
        logger.info("Dashboard disconnected (total connections: %d)", len(self.active_connections))

    @property
    def connection_count(self) -> int:
        return len(self.active_connections)

    async def broadcast(self, message: Dict[str, Any]) -> int:
        """
        Send a message to every connection; drop the ones that fail.

        Returns:
            Number of connections the message was sent to
        """
        payload = json.dumps(message)
        sent = 0
        stale = []
        for websocket in list(self.active_connections):
            try:
                await websocket.send_text(payload)
                sent += 1
            except Exception as e:
                logger.warning("Dropping dashboard connection after send failure: %s", e)
                stale.append(websocket)
        for websocket in stale:
            self.active_connections.discard(websocket)
        return sent

    def publish(self, reason: str, match_id: Optional[int] = None) -> None:
        """Schedule a broadcast without waiting for it. Safe from worker threads."""
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug("Notifier not bound to a running loop; dropping %s", reason)
            return
        if not self.active_connections:
            return

        message = {
            "type": MATCHES_CHANGED,
            "reason": reason,
            "match_id": match_id,
            "sent_at": utc_now().isoformat(),
        }

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            task = loop.create_task(self.broadcast(message))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        else:
            asyncio.run_coroutine_threadsafe(self.broadcast(message), loop)

    async def close(self) -> None:
        """Close every open connection (called on shutdown)."""
        for websocket in list(self.active_connections):
            try:
                await websocket.close()
            except Exception as e:
                logger.debug("Ignoring error while closing dashboard connection: %s", e)
        self.active_connections.clear()
        self._loop = None


def get_notifier(request: Request) -> MatchNotifier:
    """Dependency: the notifier owned by the running application."""
    return request.app.state.notifier
