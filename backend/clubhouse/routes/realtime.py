"""
Realtime dashboard channel.

Clients connect here to receive "matches_changed" hints. Incoming text frames
are treated as keep-alive pings and otherwise ignored.
"""
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from clubhouse.services.notifier import MatchNotifier

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/matches")
async def matches_socket(websocket: WebSocket):
    notifier: MatchNotifier = websocket.app.state.notifier
    await notifier.connect(websocket)
    try:
        while True:
            message = await websocket.receive_text()
            if message == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        pass
    finally:
        notifier.disconnect(websocket)
