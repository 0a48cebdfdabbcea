"""WebSocket endpoint for live operation updates."""

import logging
from typing import List
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from api.dependencies import get_registry
from pipeline import TrackedOperation
from registry import OperationRegistry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class OperationFeed:
    """Pushes operation snapshots to every connected client.

    A client that fails to receive a message is dropped; it has to reconnect
    and will get a fresh snapshot of all operations.
    """

    def __init__(self):
        self.clients: List[WebSocket] = []

    async def subscribe(self, websocket: WebSocket, registry: OperationRegistry):
        await websocket.accept()
        self.clients.append(websocket)
        logger.info(f"Operation feed client connected ({len(self.clients)} total)")
        await websocket.send_json({
            "type": "operations",
            "operations": [operation.snapshot() for operation in registry.operations()],
            "timestamp": _now(),
        })

    def unsubscribe(self, websocket: WebSocket):
        if websocket in self.clients:
            self.clients.remove(websocket)
        logger.info(f"Operation feed client disconnected ({len(self.clients)} total)")

    async def publish(self, message: dict):
        for client in list(self.clients):
            try:
                await client.send_json(message)
            except Exception as e:
                logger.warning(f"Dropping operation feed client: {e}")
                self.unsubscribe(client)


feed = OperationFeed()


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    registry: OperationRegistry = Depends(get_registry)
):
    """Live feed of tracked operations.

    On connect the client receives every live operation, then one
    "operation_update" per change. Any text sent is answered with a pong
    carrying the live operation count.
    """
    await feed.subscribe(websocket, registry)
    try:
        while True:
            await websocket.receive_text()

            await websocket.send_json({
                "type": "pong",
                "operations": len(registry),
                "timestamp": _now(),
            })
    except WebSocketDisconnect:
        feed.unsubscribe(websocket)
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
        feed.unsubscribe(websocket)


async def broadcast_operation_update(operation: TrackedOperation):
    """Publish an operation's current steps to all connected clients."""
    message = operation.snapshot()
    message["type"] = "operation_update"
    message["timestamp"] = _now()
    await feed.publish(message)
