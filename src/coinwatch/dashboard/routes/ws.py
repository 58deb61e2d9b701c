"""WebSocket channel that pushes market panels to open dashboards."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from coinwatch.dashboard.update_loop import render_market_panels

log = structlog.get_logger(__name__)

router = APIRouter()


class DashboardHub:
    """Registry of connected dashboards; fans out OOB fragments."""

    def __init__(self) -> None:
        self.connections: list[WebSocket] = []

    @property
    def has_clients(self) -> bool:
        return bool(self.connections)

    async def connect(self, ws: WebSocket) -> None:
        await ws.accept()
        self.connections.append(ws)
        log.info("dashboard_ws_connected", clients=len(self.connections))

    def disconnect(self, ws: WebSocket) -> None:
        if ws in self.connections:
            self.connections.remove(ws)
        log.info("dashboard_ws_disconnected", clients=len(self.connections))

    async def send_to(self, ws: WebSocket, html: str) -> bool:
        """Send one fragment; a failed send drops the client. Returns success."""
        try:
            await ws.send_text(html)
        except Exception:
            self.disconnect(ws)
            log.warning("dashboard_ws_send_failed", exc_info=True)
            return False
        return True

    async def broadcast(self, html: str) -> None:
        for ws in self.connections.copy():
            await self.send_to(ws, html)


hub = DashboardHub()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Register the dashboard and send it the current panels immediately.

    Later pushes come from the update loop; incoming messages are ignored.
    """
    ws_hub: DashboardHub = websocket.app.state.hub
    await ws_hub.connect(websocket)
    try:
        if not await ws_hub.send_to(websocket, render_market_panels(websocket.app)):
            return
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        ws_hub.disconnect(websocket)
