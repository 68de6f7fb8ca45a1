from fastapi import WebSocket
from typing import List
import asyncio


class PresenceManager:
    def __init__(self):
        self.connections: List[WebSocket] = []
        self.lock = asyncio.Lock()

    @property
    def online(self) -> int:
        return len(self.connections)

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        async with self.lock:
            self.connections.append(websocket)
        await self.broadcast_count()

    async def disconnect(self, websocket: WebSocket):
        async with self.lock:
            if websocket in self.connections:
                self.connections.remove(websocket)
        await self.broadcast_count()

    async def broadcast_count(self):
        async with self.lock:
            targets = list(self.connections)

        payload = {"type": "userCount", "count": len(targets)}
        disconnected = []
        if targets:
            await asyncio.gather(*[self._send_and_track(ws, payload, disconnected) for ws in targets])

        if disconnected:
            async with self.lock:
                for ws in disconnected:
                    if ws in self.connections:
                        self.connections.remove(ws)

    async def _send_and_track(self, ws: WebSocket, payload: dict, error_list: list):
        try:
            await ws.send_json(payload)
        except Exception:
            error_list.append(ws)
