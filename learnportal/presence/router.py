from fastapi import APIRouter, WebSocket, WebSocketDisconnect

router = APIRouter(prefix="/ws")


@router.websocket("/presence")
async def presence_socket(websocket: WebSocket):
    manager = websocket.app.state.store.presence
    await manager.connect(websocket)

    try:
        while True:
            # Clients never need to send anything; this only waits for the close
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        await manager.disconnect(websocket)
