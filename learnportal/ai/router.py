from typing import Any

from fastapi import APIRouter, Body, Depends

from learnportal.ai.services import ask_ai
from learnportal.schemas import AskRequest
from learnportal.store import PortalStore, get_store

router = APIRouter(prefix="/api", tags=["AI"])


@router.post("/ai")
async def ai_ask(body: Any = Body(default=None), store: PortalStore = Depends(get_store)):
    payload = AskRequest.from_raw(body)
    return await ask_ai(store, payload.message)
