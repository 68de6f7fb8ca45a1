from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from learnportal.analytics import service
from learnportal.schemas import VisitRequest
from learnportal.store import PortalStore, client_ip, get_store

router = APIRouter(prefix="/api", tags=["Analytics"])


@router.post("/track-visit")
async def track_visit(
    request: Request,
    body: Any = Body(default=None),
    store: PortalStore = Depends(get_store)
):
    payload = VisitRequest.from_raw(body)
    return await service.track_visit(
        store,
        ip=client_ip(request),
        user_agent=payload.userAgent,
        platform=payload.platform,
        screen=payload.screen,
    )


@router.get("/stats")
async def stats(store: PortalStore = Depends(get_store)):
    return await service.get_stats(store)
