from fastapi import APIRouter, Depends

from learnportal.store import PortalStore, get_store

router = APIRouter(tags=["System"])


@router.get("/health")
def health(store: PortalStore = Depends(get_store)):
    return {"status": "ok", "online": store.presence.online}
