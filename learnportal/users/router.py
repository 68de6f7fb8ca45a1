from typing import Any

from fastapi import APIRouter, Body, Depends

from learnportal.schemas import ProgressUpdate, SigninRequest, SignupRequest
from learnportal.store import PortalStore, get_store
from learnportal.users import service

router = APIRouter(prefix="/api", tags=["Accounts"])

# ==================== ACCOUNTS ====================

@router.post("/signup")
async def signup(body: Any = Body(default=None), store: PortalStore = Depends(get_store)):
    """
    Register a student. A duplicate email is a soft failure (success=false),
    never an overwrite.
    """
    payload = SignupRequest.from_raw(body)
    return service.signup(store, payload.model_dump())


@router.post("/signin")
async def signin(body: Any = Body(default=None), store: PortalStore = Depends(get_store)):
    payload = SigninRequest.from_raw(body)
    return service.signin(store, payload.email, payload.password)

# ==================== PROGRESS ====================

@router.get("/progress/{email}")
async def get_progress(email: str, store: PortalStore = Depends(get_store)):
    return service.get_progress(store, email)


@router.post("/progress/{email}")
async def update_progress(
    email: str,
    body: Any = Body(default=None),
    store: PortalStore = Depends(get_store)
):
    """
    Merge module scores into the stored record.
    Omitted or null fields keep their previous value.
    """
    payload = ProgressUpdate.from_raw(body)
    return service.update_progress(store, email, payload.model_dump())
