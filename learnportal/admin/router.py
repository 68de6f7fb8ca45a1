"""
Admin panel routes
User listing/deletion (shared-secret key) and the access-code gate
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import PlainTextResponse

from learnportal.admin import access, service
from learnportal.schemas import VerifyAdminRequest
from learnportal.store import PortalStore, client_ip, get_store

router = APIRouter(prefix="/api", tags=["Admin"])


@router.get("/admin/users")
async def list_users(
    key: Optional[str] = Query(None),
    store: PortalStore = Depends(get_store)
):
    """All registered users, passwords stripped. 403 on a bad key."""
    return service.list_users(store, key)


@router.delete("/admin/users/{email}")
async def delete_user(
    email: str,
    key: Optional[str] = Query(None),
    store: PortalStore = Depends(get_store)
):
    """Remove a user together with their progress record"""
    return service.delete_user(store, email, key)


@router.post("/verify-admin", response_class=PlainTextResponse)
async def verify_admin(
    request: Request,
    body: Any = Body(default=None),
    store: PortalStore = Depends(get_store)
):
    payload = VerifyAdminRequest.from_raw(body)
    allowed, message = await access.verify_admin_code(store, client_ip(request), payload.code)
    return PlainTextResponse(message, status_code=200 if allowed else 403)
