"""
Admin access-code check with a temporary per-IP denylist.

A wrong code blocks the caller's IP for a fixed window (12h by default).
While blocked, every attempt is refused without looking at the code,
and each new failure restarts the window.
"""

import logging
import time
from typing import Optional

from learnportal.storage.cache import BLOCKED_IPS
from learnportal.store import PortalStore

logger = logging.getLogger(__name__)

BLOCKED_MESSAGE = "Access temporarily blocked. Try again later."
DENIED_MESSAGE = "Access denied"
VERIFIED_MESSAGE = "Verified"


def now_millis() -> int:
    return int(time.time() * 1000)


def is_blocked(store: PortalStore, ip: str, now_ms: Optional[int] = None) -> bool:
    expiry = store.cache.get(BLOCKED_IPS).get(ip)
    if expiry is None:
        return False
    now_ms = now_millis() if now_ms is None else now_ms
    return now_ms < expiry


def block_ip(store: PortalStore, ip: str, now_ms: Optional[int] = None) -> int:
    now_ms = now_millis() if now_ms is None else now_ms
    expiry = now_ms + store.config.block_millis
    store.cache.get(BLOCKED_IPS)[ip] = expiry
    store.cache.mark_dirty(BLOCKED_IPS)
    return expiry


async def verify_admin_code(store: PortalStore, ip: str, code, now_ms: Optional[int] = None):
    """
    Returns (allowed, message). `code` is whatever the client sent; anything
    that is not exactly one of the configured codes (missing, non-string) is a failure.
    """
    if is_blocked(store, ip, now_ms):
        return False, BLOCKED_MESSAGE

    if not isinstance(code, str) or code not in store.config.admin_codes:
        block_ip(store, ip, now_ms)
        logger.warning("Blocked %s after a wrong admin code", ip)
        await store.denied_log.append(f"Denied admin access from {ip}")
        return False, DENIED_MESSAGE

    return True, VERIFIED_MESSAGE
