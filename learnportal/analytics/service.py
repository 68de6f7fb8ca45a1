"""
Visit analytics
Visits bypass the cache: every track goes straight to storage as one append
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from learnportal.store import PortalStore

logger = logging.getLogger(__name__)

VISITS = "visits"
RECENT_LIMIT = 10


async def load_visits(store: PortalStore) -> List[dict]:
    try:
        visits = await store.storage.load(VISITS)
    except Exception as e:
        logger.warning("Visit log unreadable, treating as empty: %s", e)
        return []
    return visits if isinstance(visits, list) else []


async def track_visit(
    store: PortalStore,
    ip: str,
    user_agent: Any,
    platform: Any,
    screen: Any,
    now: Optional[datetime] = None
) -> dict:
    now = now or datetime.now(timezone.utc)
    record = {
        "timestamp": now.isoformat(),
        "ip": ip,
        "userAgent": user_agent,
        "platform": platform,
        "screen": screen,
    }

    try:
        await store.storage.append(VISITS, record)
    except Exception as e:
        logger.error("Failed to record visit from %s: %s", ip, e)

    return {"message": "Visit tracked"}


async def get_stats(store: PortalStore, now: Optional[datetime] = None) -> Dict:
    """
    Aggregate visit stats:
    - total: every visit ever recorded
    - today: visits whose timestamp date matches today's UTC date
    - online: current presence count
    - recent: last 10 visits, oldest first
    """
    now = now or datetime.now(timezone.utc)
    today_prefix = now.astimezone(timezone.utc).strftime("%Y-%m-%d")

    visits = await load_visits(store)
    today = sum(
        1 for visit in visits
        if str(visit.get("timestamp", "")).startswith(today_prefix)
    )

    return {
        "total": len(visits),
        "today": today,
        "online": store.presence.online,
        "recent": visits[-RECENT_LIMIT:],
    }
