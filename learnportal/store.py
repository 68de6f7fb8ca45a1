"""
Process-wide portal state, built once by the app factory and injected into handlers
"""

from typing import Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient

from learnportal.config import PortalConfig
from learnportal.presence.manager import PresenceManager
from learnportal.storage.audit import AuditLog
from learnportal.storage.backends import JsonFileStorage, MongoStorage, Storage
from learnportal.storage.cache import PersistenceCache

ADMIN_DENIED_LOG = "admin_denied.log"
AI_FAILURE_LOG = "ai_logs.txt"


class PortalStore:
    def __init__(self, config: PortalConfig, storage: Storage, ai_client=None):
        self.config = config
        self.storage = storage
        self.cache = PersistenceCache(storage)
        self.denied_log = AuditLog(config.data_path(ADMIN_DENIED_LOG))
        self.ai_log = AuditLog(config.data_path(AI_FAILURE_LOG))
        self.presence = PresenceManager()
        self.ai_client = ai_client


def build_storage(config: PortalConfig) -> Storage:
    if config.storage_backend == "mongo":
        if not config.mongo_url:
            raise RuntimeError("MONGO_URL is required when STORAGE_BACKEND=mongo")
        client = AsyncIOMotorClient(config.mongo_url)
        return MongoStorage(client[config.mongo_db_name])
    return JsonFileStorage(config.data_dir)


def get_store(request: Request) -> PortalStore:
    """FastAPI dependency for the process store"""
    return request.app.state.store


def client_ip(request: Request, fallback: Optional[str] = "unknown") -> str:
    """First hop of X-Forwarded-For, else the socket peer"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return fallback
