"""
In-memory entity cache with periodic flush to durable storage
"""

import asyncio
import copy
import logging
from typing import Dict, Iterable, Set

from learnportal.storage.backends import Storage

logger = logging.getLogger(__name__)

USERS = "users"
PROGRESS = "progress"
BLOCKED_IPS = "blocked_ips"

CACHED_ENTITIES = (USERS, PROGRESS, BLOCKED_IPS)


class PersistenceCache:
    """
    Holds one mapping per entity. Storage is read once at startup,
    after which the in-memory mapping is authoritative until the next flush.
    """

    def __init__(self, storage: Storage, entities: Iterable[str] = CACHED_ENTITIES):
        self.storage = storage
        self._data: Dict[str, dict] = {name: {} for name in entities}
        self._dirty: Set[str] = set()

    async def load(self, entity: str) -> dict:
        """Load `entity` from storage. Missing or corrupt blobs become `{}`."""
        try:
            data = await self.storage.load(entity)
        except Exception as e:
            logger.warning("Could not load %s, starting empty: %s", entity, e)
            data = None

        if not isinstance(data, dict):
            data = {}

        self._data[entity] = data
        return data

    async def load_all(self):
        for entity in list(self._data):
            await self.load(entity)

    def get(self, entity: str) -> dict:
        return self._data[entity]

    def mark_dirty(self, entity: str):
        self._dirty.add(entity)

    async def flush(self):
        """Write every dirty entity whole. Failures are logged, not retried."""
        for entity in list(self._dirty):
            self._dirty.discard(entity)
            snapshot = copy.deepcopy(self._data[entity])
            try:
                await self.storage.save(entity, snapshot)
            except Exception as e:
                logger.error("Failed to persist %s: %s", entity, e)

    async def run_flush_loop(self, interval: float):
        """Background worker that flushes dirty entities every `interval` seconds"""
        while True:
            await asyncio.sleep(interval)
            await self.flush()
