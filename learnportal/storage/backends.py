"""
Durable blob storage for portal entities
Each entity (users, progress, blocked_ips, visits) is stored whole as one JSON blob
"""

import asyncio
import json
import os
from datetime import datetime
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase


class Storage:
    """Whole-blob key/value storage. Subclasses raise on I/O failure."""

    async def load(self, name: str) -> Optional[Any]:
        """Return the stored blob for `name`, or None if nothing was ever saved"""
        raise NotImplementedError

    async def save(self, name: str, data: Any):
        raise NotImplementedError

    async def append(self, name: str, record: Any):
        """Add one record to a list entity as a single step"""
        raise NotImplementedError


class JsonFileStorage(Storage):
    """One pretty-printed `<name>.json` file per entity inside `data_dir`"""

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        self._append_lock = asyncio.Lock()

    def path_for(self, name: str) -> str:
        return os.path.join(self.data_dir, f"{name}.json")

    def _read(self, name: str) -> Optional[Any]:
        path = self.path_for(name)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, name: str, data: Any):
        os.makedirs(self.data_dir, exist_ok=True)
        with open(self.path_for(name), "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    async def load(self, name: str) -> Optional[Any]:
        return await asyncio.to_thread(self._read, name)

    async def save(self, name: str, data: Any):
        await asyncio.to_thread(self._write, name, data)

    async def append(self, name: str, record: Any):
        # whole-file read-modify-write, serialised by the lock
        async with self._append_lock:
            try:
                records = await self.load(name)
            except ValueError:
                records = None
            if not isinstance(records, list):
                records = []
            records.append(record)
            await self.save(name, records)


class MongoStorage(Storage):
    """
    Entities kept as documents in a single `kv_store` collection.
    Maps are stored as a JSON string since emails (with dots) are map keys;
    lists live in an `items` array so appends can use $push.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection: str = "kv_store"):
        self.collection = db[collection]

    async def load(self, name: str) -> Optional[Any]:
        doc = await self.collection.find_one({"_id": name})
        if not doc:
            return None
        if "items" in doc:
            return doc["items"]
        return json.loads(doc["payload"])

    async def save(self, name: str, data: Any):
        doc = {"_id": name, "updated_at": datetime.utcnow()}
        if isinstance(data, list):
            doc["items"] = data
        else:
            doc["payload"] = json.dumps(data)
        await self.collection.replace_one({"_id": name}, doc, upsert=True)

    async def append(self, name: str, record: Any):
        await self.collection.update_one(
            {"_id": name},
            {"$push": {"items": record}, "$set": {"updated_at": datetime.utcnow()}},
            upsert=True,
        )
