import asyncio
import logging
import os
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuditLog:
    """Append-only text log, one line per event. Write failures are swallowed."""

    def __init__(self, path: str):
        self.path = path

    def _write(self, line: str):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line)

    async def append(self, text: str) -> bool:
        line = f"{utc_timestamp()} - {text}\n"
        try:
            await asyncio.to_thread(self._write, line)
            return True
        except OSError as e:
            logger.error("Could not append to %s: %s", self.path, e)
            return False
