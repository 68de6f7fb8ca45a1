"""
Portal configuration
Secrets, storage location and tunables, read from environment variables
"""

import os
from typing import List, Optional


def _split_codes(raw: str) -> List[str]:
    return [code.strip() for code in raw.split(",") if code.strip()]


def _as_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


class PortalConfig:
    """Runtime configuration for one portal process"""

    def __init__(
        self,
        data_dir: str = ".",
        storage_backend: str = "json",
        mongo_url: Optional[str] = None,
        mongo_db_name: str = "learnportal",
        admin_key: str = "",
        admin_codes: Optional[List[str]] = None,
        ai_api_key: Optional[str] = None,
        ai_model: str = "llama3.1-8b",
        flush_interval_seconds: float = 5.0,
        block_hours: float = 12.0,
        hash_passwords: bool = True,
        port: int = 4000,
    ):
        self.data_dir = data_dir
        self.storage_backend = storage_backend
        self.mongo_url = mongo_url
        self.mongo_db_name = mongo_db_name
        self.admin_key = admin_key
        self.admin_codes = admin_codes if admin_codes is not None else ["africa2025"]
        self.ai_api_key = ai_api_key
        self.ai_model = ai_model
        self.flush_interval_seconds = flush_interval_seconds
        self.block_hours = block_hours
        self.hash_passwords = hash_passwords
        self.port = port

    @property
    def block_millis(self) -> int:
        return int(self.block_hours * 60 * 60 * 1000)

    def data_path(self, filename: str) -> str:
        return os.path.join(self.data_dir, filename)


def get_config_from_env() -> PortalConfig:
    """
    Create portal config from environment variables

    Environment variables:
    - DATA_DIR: where JSON blobs and log files live
    - STORAGE_BACKEND: "json" (default) or "mongo"
    - MONGO_URL / MONGO_DB_NAME: used by the mongo backend
    - ADMIN_KEY: admin panel secret (empty disables the panel)
    - ADMIN_CODES: comma-separated access codes for /api/verify-admin
    - CEREBRAS_API_KEY / AI_MODEL: chat-completion settings
    - FLUSH_INTERVAL_SECONDS, BLOCK_HOURS, HASH_PASSWORDS, PORT
    """
    return PortalConfig(
        data_dir=os.getenv("DATA_DIR", "."),
        storage_backend=os.getenv("STORAGE_BACKEND", "json"),
        mongo_url=os.getenv("MONGO_URL"),
        mongo_db_name=os.getenv("MONGO_DB_NAME", "learnportal"),
        admin_key=os.getenv("ADMIN_KEY", ""),
        admin_codes=_split_codes(os.getenv("ADMIN_CODES", "africa2025")),
        ai_api_key=os.getenv("CEREBRAS_API_KEY"),
        ai_model=os.getenv("AI_MODEL", "llama3.1-8b"),
        flush_interval_seconds=float(os.getenv("FLUSH_INTERVAL_SECONDS", "5")),
        block_hours=float(os.getenv("BLOCK_HOURS", "12")),
        hash_passwords=_as_bool(os.getenv("HASH_PASSWORDS", "true")),
        port=int(os.getenv("PORT", "4000")),
    )
