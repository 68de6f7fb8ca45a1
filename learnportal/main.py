import asyncio
import contextlib
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from learnportal.admin.router import router as admin_router
from learnportal.ai.router import router as ai_router
from learnportal.analytics.router import router as analytics_router
from learnportal.config import PortalConfig, get_config_from_env
from learnportal.errors import register_error_handlers
from learnportal.presence.router import router as presence_router
from learnportal.storage.backends import Storage
from learnportal.store import PortalStore, build_storage
from learnportal.system.health_router import router as health_router
from learnportal.users.router import router as users_router

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[PortalConfig] = None,
    storage: Optional[Storage] = None,
    ai_client=None
) -> FastAPI:
    """Build the portal app around one PortalStore"""
    config = config or get_config_from_env()
    storage = storage or build_storage(config)

    app = FastAPI(title="Learning Portal API")
    app.state.store = PortalStore(config, storage, ai_client=ai_client)
    app.state.flush_task = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def startup_event():
        store = app.state.store
        await store.cache.load_all()
        app.state.flush_task = asyncio.create_task(
            store.cache.run_flush_loop(config.flush_interval_seconds)
        )
        logger.info("✅ Portal started (storage=%s)", config.storage_backend)

    @app.on_event("shutdown")
    async def shutdown_event():
        task = app.state.flush_task
        if task:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await app.state.store.cache.flush()
        logger.info("Portal stopped, caches flushed")

    register_error_handlers(app)

    # ==================== ROUTER REGISTRATION ====================
    app.include_router(users_router)
    app.include_router(admin_router)
    app.include_router(analytics_router)
    app.include_router(ai_router)
    app.include_router(presence_router)
    app.include_router(health_router)
    # ============================================================

    return app


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = get_config_from_env()
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port)
