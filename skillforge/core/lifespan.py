import contextlib
from contextlib import asynccontextmanager
import asyncio
import logging

from skillforge.analytics.db import init_db, purge_old_records
from skillforge.ai.config import load_ai_config
from skillforge.core.resume_store import init_resume_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    init_db()
    init_resume_store()

    ai_config = load_ai_config()
    if not ai_config.api_keys:
        logger.warning("ai_keys_missing provider=%s: AI endpoints will return errors", ai_config.provider)
    else:
        logger.info("ai_configured provider=%s model=%s keys=%s", ai_config.provider, ai_config.model, len(ai_config.api_keys))

    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                deleted = purge_old_records()
                if any(deleted.values()):
                    logger.info("analytics_retention_purge deleted=%s", deleted)
            except Exception as exc:
                logger.warning("analytics_retention_purge_failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=3600)
            except asyncio.TimeoutError:
                continue

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
