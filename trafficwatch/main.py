import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from trafficwatch.config import settings
from trafficwatch.logging_config import configure_logging
from trafficwatch.routers import checks, system
from trafficwatch.services.checker import run_check

logger = logging.getLogger(__name__)


async def _check_loop(interval: float):
    while True:
        await asyncio.sleep(interval)
        try:
            result = await run_check(settings)
            logger.info("Scheduled check finished: %s", result.status.value)
        except Exception:
            logger.exception("Scheduled check failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    task = None
    if settings.check_interval_seconds > 0:
        task = asyncio.create_task(_check_loop(settings.check_interval_seconds))
        logger.info("Traffic check scheduled every %ss", settings.check_interval_seconds)
    yield
    if task is not None:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


app = FastAPI(title="Traffic Watch", lifespan=lifespan)

app.include_router(system.router)
app.include_router(checks.router)
