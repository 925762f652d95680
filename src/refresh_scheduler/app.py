"""
Application wiring: schedule the daily refresh of the video cache.

Registration happens off the startup path in a bounded background task
(delayed_init) so that starting the host is not slowed down by it.
"""

import asyncio
import logging
from datetime import timedelta
from typing import Optional

from refresh_scheduler.backends.base import BaseBackend
from refresh_scheduler.backends.local import LocalBackend
from refresh_scheduler.config import SchedulerSettings
from refresh_scheduler.domain.definition import JobDefinition, Constraints, NetworkType, ConflictPolicy
from refresh_scheduler.storages.sqlalchemy import SqlAlchemyJobStore
from refresh_scheduler.worker_factory import WorkerFactory
from refresh_scheduler.workers.refresh import RefreshDataWorker

logger = logging.getLogger(__name__)

REFRESH_WORK_NAME = "RefreshDataWorker"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)
    logger.debug("Logging configured: level=%s", level.upper())


def build_refresh_definition(policy: ConflictPolicy = ConflictPolicy.KEEP) -> JobDefinition:
    """
    Daily refresh, only on an unmetered network. With KEEP only the first
    registration ever takes effect; REPLACE reinstalls it on every start.
    """
    return JobDefinition(
        name=REFRESH_WORK_NAME,
        worker=REFRESH_WORK_NAME,
        interval=timedelta(days=1),
        constraints=Constraints(required_network=NetworkType.UNMETERED),
        conflict_policy=policy,
    )


async def setup_recurring_work(backend: BaseBackend, definition: Optional[JobDefinition] = None) -> JobDefinition:
    if not backend.worker_factory.is_registered(REFRESH_WORK_NAME):
        backend.worker_factory.register(REFRESH_WORK_NAME, RefreshDataWorker)
    logger.debug("setup_recurring_work")
    return await backend.ensure_scheduled(definition or build_refresh_definition())


def delayed_init(backend: BaseBackend) -> asyncio.Task:
    """
    Configure logging and register the recurring work in the background.
    The caller owns the returned task and may await or cancel it.
    """
    async def _init() -> JobDefinition:
        configure_logging(backend.settings.log_level)
        return await setup_recurring_work(backend)

    return asyncio.create_task(_init(), name="delayed-init")


async def run(settings: Optional[SchedulerSettings] = None, stop_event: Optional[asyncio.Event] = None) -> None:
    """
    Run the scheduler with a durable job store until stop_event is set.
    """
    settings = settings or SchedulerSettings.from_env()
    stop_event = stop_event or asyncio.Event()
    job_store = SqlAlchemyJobStore(settings.jobs_database_url)
    backend = LocalBackend(WorkerFactory(), job_store, settings)
    await backend.start()
    try:
        await delayed_init(backend)
        await stop_event.wait()
    finally:
        await backend.stop()
        await job_store.close()
