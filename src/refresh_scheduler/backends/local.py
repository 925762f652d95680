import asyncio
import logging
from typing import Dict, Optional

from refresh_scheduler.config import SchedulerSettings
from refresh_scheduler.domain.definition import JobDefinition
from refresh_scheduler.domain.job import JobInstance, JobState
from refresh_scheduler.network import NetworkMonitor
from refresh_scheduler.runner import JobRunner
from refresh_scheduler.worker_factory import WorkerFactory
from refresh_scheduler.storages.protocol import JobStore
from refresh_scheduler.storages.sqlalchemy import InMemoryJobStore, SqlAlchemyJobStore
from .base import BaseBackend

logger = logging.getLogger(__name__)


class LocalBackend(BaseBackend):
    """
    Single-process backend running every stored job on the asyncio event loop.

    Definitions live in the job store, so with a durable store they survive
    restarts: start() resumes every stored job whose worker is registered.
    """

    def __init__(
        self,
        worker_factory: WorkerFactory,
        job_store: Optional[JobStore] = None,
        settings: Optional[SchedulerSettings] = None,
        network: Optional[NetworkMonitor] = None,
    ):
        super().__init__(worker_factory, job_store or InMemoryJobStore(), settings, network)
        self.runners: Dict[str, JobRunner] = {}
        self.is_running: bool = False

    async def start(self):
        """
        Start the backend and resume the stored jobs.
        """
        if isinstance(self.job_store, SqlAlchemyJobStore):
            await self.job_store.create_tables()
        async with self._registry_lock:
            if self.is_running:
                return
            self.is_running = True
            for definition in await self.job_store.list_definitions():
                if not self.validate_definition(definition):
                    logger.warning("Job '%s' stays idle: no worker registered with name '%s'",
                                   definition.name, definition.worker)
                    continue
                self._start_runner(definition)
        logger.info("LocalBackend started with %d job(s).", len(self.runners))

    async def stop(self):
        """
        Stop the backend, cancelling every episode in flight.
        """
        async with self._registry_lock:
            if not self.is_running:
                return
            self.is_running = False
            runners = list(self.runners.values())
            self.runners.clear()
            await asyncio.gather(*(runner.stop() for runner in runners))
        logger.info("LocalBackend stopped.")

    def get_state(self, name: str) -> Optional[JobState]:
        runner = self.runners.get(name)
        return runner.state if runner else None

    def get_current_instance(self, name: str) -> Optional[JobInstance]:
        runner = self.runners.get(name)
        return runner.current if runner else None

    async def trigger(self, name: str) -> bool:
        """
        Dispatch an episode of a job now, outside its regular schedule.
        """
        async with self._registry_lock:
            runner = self.runners.get(name)
            if runner is None:
                return False
            return runner.trigger()

    async def _schedule(self, definition: JobDefinition) -> None:
        if not self.is_running or definition.name in self.runners:
            return
        self._start_runner(definition)

    async def _unschedule(self, name: str) -> None:
        runner = self.runners.pop(name, None)
        if runner is not None:
            await runner.stop()

    def _start_runner(self, definition: JobDefinition) -> None:
        runner = JobRunner(
            definition,
            self.worker_factory,
            self.network,
            self.settings,
            dispatch_lock=self._registry_lock,
        )
        self.runners[definition.name] = runner
        runner.start()
