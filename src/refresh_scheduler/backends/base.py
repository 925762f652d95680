from abc import ABC, abstractmethod
import asyncio
import logging
from typing import List, Optional
from refresh_scheduler.config import SchedulerSettings
from refresh_scheduler.domain.definition import JobDefinition, ConflictPolicy
from refresh_scheduler.network import NetworkMonitor
from refresh_scheduler.worker_factory import WorkerFactory
from refresh_scheduler.storages.protocol import JobStore

logger = logging.getLogger(__name__)


class BaseBackend(ABC):
    """
    Keeps at most one definition per job name in the job store and
    resolves repeated registrations with the definition's conflict policy.
    Subclasses decide how stored definitions are run.
    """

    def __init__(
        self,
        worker_factory: WorkerFactory,
        job_store: JobStore,
        settings: Optional[SchedulerSettings] = None,
        network: Optional[NetworkMonitor] = None,
    ):
        self.worker_factory: WorkerFactory = worker_factory
        self.job_store: JobStore = job_store
        self.settings: SchedulerSettings = settings or SchedulerSettings()
        self.network: NetworkMonitor = network or NetworkMonitor(self.settings.network_type)
        self._registry_lock: asyncio.Lock = asyncio.Lock()

    def validate_definition(self, definition: JobDefinition) -> bool:
        return self.worker_factory.is_registered(definition.worker)

    def enforce_limits(self, definition: JobDefinition) -> JobDefinition:
        """
        Clamp the interval and backoff of a definition into the supported range.
        """
        updates = {}
        if definition.interval < self.settings.min_interval:
            logger.warning("Interval %s of job '%s' is below the minimum, using %s",
                           definition.interval, definition.name, self.settings.min_interval)
            updates["interval"] = self.settings.min_interval
        if definition.backoff_delay < self.settings.min_backoff:
            updates["backoff_delay"] = self.settings.min_backoff
        elif definition.backoff_delay > self.settings.max_backoff:
            updates["backoff_delay"] = self.settings.max_backoff
        if updates:
            return definition.model_copy(update=updates)
        return definition

    async def start(self):
        pass

    async def stop(self):
        pass

    async def ensure_scheduled(self, definition: JobDefinition) -> JobDefinition:
        """
        Register a definition under its name and return the one active afterwards.

        With KEEP an existing job is left untouched and the new definition is
        discarded. With REPLACE the existing job is cancelled and the new
        definition installed with a fresh timer.

        Raises:
            ValueError: If the definition's worker is not registered.
        """
        if not self.validate_definition(definition):
            raise ValueError(f"No worker registered with name '{definition.worker}'")
        definition = self.enforce_limits(definition)

        async with self._registry_lock:
            existing = await self.job_store.get_definition(definition.name)
            if existing is not None and definition.conflict_policy == ConflictPolicy.KEEP:
                logger.info("Job '%s' already scheduled as %s, keeping it", existing.name, existing.id)
                await self._schedule(existing)
                return existing
            if existing is not None:
                logger.info("Replacing job '%s' (%s -> %s)", existing.name, existing.id, definition.id)
                await self._unschedule(existing.name)
            else:
                logger.info("Scheduling job '%s' as %s", definition.name, definition.id)
            await self.job_store.save_definition(definition)
            await self._schedule(definition)
            return definition

    async def cancel(self, name: str) -> bool:
        """
        Unschedule a job and forget its definition.
        """
        async with self._registry_lock:
            await self._unschedule(name)
            deleted = await self.job_store.delete_definition(name)
        if deleted:
            logger.info("Cancelled job '%s'", name)
        return deleted

    async def get_definition(self, name: str) -> Optional[JobDefinition]:
        return await self.job_store.get_definition(name)

    async def list_definitions(self) -> List[JobDefinition]:
        return await self.job_store.list_definitions()

    @abstractmethod
    async def _schedule(self, definition: JobDefinition) -> None:
        """Start running a stored definition, unless it already runs."""

    @abstractmethod
    async def _unschedule(self, name: str) -> None:
        """Stop running the job with that name, cancelling work in flight."""
