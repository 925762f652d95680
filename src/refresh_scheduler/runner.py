"""
Per-job state machine.

A JobRunner owns one job definition. Its periodic loop waits for the next
trigger time and for the network precondition, then dispatches an episode.
An episode invokes the worker, retries it with backoff while it asks for a
retry, and always ends in SUCCESS or FAILURE within the execution budget:

    IDLE -> RUNNING -> IDLE            (SUCCESS or FAILURE)
    RUNNING -> PENDING_RETRY -> RUNNING (RETRY, after backoff)

Triggers arriving while an episode is in flight are dropped.
"""

import asyncio
import logging
from typing import Optional

from refresh_scheduler.config import SchedulerSettings
from refresh_scheduler.domain.definition import JobDefinition
from refresh_scheduler.domain.job import JobInstance, JobState, Outcome
from refresh_scheduler.errors import BudgetExceededError
from refresh_scheduler.network import NetworkMonitor
from refresh_scheduler.worker_factory import WorkerFactory
from refresh_scheduler.workers.protocol import WorkerContext

logger = logging.getLogger(__name__)


class JobRunner:
    def __init__(
        self,
        definition: JobDefinition,
        worker_factory: WorkerFactory,
        network: NetworkMonitor,
        settings: SchedulerSettings,
        dispatch_lock: Optional[asyncio.Lock] = None,
    ):
        self.definition: JobDefinition = definition
        self.worker_factory: WorkerFactory = worker_factory
        self.network: NetworkMonitor = network
        self.settings: SchedulerSettings = settings
        self.state: JobState = JobState.IDLE
        self.current: Optional[JobInstance] = None
        self._dispatch_lock: asyncio.Lock = dispatch_lock or asyncio.Lock()
        self._loop_task: Optional[asyncio.Task] = None
        self._episode_task: Optional[asyncio.Task] = None

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def is_started(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def start(self) -> None:
        """
        Start the periodic loop. The first trigger fires after the initial delay.
        """
        if not self.is_started:
            self._loop_task = asyncio.create_task(self._periodic_loop(), name=f"runner:{self.name}")

    async def stop(self) -> None:
        """
        Stop the periodic loop and cancel the episode in flight, if any.
        """
        tasks = [task for task in (self._loop_task, self._episode_task) if task and not task.done()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._loop_task = None
        self._episode_task = None
        # an episode cancelled before its first step never resets the state
        self.state = JobState.IDLE
        self.current = None

    def trigger(self) -> bool:
        """
        Start an episode in the background unless one is already in flight.
        """
        if self.state != JobState.IDLE:
            logger.info("Trigger for job '%s' dropped: state is %s", self.name, self.state.value)
            return False
        self.state = JobState.RUNNING
        self._episode_task = asyncio.create_task(self._run_episode(), name=f"episode:{self.name}")
        return True

    async def run_episode(self) -> Optional[Outcome]:
        """
        Run one episode to completion and return its outcome, or None when
        another episode is already in flight.
        """
        if self.state != JobState.IDLE:
            logger.info("Episode for job '%s' not started: state is %s", self.name, self.state.value)
            return None
        self.state = JobState.RUNNING
        return await self._run_episode()

    async def _periodic_loop(self):
        delay = self.definition.initial_delay.total_seconds()
        required = self.definition.required_network
        while True:
            if delay > 0:
                await asyncio.sleep(delay)
            if not self.network.is_satisfied(required):
                logger.info("Job '%s' deferred until %s network is available", self.name, required.value)
                await self.network.wait_until_satisfied(required)
            async with self._dispatch_lock:
                self.trigger()
            delay = self.definition.interval.total_seconds()

    async def _run_episode(self) -> Outcome:
        instance = JobInstance(definition=self.definition)
        self.current = instance
        budget = self.settings.execution_budget.total_seconds()
        deadline = asyncio.get_running_loop().time() + budget
        outcome = Outcome.FAILURE
        try:
            outcome = await asyncio.wait_for(self._run_attempts(instance, deadline), timeout=budget)
        except asyncio.TimeoutError:
            logger.error("%s; episode aborted", BudgetExceededError(self.name, budget))
        except asyncio.CancelledError:
            logger.warning("Episode %s of job '%s' was cancelled", instance.id, self.name)
            raise
        finally:
            instance.set_outcome(outcome)
            self.state = JobState.IDLE
            self.current = None
            logger.info("Job '%s' finished with %s after %d attempt(s)",
                        self.name, outcome.value, instance.run_attempt_count + 1)
        return outcome

    async def _run_attempts(self, instance: JobInstance, deadline: float) -> Outcome:
        loop = asyncio.get_running_loop()
        attempt = 0
        while True:
            instance.run_attempt_count = attempt
            instance.set_state(JobState.RUNNING)
            self.state = JobState.RUNNING
            outcome = await self._invoke(attempt)
            if outcome != Outcome.RETRY:
                return outcome

            delay = self.definition.backoff_for(attempt, self.settings.max_backoff).total_seconds()
            if loop.time() + delay >= deadline:
                logger.error("%s; retry after %.1fs does not fit",
                             BudgetExceededError(self.name, self.settings.execution_budget.total_seconds()), delay)
                return Outcome.FAILURE

            instance.set_state(JobState.PENDING_RETRY)
            self.state = JobState.PENDING_RETRY
            logger.info("Job '%s' will retry in %.1fs", self.name, delay)
            await asyncio.sleep(delay)
            await self.network.wait_until_satisfied(self.definition.required_network)
            attempt += 1

    async def _invoke(self, attempt: int) -> Outcome:
        context = WorkerContext(job_name=self.name, run_attempt_count=attempt, settings=self.settings)
        try:
            worker = self.worker_factory.create(self.definition.worker, context)
            outcome = await worker.execute()
        except Exception:
            logger.exception("Job '%s' failed on attempt %d", self.name, attempt + 1)
            return Outcome.FAILURE
        if not isinstance(outcome, Outcome):
            logger.error("Worker '%s' returned %r instead of an Outcome", self.definition.worker, outcome)
            return Outcome.FAILURE
        return outcome
