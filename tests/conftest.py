import asyncio
from datetime import timedelta
from typing import Any, Callable, List

import pytest

from refresh_scheduler.config import SchedulerSettings
from refresh_scheduler.domain.job import Outcome
from refresh_scheduler.network import NetworkMonitor, ObservedNetwork
from refresh_scheduler.worker_factory import WorkerFactory
from refresh_scheduler.workers.protocol import WorkerContext


class ScriptedWorker:
    """
    Plays back a shared script: an Outcome is returned, an exception raised,
    a number is slept on before succeeding.
    """

    def __init__(self, context: WorkerContext, script: List[Any], calls: List[int]):
        self.context = context
        self.script = script
        self.calls = calls

    async def execute(self) -> Outcome:
        self.calls.append(self.context.run_attempt_count)
        step = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(step, BaseException):
            raise step
        if isinstance(step, (int, float)):
            await asyncio.sleep(step)
            return Outcome.SUCCESS
        return step


@pytest.fixture(scope="function")
def fast_settings() -> SchedulerSettings:
    return SchedulerSettings(
        min_interval=timedelta(milliseconds=50),
        execution_budget=timedelta(seconds=1),
        min_backoff=timedelta(0),
        max_backoff=timedelta(seconds=1),
    )


@pytest.fixture(scope="function")
def network() -> NetworkMonitor:
    return NetworkMonitor(ObservedNetwork.UNMETERED)


@pytest.fixture(scope="function")
def calls() -> List[int]:
    return []


@pytest.fixture(scope="function")
def scripted_factory(calls: List[int]) -> Callable[..., WorkerFactory]:
    """
    Build a WorkerFactory whose "scripted" worker follows the given steps.
    """
    def build(*script: Any) -> WorkerFactory:
        steps = list(script) or [Outcome.SUCCESS]
        factory = WorkerFactory()
        factory.register("scripted", lambda context: ScriptedWorker(context, steps, calls))
        return factory
    return build
