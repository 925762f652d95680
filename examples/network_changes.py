import asyncio
from datetime import timedelta

from refresh_scheduler.backends.local import LocalBackend
from refresh_scheduler.config import SchedulerSettings
from refresh_scheduler.domain.definition import JobDefinition, Constraints, NetworkType
from refresh_scheduler.domain.job import Outcome
from refresh_scheduler.network import ObservedNetwork
from refresh_scheduler.worker_factory import WorkerFactory
from refresh_scheduler.workers.protocol import WorkerContext


class PrintWorker:
    def __init__(self, context: WorkerContext):
        self.context = context

    async def execute(self) -> Outcome:
        print(f"Running job {self.context.job_name}")
        return Outcome.SUCCESS

# Shrink the limits so the demo runs in seconds
settings = SchedulerSettings(
    min_interval=timedelta(seconds=1),
    min_backoff=timedelta(0),
    network_type=ObservedNetwork.METERED,
)
worker_factory = WorkerFactory()
worker_factory.register("print", PrintWorker)
backend = LocalBackend(worker_factory, settings=settings)

async def main():
    await backend.start()
    await backend.ensure_scheduled(JobDefinition(
        name="sync",
        worker="print",
        interval=timedelta(seconds=1),
        constraints=Constraints(required_network=NetworkType.UNMETERED),
    ))
    print("On a metered network, nothing runs...")
    await asyncio.sleep(2)
    print("Switching to an unmetered network")
    backend.network.update(ObservedNetwork.UNMETERED)
    await asyncio.sleep(2.5)
    await backend.stop()

if __name__ == "__main__":
    asyncio.run(main())
