import pytest
from refresh_scheduler.domain.job import Outcome
from refresh_scheduler.worker_factory import WorkerFactory
from refresh_scheduler.workers.protocol import Worker, WorkerContext

class DummyWorker(Worker):
    def __init__(self, context: WorkerContext):
        self.context = context

    async def execute(self) -> Outcome:
        return Outcome.SUCCESS

@pytest.fixture
def factory() -> WorkerFactory:
    return WorkerFactory()

def test_register_worker(factory: WorkerFactory) -> None:
    factory.register("dummy", DummyWorker)
    assert factory.is_registered("dummy")
    assert factory.registered_workers == ["dummy"]

def test_register_duplicate_worker(factory: WorkerFactory) -> None:
    factory.register("dummy", DummyWorker)
    with pytest.raises(ValueError, match="already registered"):
        factory.register("dummy", DummyWorker)

def test_register_empty_name(factory: WorkerFactory) -> None:
    with pytest.raises(ValueError):
        factory.register("", DummyWorker)

def test_create_builds_fresh_instances(factory: WorkerFactory) -> None:
    factory.register("dummy", DummyWorker)
    context = WorkerContext(job_name="sync", run_attempt_count=2)
    first = factory.create("dummy", context)
    second = factory.create("dummy", context)
    assert isinstance(first, DummyWorker)
    assert first is not second
    assert first.context.run_attempt_count == 2

def test_create_from_closure(factory: WorkerFactory) -> None:
    class Closure:
        async def execute(self) -> Outcome:
            return Outcome.RETRY

    factory.register("closure", lambda context: Closure())
    assert isinstance(factory.create("closure", WorkerContext(job_name="sync")), Closure)

def test_create_unknown_worker(factory: WorkerFactory) -> None:
    with pytest.raises(KeyError, match="No worker registered with name 'missing'"):
        factory.create("missing", WorkerContext(job_name="sync"))
