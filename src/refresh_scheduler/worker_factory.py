from typing import Callable, Dict, List

from refresh_scheduler.workers.protocol import Worker, WorkerContext

WorkerBuilder = Callable[[WorkerContext], Worker]


class WorkerFactory:
    """
    Factory class for creating workers.

    A builder is any callable taking a WorkerContext and returning a Worker:
    a worker class or a plain closure.
    """
    def __init__(self):
        self._builders: Dict[str, WorkerBuilder] = {}

    @property
    def registered_workers(self) -> List[str]:
        return list(self._builders)

    def is_registered(self, worker_name: str) -> bool:
        return worker_name in self._builders

    def register(self, worker_name: str, builder: WorkerBuilder) -> None:
        """
        Register a builder under the given worker name.

        Args:
            worker_name (str): The name job definitions refer to.
            builder (WorkerBuilder): Callable building a fresh worker per invocation.
        """
        if not worker_name:
            raise ValueError("Worker name must not be empty")
        if worker_name in self._builders:
            raise ValueError(f"A worker named '{worker_name}' is already registered")
        self._builders[worker_name] = builder

    def create(self, worker_name: str, context: WorkerContext) -> Worker:
        """
        Build a new worker instance for one invocation.

        Raises:
            KeyError: If no worker is registered under that name.
        """
        if worker_name not in self._builders:
            raise KeyError(f"No worker registered with name '{worker_name}'")
        return self._builders[worker_name](context)
