from .protocol import Worker, WorkerContext
from .refresh import RefreshDataWorker, default_repository_factory

__all__ = ["Worker", "WorkerContext", "RefreshDataWorker", "default_repository_factory"]
