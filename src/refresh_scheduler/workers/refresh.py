import logging
from typing import Callable, Optional

from refresh_scheduler.domain.job import Outcome
from refresh_scheduler.errors import TransientNetworkError
from refresh_scheduler.repositories.database import get_database
from refresh_scheduler.repositories.protocol import Repository
from refresh_scheduler.repositories.videos import VideosRepository
from refresh_scheduler.workers.protocol import Worker, WorkerContext

logger = logging.getLogger(__name__)

RepositoryFactory = Callable[[WorkerContext], Repository]


def default_repository_factory(context: WorkerContext) -> Repository:
    database = get_database(context.settings.database_url)
    return VideosRepository(database, context.settings.feed_url)


class RefreshDataWorker(Worker):
    """
    Refreshes the local cache from the network.

    A repository is built for every invocation and closed when it ends.
    Transient network failures ask for a retry; anything else propagates
    and ends the episode as a failure.
    """

    def __init__(self, context: WorkerContext, repository_factory: Optional[RepositoryFactory] = None):
        self.context = context
        self.repository_factory: RepositoryFactory = repository_factory or default_repository_factory

    async def execute(self) -> Outcome:
        repository = self.repository_factory(self.context)
        try:
            await repository.refresh()
        except TransientNetworkError as e:
            logger.warning("Refresh of '%s' failed on attempt %d, will retry: %s",
                           self.context.job_name, self.context.run_attempt_count + 1, e)
            return Outcome.RETRY
        finally:
            await repository.close()
        return Outcome.SUCCESS
