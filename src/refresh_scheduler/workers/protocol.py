from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from refresh_scheduler.config import SchedulerSettings
from refresh_scheduler.domain.job import Outcome


class WorkerContext(BaseModel):
    """
    Everything a worker may know about the invocation it serves.
    """
    model_config = ConfigDict(frozen=True)

    job_name: str = Field(..., description="Name of the job being run")
    run_attempt_count: int = Field(default=0, description="Number of previous attempts in this episode")
    settings: SchedulerSettings = Field(default_factory=SchedulerSettings)


class Worker(Protocol):
    """
    Protocol class for workers.
    """

    async def execute(self) -> Outcome:
        """
        Perform one unit of work.

        Returns:
            Outcome: SUCCESS when done, RETRY when the work should be attempted
            again after a backoff. Any other error is raised and recorded as a
            failure by the runner.
        """
        ...
