import uuid
from enum import Enum
from typing import Optional
from datetime import datetime

from pydantic import BaseModel, Field

from .definition import JobDefinition


class JobState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PENDING_RETRY = "pending_retry"


class Outcome(str, Enum):
    SUCCESS = "success"
    RETRY = "retry"
    FAILURE = "failure"


class JobInstance(BaseModel):
    """
    Represents one activation of a job definition.
    """
    id: str = Field(default_factory=lambda: f"run_{uuid.uuid4().hex[:8]}", description="Unique instance identifier")
    definition: JobDefinition = Field(..., description="The definition this instance activates")
    run_attempt_count: int = 0
    state: JobState = JobState.IDLE
    outcome: Optional[Outcome] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def definition_id(self) -> str:
        return self.definition.id

    def set_state(self, state: JobState):
        """
        Update the state of the instance.
        """
        self.state = state
        if state == JobState.RUNNING and self.start_time is None:
            self.start_time = datetime.now()

    def set_outcome(self, outcome: Outcome):
        """
        Record the final outcome of the instance.
        """
        if outcome == Outcome.RETRY:
            raise ValueError("Outcome must be either SUCCESS or FAILURE")
        self.outcome = outcome
        self.state = JobState.IDLE
        self.end_time = datetime.now()
