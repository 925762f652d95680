import uuid
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field, field_validator


class NetworkType(str, Enum):
    """
    Network requirement a job places on the host before it may run.
    """
    NOT_REQUIRED = "not_required"
    CONNECTED = "connected"
    UNMETERED = "unmetered"
    METERED = "metered"


class ConflictPolicy(str, Enum):
    KEEP = "keep"
    REPLACE = "replace"


class BackoffPolicy(str, Enum):
    EXPONENTIAL = "exponential"
    LINEAR = "linear"


class Constraints(BaseModel):
    """
    Preconditions that must hold before a scheduled trigger may start execution.
    """
    required_network: NetworkType = Field(default=NetworkType.NOT_REQUIRED, description="Required network type")

    def format_constraints(self) -> str:
        if self.required_network == NetworkType.NOT_REQUIRED:
            return "No network required"
        return f"Requires {self.required_network.value} network"


class JobDefinition(BaseModel):
    """
    Named description of a periodic job: what to run, how often and under which conditions.
    """
    id: str = Field(default_factory=lambda: f"def_{uuid.uuid4().hex[:8]}", description="Unique definition identifier")
    name: str = Field(..., description="Unique job name, used as the deduplication key")
    worker: str = Field(..., description="Name of the registered worker invoked on each trigger")
    interval: timedelta = Field(..., description="Repeat interval between two triggers")
    constraints: Constraints = Field(default_factory=Constraints, description="Preconditions gating each trigger")
    conflict_policy: ConflictPolicy = Field(default=ConflictPolicy.KEEP, description="What to do when a job with the same name exists")
    initial_delay: timedelta = Field(default=timedelta(0), description="Delay before the first trigger")
    backoff_policy: BackoffPolicy = Field(default=BackoffPolicy.EXPONENTIAL, description="How retry delays grow")
    backoff_delay: timedelta = Field(default=timedelta(seconds=30), description="Base delay before a retry")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(ZoneInfo("UTC")),
        description="Definition creation timestamp with UTC timezone"
    )

    @field_validator('name', 'worker')
    def check_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator('interval')
    def check_interval(cls, v: timedelta) -> timedelta:
        if v <= timedelta(0):
            raise ValueError("interval must be positive")
        return v

    @field_validator('initial_delay', 'backoff_delay')
    def check_non_negative(cls, v: timedelta) -> timedelta:
        if v < timedelta(0):
            raise ValueError("delay must not be negative")
        return v

    @field_validator('created_at')
    def check_timezone(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=ZoneInfo("UTC"))
        return v

    @property
    def required_network(self) -> NetworkType:
        return self.constraints.required_network

    def backoff_for(self, attempt: int, max_backoff: Optional[timedelta] = None) -> timedelta:
        """
        Delay to wait before re-invoking after the given (0-based) failed attempt.
        """
        if self.backoff_policy == BackoffPolicy.EXPONENTIAL:
            delay = self.backoff_delay * (2 ** attempt)
        else:
            delay = self.backoff_delay * (attempt + 1)
        if max_backoff is not None and delay > max_backoff:
            return max_backoff
        return delay

    def same_schedule(self, other: "JobDefinition") -> bool:
        """
        Whether both definitions describe the same externally observable schedule.
        """
        return (
            self.name == other.name
            and self.worker == other.worker
            and self.interval == other.interval
            and self.constraints == other.constraints
            and self.initial_delay == other.initial_delay
            and self.backoff_policy == other.backoff_policy
            and self.backoff_delay == other.backoff_delay
        )

    @property
    def readable_string(self) -> str:
        summary = f"Job Name: '{self.name}' (worker: {self.worker})"
        schedule_details = f"Repeats every {self.interval}"
        if self.initial_delay:
            schedule_details += f", first run after {self.initial_delay}"
        return f"{summary}\n{schedule_details}\n{self.constraints.format_constraints()}"
