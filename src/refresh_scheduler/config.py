"""
Runtime settings for the refresh scheduler.

Defaults mirror the limits of a platform job scheduler: a 15 minute minimum
period, a 10 minute execution budget per episode and exponential backoff
bounded between 10 seconds and 5 hours. Every value can be overridden from
``REFRESH_SCHEDULER_*`` environment variables; durations are given in seconds.
"""

import os
from datetime import timedelta
from typing import Mapping, Optional

from pydantic import BaseModel, Field, model_validator

from .network import ObservedNetwork

ENV_PREFIX = "REFRESH_SCHEDULER_"

_DURATION_FIELDS = ("min_interval", "execution_budget", "min_backoff", "max_backoff")
_STRING_FIELDS = ("network_type", "database_url", "jobs_database_url", "feed_url", "log_level")


class SchedulerSettings(BaseModel):
    min_interval: timedelta = Field(default=timedelta(minutes=15), description="Smallest accepted repeat interval")
    execution_budget: timedelta = Field(default=timedelta(minutes=10), description="Wall-clock ceiling of one episode, retries included")
    min_backoff: timedelta = Field(default=timedelta(seconds=10), description="Smallest accepted retry backoff")
    max_backoff: timedelta = Field(default=timedelta(hours=5), description="Largest retry backoff")
    network_type: ObservedNetwork = Field(default=ObservedNetwork.UNMETERED, description="Network type observed at startup")
    database_url: str = Field(default="sqlite+aiosqlite:///./videos.db", description="Local cache of fetched records")
    jobs_database_url: str = Field(default="sqlite+aiosqlite:///./jobs.db", description="Durable store of job definitions")
    feed_url: str = Field(default="https://android-kotlin-fun-mars-server.appspot.com/devbytes", description="Remote playlist to refresh")
    log_level: str = Field(default="INFO")

    @model_validator(mode="after")
    def check_bounds(self) -> "SchedulerSettings":
        if self.execution_budget <= timedelta(0):
            raise ValueError("execution_budget must be positive")
        if self.min_backoff > self.max_backoff:
            raise ValueError("min_backoff must not exceed max_backoff")
        return self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SchedulerSettings":
        """
        Build settings from environment variables, falling back to defaults.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for name in _DURATION_FIELDS:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = timedelta(seconds=float(raw))
        for name in _STRING_FIELDS:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw
        return cls(**values)
