"""
Recurring Background Refresh

This module defines the core concepts and components of a periodic refresh scheduler.

Core Concepts:

JobDefinition:
    A JobDefinition is the named description of a periodic job: which worker to run,
    how often, under which network precondition and what to do when a job with the
    same name is already scheduled (KEEP or REPLACE).
    At most one definition is active per name.

JobInstance:
    A JobInstance represents a single activation of a JobDefinition.
    Each trigger starts one episode; an episode may invoke the worker several
    times when it asks to be retried, and ends with SUCCESS or FAILURE.

Worker:
    The unit of work run by each invocation. It reports an Outcome:
    SUCCESS, RETRY (after a backoff) or FAILURE.

Relationships:
    - A JobDefinition has at most one JobInstance in flight at any time.
"""

from .domain import *
from .backends import *

__all__ = ["domain", "backends"]
