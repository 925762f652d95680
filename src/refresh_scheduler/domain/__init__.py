from .definition import JobDefinition, Constraints, NetworkType, ConflictPolicy, BackoffPolicy
from .job import JobInstance, JobState, Outcome

__all__ = [
    "JobDefinition", "Constraints", "NetworkType", "ConflictPolicy", "BackoffPolicy",
    "JobInstance", "JobState", "Outcome",
]
