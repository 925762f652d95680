class SchedulerError(Exception):
    """Base class for errors raised by the refresh scheduler."""


class TransientNetworkError(SchedulerError):
    """
    Raised by a repository when a fetch failed for a reason worth retrying,
    such as a connection error or a non-2xx HTTP response.
    """


class BudgetExceededError(SchedulerError):
    """Raised when an episode runs past its execution budget."""

    def __init__(self, name: str, budget: float):
        super().__init__(f"Job '{name}' exceeded its execution budget of {budget:.1f}s")
        self.name = name
        self.budget = budget
