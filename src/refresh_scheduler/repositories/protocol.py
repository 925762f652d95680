from typing import Protocol


class Repository(Protocol):
    async def refresh(self) -> None:
        """Fetch remote data and persist it. Raise TransientNetworkError on retryable failures."""
        ...

    async def close(self) -> None:
        """Release the resources held for this invocation."""
        ...
