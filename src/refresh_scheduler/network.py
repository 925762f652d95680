import asyncio
import logging
from enum import Enum

from .domain.definition import NetworkType

logger = logging.getLogger(__name__)


class ObservedNetwork(str, Enum):
    """
    Connectivity the host currently has.
    """
    NONE = "none"
    METERED = "metered"
    UNMETERED = "unmetered"


def satisfies(observed: ObservedNetwork, required: NetworkType) -> bool:
    if required == NetworkType.NOT_REQUIRED:
        return True
    if required == NetworkType.CONNECTED:
        return observed != ObservedNetwork.NONE
    if required == NetworkType.UNMETERED:
        return observed == ObservedNetwork.UNMETERED
    if required == NetworkType.METERED:
        return observed == ObservedNetwork.METERED
    raise ValueError(f"Unsupported network requirement: {required}")


class NetworkMonitor:
    """
    Tracks the network type reported by the host and wakes up jobs waiting
    for their network precondition.
    """

    def __init__(self, initial: ObservedNetwork = ObservedNetwork.UNMETERED):
        self._current: ObservedNetwork = initial
        self._changed: asyncio.Event = asyncio.Event()

    @property
    def current(self) -> ObservedNetwork:
        return self._current

    def update(self, observed: ObservedNetwork) -> None:
        """
        Report a change in connectivity.
        """
        if observed == self._current:
            return
        logger.info("Network changed from %s to %s", self._current.value, observed.value)
        self._current = observed
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    def is_satisfied(self, required: NetworkType) -> bool:
        return satisfies(self._current, required)

    async def wait_until_satisfied(self, required: NetworkType) -> None:
        while not self.is_satisfied(required):
            await self._changed.wait()
