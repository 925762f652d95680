import asyncio
import pytest

from refresh_scheduler.domain.definition import NetworkType
from refresh_scheduler.network import NetworkMonitor, ObservedNetwork, satisfies


@pytest.mark.parametrize("observed,required,expected", [
    (ObservedNetwork.NONE, NetworkType.NOT_REQUIRED, True),
    (ObservedNetwork.NONE, NetworkType.CONNECTED, False),
    (ObservedNetwork.METERED, NetworkType.CONNECTED, True),
    (ObservedNetwork.METERED, NetworkType.UNMETERED, False),
    (ObservedNetwork.UNMETERED, NetworkType.UNMETERED, True),
    (ObservedNetwork.UNMETERED, NetworkType.METERED, False),
    (ObservedNetwork.METERED, NetworkType.METERED, True),
])
def test_satisfies(observed: ObservedNetwork, required: NetworkType, expected: bool) -> None:
    assert satisfies(observed, required) is expected


@pytest.mark.asyncio
async def test_wait_returns_immediately_when_satisfied() -> None:
    monitor = NetworkMonitor(ObservedNetwork.UNMETERED)
    await asyncio.wait_for(monitor.wait_until_satisfied(NetworkType.UNMETERED), timeout=0.1)


@pytest.mark.asyncio
async def test_wait_until_network_changes() -> None:
    monitor = NetworkMonitor(ObservedNetwork.NONE)
    waiter = asyncio.create_task(monitor.wait_until_satisfied(NetworkType.UNMETERED))

    await asyncio.sleep(0.05)
    assert not waiter.done()

    # a metered network does not satisfy the requirement
    monitor.update(ObservedNetwork.METERED)
    await asyncio.sleep(0.05)
    assert not waiter.done()

    monitor.update(ObservedNetwork.UNMETERED)
    await asyncio.wait_for(waiter, timeout=0.5)
    assert monitor.current == ObservedNetwork.UNMETERED
