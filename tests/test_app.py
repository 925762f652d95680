import asyncio
from datetime import timedelta

import pytest
import pytest_asyncio

from refresh_scheduler.app import (
    REFRESH_WORK_NAME, build_refresh_definition, delayed_init, run, setup_recurring_work,
)
from refresh_scheduler.backends.local import LocalBackend
from refresh_scheduler.config import SchedulerSettings
from refresh_scheduler.domain.definition import ConflictPolicy, NetworkType
from refresh_scheduler.domain.job import JobState
from refresh_scheduler.network import ObservedNetwork
from refresh_scheduler.storages.sqlalchemy import InMemoryJobStore, SqlAlchemyJobStore
from refresh_scheduler.worker_factory import WorkerFactory


@pytest.fixture(scope="function")
def metered_settings() -> SchedulerSettings:
    # the refresh needs an unmetered network, so nothing reaches the network
    return SchedulerSettings(network_type=ObservedNetwork.METERED)


@pytest_asyncio.fixture(scope="function")
async def backend(metered_settings: SchedulerSettings):
    job_store = InMemoryJobStore()
    backend = LocalBackend(WorkerFactory(), job_store, metered_settings)
    await backend.start()
    yield backend
    await backend.stop()
    await job_store.close()


def test_build_refresh_definition() -> None:
    definition = build_refresh_definition()
    assert definition.name == REFRESH_WORK_NAME
    assert definition.worker == REFRESH_WORK_NAME
    assert definition.interval == timedelta(days=1)
    assert definition.required_network == NetworkType.UNMETERED
    assert definition.conflict_policy == ConflictPolicy.KEEP


@pytest.mark.asyncio
async def test_setup_recurring_work(backend: LocalBackend) -> None:
    active = await setup_recurring_work(backend)

    assert backend.worker_factory.is_registered(REFRESH_WORK_NAME)
    assert (await backend.get_definition(REFRESH_WORK_NAME)).id == active.id
    assert backend.get_state(REFRESH_WORK_NAME) == JobState.IDLE


@pytest.mark.asyncio
async def test_setup_recurring_work_keeps_first_registration(backend: LocalBackend) -> None:
    first = await setup_recurring_work(backend)
    second = await setup_recurring_work(backend)

    assert second.id == first.id
    assert len(await backend.list_definitions()) == 1


@pytest.mark.asyncio
async def test_setup_recurring_work_replace(backend: LocalBackend) -> None:
    first = await setup_recurring_work(backend)
    second = await setup_recurring_work(backend, build_refresh_definition(ConflictPolicy.REPLACE))

    assert second.id != first.id
    assert (await backend.get_definition(REFRESH_WORK_NAME)).id == second.id


@pytest.mark.asyncio
async def test_delayed_init(backend: LocalBackend) -> None:
    task = delayed_init(backend)
    assert isinstance(task, asyncio.Task)

    active = await task
    assert active.name == REFRESH_WORK_NAME
    assert REFRESH_WORK_NAME in backend.runners


@pytest.mark.asyncio
async def test_run_until_stopped(tmp_path, metered_settings: SchedulerSettings) -> None:
    jobs_url = f"sqlite+aiosqlite:///{tmp_path / 'jobs.db'}"
    settings = metered_settings.model_copy(update={
        "jobs_database_url": jobs_url,
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'videos.db'}",
    })
    stop_event = asyncio.Event()

    runner = asyncio.create_task(run(settings, stop_event))
    await asyncio.sleep(0.2)
    stop_event.set()
    await asyncio.wait_for(runner, timeout=2)

    store = SqlAlchemyJobStore(jobs_url)
    definition = await store.get_definition(REFRESH_WORK_NAME)
    await store.close()
    assert definition is not None
    assert definition.worker == REFRESH_WORK_NAME

