import pytest
from datetime import timedelta
from pydantic import ValidationError

from refresh_scheduler.config import SchedulerSettings
from refresh_scheduler.network import ObservedNetwork


def test_defaults() -> None:
    settings = SchedulerSettings()
    assert settings.min_interval == timedelta(minutes=15)
    assert settings.execution_budget == timedelta(minutes=10)
    assert settings.min_backoff == timedelta(seconds=10)
    assert settings.max_backoff == timedelta(hours=5)
    assert settings.network_type == ObservedNetwork.UNMETERED


def test_from_env() -> None:
    settings = SchedulerSettings.from_env({
        "REFRESH_SCHEDULER_MIN_INTERVAL": "60",
        "REFRESH_SCHEDULER_EXECUTION_BUDGET": "120.5",
        "REFRESH_SCHEDULER_NETWORK_TYPE": "metered",
        "REFRESH_SCHEDULER_FEED_URL": "https://example.com/feed",
        "UNRELATED": "ignored",
    })
    assert settings.min_interval == timedelta(seconds=60)
    assert settings.execution_budget == timedelta(seconds=120.5)
    assert settings.network_type == ObservedNetwork.METERED
    assert settings.feed_url == "https://example.com/feed"
    assert settings.max_backoff == timedelta(hours=5)


def test_from_env_rejects_invalid_values() -> None:
    with pytest.raises(ValidationError):
        SchedulerSettings.from_env({"REFRESH_SCHEDULER_NETWORK_TYPE": "satellite"})
    with pytest.raises(ValidationError):
        SchedulerSettings.from_env({"REFRESH_SCHEDULER_EXECUTION_BUDGET": "0"})
