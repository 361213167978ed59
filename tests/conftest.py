"""Pytest configuration and fixtures"""

import pytest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from mock_backend.services.scenario_registry import get_scenario_registry
from mock_backend.services.session_service import get_session_service
from mock_backend.strategies import camera_performance, override
from mock_backend.trackers.camera_performance import get_camera_performance_tracker
from mock_backend.trackers.remove_listing import get_remove_listing_test_tracker
from mock_backend.trackers.rotation import get_rotation_test_tracker
from mock_backend.utils import timeutils


def _stores():
    return [
        get_session_service().store,
        get_camera_performance_tracker().store,
        get_rotation_test_tracker().store,
        get_remove_listing_test_tracker().store,
    ]


@pytest.fixture(autouse=True)
def clear_stores():
    """Clear sessions and tracker data before and after each test"""
    for store in _stores():
        store.clear()
    yield
    for store in _stores():
        store.clear()


@pytest.fixture(autouse=True)
def sleeps(monkeypatch):
    """Record strategy delays instead of sleeping"""
    calls = []
    fake_time = SimpleNamespace(sleep=calls.append)
    monkeypatch.setattr(camera_performance, "time", fake_time)
    monkeypatch.setattr(override, "time", fake_time)
    return calls


class FrozenClock:
    """Replacement for `timeutils.utcnow` that only moves when told to"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock(monkeypatch) -> FrozenClock:
    clock = FrozenClock(datetime(2025, 8, 27, 20, 0, 0, tzinfo=timezone.utc))
    monkeypatch.setattr(timeutils, "utcnow", clock)
    return clock


@pytest.fixture
def registry():
    """Shared scenario registry, restored after the test"""
    registry = get_scenario_registry()
    config_path = registry.config_path
    policy = registry.policy
    yield registry
    registry.policy = policy
    registry.reload(str(config_path))


@pytest.fixture
def scenario_dir(tmp_path):
    """Directory for ad-hoc scenario files"""
    path = tmp_path / "scenarios"
    path.mkdir()
    return path
