import pytest
from fastapi.testclient import TestClient

from config import Settings
from core.registry import LobbyRegistry
from core.lobby_manager import LobbyManager
from core.reaper import LobbyReaper
from main import create_app


class FakeClock:
    """可手動推進的時鐘，讓 TTL 測試不必真的等待"""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def registry():
    return LobbyRegistry()


@pytest.fixture()
def manager(registry, clock):
    return LobbyManager(registry, capacity=12, max_attempts=20, clock=clock)


@pytest.fixture()
def reaper(registry, clock):
    return LobbyReaper(registry, ttl_seconds=3600, interval_seconds=300, clock=clock)


@pytest.fixture()
def app_settings():
    return Settings(sweep_interval_seconds=3600, lobby_ttl_seconds=3600)


@pytest.fixture()
def app(app_settings):
    return create_app(app_settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
