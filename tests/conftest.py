import pytest

from tests.factories import make_flight, make_passenger


@pytest.fixture
def flight():
    return make_flight()


@pytest.fixture
def passenger():
    return make_passenger()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep a developer's environment from leaking into Config()"""
    for name in ("FLIGHTDESK_DATA_DIR", "FLIGHTS_FILE", "PASSENGERS_FILE", "TICKETS_FILE",
                 "MAX_FLIGHTS", "INITIAL_CAPACITY", "LOG_LEVEL", "LOG_FORMAT", "LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
