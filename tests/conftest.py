"""tinynetworking test configuration.

Tests run against httpx.MockTransport, no network access is required. The
example request tests reach real services and only run with
TINYNETWORKING_INTEGRATION=1.
"""

import os
from typing import Any, Callable, Iterator

import httpx
import pytest

from tinynetworking import Config, Endpoint, Result, Session

Handler = Callable[[httpx.Request], Any]


def pytest_collection_modifyitems(config, items):
    if os.environ.get("TINYNETWORKING_INTEGRATION") == "1":
        return
    skip = pytest.mark.skip(reason="set TINYNETWORKING_INTEGRATION=1 to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def config() -> Config:
    return Config(verify_ssl=False, timeout=5.0, max_workers=1)


@pytest.fixture
def make_session(config: Config) -> Iterator[Callable[[Handler], Session]]:
    """Build sessions whose requests are answered by ``handler``."""
    sessions: list[Session] = []

    def factory(handler: Handler) -> Session:
        session = Session(config, transport=httpx.MockTransport(handler))
        sessions.append(session)
        return session

    yield factory

    for session in sessions:
        session.close()


@pytest.fixture
def load_and_wait() -> Callable[[Session, Endpoint[Any]], list[Result[Any]]]:
    """Load an endpoint and return every result its completion handler received."""

    def load(session: Session, endpoint: Endpoint[Any]) -> list[Result[Any]]:
        results: list[Result[Any]] = []
        task = session.load(endpoint, results.append)
        assert task.wait(5), f"{endpoint.description} did not complete"
        return results

    return load
