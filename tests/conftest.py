import os

import pytest

from worker_sentry import DummyTransport, Sentry

TEST_DSN = "https://123@456.ingest.example.com/789"


@pytest.fixture(autouse=True)
def reset_environ():
    old_env = os.environ
    os.environ = dict(**old_env)  # type: ignore[assignment]
    try:
        yield
    finally:
        os.environ = old_env


@pytest.fixture
def transport() -> DummyTransport:
    return DummyTransport()


@pytest.fixture
def sentry(transport: DummyTransport) -> Sentry:
    return Sentry(TEST_DSN, transport=transport)
