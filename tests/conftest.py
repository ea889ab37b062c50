import logging
import os

import pytest
import pytest_asyncio

# Set environment variables for testing before importing application modules
os.environ["QUERYCONSOLE_API_URL"] = "http://test-query-api:8000"
os.environ["QUERYCONSOLE_SUBMIT_DELAY"] = "0"
os.environ["QUERYCONSOLE_HTTP_TIMEOUT"] = "5"

from queryconsole.config import ConsoleSettings
from queryconsole.pipeline import QueryPipeline
from queryconsole.query_client import QueryClient
from queryconsole.state import ConsoleState

API_URL = os.environ["QUERYCONSOLE_API_URL"]
GENERATE_URL = f"{API_URL}/api/generate"


@pytest.fixture(scope="session", autouse=True)
def configure_test_logging():
    """
    Configure logging for tests based on environment variables.
    This is automatically applied to all tests.
    """
    log_level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_name, logging.INFO)

    logging.getLogger().setLevel(log_level)

    if log_level == logging.ERROR:
        for logger_name in ["httpx", "httpcore"]:
            logging.getLogger(logger_name).setLevel(logging.ERROR)


@pytest.fixture
def settings() -> ConsoleSettings:
    """Settings pointing at the mocked API with no artificial delay."""
    return ConsoleSettings(api_url=API_URL, http_timeout=5.0, submit_delay=0, history_limit=50)


@pytest.fixture
def state(settings) -> ConsoleState:
    """Provides a clean ConsoleState for each test."""
    return ConsoleState(settings)


@pytest_asyncio.fixture
async def query_client():
    """Provides a QueryClient aimed at the mocked API, closed after the test."""
    client = QueryClient(API_URL, timeout=5.0)
    yield client
    await client.close()


@pytest.fixture
def pipeline(state, query_client) -> QueryPipeline:
    return QueryPipeline(state, query_client)


@pytest.fixture
def users_generation():
    """A generation response targeting /api/users."""
    return {"json": {"query": {"select": ["id"]}, "endpoint": "/users"}}
