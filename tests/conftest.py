import pytest

from orderflow.logging_config import LogContext, reset_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    yield
    LogContext.clear()
    reset_logging()
