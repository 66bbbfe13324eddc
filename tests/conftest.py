import pytest
from loguru import logger


@pytest.fixture
def log_records():
    """Collects loguru records emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
