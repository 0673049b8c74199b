from loguru import logger

from podcheck.logging_config import setup_logging


def test_setup_logging_filters_by_level():
    """Test: only records at or above the configured level reach the sink."""
    messages = []
    setup_logging("warning", sink=messages.append)

    logger.info("[Test] hidden")
    logger.warning("[Test] shown")

    assert len(messages) == 1
    assert "[Test] shown" in messages[0]
    assert "WARNING" in messages[0]
    logger.remove()
