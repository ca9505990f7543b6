import pytest
from structlog.testing import capture_logs

from quote_ratio.core.log import get_logger, set_level


@pytest.fixture(autouse=True)
def _restore_level():
    yield
    set_level("warning")


def test_module_logger_emits_structured_event():
    logger = get_logger("quote_ratio.pipeline.page_fetcher")
    with capture_logs() as logs:
        logger.warning("page_fetched", page=1, transactions=3)

    assert len(logs) == 1
    entry = logs[0]
    assert entry["event"] == "page_fetched"
    assert entry["page"] == 1
    assert entry["transactions"] == 3
    assert entry["logger_name"] == "quote_ratio.pipeline.page_fetcher"
    assert entry["log_level"] == "warning"


def test_set_level_reaches_loggers_created_earlier():
    logger = get_logger("quote_ratio.pipeline.consumer")

    set_level("error")
    with capture_logs() as quiet:
        logger.warning("decode_failed", signature="s1")

    set_level("DEBUG")
    with capture_logs() as verbose:
        logger.debug("decode_failed", signature="s2")

    assert quiet == []
    assert [entry["signature"] for entry in verbose] == ["s2"]


def test_unknown_level_is_refused():
    with pytest.raises(ValueError):
        set_level("verbose")
