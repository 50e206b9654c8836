import pytest

from social_core.config.settings import get_settings
from social_core.core.logging.builder import setup_logging, stop_queue_logging
from social_core.core.logging.filters import reset_request_id, set_request_id


@pytest.fixture(autouse=True)
def restore_logging():
    """Tests here reconfigure logging; put the session configuration back afterwards."""
    yield
    stop_queue_logging()
    setup_logging(get_settings())


@pytest.fixture
def request_id():
    """Set a request id for one test and reset the contextvar afterwards."""
    tokens = []

    def _set(value):
        tokens.append(set_request_id(value))

    yield _set

    for token in reversed(tokens):
        reset_request_id(token)
