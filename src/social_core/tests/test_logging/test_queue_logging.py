import logging
from pathlib import Path

from logging.handlers import QueueHandler

from social_core.config.settings import Settings
from social_core.core.logging.builder import (
    NonBlockingQueueHandler,
    get_queue_stats,
    setup_logging,
    stop_queue_logging,
)


def make_test_settings(tmp_path: Path, **overrides) -> Settings:
    values = {
        "ENV": "testing",
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "json",
        "LOG_TO_STDOUT": False,
        "LOG_DIR": tmp_path,
        "LOG_MAX_BYTES": 1_000_000,
        "LOG_BACKUP_COUNT": 1,
        "LOG_USE_QUEUE": True,
        "LOG_QUEUE_MAX_SIZE": 0,
    }
    values.update(overrides)
    return Settings(**values)


def test_queue_listener_writes_file(tmp_path, request_id):
    settings = make_test_settings(tmp_path)
    setup_logging(settings)

    logger = logging.getLogger("social_core.tests.queue")
    request_id("queue-req-1")

    for i in range(10):
        logger.info("queued message %d", i, extra={"iteration": i, "password": "secret"})

    # stopping the listener flushes everything still queued
    stop_queue_logging()

    text = (tmp_path / "app.log").read_text(encoding="utf-8")
    assert "queued message 0" in text
    assert "queued message 9" in text
    assert "iteration" in text
    assert "queue-req-1" in text
    assert "secret" not in text


def test_bounded_non_blocking_queue_uses_dropping_handler(tmp_path):
    setup_logging(make_test_settings(tmp_path, LOG_QUEUE_MAX_SIZE=100, LOG_QUEUE_BLOCKING=False))

    queue_handlers = [h for h in logging.getLogger().handlers if isinstance(h, QueueHandler)]

    assert len(queue_handlers) == 1
    assert isinstance(queue_handlers[0], NonBlockingQueueHandler)
    assert get_queue_stats()["queue_present"] is True


def test_stop_queue_logging_is_idempotent(tmp_path):
    setup_logging(make_test_settings(tmp_path))

    stop_queue_logging()
    stop_queue_logging()

    assert get_queue_stats()["queue_present"] is False
