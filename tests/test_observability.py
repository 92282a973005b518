from __future__ import annotations

import io
import json
import logging

from las2png.observability import JsonFormatter, configure_logging


def test_json_formatter_includes_extra_fields() -> None:
    record = logging.LogRecord(
        name="las2png.pipeline",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="las_read_completed",
        args=(),
        exc_info=None,
    )
    record.path = "a.las"
    record.samples = 3

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "info"
    assert payload["logger"] == "las2png.pipeline"
    assert payload["message"] == "las_read_completed"
    assert payload["extra"] == {"path": "a.las", "samples": 3}
    assert payload["timestamp"].endswith("Z")


def test_configure_logging_writes_json_lines() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    stream = io.StringIO()
    try:
        configure_logging(log_level="warning", stream=stream)
        logger = logging.getLogger("las2png.test")
        logger.info("hidden")
        logger.warning("elevation_out_of_range", extra={"dropped_writes": 2})
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)

    lines = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert len(lines) == 1
    assert lines[0]["message"] == "elevation_out_of_range"
    assert lines[0]["extra"]["dropped_writes"] == 2


def test_configure_logging_falls_back_to_info_for_unknown_level() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(log_level="loud", stream=io.StringIO())
        assert root.level == logging.INFO
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
