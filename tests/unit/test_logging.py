"""Unit tests for the JSON log format and request-id stamping."""

import json
import logging

from thinktank.logging_config import JsonFormatter, RequestIdFilter, request_id_var


def _record(**extra) -> logging.LogRecord:
    record = logging.makeLogRecord({"name": "thinktank.test", "levelname": "INFO", "msg": "Approved %s", "args": (7,)})
    record.__dict__.update(extra)
    return record


def test_json_line_carries_extra_fields_and_request_id():
    token = request_id_var.set("req-42")
    try:
        record = _record(publication_id=7, actor_id="user_admin")
        RequestIdFilter().filter(record)
        payload = json.loads(JsonFormatter().format(record))
    finally:
        request_id_var.reset(token)

    assert payload["message"] == "Approved 7"
    assert payload["request_id"] == "req-42"
    assert payload["publication_id"] == 7
    assert payload["actor_id"] == "user_admin"
    assert "msg" not in payload and "args" not in payload


def test_request_id_omitted_outside_a_request():
    record = _record()
    RequestIdFilter().filter(record)
    assert record.request_id == "-"
    assert "request_id" not in json.loads(JsonFormatter().format(record))
