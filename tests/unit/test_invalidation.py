"""Tests for listing-view invalidation and JSON log formatting."""

import json
import logging
import sys

from cse_whiteboard.common.invalidation import DASHBOARD_PATH, TODOS_PATH, ViewInvalidator
from cse_whiteboard.common.logging import JSONFormatter


class TestViewInvalidator:
    def test_versions_per_path(self):
        inv = ViewInvalidator()
        assert inv.version(DASHBOARD_PATH) == 0
        inv.invalidate(DASHBOARD_PATH)
        inv.invalidate(DASHBOARD_PATH)
        inv.invalidate(TODOS_PATH)
        assert inv.version(DASHBOARD_PATH) == 2
        assert inv.version(TODOS_PATH) == 1

    def test_etag(self):
        inv = ViewInvalidator()
        inv.invalidate(TODOS_PATH)
        assert inv.etag(TODOS_PATH) == 'W/"todos-1"'
        assert inv.etag("/") == 'W/"root-0"'


class TestJSONFormatter:
    def test_extra_fields_included(self):
        record = logging.LogRecord(
            "cse_whiteboard.todos.service", logging.INFO, __file__, 1,
            "todo created", (), None,
        )
        record.todo_id = 7
        record.user_id = "user_alice"
        data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "todo created"
        assert data["level"] == "INFO"
        assert data["todo_id"] == 7
        assert data["user_id"] == "user_alice"
        assert "args" not in data

    def test_exception_rendered(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "cse_whiteboard", logging.WARNING, __file__, 1, "failed", (), sys.exc_info(),
            )
        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]
