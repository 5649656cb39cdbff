from __future__ import annotations

import io
import logging

from schemaview.log import get_logger, setup_logging


def test_loggers_are_nested_under_package_namespace() -> None:
    assert get_logger().name == "schemaview"
    assert get_logger("schemaview.view.store").name == "schemaview.view.store"
    assert get_logger("myapp").name == "schemaview.myapp"


def test_setup_logging_writes_to_stream(monkeypatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    stream = io.StringIO()
    setup_logging(logging.DEBUG, stream=stream)
    get_logger("probe").debug("hello")
    assert "schemaview.probe" in stream.getvalue()
    assert "hello" in stream.getvalue()
