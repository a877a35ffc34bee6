import json

import pytest
import structlog

from mcp_pyenv.logging import CompactJSONRenderer, add_timestamp, drop_ignored, get_logger


def test_compact_renderer_dict_event():
    """Test dict-style events are flattened into msg and data"""
    output = CompactJSONRenderer()(
        None,
        "info",
        {
            "event": {"event": "workspace_created", "work_dir": "/tmp/x"},
            "level": "info",
            "timestamp": "2024-01-01T00:00:00",
        },
    )
    data = json.loads(output)

    assert data == {
        "ts": "2024-01-01T00:00:00",
        "lvl": "info",
        "msg": "workspace_created",
        "data": {"work_dir": "/tmp/x"},
    }


def test_compact_renderer_string_event():
    output = CompactJSONRenderer()(None, "info", {"event": "Starting", "level": "info"})
    data = json.loads(output)

    assert data["msg"] == "Starting"
    assert data["ts"] is None
    assert "data" not in data


def test_add_timestamp_keeps_existing():
    assert add_timestamp(None, None, {"timestamp": "then"}) == {"timestamp": "then"}
    assert "timestamp" in add_timestamp(None, None, {})


def test_drop_ignored_loggers():
    class Named:
        name = "aiohttp.access"

    with pytest.raises(structlog.DropEvent):
        drop_ignored(Named(), "info", {"event": "x"})


def test_get_logger():
    logger = get_logger("mcp_pyenv.test")
    assert hasattr(logger, "info")
