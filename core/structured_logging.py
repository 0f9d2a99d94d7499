"""Shared structured JSON logging helpers."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any


def render_json_event(event_type: str, **fields: Any) -> str:
    """Render one event as a sorted, ASCII-safe JSON line."""
    event: dict[str, Any] = {
        "event_type": event_type,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    event.update(fields)
    return json.dumps(event, ensure_ascii=True, sort_keys=True, default=str)


def emit_json_event(
    event_type: str,
    *,
    run_id: str | None,
    level: str = "info",
    **payload: Any,
) -> str:
    """Emit one JSON event line to stdout and return the rendered line."""
    line = render_json_event(event_type, level=level, run_id=run_id, **payload)
    print(line)
    return line
