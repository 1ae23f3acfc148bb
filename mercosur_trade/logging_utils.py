"""
Logging utilities for the MCP server.

Provides structured JSON logging for:
- Tool calls (inputs, result size, found flag, duration)
- Tool errors (invalid input, store unavailable)

All handlers write to STDERR: with the stdio transport, STDOUT carries the
MCP JSON-RPC stream and any stray log line there would corrupt it.

Usage:
    from mercosur_trade.logging_utils import configure_logging, log_tool_call

    configure_logging("INFO", "json")
    log_tool_call("get_data_transfer_rules", {"source_country": "AR"}, result, 1.7)
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Configure logger
logger = logging.getLogger("tool_calls")
logger.setLevel(logging.INFO)


# JSON formatter for structured logging
class JSONFormatter(logging.Formatter):
    def format(self, record):
        if isinstance(record.msg, dict):
            return json.dumps(record.msg, default=str)
        return json.dumps({
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        })


TEXT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """
    Route all logging to stderr with the chosen format.

    Args:
        level: Log level name ("DEBUG", "INFO", ...)
        fmt: "json" for one JSON object per line, anything else for plain text
    """
    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())


# ============================================================================
# Simple Logging Functions
# ============================================================================

def log_tool_event(event_type: str, payload: Dict[str, Any]) -> None:
    """
    Log a tool event with structured data.

    Args:
        event_type: Type of event (e.g., "tool_call", "tool_error")
        payload: Event data
    """
    event = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event_type": event_type,
        **payload
    }
    logger.info(event)


def _summarize_result(result: Any) -> Dict[str, Any]:
    """Pick the envelope fields worth logging (never the payload itself)."""
    if not isinstance(result, dict):
        return {"result_type": type(result).__name__}
    summary = {}
    for key in ("found", "count", "reversed_lookup"):
        if key in result:
            summary[key] = result[key]
    summary["result_bytes"] = len(json.dumps(result, default=str))
    return summary


def log_tool_call(
    tool_name: str,
    inputs: Dict[str, Any],
    result: Any,
    duration_ms: float
) -> None:
    """Log a completed tool invocation."""
    log_tool_event("tool_call", {
        "tool": tool_name,
        "inputs": inputs,
        **_summarize_result(result),
        "duration_ms": round(duration_ms, 2)
    })


def log_tool_error(
    tool_name: str,
    inputs: Dict[str, Any],
    error: Exception,
    duration_ms: Optional[float] = None
) -> None:
    """Log a tool invocation that ended in an error."""
    log_tool_event("tool_error", {
        "tool": tool_name,
        "inputs": inputs,
        "error_type": type(error).__name__,
        "error": str(error),
        "duration_ms": round(duration_ms, 2) if duration_ms is not None else None
    })
