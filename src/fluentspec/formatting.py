"""Rendering helpers for action labels, log records and failure messages."""

import json
from typing import Any


def render_value(value: Any) -> str:
    """Render a value as JSON, falling back to `repr` for non-serializable parts.

    Params:
        value: Any Python value

    Returns:
        Compact JSON text, e.g. `5`, `"abc"`, `[1,2]`
    """
    try:
        return json.dumps(value, separators=(",", ":"), default=repr)
    except (TypeError, ValueError):
        # circular structures and non-string keys
        return repr(value)


def render_args(args: tuple | list) -> str:
    """Render call arguments as a comma-separated JSON list without brackets."""
    return ",".join(render_value(arg) for arg in args)


def describe_instance(value: Any) -> str:
    """Short description of a value for log records: its type name plus repr.

    Long reprs are truncated to keep log lines readable.
    """
    text = repr(value)
    if len(text) > 60:
        text = text[:57] + "..."
    return f"{type(value).__name__}({text})" if value is not None else "None"
