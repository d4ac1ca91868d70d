import json
from typing import Any

from .result import Error, Ok, Result


SSE_DATA_PREFIX = "data:"


def _parse_json_safely(json_str: str) -> Result[dict[str, Any], str]:
    """
    Safely parse a JSON object string, returning Result instead of raising.

    Args:
        json_str: JSON string to parse

    Returns:
        Ok(dict) if parsing succeeds, Error(str) if parsing fails or the
        payload is not an object
    """
    try:  # nosemgrep: forbid-try-except
        parsed = json.loads(json_str)
    except json.JSONDecodeError as e:
        return Error(f"JSON decode error: {e!s}")
    if not isinstance(parsed, dict):
        return Error(f"Expected a JSON object, got {type(parsed).__name__}")
    return Ok(parsed)


def _sse_frame_data(frame: str) -> str | None:
    """
    Join the ``data:`` lines of one SSE frame.

    Comment lines (``:``) and other fields (``event:``, ``id:``) are ignored.
    Returns None when the frame carries no data at all.
    """
    data_lines = [
        line[len(SSE_DATA_PREFIX) :].lstrip(" ")
        for line in frame.splitlines()
        if line.startswith(SSE_DATA_PREFIX)
    ]
    if not data_lines:
        return None
    return "\n".join(data_lines)

