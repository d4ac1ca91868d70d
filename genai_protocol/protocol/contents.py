"""
Value coercions used as FieldRule encoders.

Callers may pass strings, Parts, Contents, lists of either, or payload-shaped
dicts wherever the API takes content. These helpers reduce all of them to the
canonical dict form before the concept tables run.
"""

from __future__ import annotations

import base64
import datetime
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from ..errors import UsageError
from .dialect import TransformContext
from .message_types import Blob, Content, File, Part, SpeechConfig, Tool


_MIXED_CONTENT_AND_PARTS = (
    "Mixing Content and Parts is not supported, please group the parts into "
    "the appropriate Content objects and specify the roles for them."
)
_WRAP_FUNCTION_PARTS = (
    "To specify functionCall or functionResponse parts, please wrap them in a "
    "Content object, specifying the role for them."
)


def t_bytes(ctx: TransformContext, value: Any) -> str:
    if isinstance(value, bytes | bytearray):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, str):
        return value
    raise UsageError(f"Expected bytes or a base64 string, got {type(value).__name__}.")


def t_decode_bytes(ctx: TransformContext, value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    if "-" in value or "_" in value:
        return base64.urlsafe_b64decode(value)
    return base64.b64decode(value)


def _is_content(value: Any) -> bool:
    if isinstance(value, Content):
        return True
    if isinstance(value, Mapping):
        return "parts" in value or "role" in value
    return False


def _is_function_part(value: Any) -> bool:
    if isinstance(value, Part):
        return value.function_call is not None or value.function_response is not None
    if isinstance(value, Mapping):
        return any(
            key in value
            for key in ("function_call", "functionCall", "function_response", "functionResponse")
        )
    return False


def t_part(ctx: TransformContext | None, part: Any) -> dict[str, Any]:
    if part is None:
        raise UsageError("part is required.")
    if isinstance(part, str):
        return {"text": part}
    if isinstance(part, File):
        if not part.uri or not part.mime_type:
            raise UsageError("A File used as a part needs both uri and mime_type.")
        return {"file_data": {"file_uri": part.uri, "mime_type": part.mime_type}}
    if isinstance(part, Part):
        return part.to_dict()
    if isinstance(part, Mapping):
        return Part.model_validate(part).to_dict()
    raise UsageError(f"Unsupported part type: {type(part).__name__}")


def t_parts(ctx: TransformContext | None, parts: Any) -> list[dict[str, Any]]:
    if parts is None or (isinstance(parts, list) and not parts):
        raise UsageError("parts are required.")
    if isinstance(parts, list):
        return [t_part(ctx, part) for part in parts]
    return [t_part(ctx, parts)]


def t_content(ctx: TransformContext | None, content: Any) -> dict[str, Any]:
    """Anything content-like -> canonical Content dict (bare parts become a user turn)."""
    if content is None:
        raise UsageError("content is required.")
    if isinstance(content, Content):
        return content.to_dict()
    if _is_content(content):
        return Content.model_validate(content).to_dict()
    return {"role": "user", "parts": t_parts(ctx, content)}


def t_contents(ctx: TransformContext | None, contents: Any) -> list[dict[str, Any]]:
    """Anything content-list-like -> list of canonical Content dicts.

    Loose parts are grouped into a single user turn; a list may hold Contents
    or parts but not both.
    """
    if contents is None or (isinstance(contents, list) and not contents):
        raise UsageError("contents are required.")
    if not isinstance(contents, list):
        if _is_function_part(contents):
            raise UsageError(_WRAP_FUNCTION_PARTS)
        return [t_content(ctx, contents)]

    content_list = _is_content(contents[0]) or isinstance(contents[0], list)
    result: list[dict[str, Any]] = []
    loose_parts: list[Any] = []
    for item in contents:
        item_is_content = _is_content(item) or isinstance(item, list)
        if item_is_content != content_list:
            raise UsageError(_MIXED_CONTENT_AND_PARTS)
        if item_is_content:
            result.append(t_content(ctx, item))
        elif _is_function_part(item):
            raise UsageError(_WRAP_FUNCTION_PARTS)
        else:
            loose_parts.append(item)

    if not content_list:
        result.append({"role": "user", "parts": t_parts(ctx, loose_parts)})
    return result


def t_tools(ctx: TransformContext, tools: Any) -> list[dict[str, Any]]:
    if not isinstance(tools, list):
        tools = [tools]
    result = []
    for tool in tools:
        if isinstance(tool, BaseModel):
            result.append(tool.model_dump(exclude_none=True))
        elif isinstance(tool, Mapping):
            result.append(Tool.model_validate(tool).to_dict())
        else:
            raise UsageError(f"Unsupported tool type: {type(tool).__name__}")
    return result


def t_blob(ctx: TransformContext, blob: Any) -> dict[str, Any]:
    """Blob, Image-like or dict -> canonical Blob dict."""
    if isinstance(blob, Blob):
        return blob.to_dict()
    if isinstance(blob, BaseModel):
        blob = blob.model_dump(exclude_none=True)
    if isinstance(blob, Mapping):
        if "image_bytes" in blob or "imageBytes" in blob:
            return {
                "data": blob.get("image_bytes", blob.get("imageBytes")),
                "mime_type": blob.get("mime_type", blob.get("mimeType")),
            }
        return Blob.model_validate(blob).to_dict()
    raise UsageError(f"Could not convert {type(blob).__name__} to a Blob.")


def t_blobs(ctx: TransformContext, blobs: Any) -> list[dict[str, Any]]:
    if isinstance(blobs, list):
        return [t_blob(ctx, blob) for blob in blobs]
    return [t_blob(ctx, blobs)]


def t_speech_config(ctx: TransformContext, speech_config: Any) -> dict[str, Any]:
    """A bare voice name is shorthand for a prebuilt voice config."""
    if isinstance(speech_config, str):
        return {"voice_config": {"prebuilt_voice_config": {"voice_name": speech_config}}}
    if isinstance(speech_config, SpeechConfig):
        return speech_config.to_dict()
    if isinstance(speech_config, Mapping):
        return SpeechConfig.model_validate(speech_config).to_dict()
    raise UsageError(f"Unsupported speech config type: {type(speech_config).__name__}")


def t_timestamp(ctx: TransformContext, value: Any) -> str:
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    return str(value)
