"""
Identifier normalizers.

Canonicalize model names, cached-content names, file names and generic
resource names into the path form each dialect expects. All normalizers take
the TransformContext first so they can be used directly as FieldRule encoders.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

from ..errors import UsageError
from ..result import Error, Ok, Result
from .dialect import Dialect, TransformContext
from .enums import translate_tuning_job_state
from .paths import get_value_by_path


_FILE_ID_PATTERN = re.compile(r"[a-z0-9]+")


def t_model(ctx: TransformContext, model: Any) -> str:
    if not model:
        raise UsageError("model is required.")
    if not isinstance(model, str):
        raise UsageError(f"model must be a string, got {type(model).__name__}.")

    if ctx.dialect is Dialect.VERTEX:
        if model.startswith(("projects/", "models/", "publishers/")):
            return model
        if "/" in model:
            publisher, model_id = model.split("/", 1)
            return f"publishers/{publisher}/models/{model_id}"
        return f"publishers/google/models/{model}"

    if model.startswith(("models/", "tunedModels/")):
        return model
    return f"models/{model}"


def t_models_url(ctx: TransformContext, base_models: bool) -> str:
    """Collection path listing base models or the caller's tuned models."""
    if ctx.dialect is Dialect.VERTEX:
        return "publishers/google/models" if base_models else "models"
    return "models" if base_models else "tunedModels"


def _require_project(ctx: TransformContext) -> tuple[str, str]:
    if not ctx.project or not ctx.location:
        raise UsageError("project and location are required to qualify Vertex AI resource names.")
    return ctx.project, ctx.location


def t_resource_name(
    ctx: TransformContext,
    resource_name: str,
    collection_identifier: str,
    collection_hierarchy_depth: int = 2,
) -> str:
    """Complete a short resource name under ``collection_identifier``.

    Already qualified names are returned unchanged. A bare name is prefixed
    only if the result has exactly ``collection_hierarchy_depth`` segments.
    """
    if not isinstance(resource_name, str) or not resource_name:
        raise UsageError(f"{collection_identifier} name is required.")

    prefixed = f"{collection_identifier}/{resource_name}"
    should_prepend_collection = (
        not resource_name.startswith(f"{collection_identifier}/")
        and prefixed.count("/") + 1 == collection_hierarchy_depth
    )

    if ctx.dialect is Dialect.VERTEX:
        if resource_name.startswith("projects/"):
            return resource_name
        project, location = _require_project(ctx)
        if resource_name.startswith("locations/"):
            return f"projects/{project}/{resource_name}"
        if resource_name.startswith(f"{collection_identifier}/"):
            return f"projects/{project}/locations/{location}/{resource_name}"
        if should_prepend_collection:
            return f"projects/{project}/locations/{location}/{prefixed}"
        return resource_name

    if should_prepend_collection:
        return prefixed
    return resource_name


def t_cached_content_name(ctx: TransformContext, name: str) -> str:
    return t_resource_name(ctx, name, collection_identifier="cachedContents")


def t_caches_model(ctx: TransformContext, model: Any) -> str:
    """Model name for cache operations.

    Vertex cache resources always live under projects/<p>/locations/<l>, even
    when they reference a publisher model.
    """
    model = t_model(ctx, model)
    if ctx.dialect is not Dialect.VERTEX:
        return model
    if model.startswith("publishers/"):
        project, location = _require_project(ctx)
        return f"projects/{project}/locations/{location}/{model}"
    if model.startswith("models/"):
        project, location = _require_project(ctx)
        return f"projects/{project}/locations/{location}/publishers/google/{model}"
    return model


def extract_file_id(uri: str) -> Result[str, str]:
    """Pull the bare file id out of ``https://.../files/<id>...``."""
    _, separator, suffix = uri.partition("files/")
    if not separator:
        return Error(f"Could not extract file name from URI {uri}")
    match = _FILE_ID_PATTERN.match(suffix)
    if match is None:
        return Error(f"Could not extract file name from URI {uri}")
    return Ok(match.group(0))


def _file_reference(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    # File, Video and GeneratedVideo (models or dicts), in that order
    for path in ("name", "uri", "video.uri"):
        found = get_value_by_path(value, path)
        if isinstance(found, str):
            return found
    return None


def t_file_name(ctx: TransformContext | None, value: Any) -> str:
    """Bare file id from a File, Video, GeneratedVideo, URL or ``files/<id>``."""
    name = _file_reference(value)
    if not name:
        raise UsageError("Could not extract file name from the provided input.")

    if name.startswith("https://"):
        match extract_file_id(name):
            case Ok(file_id):
                return file_id
            case Error(reason):
                raise UsageError(reason)
    if name.startswith("files/"):
        return name.split("files/", 1)[1]
    return name


def t_tuning_job_status(ctx: TransformContext, status: str) -> str:
    return translate_tuning_job_state(status)


_NORMALIZERS: Mapping[str, Callable[[TransformContext, Any], str]] = {
    "model": t_model,
    "caches_model": t_caches_model,
    "cached_content": t_cached_content_name,
    "file": t_file_name,
}


def normalize_id(kind: str, value: Any, context: TransformContext | Dialect) -> str:
    """Normalize an identifier of ``kind`` for the context's dialect.

    Kinds: ``model``, ``caches_model``, ``cached_content``, ``file``.
    """
    normalizer = _NORMALIZERS.get(kind)
    if normalizer is None:
        raise UsageError(f"Unknown identifier kind: {kind}")
    return normalizer(TransformContext.coerce(context), value)


def t_live_model(ctx: TransformContext, model: Any) -> str:
    """Model name for the Live setup frame; Vertex wants it fully qualified."""
    model = t_model(ctx, model)
    if ctx.dialect is Dialect.VERTEX and model.startswith("publishers/"):
        project, location = _require_project(ctx)
        return f"projects/{project}/locations/{location}/{model}"
    return model


def t_extract_models(ctx: TransformContext, response: Any) -> list[Any] | None:
    """A list-models response keeps its items under a key that varies by endpoint."""
    for key in ("models", "tunedModels", "publisherModels"):
        items = get_value_by_path(response, key)
        if items is not None:
            return items
    return None
