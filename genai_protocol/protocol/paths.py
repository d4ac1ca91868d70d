"""
Path/Value accessor over nested dicts.

Every dialect transformer is a list of "read this path, write that path"
rules, so these two functions carry the whole transformation layer.

Segments:
    - ``key``     plain object key
    - ``key[]``   fan-out: apply the rest of the path to every element of the
                  array at ``key``
    - ``key[0]``  array-create: descend into element 0, creating ``[{}]`` when
                  ``key`` is absent
    - ``_self``   the object itself (read side only)

Paths are either a list of segment strings (``["requests[]", "content"]``) or
a dotted string (``"requests[].content"``).
"""

from __future__ import annotations

import functools
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from ..errors import PathError


@dataclass(frozen=True)
class Key:
    name: str


@dataclass(frozen=True)
class FanOut:
    name: str


@dataclass(frozen=True)
class ArrayCreate:
    name: str


@dataclass(frozen=True)
class SelfRef:
    pass


Segment = Key | FanOut | ArrayCreate | SelfRef
PathLike = str | Sequence[str | Segment]

SELF = "_self"


def parse_segment(raw: str) -> Segment:
    """Parse one segment string into its tagged form."""
    if raw == SELF:
        return SelfRef()
    if raw.endswith("[]"):
        return FanOut(raw[:-2])
    if raw.endswith("[0]"):
        return ArrayCreate(raw[:-3])
    return Key(raw)


@functools.lru_cache(maxsize=2048)
def _parse_dotted(path: str) -> tuple[Segment, ...]:
    return tuple(parse_segment(part) for part in path.split("."))


def parse_path(path: PathLike) -> tuple[Segment, ...]:
    """Normalize a dotted string or a segment list into a segment tuple."""
    if isinstance(path, str):
        return _parse_dotted(path)
    return tuple(
        parse_segment(segment) if isinstance(segment, str) else segment for segment in path
    )


def format_path(path: PathLike) -> str:
    """Render a path back to its dotted form, for error messages."""
    rendered = []
    for segment in parse_path(path):
        match segment:
            case Key(name):
                rendered.append(name)
            case FanOut(name):
                rendered.append(f"{name}[]")
            case ArrayCreate(name):
                rendered.append(f"{name}[0]")
            case SelfRef():
                rendered.append(SELF)
    return ".".join(rendered)


def _child(data: Any, name: str) -> Any:
    if isinstance(data, Mapping):
        return data.get(name)
    if isinstance(data, BaseModel):
        return getattr(data, name, None)
    return None


def get_value_by_path(data: Any, path: PathLike) -> Any | None:
    """Return the value at ``path`` or ``None`` when any step is missing.

    A fan-out segment returns one result per array element.
    """
    return _get(data, parse_path(path))


def _get(data: Any, segments: tuple[Segment, ...]) -> Any | None:
    for index, segment in enumerate(segments):
        if data is None:
            return None
        match segment:
            case SelfRef():
                continue
            case FanOut(name):
                items = _child(data, name)
                if not isinstance(items, list):
                    return None
                rest = segments[index + 1 :]
                return [_get(item, rest) for item in items]
            case ArrayCreate(name):
                items = _child(data, name)
                if not isinstance(items, list) or not items:
                    return None
                return _get(items[0], segments[index + 1 :])
            case Key(name):
                data = _child(data, name)
    return data


def set_value_by_path(data: dict[str, Any], path: PathLike, value: Any) -> None:
    """Write ``value`` at ``path`` inside ``data``, creating intermediates.

    ``None`` is never written. When the terminal key already holds a value:
    a falsy or identical new value is ignored, two dicts are shallow-merged,
    anything else raises PathError.
    """
    if value is None:
        return
    segments = parse_path(path)
    if not segments:
        raise PathError("Cannot set a value at an empty path.")
    _set(data, segments, value)


def _set(data: Any, segments: tuple[Segment, ...], value: Any) -> None:
    if not isinstance(data, dict):
        raise PathError(f"Cannot set {format_path(segments)} on non-object value {data!r}.")

    for index, segment in enumerate(segments[:-1]):
        rest = segments[index + 1 :]
        match segment:
            case SelfRef():
                continue
            case FanOut(name):
                _fan_out(data, name, rest, value)
                return
            case ArrayCreate(name):
                if name not in data:
                    data[name] = [{}]
                items = data[name]
                if not isinstance(items, list) or not items:
                    raise PathError(f"Expected a non-empty array at key {name}, got {items!r}.")
                _set(items[0], rest, value)
                return
            case Key(name):
                if data.get(name) is None:
                    data[name] = {}
                child = data[name]
                if not isinstance(child, dict):
                    raise PathError(f"Cannot traverse non-object value at key {name}: {child!r}.")
                data = child

    match segments[-1]:
        case Key(name):
            _assign(data, name, value)
        case segment:
            raise PathError(f"Path must end with a plain key, got {format_path([segment])}.")


def _fan_out(data: dict[str, Any], name: str, rest: tuple[Segment, ...], value: Any) -> None:
    if name not in data:
        if not isinstance(value, list):
            raise PathError(f"Value {value!r} must be a list given an array path {name}[].")
        data[name] = [{} for _ in value]

    items = data[name]
    if not isinstance(items, list):
        raise PathError(f"Cannot fan out over non-array value at key {name}: {items!r}.")

    if isinstance(value, list):
        if len(value) != len(items):
            raise PathError(
                f"Cannot pair {len(value)} values with {len(items)} elements at key {name}[]."
            )
        for item, element in zip(items, value, strict=True):
            _set(item, rest, element)
    else:
        for item in items:
            _set(item, rest, value)


def _assign(data: dict[str, Any], key: str, value: Any) -> None:
    if value is None:
        return
    existing = data.get(key)
    if existing is None:
        data[key] = value
        return
    if not value or value == existing:
        return
    if isinstance(existing, dict) and isinstance(value, dict):
        existing.update(value)
        return
    raise PathError(
        f"Cannot set value for an existing key. Key: {key}; "
        f"Existing value: {existing!r}; New value: {value!r}."
    )
