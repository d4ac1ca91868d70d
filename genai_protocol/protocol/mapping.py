"""
Data-driven dialect transformer.

Every transformable concept is a table of FieldRule entries. A single pair of
functions, ``to_dialect`` and ``from_dialect``, interprets any table:

    read canonical path -> (reject if unsupported) -> encode -> recurse -> write wire path

Components:
    - FieldRule: one "canonical path <-> wire path" entry with optional value
      transforms, nested concept, dialect availability and target object
    - Concept: named, ordered tuple of FieldRules
    - register / get_concept: the concept registry filled by concepts.py
    - to_dialect / from_dialect: the generic interpreters
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel

from ..errors import UnsupportedFieldError, UsageError
from .dialect import ALL_DIALECTS, Dialect, TransformContext
from .paths import get_value_by_path, set_value_by_path


ValueTransform = Callable[[TransformContext, Any], Any]


class Target(str, Enum):
    """Object a rule writes into when building a wire payload."""

    SELF = "self"
    PARENT = "parent"


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(word[:1].upper() + word[1:] for word in rest)


def camelize_path(path: str) -> str:
    """snake_case dotted path -> camelCase dotted path, keeping array markers."""
    segments = []
    for segment in path.split("."):
        if segment == "_self":
            segments.append(segment)
            continue
        marker = ""
        for suffix in ("[]", "[0]"):
            if segment.endswith(suffix):
                segment, marker = segment[: -len(suffix)], suffix
                break
        segments.append(_camel(segment) + marker)
    return ".".join(segments)


@dataclass(frozen=True)
class FieldRule:
    """One field mapping.

    Attributes:
        canonical: Dotted path in the canonical dict
        wire: Dotted path in the wire payload, or a per-dialect mapping of
            paths (dialects missing from the mapping do not support the
            field). Defaults to the camelCase form of ``canonical``.
        concept: Nested concept applied to the value (element-wise for lists)
        encode: Value transform applied by to_dialect before recursion
        decode: Value transform applied by from_dialect before recursion
        dialects: Dialects that accept the field
        target: SELF writes into the concept's own payload, PARENT into the
            parent object passed by the caller
        readonly: Only read by from_dialect (e.g. ``_self`` re-interpretations)
        strict: When False, a dialect without a place for the field skips it
            instead of raising
    """

    canonical: str
    wire: str | Mapping[Dialect, str] | None = None
    concept: str | None = None
    encode: ValueTransform | None = None
    decode: ValueTransform | None = None
    dialects: frozenset[Dialect] = ALL_DIALECTS
    target: Target = Target.SELF
    readonly: bool = False
    strict: bool = True

    def supports(self, dialect: Dialect) -> bool:
        if dialect not in self.dialects:
            return False
        return not isinstance(self.wire, Mapping) or dialect in self.wire

    def wire_path(self, dialect: Dialect) -> str:
        if self.wire is None:
            return camelize_path(self.canonical)
        if isinstance(self.wire, str):
            return self.wire
        return self.wire[dialect]


@dataclass(frozen=True)
class Concept:
    name: str
    fields: tuple[FieldRule, ...] = field(default_factory=tuple)


_REGISTRY: dict[str, Concept] = {}


def register(name: str, *fields: FieldRule) -> Concept:
    concept = Concept(name=name, fields=tuple(fields))
    _REGISTRY[name] = concept
    return concept


def get_concept(name: str) -> Concept:
    concept = _REGISTRY.get(name)
    if concept is None:
        raise UsageError(f"Unknown concept: {name}")
    return concept


def registered_concepts() -> list[str]:
    return sorted(_REGISTRY)


def as_plain_dict(data: Any, concept: str) -> dict[str, Any]:
    """Canonical model or mapping -> plain dict."""
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_none=True)
    if isinstance(data, Mapping):
        return dict(data)
    raise UsageError(f"Expected an object for {concept}, got {type(data).__name__}.")


def _map_nested(value: Any, transform: Callable[[Any], Any]) -> Any:
    if isinstance(value, list):
        return [transform(item) if item is not None else None for item in value]
    return transform(value)


def to_dialect(
    concept: str,
    data: Any,
    context: TransformContext | Dialect,
    *,
    parent: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the wire payload of ``concept`` for the context's dialect.

    Args:
        concept: Registered concept name
        data: Canonical model or dict
        context: Target dialect, optionally with project/location
        parent: Object under construction that PARENT rules write into. When
            omitted, PARENT rules are validated but not written.

    Raises:
        UnsupportedFieldError: A set field has no place in the dialect
    """
    ctx = TransformContext.coerce(context)
    table = get_concept(concept)
    source = as_plain_dict(data, concept)
    result: dict[str, Any] = {}

    for rule in table.fields:
        if rule.readonly:
            continue
        value = get_value_by_path(source, rule.canonical)
        if value is None:
            continue
        if not rule.supports(ctx.dialect):
            if not rule.strict:
                continue
            raise UnsupportedFieldError(rule.canonical, ctx.dialect.value)
        if rule.target is Target.PARENT and parent is None:
            continue

        if rule.encode is not None:
            value = rule.encode(ctx, value)
        if rule.concept is not None:
            nested = rule.concept
            value = _map_nested(value, lambda item: to_dialect(nested, item, ctx, parent=result))
            # every field went to the parent
            if value == {}:
                continue

        destination = parent if rule.target is Target.PARENT else result
        set_value_by_path(destination, rule.wire_path(ctx.dialect), value)

    return result


def from_dialect(
    concept: str,
    payload: Any,
    context: TransformContext | Dialect,
) -> dict[str, Any]:
    """Read a wire payload of ``concept`` back into a canonical dict.

    Fields the dialect never sends are ignored.
    """
    ctx = TransformContext.coerce(context)
    table = get_concept(concept)
    if not isinstance(payload, Mapping):
        raise UsageError(f"Expected an object for {concept}, got {type(payload).__name__}.")
    result: dict[str, Any] = {}

    for rule in table.fields:
        if rule.target is Target.PARENT or not rule.supports(ctx.dialect):
            continue
        value = get_value_by_path(payload, rule.wire_path(ctx.dialect))
        if value is None:
            continue

        if rule.decode is not None:
            value = rule.decode(ctx, value)
        if rule.concept is not None:
            nested = rule.concept
            value = _map_nested(value, lambda item: from_dialect(nested, item, ctx))

        set_value_by_path(result, rule.canonical, value)

    return result
