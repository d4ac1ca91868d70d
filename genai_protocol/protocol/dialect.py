"""Backend dialects and the per-call transform context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Dialect(str, Enum):
    """Wire dialect of the backend a client talks to."""

    MLDEV = "mldev"  # Gemini Developer API
    VERTEX = "vertex"  # Vertex AI

    @classmethod
    def resolve(cls, vertexai: bool | None) -> Dialect:
        return cls.VERTEX if vertexai else cls.MLDEV


ALL_DIALECTS: frozenset[Dialect] = frozenset(Dialect)
MLDEV_ONLY: frozenset[Dialect] = frozenset({Dialect.MLDEV})
VERTEX_ONLY: frozenset[Dialect] = frozenset({Dialect.VERTEX})


@dataclass(frozen=True)
class TransformContext:
    """What value transforms may need besides the value itself.

    Attributes:
        dialect: Target (or source) dialect
        project: Vertex project, used to qualify resource names
        location: Vertex location, used to qualify resource names
    """

    dialect: Dialect
    project: str | None = None
    location: str | None = None

    @property
    def vertexai(self) -> bool:
        return self.dialect is Dialect.VERTEX

    @classmethod
    def coerce(cls, context: TransformContext | Dialect) -> TransformContext:
        if isinstance(context, TransformContext):
            return context
        return cls(dialect=Dialect(context))
