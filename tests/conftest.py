"""Pytest configuration and shared fixtures for tests.

This module provides common pytest fixtures that are shared across
unit and integration tests.
"""

from collections.abc import Iterator

import pytest

from genai_protocol.chunk_logger import chunk_logger
from genai_protocol.protocol import Dialect, TransformContext


# ============================================================
# Transform Contexts
# ============================================================


@pytest.fixture
def mldev() -> TransformContext:
    """Gemini Developer API context."""
    return TransformContext(dialect=Dialect.MLDEV)


@pytest.fixture
def vertex() -> TransformContext:
    """Vertex AI context with project and location."""
    return TransformContext(dialect=Dialect.VERTEX, project="test-project", location="us-central1")


@pytest.fixture
def vertex_without_project() -> TransformContext:
    """Vertex AI context as used with an API key (no project/location)."""
    return TransformContext(dialect=Dialect.VERTEX)


# ============================================================
# Chunk Logger
# ============================================================


@pytest.fixture(autouse=True)
def disable_chunk_logger() -> Iterator[None]:
    """Keep the global chunk logger from writing files during tests."""
    enabled = chunk_logger._enabled
    chunk_logger._enabled = False
    yield
    chunk_logger._enabled = enabled
