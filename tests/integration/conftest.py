"""Pytest configuration for integration tests.

Integration tests drive a full Client against mocked transports.
"""

from collections.abc import Callable
from typing import Any
from unittest.mock import Mock

import pytest

from genai_protocol import Client
from tests.utils.mocks import create_mock_http_session


@pytest.fixture
def make_client() -> Callable[..., Client]:
    """Build a Client whose HTTP session answers with the given responses.

    Examples:
        client = make_client(create_mock_response(json_body={...}))
        client = make_client(vertexai=True, websocket_connect=connect)
    """

    def _make(*responses: Mock, vertexai: bool = False, **kwargs: Any) -> Client:
        session = create_mock_http_session(*responses)
        if vertexai:
            return Client(
                vertexai=True,
                project="test-project",
                location="us-central1",
                session=session,
                **kwargs,
            )
        return Client(api_key="test-api-key", session=session, **kwargs)

    return _make
