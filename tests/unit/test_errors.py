"""Tests for the error taxonomy and status classification."""

import pytest

from genai_protocol.errors import (
    APIError,
    ClientError,
    GenAIError,
    HistoryError,
    PathError,
    ServerError,
    UnsupportedFieldError,
    UsageError,
)


class TestHierarchy:
    @pytest.mark.parametrize("error_type", [UnsupportedFieldError, PathError, HistoryError])
    def test_usage_errors_are_value_errors(self, error_type: type) -> None:
        assert issubclass(error_type, UsageError)
        assert issubclass(error_type, ValueError)

    def test_api_errors_share_base(self) -> None:
        assert issubclass(ClientError, APIError)
        assert issubclass(ServerError, APIError)
        assert issubclass(APIError, GenAIError)

    def test_unsupported_field_message(self) -> None:
        error = UnsupportedFieldError("labels", "mldev")
        assert str(error) == "labels parameter is not supported in the mldev dialect."


class TestRaiseForStatus:
    def test_success_does_not_raise(self) -> None:
        APIError.raise_for_status(204, {})

    def test_client_error_fields(self) -> None:
        # given
        body = {
            "error": {
                "code": 404,
                "status": "NOT_FOUND",
                "message": "models/x is not found",
                "details": [{"@type": "type.googleapis.com/google.rpc.ErrorInfo"}],
            }
        }

        # when
        with pytest.raises(ClientError) as exc_info:
            APIError.raise_for_status(404, body)

        # then
        error = exc_info.value
        assert error.code == 404
        assert error.status == "NOT_FOUND"
        assert error.message == "models/x is not found"
        assert error.details == [{"@type": "type.googleapis.com/google.rpc.ErrorInfo"}]
        assert error.response_json is body
        assert str(error) == "404 NOT_FOUND. models/x is not found"

    def test_server_error(self) -> None:
        with pytest.raises(ServerError):
            APIError.raise_for_status(500, {"error": {"message": "internal"}})

    def test_other_status_is_plain_api_error(self) -> None:
        with pytest.raises(APIError) as exc_info:
            APIError.raise_for_status(302, {})
        assert type(exc_info.value) is APIError

    def test_string_error_body(self) -> None:
        with pytest.raises(ClientError) as exc_info:
            APIError.raise_for_status(400, {"error": "bad request"})
        assert exc_info.value.message == "bad request"


class TestEmbeddedError:
    def test_chunk_without_error_passes(self) -> None:
        APIError.raise_for_embedded_error({"candidates": []})

    def test_embedded_code_selects_error_kind(self) -> None:
        with pytest.raises(ClientError) as exc_info:
            APIError.raise_for_embedded_error({"error": {"code": 429, "message": "quota"}})
        assert exc_info.value.code == 429

    def test_missing_code_is_a_server_error(self) -> None:
        with pytest.raises(ServerError) as exc_info:
            APIError.raise_for_embedded_error({"error": {"message": "unknown"}})
        assert exc_info.value.code == 500

    def test_string_code_is_coerced(self) -> None:
        with pytest.raises(ClientError):
            APIError.raise_for_embedded_error({"error": {"code": "400"}})
