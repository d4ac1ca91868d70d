"""
Tests for the data-driven dialect transformer.

These exercise the engine rules (unsupported fields, renames, nested
recursion, parent targets) through real concept tables.
"""

import pytest

from genai_protocol.errors import UnsupportedFieldError, UsageError
from genai_protocol.protocol import (
    Dialect,
    FieldRule,
    TransformContext,
    from_dialect,
    get_concept,
    registered_concepts,
    to_dialect,
)
from genai_protocol.protocol.mapping import camelize_path
from genai_protocol.protocol.message_types import Content, Part, Retrieval, Tool


class TestCamelizePath:
    @pytest.mark.parametrize(
        ("canonical", "wire"),
        [
            ("mime_type", "mimeType"),
            (
                "voice_config.prebuilt_voice_config.voice_name",
                "voiceConfig.prebuiltVoiceConfig.voiceName",
            ),
            ("requests[].task_type", "requests[].taskType"),
            ("instances[0].image_bytes", "instances[0].imageBytes"),
            ("_self", "_self"),
        ],
    )
    def test_snake_case_segments_become_camel_case(self, canonical: str, wire: str) -> None:
        assert camelize_path(canonical) == wire


class TestFieldRule:
    def test_string_wire_path_is_supported_by_every_dialect(self) -> None:
        rule = FieldRule(canonical="mime_type")
        assert rule.supports(Dialect.MLDEV)
        assert rule.supports(Dialect.VERTEX)
        assert rule.wire_path(Dialect.VERTEX) == "mimeType"

    def test_per_dialect_mapping_limits_support(self) -> None:
        rule = FieldRule(
            canonical="auto_truncate", wire={Dialect.VERTEX: "parameters.autoTruncate"}
        )
        assert not rule.supports(Dialect.MLDEV)
        assert rule.wire_path(Dialect.VERTEX) == "parameters.autoTruncate"


class TestRegistry:
    def test_unknown_concept_raises(self) -> None:
        with pytest.raises(UsageError, match="Unknown concept"):
            get_concept("NoSuchConcept")

    def test_core_concepts_are_registered(self) -> None:
        names = registered_concepts()
        for name in (
            "Content",
            "Part",
            "Tool",
            "GenerateContentConfig",
            "CreateCachedContentConfig",
            "LiveConnectConfig",
            "CreateTuningJobConfig",
            "Image",
            "GenerateImagesConfig",
            "GenerateVideosConfig",
            "EmbedContentConfig",
        ):
            assert name in names


class TestUnsupportedFields:
    def test_retrieval_tool_is_rejected_by_gemini_api(self, mldev: TransformContext) -> None:
        # given
        tool = Tool(retrieval=Retrieval(disable_attribution=True))

        # when / then
        with pytest.raises(UnsupportedFieldError) as exc_info:
            to_dialect("Tool", tool, mldev)
        assert exc_info.value.field == "retrieval"
        assert exc_info.value.dialect == "mldev"

    def test_retrieval_tool_is_preserved_for_vertex(self, vertex: TransformContext) -> None:
        # given
        tool = Tool(retrieval=Retrieval(disable_attribution=True))

        # when
        payload = to_dialect("Tool", tool, vertex)

        # then
        assert payload == {"retrieval": {"disableAttribution": True}}

    def test_nested_unsupported_field_is_rejected(self, mldev: TransformContext) -> None:
        # given
        content = {"role": "user", "parts": [{"video_metadata": {"start_offset": "1s"}}]}

        # when / then
        with pytest.raises(UnsupportedFieldError, match="video_metadata"):
            to_dialect("Content", content, mldev)

    def test_unset_unsupported_field_is_not_an_error(self, mldev: TransformContext) -> None:
        assert to_dialect("Tool", Tool(code_execution={}), mldev) == {"codeExecution": {}}

    def test_accepts_dialect_in_place_of_context(self) -> None:
        with pytest.raises(UnsupportedFieldError):
            to_dialect("SafetySetting", {"method": "SEVERITY"}, Dialect.MLDEV)


class TestRenames:
    def test_response_token_count_reads_vertex_candidates_token_count(self) -> None:
        # given
        payload = {"promptTokenCount": 3, "candidatesTokenCount": 5, "totalTokenCount": 8}

        # when
        canonical = from_dialect("UsageMetadata", payload, Dialect.VERTEX)

        # then
        assert canonical == {
            "prompt_token_count": 3,
            "response_token_count": 5,
            "total_token_count": 8,
        }

    def test_response_token_count_reads_gemini_api_response_token_count(self) -> None:
        payload = {"responseTokenCount": 5, "candidatesTokenCount": 99}
        assert from_dialect("UsageMetadata", payload, Dialect.MLDEV) == {"response_token_count": 5}

    def test_from_dialect_ignores_fields_the_dialect_never_sends(self) -> None:
        payload = {"promptTokenCount": 1, "trafficType": "ON_DEMAND"}
        assert from_dialect("UsageMetadata", payload, Dialect.MLDEV) == {"prompt_token_count": 1}

    def test_from_dialect_rejects_non_object_payload(self) -> None:
        with pytest.raises(UsageError):
            from_dialect("UsageMetadata", ["not", "an", "object"], Dialect.MLDEV)


class TestNestedConcepts:
    def test_content_maps_every_part_in_order(self, mldev: TransformContext) -> None:
        # given
        content = Content(
            role="user",
            parts=[
                Part(text="first"),
                Part.from_uri("gs://bucket/a.png", "image/png"),
                Part(text="last"),
            ],
        )

        # when
        payload = to_dialect("Content", content, mldev)

        # then
        assert payload == {
            "role": "user",
            "parts": [
                {"text": "first"},
                {"fileData": {"fileUri": "gs://bucket/a.png", "mimeType": "image/png"}},
                {"text": "last"},
            ],
        }

    def test_inline_bytes_are_base64_encoded_and_decoded(self, mldev: TransformContext) -> None:
        # given
        part = Part.from_bytes(b"\x00\x01\x02", "application/octet-stream")

        # when
        payload = to_dialect("Part", part, mldev)
        canonical = from_dialect("Part", payload, mldev)

        # then
        assert payload == {"inlineData": {"data": "AAEC", "mimeType": "application/octet-stream"}}
        assert canonical == {
            "inline_data": {"data": b"\x00\x01\x02", "mime_type": "application/octet-stream"}
        }


class TestParentTargets:
    def test_parent_rules_are_skipped_without_parent(self, mldev: TransformContext) -> None:
        # given
        config = {
            "temperature": 0.2,
            "system_instruction": "be brief",
            "tools": [{"code_execution": {}}],
        }

        # when
        payload = to_dialect("GenerateContentConfig", config, mldev)

        # then
        assert payload == {"temperature": 0.2}

    def test_parent_rules_write_into_supplied_parent(self, mldev: TransformContext) -> None:
        # given
        parent: dict = {}
        config = {"temperature": 0.2, "system_instruction": "be brief"}

        # when
        payload = to_dialect("GenerateContentConfig", config, mldev, parent=parent)

        # then
        assert payload == {"temperature": 0.2}
        assert parent == {"systemInstruction": {"role": "user", "parts": [{"text": "be brief"}]}}

    def test_parent_rules_are_still_validated_without_parent(self, mldev: TransformContext) -> None:
        with pytest.raises(UnsupportedFieldError, match="labels"):
            to_dialect("GenerateContentConfig", {"labels": {"team": "a"}}, mldev)

    def test_non_object_input_raises(self, mldev: TransformContext) -> None:
        with pytest.raises(UsageError):
            to_dialect("Content", "not an object", mldev)
