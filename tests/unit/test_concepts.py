"""
Request and response shapes produced by the concept tables.

One test per endpoint family checks that a canonical request lands on the
wire the way each backend expects it.
"""

import pytest

from genai_protocol.errors import UnsupportedFieldError
from genai_protocol.protocol import Dialect, TransformContext, from_dialect, to_dialect
from genai_protocol.protocol.message_types import (
    GenerateContentConfig,
    GenerateContentResponse,
    LiveConnectConfig,
    SafetySetting,
)


class TestGenerateContentParameters:
    def test_gemini_api_request_body(self, mldev: TransformContext) -> None:
        # given
        config = GenerateContentConfig(
            temperature=0.5,
            max_output_tokens=64,
            system_instruction="be brief",
            safety_settings=[
                SafetySetting(
                    category="HARM_CATEGORY_HARASSMENT",
                    threshold="BLOCK_MEDIUM_AND_ABOVE",
                )
            ],
        )

        # when
        payload = to_dialect(
            "GenerateContentParameters",
            {"model": "gemini-2.0-flash", "contents": "Hello", "config": config},
            mldev,
        )

        # then
        assert payload == {
            "_url": {"model": "models/gemini-2.0-flash"},
            "contents": [{"role": "user", "parts": [{"text": "Hello"}]}],
            "generationConfig": {"temperature": 0.5, "maxOutputTokens": 64},
            "systemInstruction": {"role": "user", "parts": [{"text": "be brief"}]},
            "safetySettings": [
                {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
            ],
        }

    def test_vertex_request_uses_publisher_model_and_labels(self, vertex: TransformContext) -> None:
        # given
        params = {
            "model": "gemini-2.0-flash",
            "contents": ["a", "b"],
            "config": {"labels": {"team": "search"}},
        }

        # when
        payload = to_dialect("GenerateContentParameters", params, vertex)

        # then
        assert payload == {
            "_url": {"model": "publishers/google/models/gemini-2.0-flash"},
            "contents": [{"role": "user", "parts": [{"text": "a"}, {"text": "b"}]}],
            "labels": {"team": "search"},
        }

    def test_labels_are_rejected_by_gemini_api(self, mldev: TransformContext) -> None:
        params = {"model": "m", "contents": "x", "config": {"labels": {"team": "search"}}}
        with pytest.raises(UnsupportedFieldError):
            to_dialect("GenerateContentParameters", params, mldev)

    def test_cached_content_is_qualified(self, vertex: TransformContext) -> None:
        # when
        payload = to_dialect(
            "GenerateContentParameters",
            {"model": "m", "contents": "x", "config": {"cached_content": "abc"}},
            vertex,
        )

        # then
        assert payload["cachedContent"] == (
            "projects/test-project/locations/us-central1/cachedContents/abc"
        )

    def test_speech_config_voice_name_shorthand(self, mldev: TransformContext) -> None:
        payload = to_dialect("GenerateContentConfig", {"speech_config": "Puck"}, mldev)
        assert payload == {
            "speechConfig": {"voiceConfig": {"prebuiltVoiceConfig": {"voiceName": "Puck"}}}
        }


class TestGenerateContentResponse:
    def test_candidates_and_usage_are_read(self, mldev: TransformContext) -> None:
        # given
        payload = {
            "candidates": [
                {
                    "content": {"role": "model", "parts": [{"text": "Hi "}, {"text": "there"}]},
                    "finishReason": "STOP",
                    "index": 0,
                }
            ],
            "usageMetadata": {"promptTokenCount": 2, "totalTokenCount": 5},
            "modelVersion": "gemini-2.0-flash",
        }

        # when
        response = GenerateContentResponse.model_validate(
            from_dialect("GenerateContentResponse", payload, mldev)
        )

        # then
        assert response.text == "Hi there"
        assert response.candidates[0].finish_reason == "STOP"
        assert response.usage_metadata.total_token_count == 5
        assert response.model_version == "gemini-2.0-flash"

    def test_unknown_enum_value_passes_through(self, mldev: TransformContext) -> None:
        # given
        payload = {"candidates": [{"finishReason": "SOME_NEW_REASON"}]}

        # when
        response = GenerateContentResponse.model_validate(
            from_dialect("GenerateContentResponse", payload, mldev)
        )

        # then
        assert response.candidates[0].finish_reason == "SOME_NEW_REASON"

    def test_function_calls_are_collected(self, mldev: TransformContext) -> None:
        # given
        payload = {
            "candidates": [
                {
                    "content": {
                        "role": "model",
                        "parts": [
                            {"functionCall": {"id": "c1", "name": "lookup", "args": {"q": 1}}}
                        ],
                    }
                }
            ]
        }

        # when
        response = GenerateContentResponse.model_validate(
            from_dialect("GenerateContentResponse", payload, mldev)
        )

        # then
        assert response.text is None
        assert [call.name for call in response.function_calls] == ["lookup"]


class TestEmbedContentParameters:
    CONTENTS = [{"parts": [{"text": "a"}]}, {"parts": [{"text": "b"}]}]
    CONFIG = {"task_type": "RETRIEVAL_DOCUMENT", "output_dimensionality": 8}

    def test_gemini_api_batch_request(self, mldev: TransformContext) -> None:
        # when
        payload = to_dialect(
            "EmbedContentParameters",
            {"model": "text-embedding-004", "contents": self.CONTENTS, "config": self.CONFIG},
            mldev,
        )

        # then
        assert payload == {
            "_url": {"model": "models/text-embedding-004"},
            "requests": [
                {
                    "content": {"parts": [{"text": text}]},
                    "taskType": "RETRIEVAL_DOCUMENT",
                    "outputDimensionality": 8,
                    "model": "models/text-embedding-004",
                }
                for text in ("a", "b")
            ],
        }

    def test_vertex_predict_request(self, vertex: TransformContext) -> None:
        # when
        payload = to_dialect(
            "EmbedContentParameters",
            {"model": "text-embedding-004", "contents": self.CONTENTS, "config": self.CONFIG},
            vertex,
        )

        # then
        assert payload == {
            "_url": {"model": "publishers/google/models/text-embedding-004"},
            "instances": [
                {"content": {"parts": [{"text": text}]}, "task_type": "RETRIEVAL_DOCUMENT"}
                for text in ("a", "b")
            ],
            "parameters": {"outputDimensionality": 8},
        }

    def test_auto_truncate_is_vertex_only(self, mldev: TransformContext) -> None:
        with pytest.raises(UnsupportedFieldError, match="auto_truncate"):
            to_dialect(
                "EmbedContentParameters",
                {"model": "m", "contents": "a", "config": {"auto_truncate": True}},
                mldev,
            )

    def test_vertex_predictions_are_read(self, vertex: TransformContext) -> None:
        # given
        payload = {
            "predictions": [
                {"embeddings": {"values": [0.1, 0.2], "statistics": {"tokenCount": 2}}},
                {"embeddings": {"values": [0.3]}},
            ]
        }

        # when
        canonical = from_dialect("EmbedContentResponse", payload, vertex)

        # then
        assert canonical == {
            "embeddings": [
                {"values": [0.1, 0.2], "statistics": {"token_count": 2}},
                {"values": [0.3]},
            ]
        }


class TestGenerateImagesParameters:
    def test_prompt_and_config_land_in_instances_and_parameters(
        self, mldev: TransformContext
    ) -> None:
        # when
        payload = to_dialect(
            "GenerateImagesParameters",
            {
                "model": "imagen-3.0-generate-002",
                "prompt": "a cat",
                "config": {"number_of_images": 2, "output_mime_type": "image/png"},
            },
            mldev,
        )

        # then
        assert payload == {
            "_url": {"model": "models/imagen-3.0-generate-002"},
            "instances": [{"prompt": "a cat"}],
            "parameters": {"sampleCount": 2, "outputOptions": {"mimeType": "image/png"}},
        }

    def test_generated_images_are_read_from_predictions(self, mldev: TransformContext) -> None:
        # given
        payload = {
            "predictions": [
                {"bytesBase64Encoded": "AAEC", "mimeType": "image/png", "prompt": "a fluffy cat"}
            ]
        }

        # when
        canonical = from_dialect("GenerateImagesResponse", payload, mldev)

        # then
        assert canonical == {
            "generated_images": [
                {
                    "image": {"image_bytes": b"\x00\x01\x02", "mime_type": "image/png"},
                    "enhanced_prompt": "a fluffy cat",
                }
            ]
        }


class TestGenerateVideos:
    def test_image_conditioned_request(self, vertex: TransformContext) -> None:
        # when
        payload = to_dialect(
            "GenerateVideosParameters",
            {
                "model": "veo-2.0-generate-001",
                "prompt": "waves",
                "image": {"gcs_uri": "gs://bucket/frame.png", "mime_type": "image/png"},
                "config": {"number_of_videos": 1, "fps": 24},
            },
            vertex,
        )

        # then
        assert payload == {
            "_url": {"model": "publishers/google/models/veo-2.0-generate-001"},
            "instances": [
                {
                    "prompt": "waves",
                    "image": {"gcsUri": "gs://bucket/frame.png", "mimeType": "image/png"},
                }
            ],
            "parameters": {"sampleCount": 1, "fps": 24},
        }

    def test_gemini_api_generated_samples(self, mldev: TransformContext) -> None:
        # given
        payload = {
            "generatedSamples": [{"video": {"uri": "https://x/files/abc", "encoding": "video/mp4"}}]
        }

        # when
        canonical = from_dialect("GenerateVideosResponse", payload, mldev)

        # then
        assert canonical == {
            "generated_videos": [
                {"video": {"uri": "https://x/files/abc", "mime_type": "video/mp4"}}
            ]
        }


class TestTuningJob:
    def test_gemini_api_tuned_model_state_is_translated(self, mldev: TransformContext) -> None:
        # given
        payload = {"name": "tunedModels/abc", "state": "ACTIVE", "baseModel": "models/m"}

        # when
        canonical = from_dialect("TuningJob", payload, mldev)

        # then
        assert canonical == {
            "name": "tunedModels/abc",
            "state": "JOB_STATE_SUCCEEDED",
            "base_model": "models/m",
            "tuned_model": {"model": "tunedModels/abc", "endpoint": "tunedModels/abc"},
        }

    def test_vertex_state_is_kept(self, vertex: TransformContext) -> None:
        payload = {"name": "projects/p/locations/l/tuningJobs/1", "state": "JOB_STATE_RUNNING"}
        assert from_dialect("TuningJob", payload, vertex)["state"] == "JOB_STATE_RUNNING"

    def test_create_request_per_dialect(
        self, mldev: TransformContext, vertex: TransformContext
    ) -> None:
        # given
        params = {
            "base_model": "gemini-1.0-pro-002",
            "training_dataset": {"gcs_uri": "gs://bucket/train.jsonl"},
            "config": {"tuned_model_display_name": "mine", "epoch_count": 3},
        }

        # when
        payload = to_dialect("CreateTuningJobParameters", params, vertex)

        # then
        assert payload == {
            "baseModel": "gemini-1.0-pro-002",
            "supervisedTuningSpec": {
                "trainingDatasetUri": "gs://bucket/train.jsonl",
                "hyperParameters": {"epochCount": 3},
            },
            "tunedModelDisplayName": "mine",
        }
        with pytest.raises(UnsupportedFieldError, match="gcs_uri"):
            to_dialect("CreateTuningJobParameters", params, mldev)


class TestLiveConnectParameters:
    def test_gemini_api_setup_frame(self, mldev: TransformContext) -> None:
        # given
        config = LiveConnectConfig(response_modalities=["TEXT"], system_instruction="hi")

        # when
        payload = to_dialect(
            "LiveConnectParameters",
            {"model": "gemini-2.0-flash-live-001", "config": config},
            mldev,
        )

        # then
        assert payload == {
            "setup": {
                "model": "models/gemini-2.0-flash-live-001",
                "generationConfig": {"responseModalities": ["TEXT"]},
                "systemInstruction": {"role": "user", "parts": [{"text": "hi"}]},
            }
        }

    def test_vertex_setup_frame_uses_qualified_model(self, vertex: TransformContext) -> None:
        # when
        payload = to_dialect(
            "LiveConnectParameters",
            {"model": "gemini-2.0-flash-live-001", "config": {"response_modalities": ["AUDIO"]}},
            vertex,
        )

        # then
        assert payload["setup"]["model"] == (
            "projects/test-project/locations/us-central1/"
            "publishers/google/models/gemini-2.0-flash-live-001"
        )

    def test_server_message_is_read(self) -> None:
        # given
        payload = {
            "serverContent": {
                "modelTurn": {"parts": [{"text": "hello"}]},
                "turnComplete": True,
            },
            "usageMetadata": {"responseTokenCount": 4},
        }

        # when
        canonical = from_dialect("LiveServerMessage", payload, Dialect.MLDEV)

        # then
        assert canonical == {
            "server_content": {"model_turn": {"parts": [{"text": "hello"}]}, "turn_complete": True},
            "usage_metadata": {"response_token_count": 4},
        }

    def test_setup_complete_is_kept_as_empty_object(self) -> None:
        canonical = from_dialect("LiveServerMessage", {"setupComplete": {}}, Dialect.VERTEX)
        assert canonical == {"setup_complete": {}}
