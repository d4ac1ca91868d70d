"""
Field-mapping tables for every transformable concept.

Each ``register`` call declares one concept as an ordered list of rules. The
wire path defaults to the camelCase form of the canonical path, so most rules
only name the canonical field. Rule order matters where several rules write
under the same wire key (fan-out over arrays created by an earlier rule,
dict merges into a shared parent key).
"""

from __future__ import annotations

from typing import Any

from .contents import (
    t_blob,
    t_blobs,
    t_bytes,
    t_content,
    t_contents,
    t_decode_bytes,
    t_speech_config,
    t_timestamp,
    t_tools,
)
from .dialect import Dialect, VERTEX_ONLY
from .identifiers import (
    t_cached_content_name,
    t_caches_model,
    t_extract_models,
    t_file_name,
    t_live_model,
    t_model,
    t_models_url,
    t_tuning_job_status,
)
from .mapping import FieldRule, Target, ValueTransform, register


MLDEV = Dialect.MLDEV
VERTEX = Dialect.VERTEX


def rule(
    canonical: str,
    wire: str | dict[Dialect, str] | None = None,
    *,
    concept: str | None = None,
    encode: ValueTransform | None = None,
    decode: ValueTransform | None = None,
    vertex_only: bool = False,
    parent: bool = False,
    readonly: bool = False,
    strict: bool = True,
) -> FieldRule:
    kwargs: dict[str, Any] = {}
    if vertex_only:
        kwargs["dialects"] = VERTEX_ONLY
    return FieldRule(
        canonical=canonical,
        wire=wire,
        concept=concept,
        encode=encode,
        decode=decode,
        target=Target.PARENT if parent else Target.SELF,
        readonly=readonly,
        strict=strict,
        **kwargs,
    )


def _query(*names: str) -> list[FieldRule]:
    """List-config fields that become query parameters of the request."""
    return [rule(name, f"_query.{rule(name).wire_path(MLDEV)}", parent=True) for name in names]


# ============================================================
# Content
# ============================================================

register(
    "Blob",
    rule("data", encode=t_bytes, decode=t_decode_bytes),
    rule("mime_type"),
)

register("FileData", rule("file_uri"), rule("mime_type"))

register("VideoMetadata", rule("start_offset"), rule("end_offset"))

register("FunctionCall", rule("id"), rule("name"), rule("args"))

register("FunctionResponse", rule("id"), rule("name"), rule("response"))

register("ExecutableCode", rule("code"), rule("language"))

register("CodeExecutionResult", rule("outcome"), rule("output"))

register(
    "Part",
    rule("video_metadata", concept="VideoMetadata", vertex_only=True),
    rule("thought"),
    rule("code_execution_result", concept="CodeExecutionResult"),
    rule("executable_code", concept="ExecutableCode"),
    rule("file_data", concept="FileData"),
    rule("function_call", concept="FunctionCall"),
    rule("function_response", concept="FunctionResponse"),
    rule("inline_data", concept="Blob"),
    rule("text"),
)

register("Content", rule("parts", concept="Part"), rule("role"))

# ============================================================
# Tools
# ============================================================

register(
    "FunctionDeclaration",
    rule("response", vertex_only=True),
    rule("description"),
    rule("name"),
    rule("parameters"),
)

register("DynamicRetrievalConfig", rule("mode"), rule("dynamic_threshold"))

register(
    "GoogleSearchRetrieval",
    rule("dynamic_retrieval_config", concept="DynamicRetrievalConfig"),
)

register(
    "Retrieval",
    rule("disable_attribution"),
    rule("vertex_ai_search"),
    rule("vertex_rag_store"),
)

register(
    "Tool",
    rule("function_declarations", concept="FunctionDeclaration"),
    rule("retrieval", concept="Retrieval", vertex_only=True),
    rule("google_search"),
    rule("google_search_retrieval", concept="GoogleSearchRetrieval"),
    rule("code_execution"),
)

register("FunctionCallingConfig", rule("mode"), rule("allowed_function_names"))

register("ToolConfig", rule("function_calling_config", concept="FunctionCallingConfig"))

# ============================================================
# Generate content
# ============================================================

register(
    "SafetySetting",
    rule("method", vertex_only=True),
    rule("category"),
    rule("threshold"),
)

register(
    "SpeechConfig",
    rule("voice_config.prebuilt_voice_config.voice_name"),
    rule("language_code"),
)

register("ThinkingConfig", rule("include_thoughts"), rule("thinking_budget"))

register(
    "GenerateContentConfig",
    rule("system_instruction", parent=True, encode=t_content, concept="Content"),
    rule("temperature"),
    rule("top_p"),
    rule("top_k"),
    rule("candidate_count"),
    rule("max_output_tokens"),
    rule("stop_sequences"),
    rule("response_logprobs"),
    rule("logprobs"),
    rule("presence_penalty"),
    rule("frequency_penalty"),
    rule("seed"),
    rule("response_mime_type"),
    rule("response_schema"),
    rule("routing_config", vertex_only=True),
    rule("safety_settings", parent=True, concept="SafetySetting"),
    rule("tools", parent=True, encode=t_tools, concept="Tool"),
    rule("tool_config", parent=True, concept="ToolConfig"),
    rule("labels", parent=True, vertex_only=True),
    rule("cached_content", parent=True, encode=t_cached_content_name),
    rule("response_modalities"),
    rule("media_resolution"),
    rule("speech_config", encode=t_speech_config, concept="SpeechConfig"),
    rule("audio_timestamp", vertex_only=True),
    rule("thinking_config", concept="ThinkingConfig"),
)

register(
    "GenerateContentParameters",
    rule("model", "_url.model", encode=t_model),
    rule("contents", encode=t_contents, concept="Content"),
    rule("config", "generationConfig", concept="GenerateContentConfig"),
)

register(
    "SafetyRating",
    rule("blocked"),
    rule("category"),
    rule("probability"),
    rule("probability_score", vertex_only=True),
    rule("severity", vertex_only=True),
    rule("severity_score", vertex_only=True),
)

register(
    "Candidate",
    rule("content", concept="Content"),
    rule("citation_metadata"),
    rule("finish_message", vertex_only=True),
    rule("token_count"),
    rule("finish_reason"),
    rule("avg_logprobs"),
    rule("grounding_metadata"),
    rule("index"),
    rule("logprobs_result"),
    rule("safety_ratings", concept="SafetyRating"),
)

register(
    "PromptFeedback",
    rule("block_reason"),
    rule("block_reason_message"),
    rule("safety_ratings", concept="SafetyRating"),
)

register(
    "GenerateContentResponseUsageMetadata",
    rule("cached_content_token_count"),
    rule("candidates_token_count"),
    rule("prompt_token_count"),
    rule("thoughts_token_count"),
    rule("tool_use_prompt_token_count"),
    rule("total_token_count"),
)

register(
    "GenerateContentResponse",
    rule("candidates", concept="Candidate"),
    rule("create_time", vertex_only=True),
    rule("response_id"),
    rule("model_version"),
    rule("prompt_feedback", concept="PromptFeedback"),
    rule("usage_metadata", concept="GenerateContentResponseUsageMetadata"),
)

# ============================================================
# Embeddings
# ============================================================

register(
    "EmbedContentConfig",
    rule("task_type", {MLDEV: "requests[].taskType", VERTEX: "instances[].task_type"}, parent=True),
    rule("title", {MLDEV: "requests[].title", VERTEX: "instances[].title"}, parent=True),
    rule(
        "output_dimensionality",
        {MLDEV: "requests[].outputDimensionality", VERTEX: "parameters.outputDimensionality"},
        parent=True,
    ),
    rule("mime_type", {VERTEX: "instances[].mimeType"}, parent=True),
    rule("auto_truncate", {VERTEX: "parameters.autoTruncate"}, parent=True),
)

register(
    "EmbedContentParameters",
    rule("model", "_url.model", encode=t_model),
    rule(
        "contents",
        {MLDEV: "requests[].content", VERTEX: "instances[].content"},
        encode=t_contents,
        concept="Content",
    ),
    rule("config", concept="EmbedContentConfig"),
    rule("model", {MLDEV: "requests[].model"}, encode=t_model, strict=False),
)

register("ContentEmbeddingStatistics", rule("truncated"), rule("token_count"))

register(
    "ContentEmbedding",
    rule("values"),
    rule("statistics", concept="ContentEmbeddingStatistics", vertex_only=True),
)

register(
    "EmbedContentResponse",
    rule(
        "embeddings",
        {MLDEV: "embeddings", VERTEX: "predictions[].embeddings"},
        concept="ContentEmbedding",
    ),
)

# ============================================================
# Models
# ============================================================

register(
    "Model",
    rule("name"),
    rule("display_name"),
    rule("description"),
    rule("version", {MLDEV: "version", VERTEX: "versionId"}),
    rule("input_token_limit", {MLDEV: "inputTokenLimit"}),
    rule("output_token_limit", {MLDEV: "outputTokenLimit"}),
    rule("supported_actions", {MLDEV: "supportedGenerationMethods"}),
)

register("GetModelParameters", rule("model", "_url.name", encode=t_model))

register(
    "ListModelsConfig",
    *_query("page_size", "page_token", "filter"),
    rule("query_base", "_url.models_url", parent=True, encode=t_models_url),
)

register("ListModelsParameters", rule("config", concept="ListModelsConfig"))

register(
    "ListModelsResponse",
    rule("next_page_token"),
    rule("models", "_self", decode=t_extract_models, concept="Model", readonly=True),
)

# ============================================================
# Cached content
# ============================================================

register(
    "CreateCachedContentConfig",
    rule("ttl", parent=True),
    rule("expire_time", parent=True, encode=t_timestamp),
    rule("display_name", parent=True),
    rule("contents", parent=True, encode=t_contents, concept="Content"),
    rule("system_instruction", parent=True, encode=t_content, concept="Content"),
    rule("tools", parent=True, encode=t_tools, concept="Tool"),
    rule("tool_config", parent=True, concept="ToolConfig"),
    rule("kms_key_name", {VERTEX: "encryptionSpec.kmsKeyName"}, parent=True),
)

register(
    "CreateCachedContentParameters",
    rule("model", encode=t_caches_model),
    rule("config", concept="CreateCachedContentConfig"),
)

register(
    "CachedContent",
    rule("name"),
    rule("display_name"),
    rule("model"),
    rule("create_time"),
    rule("update_time"),
    rule("expire_time"),
    rule("usage_metadata"),
)

register("GetCachedContentParameters", rule("name", "_url.name", encode=t_cached_content_name))

register("ListCachedContentsConfig", *_query("page_size", "page_token"))

register("ListCachedContentsParameters", rule("config", concept="ListCachedContentsConfig"))

register(
    "ListCachedContentsResponse",
    rule("next_page_token"),
    rule("cached_contents", concept="CachedContent"),
)

# ============================================================
# Files
# ============================================================

register(
    "File",
    rule("name"),
    rule("display_name"),
    rule("mime_type"),
    rule("size_bytes"),
    rule("create_time", encode=t_timestamp),
    rule("expiration_time", encode=t_timestamp),
    rule("update_time", encode=t_timestamp),
    rule("sha256_hash"),
    rule("uri"),
    rule("download_uri"),
    rule("state"),
    rule("source"),
    rule("video_metadata"),
    rule("error"),
)

register("GetFileParameters", rule("name", "_url.file", encode=t_file_name))

register("ListFilesConfig", *_query("page_size", "page_token"))

register("ListFilesParameters", rule("config", concept="ListFilesConfig"))

register("ListFilesResponse", rule("next_page_token"), rule("files", concept="File"))

# ============================================================
# Tuning
# ============================================================

register("TuningExample", rule("text_input"), rule("output"))

register(
    "TuningDataset",
    rule("gcs_uri", {VERTEX: "trainingDatasetUri"}),
    rule("examples", {MLDEV: "examples.examples"}, concept="TuningExample"),
)

register("TuningValidationDataset", rule("gcs_uri", {VERTEX: "validationDatasetUri"}))

register(
    "CreateTuningJobConfig",
    rule(
        "validation_dataset",
        {VERTEX: "supervisedTuningSpec"},
        parent=True,
        concept="TuningValidationDataset",
    ),
    rule(
        "tuned_model_display_name",
        {MLDEV: "displayName", VERTEX: "tunedModelDisplayName"},
        parent=True,
    ),
    rule("description", parent=True),
    rule(
        "epoch_count",
        {
            MLDEV: "tuningTask.hyperparameters.epochCount",
            VERTEX: "supervisedTuningSpec.hyperParameters.epochCount",
        },
        parent=True,
    ),
    rule(
        "learning_rate_multiplier",
        {
            MLDEV: "tuningTask.hyperparameters.learningRateMultiplier",
            VERTEX: "supervisedTuningSpec.hyperParameters.learningRateMultiplier",
        },
        parent=True,
    ),
    rule(
        "adapter_size",
        {VERTEX: "supervisedTuningSpec.hyperParameters.adapterSize"},
        parent=True,
    ),
    rule("batch_size", {MLDEV: "tuningTask.hyperparameters.batchSize"}, parent=True),
    rule("learning_rate", {MLDEV: "tuningTask.hyperparameters.learningRate"}, parent=True),
)

register(
    "CreateTuningJobParameters",
    rule("base_model"),
    rule(
        "training_dataset",
        {MLDEV: "tuningTask.trainingData", VERTEX: "supervisedTuningSpec"},
        concept="TuningDataset",
    ),
    rule("config", concept="CreateTuningJobConfig"),
)

register(
    "TunedModel",
    rule("model", {MLDEV: "name", VERTEX: "model"}),
    rule("endpoint", {MLDEV: "name", VERTEX: "endpoint"}),
)

register(
    "TuningJob",
    rule("name"),
    rule("state", {MLDEV: "state"}, decode=t_tuning_job_status, strict=False),
    rule("state", {VERTEX: "state"}, strict=False),
    rule("create_time"),
    rule("start_time", {MLDEV: "tuningTask.startTime", VERTEX: "startTime"}),
    rule("end_time", {MLDEV: "tuningTask.completeTime", VERTEX: "endTime"}),
    rule("update_time"),
    rule("error", vertex_only=True),
    rule("description"),
    rule("base_model"),
    rule(
        "tuned_model",
        {MLDEV: "_self", VERTEX: "tunedModel"},
        concept="TunedModel",
        readonly=True,
    ),
    rule("tuned_model_display_name", vertex_only=True),
    rule("experiment", vertex_only=True),
)

register("GetTuningJobParameters", rule("name", "_url.name"))

register("ListTuningJobsConfig", *_query("page_size", "page_token", "filter"))

register("ListTuningJobsParameters", rule("config", concept="ListTuningJobsConfig"))

register(
    "ListTuningJobsResponse",
    rule("next_page_token"),
    rule("tuning_jobs", {MLDEV: "tunedModels", VERTEX: "tuningJobs"}, concept="TuningJob"),
)

# ============================================================
# Images and videos
# ============================================================

register(
    "Image",
    rule("gcs_uri", vertex_only=True),
    rule("image_bytes", "bytesBase64Encoded", encode=t_bytes, decode=t_decode_bytes),
    rule("mime_type"),
)

register(
    "GenerateImagesConfig",
    rule("output_gcs_uri", "parameters.storageUri", parent=True, vertex_only=True),
    rule("negative_prompt", "parameters.negativePrompt", parent=True, vertex_only=True),
    rule("number_of_images", "parameters.sampleCount", parent=True),
    rule("aspect_ratio", "parameters.aspectRatio", parent=True),
    rule("guidance_scale", "parameters.guidanceScale", parent=True),
    rule("seed", "parameters.seed", parent=True, vertex_only=True),
    rule("safety_filter_level", "parameters.safetySetting", parent=True),
    rule("person_generation", "parameters.personGeneration", parent=True),
    rule("include_safety_attributes", "parameters.includeSafetyAttributes", parent=True),
    rule("include_rai_reason", "parameters.includeRaiReason", parent=True),
    rule("language", "parameters.language", parent=True),
    rule("output_mime_type", "parameters.outputOptions.mimeType", parent=True),
    rule(
        "output_compression_quality",
        "parameters.outputOptions.compressionQuality",
        parent=True,
    ),
    rule("add_watermark", "parameters.addWatermark", parent=True, vertex_only=True),
    rule("enhance_prompt", "parameters.enhancePrompt", parent=True, vertex_only=True),
)

register(
    "GenerateImagesParameters",
    rule("model", "_url.model", encode=t_model),
    rule("prompt", "instances[0].prompt"),
    rule("config", concept="GenerateImagesConfig"),
)

register(
    "GeneratedImage",
    rule("image", "_self", concept="Image", readonly=True),
    rule("rai_filtered_reason"),
    rule("enhanced_prompt", "prompt"),
)

register(
    "GenerateImagesResponse",
    rule("generated_images", "predictions", concept="GeneratedImage"),
)

register(
    "Video",
    rule("uri", {MLDEV: "video.uri", VERTEX: "gcsUri"}),
    rule(
        "video_bytes",
        {MLDEV: "video.encodedVideo", VERTEX: "bytesBase64Encoded"},
        encode=t_bytes,
        decode=t_decode_bytes,
    ),
    rule("mime_type", {MLDEV: "video.encoding", VERTEX: "mimeType"}),
)

register("GeneratedVideo", rule("video", "_self", concept="Video", readonly=True))

register(
    "GenerateVideosConfig",
    rule("number_of_videos", "parameters.sampleCount", parent=True),
    rule("output_gcs_uri", "parameters.storageUri", parent=True, vertex_only=True),
    rule("fps", "parameters.fps", parent=True, vertex_only=True),
    rule("duration_seconds", "parameters.durationSeconds", parent=True),
    rule("seed", "parameters.seed", parent=True, vertex_only=True),
    rule("aspect_ratio", "parameters.aspectRatio", parent=True),
    rule("resolution", "parameters.resolution", parent=True, vertex_only=True),
    rule("person_generation", "parameters.personGeneration", parent=True),
    rule("pubsub_topic", "parameters.pubsubTopic", parent=True, vertex_only=True),
    rule("negative_prompt", "parameters.negativePrompt", parent=True),
    rule("enhance_prompt", "parameters.enhancePrompt", parent=True),
)

register(
    "GenerateVideosParameters",
    rule("model", "_url.model", encode=t_model),
    rule("prompt", "instances[0].prompt"),
    rule("image", "instances[0].image", concept="Image"),
    rule("config", concept="GenerateVideosConfig"),
)

register(
    "GenerateVideosResponse",
    rule(
        "generated_videos",
        {MLDEV: "generatedSamples", VERTEX: "videos"},
        concept="GeneratedVideo",
    ),
    rule("rai_media_filtered_count"),
    rule("rai_media_filtered_reasons"),
)

# ============================================================
# Live: setup
# ============================================================

register(
    "GenerationConfig",
    rule("temperature"),
    rule("top_p"),
    rule("top_k"),
    rule("max_output_tokens"),
    rule("response_modalities"),
    rule("media_resolution"),
    rule("seed"),
    rule("speech_config", encode=t_speech_config, concept="SpeechConfig"),
)

register("SessionResumptionConfig", rule("handle"), rule("transparent", vertex_only=True))

register("SlidingWindow", rule("target_tokens"))

register(
    "ContextWindowCompressionConfig",
    rule("trigger_tokens"),
    rule("sliding_window", concept="SlidingWindow"),
)

register(
    "AutomaticActivityDetection",
    rule("disabled"),
    rule("start_of_speech_sensitivity"),
    rule("end_of_speech_sensitivity"),
    rule("prefix_padding_ms"),
    rule("silence_duration_ms"),
)

register(
    "RealtimeInputConfig",
    rule("automatic_activity_detection", concept="AutomaticActivityDetection"),
    rule("activity_handling"),
    rule("turn_coverage"),
)

register(
    "LiveConnectConfig",
    rule("generation_config", concept="GenerationConfig"),
    rule("response_modalities", "generationConfig.responseModalities"),
    rule("temperature", "generationConfig.temperature"),
    rule("top_p", "generationConfig.topP"),
    rule("top_k", "generationConfig.topK"),
    rule("max_output_tokens", "generationConfig.maxOutputTokens"),
    rule("media_resolution", "generationConfig.mediaResolution"),
    rule("seed", "generationConfig.seed"),
    rule(
        "speech_config",
        "generationConfig.speechConfig",
        encode=t_speech_config,
        concept="SpeechConfig",
    ),
    rule("system_instruction", encode=t_content, concept="Content"),
    rule("tools", encode=t_tools, concept="Tool"),
    rule("session_resumption", concept="SessionResumptionConfig"),
    rule("input_audio_transcription"),
    rule("output_audio_transcription"),
    rule("realtime_input_config", concept="RealtimeInputConfig"),
    rule("context_window_compression", concept="ContextWindowCompressionConfig"),
)

register(
    "LiveConnectParameters",
    rule("model", "setup.model", encode=t_live_model),
    rule("config", "setup", concept="LiveConnectConfig"),
)

# ============================================================
# Live: client messages
# ============================================================

register(
    "LiveClientContent",
    rule("turns", encode=t_contents, concept="Content"),
    rule("turn_complete"),
)

register(
    "LiveClientRealtimeInput",
    rule("media_chunks", encode=t_blobs, concept="Blob"),
    rule("audio", encode=t_blob, concept="Blob"),
    rule("audio_stream_end"),
    rule("video", encode=t_blob, concept="Blob"),
    rule("text"),
    rule("activity_start"),
    rule("activity_end"),
)

register("LiveClientToolResponse", rule("function_responses", concept="FunctionResponse"))

register(
    "LiveClientMessage",
    rule("client_content", concept="LiveClientContent"),
    rule("realtime_input", concept="LiveClientRealtimeInput"),
    rule("tool_response", concept="LiveClientToolResponse"),
)

# ============================================================
# Live: server messages
# ============================================================

register("LiveServerSetupComplete")

register("Transcription", rule("text"), rule("finished"))

register(
    "LiveServerContent",
    rule("model_turn", concept="Content"),
    rule("turn_complete"),
    rule("interrupted"),
    rule("grounding_metadata"),
    rule("generation_complete"),
    rule("input_transcription", concept="Transcription"),
    rule("output_transcription", concept="Transcription"),
)

register("LiveServerToolCall", rule("function_calls", concept="FunctionCall"))

register("LiveServerToolCallCancellation", rule("ids"))

register("ModalityTokenCount", rule("modality"), rule("token_count"))

register(
    "UsageMetadata",
    rule("prompt_token_count"),
    rule("cached_content_token_count"),
    rule("response_token_count", {MLDEV: "responseTokenCount", VERTEX: "candidatesTokenCount"}),
    rule("tool_use_prompt_token_count"),
    rule("thoughts_token_count"),
    rule("total_token_count"),
    rule("prompt_tokens_details", concept="ModalityTokenCount"),
    rule("cache_tokens_details", concept="ModalityTokenCount"),
    rule(
        "response_tokens_details",
        {MLDEV: "responseTokensDetails", VERTEX: "candidatesTokensDetails"},
        concept="ModalityTokenCount",
    ),
    rule("tool_use_prompt_tokens_details", concept="ModalityTokenCount"),
    rule("traffic_type", vertex_only=True),
)

register("LiveServerGoAway", rule("time_left"))

register(
    "LiveServerSessionResumptionUpdate",
    rule("new_handle"),
    rule("resumable"),
    rule("last_consumed_client_message_index"),
)

register(
    "LiveServerMessage",
    rule("setup_complete", concept="LiveServerSetupComplete"),
    rule("server_content", concept="LiveServerContent"),
    rule("tool_call", concept="LiveServerToolCall"),
    rule("tool_call_cancellation", concept="LiveServerToolCallCancellation"),
    rule("usage_metadata", concept="UsageMetadata"),
    rule("go_away", concept="LiveServerGoAway"),
    rule("session_resumption_update", concept="LiveServerSessionResumptionUpdate"),
)
