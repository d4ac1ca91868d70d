"""
Canonical object model.

These pydantic models are the backend-agnostic shapes callers build and
receive. Field names are snake_case; camelCase aliases are accepted on input
so payload-shaped dicts validate too. The dialect transformers work on the
plain-dict form produced by ``to_dict()``.
"""

from __future__ import annotations

import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .enums import (
    ActivityHandling,
    BlockedReason,
    EndSensitivity,
    EnumOrStr,
    FileSource,
    FileState,
    FinishReason,
    FunctionCallingConfigMode,
    HarmBlockMethod,
    HarmBlockThreshold,
    HarmCategory,
    HarmProbability,
    JobState,
    Language,
    MediaModality,
    MediaResolution,
    Modality,
    Outcome,
    PersonGeneration,
    SafetyFilterLevel,
    StartSensitivity,
    TrafficType,
    TurnCoverage,
)


class _BaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        arbitrary_types_allowed=True,
        protected_namespaces=(),
    )

    def to_dict(self) -> dict[str, Any]:
        """Plain snake_case dict without unset fields."""
        return self.model_dump(exclude_none=True)


# ============================================================
# Content
# ============================================================


class Blob(_BaseModel):
    data: bytes | None = None
    mime_type: str | None = None


class FileData(_BaseModel):
    file_uri: str | None = None
    mime_type: str | None = None


class VideoMetadata(_BaseModel):
    start_offset: str | None = None
    end_offset: str | None = None


class FunctionCall(_BaseModel):
    id: str | None = None
    name: str | None = None
    args: dict[str, Any] | None = None


class FunctionResponse(_BaseModel):
    id: str | None = None
    name: str | None = None
    response: dict[str, Any] | None = None


class ExecutableCode(_BaseModel):
    code: str | None = None
    language: EnumOrStr[Language] | None = None


class CodeExecutionResult(_BaseModel):
    outcome: EnumOrStr[Outcome] | None = None
    output: str | None = None


class Part(_BaseModel):
    """One element of a Content; exactly one payload field is normally set."""

    video_metadata: VideoMetadata | None = None
    thought: bool | None = None
    code_execution_result: CodeExecutionResult | None = None
    executable_code: ExecutableCode | None = None
    file_data: FileData | None = None
    function_call: FunctionCall | None = None
    function_response: FunctionResponse | None = None
    inline_data: Blob | None = None
    text: str | None = None

    @classmethod
    def from_text(cls, text: str) -> Part:
        return cls(text=text)

    @classmethod
    def from_uri(cls, file_uri: str, mime_type: str) -> Part:
        return cls(file_data=FileData(file_uri=file_uri, mime_type=mime_type))

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> Part:
        return cls(inline_data=Blob(data=data, mime_type=mime_type))

    @classmethod
    def from_function_call(cls, name: str, args: dict[str, Any]) -> Part:
        return cls(function_call=FunctionCall(name=name, args=args))

    @classmethod
    def from_function_response(cls, name: str, response: dict[str, Any]) -> Part:
        return cls(function_response=FunctionResponse(name=name, response=response))


class Content(_BaseModel):
    parts: list[Part] | None = None
    role: str | None = None


PartUnion = Part | str
ContentUnion = Content | list[PartUnion] | PartUnion
ContentListUnion = list[ContentUnion] | ContentUnion


# ============================================================
# Tools
# ============================================================


class FunctionDeclaration(_BaseModel):
    name: str | None = None
    description: str | None = None
    parameters: dict[str, Any] | None = None
    response: dict[str, Any] | None = None


class DynamicRetrievalConfig(_BaseModel):
    mode: str | None = None
    dynamic_threshold: float | None = None


class GoogleSearchRetrieval(_BaseModel):
    dynamic_retrieval_config: DynamicRetrievalConfig | None = None


class GoogleSearch(_BaseModel):
    pass


class ToolCodeExecution(_BaseModel):
    pass


class Retrieval(_BaseModel):
    disable_attribution: bool | None = None
    vertex_ai_search: dict[str, Any] | None = None
    vertex_rag_store: dict[str, Any] | None = None


class Tool(_BaseModel):
    function_declarations: list[FunctionDeclaration] | None = None
    retrieval: Retrieval | None = None
    google_search: GoogleSearch | None = None
    google_search_retrieval: GoogleSearchRetrieval | None = None
    code_execution: ToolCodeExecution | None = None


class FunctionCallingConfig(_BaseModel):
    mode: EnumOrStr[FunctionCallingConfigMode] | None = None
    allowed_function_names: list[str] | None = None


class ToolConfig(_BaseModel):
    function_calling_config: FunctionCallingConfig | None = None


# ============================================================
# Generation config
# ============================================================


class SafetySetting(_BaseModel):
    method: EnumOrStr[HarmBlockMethod] | None = None
    category: EnumOrStr[HarmCategory] | None = None
    threshold: EnumOrStr[HarmBlockThreshold] | None = None


class PrebuiltVoiceConfig(_BaseModel):
    voice_name: str | None = None


class VoiceConfig(_BaseModel):
    prebuilt_voice_config: PrebuiltVoiceConfig | None = None


class SpeechConfig(_BaseModel):
    voice_config: VoiceConfig | None = None
    language_code: str | None = None


class ThinkingConfig(_BaseModel):
    include_thoughts: bool | None = None
    thinking_budget: int | None = None


class GenerateContentConfig(_BaseModel):
    """Optional parameters of a generate-content call."""

    system_instruction: ContentUnion | None = None
    temperature: float | None = None
    top_p: float | None = None
    top_k: float | None = None
    candidate_count: int | None = None
    max_output_tokens: int | None = None
    stop_sequences: list[str] | None = None
    response_logprobs: bool | None = None
    logprobs: int | None = None
    presence_penalty: float | None = None
    frequency_penalty: float | None = None
    seed: int | None = None
    response_mime_type: str | None = None
    response_schema: dict[str, Any] | None = None
    routing_config: dict[str, Any] | None = None
    safety_settings: list[SafetySetting] | None = None
    tools: list[Tool] | None = None
    tool_config: ToolConfig | None = None
    labels: dict[str, str] | None = None
    cached_content: str | None = None
    response_modalities: list[EnumOrStr[Modality]] | None = None
    media_resolution: EnumOrStr[MediaResolution] | None = None
    speech_config: SpeechConfig | str | None = None
    audio_timestamp: bool | None = None
    thinking_config: ThinkingConfig | None = None


# ============================================================
# Generate content response
# ============================================================


class SafetyRating(_BaseModel):
    blocked: bool | None = None
    category: EnumOrStr[HarmCategory] | None = None
    probability: EnumOrStr[HarmProbability] | None = None
    probability_score: float | None = None
    severity: str | None = None
    severity_score: float | None = None


class Candidate(_BaseModel):
    content: Content | None = None
    citation_metadata: dict[str, Any] | None = None
    finish_message: str | None = None
    token_count: int | None = None
    finish_reason: EnumOrStr[FinishReason] | None = None
    avg_logprobs: float | None = None
    grounding_metadata: dict[str, Any] | None = None
    index: int | None = None
    logprobs_result: dict[str, Any] | None = None
    safety_ratings: list[SafetyRating] | None = None


class PromptFeedback(_BaseModel):
    block_reason: EnumOrStr[BlockedReason] | None = None
    block_reason_message: str | None = None
    safety_ratings: list[SafetyRating] | None = None


class ModalityTokenCount(_BaseModel):
    modality: EnumOrStr[MediaModality] | None = None
    token_count: int | None = None


class GenerateContentResponseUsageMetadata(_BaseModel):
    cached_content_token_count: int | None = None
    candidates_token_count: int | None = None
    prompt_token_count: int | None = None
    thoughts_token_count: int | None = None
    tool_use_prompt_token_count: int | None = None
    total_token_count: int | None = None


class GenerateContentResponse(_BaseModel):
    candidates: list[Candidate] | None = None
    create_time: datetime.datetime | None = None
    response_id: str | None = None
    model_version: str | None = None
    prompt_feedback: PromptFeedback | None = None
    usage_metadata: GenerateContentResponseUsageMetadata | None = None

    @property
    def text(self) -> str | None:
        """Concatenated text of the first candidate, ignoring thought parts."""
        if not self.candidates or not self.candidates[0].content:
            return None
        parts = self.candidates[0].content.parts or []
        texts = [part.text for part in parts if part.text is not None and not part.thought]
        if not texts:
            return None
        return "".join(texts)

    @property
    def function_calls(self) -> list[FunctionCall] | None:
        if not self.candidates or not self.candidates[0].content:
            return None
        calls = [
            part.function_call
            for part in self.candidates[0].content.parts or []
            if part.function_call is not None
        ]
        return calls or None


# ============================================================
# Embeddings
# ============================================================


class EmbedContentConfig(_BaseModel):
    task_type: str | None = None
    title: str | None = None
    output_dimensionality: int | None = None
    mime_type: str | None = None
    auto_truncate: bool | None = None


class ContentEmbeddingStatistics(_BaseModel):
    truncated: bool | None = None
    token_count: float | None = None


class ContentEmbedding(_BaseModel):
    values: list[float] | None = None
    statistics: ContentEmbeddingStatistics | None = None


class EmbedContentResponse(_BaseModel):
    embeddings: list[ContentEmbedding] | None = None


# ============================================================
# Models
# ============================================================


class Model(_BaseModel):
    name: str | None = None
    display_name: str | None = None
    description: str | None = None
    version: str | None = None
    input_token_limit: int | None = None
    output_token_limit: int | None = None
    supported_actions: list[str] | None = None


class ListModelsConfig(_BaseModel):
    page_size: int | None = None
    page_token: str | None = None
    filter: str | None = None
    query_base: bool | None = None


class ListModelsResponse(_BaseModel):
    next_page_token: str | None = None
    models: list[Model] | None = None


# ============================================================
# Cached content
# ============================================================


class CreateCachedContentConfig(_BaseModel):
    ttl: str | None = None
    expire_time: datetime.datetime | None = None
    display_name: str | None = None
    contents: ContentListUnion | None = None
    system_instruction: ContentUnion | None = None
    tools: list[Tool] | None = None
    tool_config: ToolConfig | None = None
    kms_key_name: str | None = None


class CachedContent(_BaseModel):
    name: str | None = None
    display_name: str | None = None
    model: str | None = None
    create_time: datetime.datetime | None = None
    update_time: datetime.datetime | None = None
    expire_time: datetime.datetime | None = None
    usage_metadata: dict[str, Any] | None = None


class ListCachedContentsConfig(_BaseModel):
    page_size: int | None = None
    page_token: str | None = None


class ListCachedContentsResponse(_BaseModel):
    next_page_token: str | None = None
    cached_contents: list[CachedContent] | None = None


# ============================================================
# Files
# ============================================================


class FileStatus(_BaseModel):
    details: list[dict[str, Any]] | None = None
    message: str | None = None
    code: int | None = None


class File(_BaseModel):
    name: str | None = None
    display_name: str | None = None
    mime_type: str | None = None
    size_bytes: int | None = None
    create_time: datetime.datetime | None = None
    expiration_time: datetime.datetime | None = None
    update_time: datetime.datetime | None = None
    sha256_hash: str | None = None
    uri: str | None = None
    download_uri: str | None = None
    state: EnumOrStr[FileState] | None = None
    source: EnumOrStr[FileSource] | None = None
    video_metadata: dict[str, Any] | None = None
    error: FileStatus | None = None


class UploadFileConfig(_BaseModel):
    name: str | None = None
    mime_type: str | None = None
    display_name: str | None = None


class ListFilesConfig(_BaseModel):
    page_size: int | None = None
    page_token: str | None = None


class ListFilesResponse(_BaseModel):
    next_page_token: str | None = None
    files: list[File] | None = None


# ============================================================
# Tuning
# ============================================================


class TuningExample(_BaseModel):
    text_input: str | None = None
    output: str | None = None


class TuningDataset(_BaseModel):
    gcs_uri: str | None = None
    examples: list[TuningExample] | None = None


class TuningValidationDataset(_BaseModel):
    gcs_uri: str | None = None


class CreateTuningJobConfig(_BaseModel):
    validation_dataset: TuningValidationDataset | None = None
    tuned_model_display_name: str | None = None
    description: str | None = None
    epoch_count: int | None = None
    learning_rate_multiplier: float | None = None
    adapter_size: str | None = None
    batch_size: int | None = None
    learning_rate: float | None = None


class TunedModel(_BaseModel):
    model: str | None = None
    endpoint: str | None = None


class TuningJob(_BaseModel):
    name: str | None = None
    state: EnumOrStr[JobState] | None = None
    create_time: datetime.datetime | None = None
    start_time: datetime.datetime | None = None
    end_time: datetime.datetime | None = None
    update_time: datetime.datetime | None = None
    error: dict[str, Any] | None = None
    description: str | None = None
    base_model: str | None = None
    tuned_model: TunedModel | None = None
    tuned_model_display_name: str | None = None
    experiment: str | None = None

    @property
    def has_ended(self) -> bool:
        return self.state in {
            JobState.JOB_STATE_SUCCEEDED,
            JobState.JOB_STATE_FAILED,
            JobState.JOB_STATE_CANCELLED,
            JobState.JOB_STATE_EXPIRED,
        }


class ListTuningJobsConfig(_BaseModel):
    page_size: int | None = None
    page_token: str | None = None
    filter: str | None = None


class ListTuningJobsResponse(_BaseModel):
    next_page_token: str | None = None
    tuning_jobs: list[TuningJob] | None = None


# ============================================================
# Images and videos
# ============================================================


class Image(_BaseModel):
    gcs_uri: str | None = None
    image_bytes: bytes | None = None
    mime_type: str | None = None


class GenerateImagesConfig(_BaseModel):
    output_gcs_uri: str | None = None
    negative_prompt: str | None = None
    number_of_images: int | None = None
    aspect_ratio: str | None = None
    guidance_scale: float | None = None
    seed: int | None = None
    safety_filter_level: EnumOrStr[SafetyFilterLevel] | None = None
    person_generation: EnumOrStr[PersonGeneration] | None = None
    include_safety_attributes: bool | None = None
    include_rai_reason: bool | None = None
    language: str | None = None
    output_mime_type: str | None = None
    output_compression_quality: int | None = None
    add_watermark: bool | None = None
    enhance_prompt: bool | None = None


class GeneratedImage(_BaseModel):
    image: Image | None = None
    rai_filtered_reason: str | None = None
    enhanced_prompt: str | None = None


class GenerateImagesResponse(_BaseModel):
    generated_images: list[GeneratedImage] | None = None


class Video(_BaseModel):
    uri: str | None = None
    video_bytes: bytes | None = None
    mime_type: str | None = None


class GeneratedVideo(_BaseModel):
    video: Video | None = None


class GenerateVideosConfig(_BaseModel):
    number_of_videos: int | None = None
    output_gcs_uri: str | None = None
    fps: int | None = None
    duration_seconds: int | None = None
    seed: int | None = None
    aspect_ratio: str | None = None
    resolution: str | None = None
    person_generation: str | None = None
    pubsub_topic: str | None = None
    negative_prompt: str | None = None
    enhance_prompt: bool | None = None


class GenerateVideosResponse(_BaseModel):
    generated_videos: list[GeneratedVideo] | None = None
    rai_media_filtered_count: int | None = None
    rai_media_filtered_reasons: list[str] | None = None


# ============================================================
# Live
# ============================================================


class AutomaticActivityDetection(_BaseModel):
    disabled: bool | None = None
    start_of_speech_sensitivity: EnumOrStr[StartSensitivity] | None = None
    end_of_speech_sensitivity: EnumOrStr[EndSensitivity] | None = None
    prefix_padding_ms: int | None = None
    silence_duration_ms: int | None = None


class RealtimeInputConfig(_BaseModel):
    automatic_activity_detection: AutomaticActivityDetection | None = None
    activity_handling: EnumOrStr[ActivityHandling] | None = None
    turn_coverage: EnumOrStr[TurnCoverage] | None = None


class SessionResumptionConfig(_BaseModel):
    handle: str | None = None
    transparent: bool | None = None


class SlidingWindow(_BaseModel):
    target_tokens: str | None = None


class ContextWindowCompressionConfig(_BaseModel):
    trigger_tokens: str | None = None
    sliding_window: SlidingWindow | None = None


class AudioTranscriptionConfig(_BaseModel):
    pass


class GenerationConfig(_BaseModel):
    temperature: float | None = None
    top_p: float | None = None
    top_k: float | None = None
    max_output_tokens: int | None = None
    response_modalities: list[EnumOrStr[Modality]] | None = None
    media_resolution: EnumOrStr[MediaResolution] | None = None
    seed: int | None = None
    speech_config: SpeechConfig | None = None


class LiveConnectConfig(_BaseModel):
    """Session configuration sent in the setup frame."""

    generation_config: GenerationConfig | None = None
    response_modalities: list[EnumOrStr[Modality]] | None = None
    temperature: float | None = None
    top_p: float | None = None
    top_k: float | None = None
    max_output_tokens: int | None = None
    media_resolution: EnumOrStr[MediaResolution] | None = None
    seed: int | None = None
    speech_config: SpeechConfig | str | None = None
    system_instruction: ContentUnion | None = None
    tools: list[Tool] | None = None
    session_resumption: SessionResumptionConfig | None = None
    input_audio_transcription: AudioTranscriptionConfig | None = None
    output_audio_transcription: AudioTranscriptionConfig | None = None
    realtime_input_config: RealtimeInputConfig | None = None
    context_window_compression: ContextWindowCompressionConfig | None = None


class ActivityStart(_BaseModel):
    pass


class ActivityEnd(_BaseModel):
    pass


class LiveClientContent(_BaseModel):
    turns: list[Content] | None = None
    turn_complete: bool | None = None


class LiveClientRealtimeInput(_BaseModel):
    media_chunks: list[Blob] | None = None
    audio: Blob | None = None
    audio_stream_end: bool | None = None
    video: Blob | None = None
    text: str | None = None
    activity_start: ActivityStart | None = None
    activity_end: ActivityEnd | None = None


class LiveClientToolResponse(_BaseModel):
    function_responses: list[FunctionResponse] | None = None


class LiveServerSetupComplete(_BaseModel):
    pass


class Transcription(_BaseModel):
    text: str | None = None
    finished: bool | None = None


class LiveServerContent(_BaseModel):
    model_turn: Content | None = None
    turn_complete: bool | None = None
    interrupted: bool | None = None
    grounding_metadata: dict[str, Any] | None = None
    generation_complete: bool | None = None
    input_transcription: Transcription | None = None
    output_transcription: Transcription | None = None


class LiveServerToolCall(_BaseModel):
    function_calls: list[FunctionCall] | None = None


class LiveServerToolCallCancellation(_BaseModel):
    ids: list[str] | None = None


class UsageMetadata(_BaseModel):
    prompt_token_count: int | None = None
    cached_content_token_count: int | None = None
    response_token_count: int | None = None
    tool_use_prompt_token_count: int | None = None
    thoughts_token_count: int | None = None
    total_token_count: int | None = None
    prompt_tokens_details: list[ModalityTokenCount] | None = None
    cache_tokens_details: list[ModalityTokenCount] | None = None
    response_tokens_details: list[ModalityTokenCount] | None = None
    tool_use_prompt_tokens_details: list[ModalityTokenCount] | None = None
    traffic_type: EnumOrStr[TrafficType] | None = None


class LiveServerGoAway(_BaseModel):
    time_left: str | None = None


class LiveServerSessionResumptionUpdate(_BaseModel):
    new_handle: str | None = None
    resumable: bool | None = None
    last_consumed_client_message_index: str | None = None


class LiveServerMessage(_BaseModel):
    setup_complete: LiveServerSetupComplete | None = None
    server_content: LiveServerContent | None = None
    tool_call: LiveServerToolCall | None = None
    tool_call_cancellation: LiveServerToolCallCancellation | None = None
    usage_metadata: UsageMetadata | None = None
    go_away: LiveServerGoAway | None = None
    session_resumption_update: LiveServerSessionResumptionUpdate | None = None

    @property
    def text(self) -> str | None:
        """Concatenated text parts of the model turn, if any."""
        parts = self._model_turn_parts()
        texts = [part.text for part in parts if part.text is not None and not part.thought]
        return "".join(texts) if texts else None

    @property
    def data(self) -> bytes | None:
        """Concatenated inline data of the model turn, if any."""
        parts = self._model_turn_parts()
        chunks = [
            part.inline_data.data
            for part in parts
            if part.inline_data is not None and part.inline_data.data is not None
        ]
        return b"".join(chunks) if chunks else None

    def _model_turn_parts(self) -> list[Part]:
        if self.server_content is None or self.server_content.model_turn is None:
            return []
        return self.server_content.model_turn.parts or []
