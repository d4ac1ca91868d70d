"""
Protocol Layer - canonical objects and their two wire dialects.

This subpackage handles conversion between:
- Canonical objects (snake_case pydantic models / dicts)
- MLDEV and VERTEX wire payloads (camelCase JSON)

Components:
- get_value_by_path / set_value_by_path: path accessor over nested dicts
- to_dialect / from_dialect: the table-driven dialect transformer
- normalize_id: model, cache, cached-content and file identifier normalizers
- GenerateContentResponse, LiveServerMessage, etc.: canonical types
"""

# Importing concepts fills the transformer registry.
from . import concepts  # noqa: F401
from .contents import t_content, t_contents, t_part, t_parts
from .dialect import Dialect, TransformContext
from .enums import (
    ActivityHandling,
    BlockedReason,
    EndSensitivity,
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
    PagedItem,
    PersonGeneration,
    SafetyFilterLevel,
    StartSensitivity,
    TrafficType,
    TurnCoverage,
    translate_tuning_job_state,
)
from .identifiers import extract_file_id, normalize_id, t_model, t_resource_name
from .mapping import FieldRule, from_dialect, get_concept, registered_concepts, to_dialect
from .message_types import (
    Blob,
    CachedContent,
    Candidate,
    Content,
    ContentEmbedding,
    CreateCachedContentConfig,
    CreateTuningJobConfig,
    EmbedContentConfig,
    EmbedContentResponse,
    File,
    FileData,
    FunctionCall,
    FunctionDeclaration,
    FunctionResponse,
    GenerateContentConfig,
    GenerateContentResponse,
    GenerateImagesConfig,
    GenerateImagesResponse,
    Image,
    ListCachedContentsConfig,
    ListFilesConfig,
    ListModelsConfig,
    ListTuningJobsConfig,
    LiveClientContent,
    LiveClientRealtimeInput,
    LiveClientToolResponse,
    LiveConnectConfig,
    LiveServerContent,
    LiveServerMessage,
    Model,
    Part,
    SafetySetting,
    SpeechConfig,
    ThinkingConfig,
    Tool,
    ToolConfig,
    TuningDataset,
    TuningJob,
    UploadFileConfig,
    UsageMetadata,
)
from .paths import get_value_by_path, parse_path, set_value_by_path


__all__ = [
    # Enums
    "ActivityHandling",
    # Types
    "Blob",
    "BlockedReason",
    "CachedContent",
    "Candidate",
    "Content",
    "ContentEmbedding",
    "CreateCachedContentConfig",
    "CreateTuningJobConfig",
    # Dialects
    "Dialect",
    "EmbedContentConfig",
    "EmbedContentResponse",
    "EndSensitivity",
    "FieldRule",
    "File",
    "FileData",
    "FileSource",
    "FileState",
    "FinishReason",
    "FunctionCall",
    "FunctionCallingConfigMode",
    "FunctionDeclaration",
    "FunctionResponse",
    "GenerateContentConfig",
    "GenerateContentResponse",
    "GenerateImagesConfig",
    "GenerateImagesResponse",
    "HarmBlockMethod",
    "HarmBlockThreshold",
    "HarmCategory",
    "HarmProbability",
    "Image",
    "JobState",
    "Language",
    "ListCachedContentsConfig",
    "ListFilesConfig",
    "ListModelsConfig",
    "ListTuningJobsConfig",
    "LiveClientContent",
    "LiveClientRealtimeInput",
    "LiveClientToolResponse",
    "LiveConnectConfig",
    "LiveServerContent",
    "LiveServerMessage",
    "MediaModality",
    "MediaResolution",
    "Modality",
    "Model",
    "Outcome",
    "PagedItem",
    "Part",
    "PersonGeneration",
    "SafetyFilterLevel",
    "SafetySetting",
    "SpeechConfig",
    "StartSensitivity",
    "ThinkingConfig",
    "Tool",
    "ToolConfig",
    "TrafficType",
    "TransformContext",
    "TuningDataset",
    "TuningJob",
    "TurnCoverage",
    "UploadFileConfig",
    "UsageMetadata",
    # Identifiers
    "extract_file_id",
    # Transformer
    "from_dialect",
    "get_concept",
    # Paths
    "get_value_by_path",
    "normalize_id",
    "parse_path",
    "registered_concepts",
    "set_value_by_path",
    # Coercions
    "t_content",
    "t_contents",
    "t_model",
    "t_part",
    "t_parts",
    "t_resource_name",
    "to_dialect",
    "translate_tuning_job_state",
]
