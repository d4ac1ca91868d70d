"""
One-shot prompt helper used by the hosting application.

Streams a generation with fixed safety settings and returns the whole text.
"""

from __future__ import annotations

from loguru import logger

from .client import Client
from .protocol.enums import HarmBlockThreshold, HarmCategory
from .protocol.message_types import Content, GenerateContentConfig, Part, SafetySetting


DEFAULT_MODEL = "gemini-2.5-flash-preview-04-17"

SAFETY_SETTINGS = [
    SafetySetting(
        category=HarmCategory.HARM_CATEGORY_HARASSMENT,
        threshold=HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    ),
    SafetySetting(
        category=HarmCategory.HARM_CATEGORY_HATE_SPEECH,
        threshold=HarmBlockThreshold.BLOCK_ONLY_HIGH,
    ),
    SafetySetting(
        category=HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
        threshold=HarmBlockThreshold.BLOCK_ONLY_HIGH,
    ),
    SafetySetting(
        category=HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
        threshold=HarmBlockThreshold.BLOCK_ONLY_HIGH,
    ),
]


def build_config() -> GenerateContentConfig:
    return GenerateContentConfig(safety_settings=SAFETY_SETTINGS, response_mime_type="text/plain")


async def fetch_gemini_response(
    prompt: str,
    *,
    client: Client | None = None,
    model: str = DEFAULT_MODEL,
) -> str:
    """
    Stream a reply to ``prompt`` and return the concatenated chunk text.

    Args:
        prompt: User prompt
        client: Client to use; by default one is built from the environment
            and closed afterwards
        model: Model name
    """
    owns_client = client is None
    active_client = client if client is not None else Client.from_env()
    contents = [Content(role="user", parts=[Part(text=prompt)])]

    full_response = ""
    try:
        stream = await active_client.models.generate_content_stream(
            model=model, contents=contents, config=build_config()
        )
        async for chunk in stream:
            full_response += chunk.text or ""
    finally:
        if owns_client:
            await active_client.aclose()

    logger.info(f"[GeminiAPI] Received {len(full_response)} characters from {model}")
    return full_response
