"""
Chat Session

Multi-turn conversation on top of Models.generate_content(_stream).

Responsibilities:
- Keep the comprehensive history (every user turn and every model turn)
- Derive the curated history sent back to the model
- Serialize sends with an asyncio.Lock so concurrent callers never interleave

Curated history:
    Each user turn opens a group; the model turns that follow belong to it.
    A group is kept only if every model turn in it is valid. Otherwise the
    whole group, user turn included, is left out.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Sequence
from typing import Any

from loguru import logger

from .errors import HistoryError
from .protocol.contents import t_content
from .protocol.message_types import (
    Content,
    ContentUnion,
    GenerateContentConfig,
    GenerateContentResponse,
)
from .resources.models import Models


VALID_ROLES = ("user", "model")


def is_valid_content(content: Content) -> bool:
    """A content is valid if it has parts, none empty, and no empty non-thought text."""
    if not content.parts:
        return False
    for part in content.parts:
        if part is None or not part.to_dict():
            return False
        if not part.thought and part.text is not None and part.text == "":
            return False
    return True


def is_valid_response(response: GenerateContentResponse) -> bool:
    if not response.candidates:
        return False
    content = response.candidates[0].content
    if content is None:
        return False
    return is_valid_content(content)


def validate_history(history: Sequence[Content]) -> None:
    """
    Raises:
        HistoryError: history does not start with a user turn, or holds a
            role other than user/model
    """
    if not history:
        return
    if history[0].role != "user":
        raise HistoryError("History must start with a user turn.")
    for content in history:
        if content.role not in VALID_ROLES:
            raise HistoryError(f"Role must be user or model, but got {content.role}.")


def extract_curated_history(comprehensive_history: Sequence[Content]) -> list[Content]:
    if not comprehensive_history:
        return []

    curated: list[Content] = []
    length = len(comprehensive_history)
    i = 0
    while i < length:
        if comprehensive_history[i].role == "user":
            curated.append(comprehensive_history[i])
            i += 1
            continue

        model_output: list[Content] = []
        is_valid = True
        while i < length and comprehensive_history[i].role != "user":
            model_output.append(comprehensive_history[i])
            if is_valid and not is_valid_content(comprehensive_history[i]):
                is_valid = False
            i += 1
        if is_valid:
            curated.extend(model_output)
        elif curated:
            # Drop the user turn that opened this group
            curated.pop()
    return curated


def _as_content(value: Content | dict[str, Any]) -> Content:
    return value if isinstance(value, Content) else Content.model_validate(value)


class Chat:
    """
    One chat session.

    Sends are serialized: a second send waits until the first has recorded
    its history. A streamed send holds the lock only until its request is
    built, so an abandoned stream never blocks later sends.
    """

    def __init__(
        self,
        *,
        models: Models,
        model: str,
        config: GenerateContentConfig | dict[str, Any] | None = None,
        history: Sequence[Content | dict[str, Any]] | None = None,
    ) -> None:
        contents = [_as_content(item) for item in history or []]
        validate_history(contents)
        self._models = models
        self._model = model
        self._config = config
        self._comprehensive_history: list[Content] = contents
        self._send_lock = asyncio.Lock()

    @property
    def model(self) -> str:
        return self._model

    def get_history(self, curated: bool = False) -> list[Content]:
        """
        Return a copy of the history.

        Args:
            curated: Only the groups that are safe to send back to the model
        """
        if curated:
            return extract_curated_history(self._comprehensive_history)
        return list(self._comprehensive_history)

    def _record_history(self, user_input: Content, model_output: list[Content]) -> None:
        if model_output and all(content.role is not None for content in model_output):
            output_contents = model_output
        else:
            output_contents = [Content(role="model", parts=[])]
        self._comprehensive_history.append(user_input)
        self._comprehensive_history.extend(output_contents)

    async def send_message(
        self,
        message: ContentUnion,
        config: GenerateContentConfig | dict[str, Any] | None = None,
    ) -> GenerateContentResponse:
        async with self._send_lock:
            input_content = Content.model_validate(t_content(None, message))
            response = await self._models.generate_content(
                model=self._model,
                contents=[*self.get_history(curated=True), input_content],
                config=config if config is not None else self._config,
            )
            model_output = []
            if response.candidates and response.candidates[0].content is not None:
                model_output.append(response.candidates[0].content)
            self._record_history(input_content, model_output)
            logger.debug(f"[Chat] History now has {len(self._comprehensive_history)} turns")
            return response

    async def send_message_stream(
        self,
        message: ContentUnion,
        config: GenerateContentConfig | dict[str, Any] | None = None,
    ) -> AsyncIterator[GenerateContentResponse]:
        """
        Start one streamed exchange and return its chunk iterator.

        The lock covers building the request from the curated history and is
        released before the iterator is returned. History is recorded after
        the last chunk has been consumed; a caller that stops early leaves
        this turn out of the history.

        Raises:
            UsageError: ``message`` cannot be turned into a user Content
        """
        async with self._send_lock:
            input_content = Content.model_validate(t_content(None, message))
            stream = await self._models.generate_content_stream(
                model=self._model,
                contents=[*self.get_history(curated=True), input_content],
                config=config if config is not None else self._config,
            )
        return self._record_stream(input_content, stream)

    async def _record_stream(
        self, input_content: Content, stream: AsyncIterator[GenerateContentResponse]
    ) -> AsyncIterator[GenerateContentResponse]:
        output_contents: list[Content] = []
        try:
            async for chunk in stream:
                if is_valid_response(chunk):
                    output_contents.append(chunk.candidates[0].content)
                yield chunk
        finally:
            await stream.aclose()
        self._record_history(input_content, output_contents)
        logger.debug(f"[Chat] Stream drained, {len(output_contents)} model chunks recorded")


class Chats:
    """Factory for Chat sessions bound to one Models resource."""

    def __init__(self, models: Models) -> None:
        self._models = models

    def create(
        self,
        *,
        model: str,
        config: GenerateContentConfig | dict[str, Any] | None = None,
        history: Sequence[Content | dict[str, Any]] | None = None,
    ) -> Chat:
        return Chat(models=self._models, model=model, config=config, history=history)
