"""
Live Session (one WebSocket connection)

Sends client messages and receives server messages over an open Live
connection, converting between canonical objects and the connection's dialect.

Responsibilities:
- Client messages: clientContent (ordered turns), realtimeInput (best-effort
  media/text/activity chunks), toolResponse (replies to a server tool call)
- Server messages: decode text or binary JSON frames into LiveServerMessage
- Optional callback dispatch from a background reader task

Client sends are not queued. Callers that need turn ordering must not issue
overlapping clientContent sends concurrently.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import json
from collections.abc import AsyncIterator, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import ValidationError
from websockets.exceptions import ConnectionClosedOK

from ..chunk_logger import chunk_logger
from ..errors import LiveProtocolError
from ..protocol.contents import t_blob, t_contents
from ..protocol.dialect import Dialect, TransformContext
from ..protocol.mapping import from_dialect, to_dialect
from ..protocol.message_types import (
    ActivityEnd,
    ActivityStart,
    Blob,
    Content,
    FunctionResponse,
    LiveClientContent,
    LiveClientRealtimeInput,
    LiveClientToolResponse,
    LiveServerMessage,
    Part,
)
from ..result import Error, Ok
from ..utils import _parse_json_safely


@dataclass
class LiveCallbacks:
    """
    Connection event handlers. Each may be a plain function or a coroutine
    function.

    Attributes:
        on_message: Called with every LiveServerMessage, setupComplete first
        on_open: Called once the socket is open, before the setup frame
        on_error: Called with the exception that stopped the reader task
        on_close: Called once when the session closes
    """

    on_message: Callable[[LiveServerMessage], Any] | None = None
    on_open: Callable[[], Any] | None = None
    on_error: Callable[[BaseException], Any] | None = None
    on_close: Callable[[], Any] | None = None


async def _invoke(callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


def _is_function_response(value: Any) -> bool:
    if isinstance(value, FunctionResponse):
        return True
    return isinstance(value, dict) and "response" in value and "name" in value


class AsyncSession:
    """Handle on one open Live connection."""

    def __init__(
        self,
        websocket: Any,
        context: TransformContext,
        callbacks: LiveCallbacks | None = None,
    ) -> None:
        self._ws = websocket
        self._context = context
        self._callbacks = callbacks or LiveCallbacks()
        self._pending: list[LiveServerMessage] = []
        self._reader_task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def dialect(self) -> Dialect:
        return self._context.dialect

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    async def _send_frame(self, frame: dict[str, Any]) -> None:
        chunk_logger.log_chunk(
            location="live-client-frame",
            direction="out",
            chunk=frame,
            mode=self.dialect.value,
        )
        logger.debug(f"[Live] → {next(iter(frame), 'empty')}")
        await self._ws.send(json.dumps(frame))

    async def send_client_content(
        self,
        *,
        turns: Any = None,
        turn_complete: bool = True,
    ) -> None:
        """
        Send ordered conversation turns.

        Args:
            turns: Content, Part, string or a list of them. May be omitted to
                only signal turn completion.
            turn_complete: The model should start generating after this turn
        """
        content: dict[str, Any] = {"turn_complete": turn_complete}
        if turns is not None:
            content["turns"] = turns
        payload = to_dialect("LiveClientContent", content, self._context)
        await self._send_frame({"clientContent": payload})

    async def send_realtime_input(
        self,
        *,
        media: Blob | dict[str, Any] | None = None,
        audio: Blob | dict[str, Any] | None = None,
        audio_stream_end: bool | None = None,
        video: Blob | dict[str, Any] | None = None,
        text: str | None = None,
        activity_start: ActivityStart | dict[str, Any] | bool | None = None,
        activity_end: ActivityEnd | dict[str, Any] | bool | None = None,
    ) -> None:
        """
        Send one best-effort realtime chunk. Exactly one argument must be set.

        Raises:
            LiveProtocolError: zero or several arguments were set
        """
        provided = {
            "media_chunks": [t_blob(self._context, media)] if media is not None else None,
            "audio": audio,
            "audio_stream_end": audio_stream_end,
            "video": video,
            "text": text,
            "activity_start": {} if activity_start not in (None, False) else None,
            "activity_end": {} if activity_end not in (None, False) else None,
        }
        fields = {key: value for key, value in provided.items() if value is not None}
        if len(fields) != 1:
            raise LiveProtocolError(
                "send_realtime_input takes exactly one of media, audio, audio_stream_end, "
                f"video, text, activity_start or activity_end; got {sorted(fields) or 'none'}."
            )
        payload = to_dialect("LiveClientRealtimeInput", fields, self._context)
        await self._send_frame({"realtimeInput": payload})

    def _tool_response_payload(self, function_responses: Any) -> dict[str, Any]:
        if function_responses is None:
            raise LiveProtocolError("function_responses is required.")
        if not isinstance(function_responses, Sequence) or isinstance(function_responses, dict):
            function_responses = [function_responses]

        validated: list[FunctionResponse] = []
        for item in function_responses:
            try:  # nosemgrep: forbid-try-except
                if isinstance(item, FunctionResponse):
                    response = item
                else:
                    response = FunctionResponse.model_validate(item)
            except ValidationError as e:
                raise LiveProtocolError(f"Malformed function response: {e}") from e
            if self.dialect is Dialect.MLDEV and response.id is None:
                raise LiveProtocolError(
                    "FunctionResponse request must have an `id` field from the "
                    "response of a ToolCall.FunctionalCalls in Google AI."
                )
            validated.append(response)

        return to_dialect(
            "LiveClientToolResponse", {"function_responses": validated}, self._context
        )

    async def send_tool_response(self, *, function_responses: Any) -> None:
        """
        Reply to a server toolCall.

        Raises:
            LiveProtocolError: a response is malformed, or (Gemini Developer
                API) lacks the id of the function call it answers
        """
        payload = self._tool_response_payload(function_responses)
        await self._send_frame({"toolResponse": payload})

    async def send(self, *, input: Any = None, end_of_turn: bool = False) -> None:  # noqa: A002
        """
        Send ``input`` as whichever client message fits its type.

        - Blob (or a list of them): realtimeInput media chunks
        - FunctionResponse (or a list of them): toolResponse
        - LiveClientContent / LiveClientRealtimeInput / LiveClientToolResponse: as is
        - anything content-like: clientContent with ``turn_complete=end_of_turn``
        """
        items = input if isinstance(input, list) else [input]

        match input:
            case LiveClientContent():
                payload = to_dialect("LiveClientContent", input, self._context)
                await self._send_frame({"clientContent": payload})
            case LiveClientRealtimeInput():
                payload = to_dialect("LiveClientRealtimeInput", input, self._context)
                await self._send_frame({"realtimeInput": payload})
            case LiveClientToolResponse():
                payload = self._tool_response_payload(input.function_responses)
                await self._send_frame({"toolResponse": payload})
            case _ if input is not None and items and all(isinstance(i, Blob) for i in items):
                blobs = [t_blob(self._context, item) for item in items]
                payload = to_dialect(
                    "LiveClientRealtimeInput", {"media_chunks": blobs}, self._context
                )
                await self._send_frame({"realtimeInput": payload})
            case _ if input is not None and items and all(_is_function_response(i) for i in items):
                await self.send_tool_response(function_responses=items)
            case None:
                await self.send_client_content(turn_complete=end_of_turn)
            case Content() | Part() | str() | list() | dict():
                await self.send_client_content(
                    turns=t_contents(self._context, input), turn_complete=end_of_turn
                )
            case _:
                raise LiveProtocolError(f"Unsupported input type: {type(input).__name__}")

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    def _decode(self, raw: str | bytes) -> LiveServerMessage:
        text = raw.decode("utf-8") if isinstance(raw, bytes | bytearray) else raw
        match _parse_json_safely(text):
            case Ok(frame):
                chunk_logger.log_chunk(
                    location="live-server-frame",
                    direction="in",
                    chunk=frame,
                    mode=self.dialect.value,
                )
                return LiveServerMessage.model_validate(
                    from_dialect("LiveServerMessage", frame, self._context)
                )
            case Error(reason):
                raise LiveProtocolError(f"Failed to parse server message: {reason}")

    async def _receive(self) -> LiveServerMessage | None:
        """Next server message, or None once the server closed normally."""
        if self._pending:
            return self._pending.pop(0)
        try:  # nosemgrep: forbid-try-except
            raw = await self._ws.recv()
        except ConnectionClosedOK:
            return None
        return self._decode(raw)

    async def receive(self) -> AsyncIterator[LiveServerMessage]:
        """
        Yield server messages for one model turn.

        Stops after the message carrying ``turn_complete`` or when the
        connection closes normally.

        Raises:
            LiveProtocolError: messages are being dispatched to on_message
        """
        if self._reader_task is not None:
            raise LiveProtocolError(
                "Messages are dispatched to on_message; receive() is unavailable."
            )
        while (message := await self._receive()) is not None:
            yield message
            if message.server_content is not None and message.server_content.turn_complete:
                break

    def _start_reader(self) -> None:
        self._reader_task = asyncio.create_task(self._read_loop())

    async def _read_loop(self) -> None:
        try:  # nosemgrep: forbid-try-except
            while (message := await self._receive()) is not None:
                await _invoke(self._callbacks.on_message, message)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"[Live] Reader stopped: {e!s}")
            await _invoke(self._callbacks.on_error, e)
        logger.debug("[Live] Reader finished")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the connection and stop the reader task. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._reader_task is not None and not self._reader_task.done():
            self._reader_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._reader_task
        await self._ws.close()
        logger.info("[Live] Session closed")
        await _invoke(self._callbacks.on_close)
