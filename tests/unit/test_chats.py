"""
Tests for Chat sessions.

Covers curated-history extraction, history validation, serialized sends and
history recording for streamed sends.
"""

import asyncio

import pytest

from genai_protocol.chats import (
    Chat,
    Chats,
    extract_curated_history,
    is_valid_content,
    validate_history,
)
from genai_protocol.errors import HistoryError, UsageError
from genai_protocol.protocol.message_types import Content, Part
from tests.utils.mocks import (
    create_mock_models,
    empty_response,
    model_content,
    text_response,
    user_content,
)


def _texts(history: list[Content]) -> list[str | None]:
    return [content.parts[0].text if content.parts else None for content in history]


# ============================================================
# Curated history
# ============================================================


class TestIsValidContent:
    def test_text_content_is_valid(self) -> None:
        assert is_valid_content(model_content("ok"))

    def test_empty_parts_are_invalid(self) -> None:
        assert not is_valid_content(Content(role="model", parts=[]))
        assert not is_valid_content(Content(role="model"))

    def test_empty_text_part_is_invalid(self) -> None:
        assert not is_valid_content(Content(role="model", parts=[Part(text="")]))

    def test_part_without_payload_is_invalid(self) -> None:
        assert not is_valid_content(Content(role="model", parts=[Part()]))

    def test_empty_thought_text_is_valid(self) -> None:
        content = Content(role="model", parts=[Part(text="", thought=True), Part(text="x")])
        assert is_valid_content(content)


class TestExtractCuratedHistory:
    def test_group_with_invalid_model_turn_is_dropped_whole(self) -> None:
        # given
        history = [
            user_content("A"),
            model_content("B"),
            Content(role="model", parts=[]),
        ]

        # when
        curated = extract_curated_history(history)

        # then
        assert curated == []

    def test_valid_group_is_kept(self) -> None:
        history = [user_content("A"), model_content("B")]
        assert _texts(extract_curated_history(history)) == ["A", "B"]

    def test_only_the_invalid_group_is_dropped(self) -> None:
        # given
        history = [
            user_content("A"),
            model_content("B"),
            user_content("C"),
            Content(role="model", parts=[Part(text="")]),
            user_content("D"),
            model_content("E"),
            model_content("F"),
        ]

        # when
        curated = extract_curated_history(history)

        # then
        assert _texts(curated) == ["A", "B", "D", "E", "F"]

    def test_trailing_user_turn_is_kept(self) -> None:
        history = [user_content("A"), model_content("B"), user_content("C")]
        assert _texts(extract_curated_history(history)) == ["A", "B", "C"]

    def test_empty_history(self) -> None:
        assert extract_curated_history([]) == []

    @pytest.mark.parametrize(
        "history",
        [
            [],
            [user_content("A"), model_content("B"), Content(role="model", parts=[])],
            [user_content("A"), model_content("B"), user_content("C")],
            [user_content("A"), Content(role="model", parts=[]), user_content("C")],
            [user_content("A"), user_content("B"), model_content("C")],
        ],
    )
    def test_curation_is_idempotent(self, history: list[Content]) -> None:
        once = extract_curated_history(history)
        assert extract_curated_history(once) == once


class TestValidateHistory:
    def test_empty_history_is_valid(self) -> None:
        validate_history([])

    def test_must_start_with_user(self) -> None:
        with pytest.raises(HistoryError, match="start with a user turn"):
            validate_history([model_content("B")])

    def test_roles_must_be_user_or_model(self) -> None:
        with pytest.raises(HistoryError, match="user or model"):
            validate_history([user_content("A"), Content(role="system", parts=[Part(text="x")])])

    def test_chat_construction_validates(self) -> None:
        with pytest.raises(HistoryError):
            Chat(models=create_mock_models(), model="m", history=[model_content("B")])

    def test_dict_history_is_accepted(self) -> None:
        chat = Chat(
            models=create_mock_models(),
            model="m",
            history=[{"role": "user", "parts": [{"text": "A"}]}],
        )
        assert _texts(chat.get_history()) == ["A"]


# ============================================================
# send_message
# ============================================================


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_sends_curated_history_plus_new_turn(self) -> None:
        # given
        models = create_mock_models([text_response("B"), text_response("D")])
        chat = Chats(models).create(model="gemini-2.0-flash", config={"temperature": 0})

        # when
        await chat.send_message("A")
        response = await chat.send_message("C")

        # then
        assert response.text == "D"
        second_call = models.generate_content.call_args_list[1].kwargs
        assert second_call["model"] == "gemini-2.0-flash"
        assert second_call["config"] == {"temperature": 0}
        assert _texts(second_call["contents"]) == ["A", "B", "C"]
        assert _texts(chat.get_history()) == ["A", "B", "C", "D"]

    @pytest.mark.asyncio
    async def test_config_override_wins_for_one_call(self) -> None:
        # given
        models = create_mock_models([text_response("B")])
        chat = Chat(models=models, model="m", config={"temperature": 0})

        # when
        await chat.send_message("A", config={"temperature": 1})

        # then
        assert models.generate_content.call_args.kwargs["config"] == {"temperature": 1}

    @pytest.mark.asyncio
    async def test_empty_response_records_synthetic_model_turn(self) -> None:
        # given
        models = create_mock_models([empty_response(), text_response("D")])
        chat = Chat(models=models, model="m")

        # when
        await chat.send_message("A")
        await chat.send_message("C")

        # then
        history = chat.get_history()
        assert history[1] == Content(role="model", parts=[])
        assert _texts(chat.get_history(curated=True)) == ["C", "D"]
        assert _texts(models.generate_content.call_args_list[1].kwargs["contents"]) == ["C"]

    @pytest.mark.asyncio
    async def test_failed_send_records_nothing(self) -> None:
        # given
        models = create_mock_models([RuntimeError("boom")])
        chat = Chat(models=models, model="m")

        # when
        with pytest.raises(RuntimeError):
            await chat.send_message("A")

        # then
        assert chat.get_history() == []

    @pytest.mark.asyncio
    async def test_concurrent_sends_are_serialized_in_call_order(self) -> None:
        # given
        release_first = asyncio.Event()
        replies = iter(["first reply", "second reply"])

        async def generate_content(**kwargs):
            reply = next(replies)
            if reply == "first reply":
                await release_first.wait()
            return text_response(reply)

        models = create_mock_models()
        models.generate_content.side_effect = generate_content
        chat = Chat(models=models, model="m")

        # when
        first = asyncio.create_task(chat.send_message("first"))
        await asyncio.sleep(0)
        second = asyncio.create_task(chat.send_message("second"))
        await asyncio.sleep(0)
        assert models.generate_content.await_count == 1
        release_first.set()
        await asyncio.gather(first, second)

        # then
        assert _texts(chat.get_history()) == [
            "first",
            "first reply",
            "second",
            "second reply",
        ]
        second_contents = models.generate_content.call_args_list[1].kwargs["contents"]
        assert _texts(second_contents) == ["first", "first reply", "second"]


# ============================================================
# send_message_stream
# ============================================================


class TestSendMessageStream:
    @pytest.mark.asyncio
    async def test_history_recorded_after_stream_is_drained(self) -> None:
        # given
        models = create_mock_models(stream_chunks=[[text_response("Hel"), text_response("lo")]])
        chat = Chat(models=models, model="m")

        # when
        chunks = [chunk.text async for chunk in await chat.send_message_stream("Hi")]

        # then
        assert chunks == ["Hel", "lo"]
        assert _texts(chat.get_history()) == ["Hi", "Hel", "lo"]

    @pytest.mark.asyncio
    async def test_nothing_recorded_until_drained(self) -> None:
        # given
        models = create_mock_models(stream_chunks=[[text_response("a"), text_response("b")]])
        chat = Chat(models=models, model="m")
        stream = await chat.send_message_stream("Hi")

        # when
        await stream.__anext__()

        # then
        assert chat.get_history() == []
        await stream.aclose()

    @pytest.mark.asyncio
    async def test_abandoned_stream_records_nothing_and_releases_lock(self) -> None:
        # given
        models = create_mock_models(
            [text_response("after")],
            stream_chunks=[[text_response("a"), text_response("b")]],
        )
        chat = Chat(models=models, model="m")

        # when
        stream = await chat.send_message_stream("Hi")
        await stream.__anext__()
        await stream.aclose()
        await chat.send_message("next")

        # then
        assert _texts(chat.get_history()) == ["next", "after"]

    @pytest.mark.asyncio
    async def test_breaking_out_without_aclose_does_not_block_next_send(self) -> None:
        # given
        models = create_mock_models(
            [text_response("after")],
            stream_chunks=[[text_response("a"), text_response("b")]],
        )
        chat = Chat(models=models, model="m")
        stream = await chat.send_message_stream("Hi")

        # when
        async for _ in stream:
            break
        response = await asyncio.wait_for(chat.send_message("next"), timeout=2)

        # then
        assert response.text == "after"
        assert _texts(chat.get_history()) == ["next", "after"]

    @pytest.mark.asyncio
    async def test_bad_message_raises_at_call_time(self) -> None:
        # given
        models = create_mock_models()
        chat = Chat(models=models, model="m")

        # when / then
        with pytest.raises(UsageError):
            await chat.send_message_stream(12345)
        models.generate_content_stream.assert_not_called()
        assert not chat._send_lock.locked()

    @pytest.mark.asyncio
    async def test_stream_is_opened_from_curated_history(self) -> None:
        # given
        models = create_mock_models(stream_chunks=[[text_response("ok")]])
        history = [user_content("q"), model_content("a")]
        chat = Chat(models=models, model="m", history=history)

        # when
        await chat.send_message_stream("Hi")

        # then
        contents = models.generate_content_stream.call_args.kwargs["contents"]
        assert _texts(contents) == ["q", "a", "Hi"]
        assert not chat._send_lock.locked()

    @pytest.mark.asyncio
    async def test_invalid_chunks_are_not_recorded(self) -> None:
        # given
        models = create_mock_models(stream_chunks=[[empty_response(), text_response("ok")]])
        chat = Chat(models=models, model="m")

        # when
        async for _ in await chat.send_message_stream("Hi"):
            pass

        # then
        assert _texts(chat.get_history()) == ["Hi", "ok"]

    @pytest.mark.asyncio
    async def test_stream_without_valid_chunks_records_synthetic_turn(self) -> None:
        # given
        models = create_mock_models(stream_chunks=[[empty_response()]])
        chat = Chat(models=models, model="m")

        # when
        async for _ in await chat.send_message_stream("Hi"):
            pass

        # then
        assert chat.get_history()[1] == Content(role="model", parts=[])
