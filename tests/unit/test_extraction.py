"""Unit tests for context extraction."""

import itertools

import pytest

from context_transfer.core.types import Message
from context_transfer.extraction import extract_context, is_important

pytestmark = pytest.mark.unit


def _chat(n: int) -> list[Message]:
    roles = itertools.cycle(["user", "assistant"])
    return [Message(next(roles), f"message {i}") for i in range(n)]


def _is_subsequence(sub: list[Message], seq: list[Message]) -> bool:
    it = iter(seq)
    return all(any(s is x for x in it) for s in sub)


class TestImportance:
    @pytest.mark.parametrize(
        "content",
        ["Important: use tabs", "There was an ERROR", "Setup the venv", "a note"],
    )
    def test_keywords_are_case_insensitive(self, content):
        assert is_important(Message("user", content))

    def test_system_messages_are_always_important(self):
        assert is_important(Message("system", "hi"))

    def test_plain_message_is_not_important(self):
        assert not is_important(Message("user", "thanks"))


class TestPlainExtraction:
    """smart_extraction=False keeps exactly the most recent messages."""

    @pytest.mark.parametrize(("n", "last_n"), [(0, 3), (2, 5), (5, 5), (10, 3)])
    def test_returns_last_min_n(self, n, last_n):
        messages = _chat(n)
        result = extract_context(messages, last_n, smart_extraction=False)

        assert result == messages[n - min(last_n, n) :]

    def test_ignores_important_messages(self):
        messages = [Message("system", "rules"), *_chat(6)]
        result = extract_context(messages, 2, smart_extraction=False)

        assert result == messages[-2:]


class TestSmartExtraction:
    """Important earlier messages are kept ahead of recent ones."""

    def test_short_conversation_is_returned_whole(self):
        messages = _chat(3)

        assert extract_context(messages, 5) == messages

    def test_keeps_important_earlier_messages(self):
        system = Message("system", "You are a reviewer.")
        warning = Message("user", "Warning: never touch prod")
        messages = [system, warning, *_chat(8)]

        result = extract_context(messages, 5)

        assert result[:2] == [system, warning]
        assert result[2:] == messages[-3:]
        assert len(result) == 5

    def test_only_the_latest_important_messages_are_kept(self):
        important = [Message("system", f"rule {i}") for i in range(4)]
        messages = [*important, *_chat(6)]

        result = extract_context(messages, 5)

        assert result[:2] == important[-2:]

    def test_no_important_messages_keeps_recent(self):
        messages = _chat(10)

        assert extract_context(messages, 4) == messages[-4:]

    def test_recent_turns_survive_when_important_fills_last_n(self):
        messages = [
            Message("system", "rules A"),
            Message("system", "rules B"),
            Message("user", "q1"),
            Message("assistant", "a1"),
            Message("user", "latest question"),
            Message("assistant", "latest answer"),
        ]

        result = extract_context(messages, 2)

        assert [m.content for m in result] == [
            "rules A",
            "rules B",
            "latest question",
            "latest answer",
        ]

    def test_single_recent_turn_with_one_important_message(self):
        messages = [
            Message("system", "rules"),
            Message("user", "q1"),
            Message("assistant", "a1"),
            Message("user", "latest"),
        ]

        result = extract_context(messages, 1)

        assert [m.content for m in result] == ["rules", "latest"]

    def test_important_overflowing_last_n_drops_the_recent_tail(self):
        messages = [Message("system", "a"), Message("system", "b"), *_chat(5)]

        result = extract_context(messages, 1)

        assert result == messages[:2]

    def test_wide_window_shortens_the_recent_tail(self):
        important = [Message("system", f"rule {i}") for i in range(4)]
        messages = [*important, *_chat(6)]

        result = extract_context(messages, 3, important_window=4)

        assert result == [*important, *messages[-2:]]

    def test_zero_window_disables_important_retention(self):
        messages = [Message("system", "rules"), *_chat(6)]

        result = extract_context(messages, 3, important_window=0)

        assert result == messages[-3:]


class TestExtractionProperties:
    """Invariants that hold for every input."""

    @pytest.mark.parametrize("smart", [True, False])
    @pytest.mark.parametrize("last_n", [1, 2, 5, 9])
    def test_output_is_bounded_ordered_subsequence(self, smart, last_n):
        messages = [
            Message("system", "setup"),
            *_chat(3),
            Message("user", "critical detail"),
            *_chat(4),
        ]
        result = extract_context(messages, last_n, smart)

        assert len(result) <= len(messages)
        assert _is_subsequence(result, messages)
