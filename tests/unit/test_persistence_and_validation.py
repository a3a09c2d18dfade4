"""Unit tests for prompt persistence and conversation validation."""

import json

import pytest

from context_transfer.core.types import Message
from context_transfer.persistence import render_prompt, save_formatted_prompt
from context_transfer.validation import (
    analyze_conversation,
    generate_recommendations,
    validate_conversation_data,
)

pytestmark = pytest.mark.unit


class TestSaveFormattedPrompt:
    def test_txt_is_written_verbatim(self, tmp_path):
        path = save_formatted_prompt("line one\r\nline two", tmp_path / "p.txt")

        assert path.read_bytes() == b"line one\r\nline two"

    def test_json_shape(self, tmp_path):
        path = save_formatted_prompt("héllo", tmp_path / "p.json", "json")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["prompt"] == "héllo"
        assert data["metadata"]["format"] == "json"
        assert data["metadata"]["length"] == 5
        assert "created_at" in data["metadata"]

    def test_markdown_template(self, tmp_path):
        path = save_formatted_prompt("body", tmp_path / "p.md", "markdown")

        assert path.read_text(encoding="utf-8") == (
            "# Formatted Prompt\n\n## Content\n\nbody\n\n---\n"
            "*Generated by Context Transfer*\n"
        )

    def test_unknown_format_written_as_text(self):
        assert render_prompt("raw", "yaml") == "raw"

    def test_write_failure_propagates(self, tmp_path):
        with pytest.raises(OSError):
            save_formatted_prompt("x", tmp_path / "missing" / "dir" / "p.txt")


class TestValidation:
    def test_single_user_message(self):
        result = validate_conversation_data([{"role": "user", "content": "hi"}])

        assert result.success and result.valid
        analysis = result.analysis
        assert analysis.total_messages == 1
        assert analysis.user_messages == 1
        assert analysis.assistant_messages == 0
        assert analysis.system_messages == 0
        assert analysis.unknown_messages == 0
        assert analysis.has_system_context is False
        assert analysis.average_message_length == 2

    def test_unknown_roles_are_counted(self):
        data = {
            "messages": [
                {"role": "user", "content": "hi"},
                {"role": "tool", "content": "result"},
                {"role": "bot", "content": "x"},
            ]
        }

        result = validate_conversation_data(data)

        assert result.analysis.unknown_messages == 2
        assert "Found 2 messages with unknown roles" in result.recommendations

    def test_empty_conversation_recommendations(self):
        result = validate_conversation_data([])

        assert result.analysis.average_message_length == 0
        assert list(result.recommendations) == [
            "No messages found in conversation data",
            "No user messages found - ensure conversation has user input",
            "No assistant messages found - ensure conversation has AI responses",
            "No system context found - consider adding system messages for "
            "better context",
        ]

    def test_large_and_long_conversation_recommendations(self):
        messages = [
            Message("user" if i % 2 else "assistant", "w" * 1500) for i in range(25)
        ]

        recs = generate_recommendations(analyze_conversation(messages))

        assert "Long messages detected - consider using smart extraction" in recs
        assert (
            "Large conversation detected - consider using smart extraction "
            "and detailed summary"
        ) in recs

    def test_well_formed_conversation_has_no_recommendations(self, sample_messages):
        result = validate_conversation_data(sample_messages)

        assert result.analysis.has_system_context is True
        assert list(result.recommendations) == []

    @pytest.mark.parametrize(
        ("data", "error_type"),
        [
            (42, "ValidationError"),
            ([{"role": "user", "content": None}], "ValidationError"),
            (["not a mapping"], "ValidationError"),
        ],
    )
    def test_invalid_data_returns_failure(self, data, error_type):
        result = validate_conversation_data(data)

        assert result.success is False
        assert result.valid is False
        assert result.error_type == error_type
        assert result.to_dict()["error"] == result.error

    def test_validates_files(self, tmp_path):
        path = tmp_path / "chat.txt"
        path.write_text("System: rules\nUser: hi\nAssistant: hello", encoding="utf-8")

        result = validate_conversation_data(path)

        assert result.analysis.total_messages == 3
        assert result.analysis.has_system_context
