"""Tests for Anthropic <-> OpenAI message translation."""

import json

import pytest

from arbagent.errors import ResolverFailure
from arbagent.openai_compat import (
    anthropic_messages_to_openai,
    anthropic_tools_to_openai,
    openai_response_to_anthropic,
)


class TestMessagesToOpenAI:
    def test_system_and_plain_text(self):
        result = anthropic_messages_to_openai(
            [{"role": "user", "content": "hi"}], "be brief")
        assert result == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hi"},
        ]

    def test_tool_round_trip(self):
        messages = [
            {"role": "user", "content": "gas?"},
            {"role": "assistant", "content": [
                {"type": "text", "text": "Checking."},
                {"type": "tool_use", "id": "c1", "name": "get_gas_price",
                 "input": {}},
            ]},
            {"role": "user", "content": [
                {"type": "tool_result", "tool_use_id": "c1",
                 "content": '{"status": "ok"}'},
            ]},
        ]
        result = anthropic_messages_to_openai(messages, "")
        assert result[0] == {"role": "user", "content": "gas?"}
        assistant = result[1]
        assert assistant["content"] == "Checking."
        call = assistant["tool_calls"][0]
        assert call["id"] == "c1"
        assert call["function"]["name"] == "get_gas_price"
        assert json.loads(call["function"]["arguments"]) == {}
        assert result[2] == {"role": "tool", "tool_call_id": "c1",
                             "content": '{"status": "ok"}'}
        assert len(result) == 3

    def test_text_after_tool_results_stays_user_turn(self):
        messages = [{"role": "user", "content": [
            {"type": "tool_result", "tool_use_id": "seed", "content": "ok"},
            {"type": "text", "text": "what is my balance?"},
        ]}]
        result = anthropic_messages_to_openai(messages, "")
        assert result == [
            {"role": "tool", "tool_call_id": "seed", "content": "ok"},
            {"role": "user", "content": "what is my balance?"},
        ]

    def test_cache_control_blocks_flattened(self):
        messages = [{"role": "user", "content": [
            {"type": "text", "text": "hi", "cache_control": {"type": "ephemeral"}},
        ]}]
        assert anthropic_messages_to_openai(messages, "") == [
            {"role": "user", "content": "hi"},
        ]


def test_tools_to_openai():
    tools = [{
        "name": "transfer_tokens",
        "description": "Send ETH",
        "input_schema": {"type": "object", "properties": {}, "required": []},
        "cache_control": {"type": "ephemeral"},
    }]
    assert anthropic_tools_to_openai(tools) == [{
        "type": "function",
        "function": {
            "name": "transfer_tokens",
            "description": "Send ETH",
            "parameters": {"type": "object", "properties": {}, "required": []},
        },
    }]


class TestResponseToAnthropic:
    def test_text_response(self):
        response = openai_response_to_anthropic({
            "choices": [{"message": {"role": "assistant", "content": "Hello"}}],
        })
        assert response.stop_reason == "end_turn"
        assert response.content[0].type == "text"
        assert response.content[0].text == "Hello"

    def test_tool_call_response(self):
        response = openai_response_to_anthropic({
            "choices": [{"message": {"content": None, "tool_calls": [{
                "id": "call_9",
                "type": "function",
                "function": {"name": "get_token_price",
                             "arguments": '{"token": "ethereum"}'},
            }]}}],
        })
        assert response.stop_reason == "tool_use"
        block = response.content[0]
        assert (block.type, block.id, block.name) == (
            "tool_use", "call_9", "get_token_price")
        assert block.input == {"token": "ethereum"}
        dumped = response.model_dump(mode="json")
        assert dumped["content"][0]["input"] == {"token": "ethereum"}

    def test_missing_id_generated(self):
        response = openai_response_to_anthropic({
            "choices": [{"message": {"tool_calls": [{
                "function": {"name": "help", "arguments": ""},
            }]}}],
        })
        assert response.content[0].id.startswith("call_")
        assert response.content[0].input == {}

    def test_dict_arguments_accepted(self):
        response = openai_response_to_anthropic({
            "choices": [{"message": {"tool_calls": [{
                "id": "x", "function": {"name": "help", "arguments": {"a": 1}},
            }]}}],
        })
        assert response.content[0].input == {"a": 1}

    def test_no_choices(self):
        with pytest.raises(ResolverFailure, match="no choices"):
            openai_response_to_anthropic({"choices": []})

    @pytest.mark.parametrize("arguments", ["{not json", "[1, 2]"])
    def test_bad_arguments(self, arguments):
        with pytest.raises(ResolverFailure):
            openai_response_to_anthropic({
                "choices": [{"message": {"tool_calls": [{
                    "id": "x", "function": {"name": "help", "arguments": arguments},
                }]}}],
            })

    def test_empty_message_becomes_empty_text(self):
        response = openai_response_to_anthropic({"choices": [{"message": {}}]})
        assert response.content[0].text == ""

    @pytest.mark.parametrize("data", [
        [],
        "oops",
        None,
        {"choices": "oops"},
        {"choices": ["oops"]},
        {"choices": [{"message": ["oops"]}]},
        {"choices": [{"message": {"content": ["oops"]}}]},
        {"choices": [{"message": {"tool_calls": {"id": "x"}}}]},
        {"choices": [{"message": {"tool_calls": ["oops"]}}]},
        {"choices": [{"message": {"tool_calls": [{"id": "x", "function": "help"}]}}]},
        {"choices": [{"message": {"tool_calls": [{"id": "x"}]}}]},
        {"choices": [{"message": {"tool_calls": [
            {"id": "x", "function": {"name": ["help"], "arguments": "{}"}},
        ]}}]},
    ])
    def test_malformed_shapes_raise_resolver_failure(self, data):
        with pytest.raises(ResolverFailure):
            openai_response_to_anthropic(data)
