"""Anthropic <-> OpenAI chat-completions translation.

The turn loop keeps the conversation in Anthropic format (content blocks
with ``tool_use`` / ``tool_result``).  ``OpenAICompatBackend`` uses these
helpers to talk to OpenAI itself or any compatible server.
"""

import json
import uuid
from dataclasses import asdict, dataclass, field

from arbagent.errors import ResolverFailure


# ---------------------------------------------------------------------------
# Response blocks
# ---------------------------------------------------------------------------
# Attribute access (block.type, block.name, ...) for the turn loop and
# model_dump(mode="json") for LoggingBackend, like the anthropic SDK types.

@dataclass
class TextBlock:
    type: str = "text"
    text: str = ""


@dataclass
class ToolUseBlock:
    type: str = "tool_use"
    id: str = ""
    name: str = ""
    input: dict = field(default_factory=dict)


@dataclass
class OpenAICompatResponse:
    """An OpenAI response reshaped to look like an Anthropic message."""

    content: list  # TextBlock | ToolUseBlock
    stop_reason: str = "end_turn"

    def model_dump(self, mode=None) -> dict:
        return {
            "content": [asdict(b) for b in self.content],
            "stop_reason": self.stop_reason,
        }


# ---------------------------------------------------------------------------
# Anthropic -> OpenAI
# ---------------------------------------------------------------------------

def _text_of(content) -> str:
    """Flatten string-or-blocks content to plain text."""
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return "" if content is None else str(content)
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "\n".join(parts)


def _assistant_message(content: list) -> dict:
    texts = []
    tool_calls = []
    for block in content:
        if not isinstance(block, dict):
            continue
        if block.get("type") == "text":
            texts.append(block.get("text", ""))
        elif block.get("type") == "tool_use":
            tool_calls.append({
                "id": block.get("id", ""),
                "type": "function",
                "function": {
                    "name": block.get("name", ""),
                    "arguments": json.dumps(block.get("input", {})),
                },
            })
    message: dict = {
        "role": "assistant",
        "content": "\n".join(texts) if texts else None,
    }
    if tool_calls:
        message["tool_calls"] = tool_calls
    return message


def anthropic_messages_to_openai(messages: list[dict],
                                 system: str) -> list[dict]:
    """Convert Anthropic-format messages to OpenAI chat-completions format.

    - The system prompt becomes the first ``system`` message.
    - Assistant ``tool_use`` blocks become ``tool_calls``.
    - Each ``tool_result`` block becomes its own ``tool`` message.
    - Anything else is flattened to text; ``cache_control`` is dropped.
    """
    result: list[dict] = []
    if system:
        result.append({"role": "system", "content": system})

    for msg in messages:
        role = msg["role"]
        content = msg.get("content")

        if not isinstance(content, list):
            result.append({"role": role, "content": _text_of(content)})
            continue

        block_types = {b.get("type") for b in content if isinstance(b, dict)}

        if role == "assistant" and "tool_use" in block_types:
            result.append(_assistant_message(content))
        elif "tool_result" in block_types:
            for block in content:
                if isinstance(block, dict) and block.get("type") == "tool_result":
                    result.append({
                        "role": "tool",
                        "tool_call_id": block.get("tool_use_id", ""),
                        "content": _text_of(block.get("content", "")),
                    })
            # Text following the results (a new instruction) stays a user turn
            trailing = _text_of(content)
            if trailing:
                result.append({"role": role, "content": trailing})
        else:
            result.append({"role": role, "content": _text_of(content)})

    return result


def anthropic_tools_to_openai(tools: list[dict]) -> list[dict]:
    """``{name, description, input_schema}`` -> ``{type: function, function: {...}}``."""
    result = []
    for tool in tools:
        schema = {k: v for k, v in tool.get("input_schema", {}).items()
                  if k != "cache_control"}
        result.append({
            "type": "function",
            "function": {
                "name": tool["name"],
                "description": tool.get("description", ""),
                "parameters": schema,
            },
        })
    return result


# ---------------------------------------------------------------------------
# OpenAI -> Anthropic
# ---------------------------------------------------------------------------

def openai_response_to_anthropic(data: dict) -> OpenAICompatResponse:
    """Convert a chat-completions JSON response to our wrapper.

    Raises:
        ResolverFailure: If the response is not shaped like a chat
            completion, has no choices, or a tool call carries arguments
            that are not a JSON object.
    """
    if not isinstance(data, dict):
        raise ResolverFailure(
            f"Resolver response is not a JSON object: {type(data).__name__}")
    choices = data.get("choices") or []
    if not isinstance(choices, list) or not choices:
        raise ResolverFailure("Resolver response contained no choices")

    choice = choices[0]
    if not isinstance(choice, dict):
        raise ResolverFailure("Resolver choice is not a JSON object")
    message = choice.get("message") or {}
    if not isinstance(message, dict):
        raise ResolverFailure("Resolver message is not a JSON object")
    blocks: list = []

    text = message.get("content")
    if text and not isinstance(text, str):
        raise ResolverFailure("Resolver message content is not text")
    if text:
        blocks.append(TextBlock(text=text))

    tool_calls = message.get("tool_calls") or []
    if not isinstance(tool_calls, list):
        raise ResolverFailure("Resolver tool_calls is not a list")
    for tc in tool_calls:
        func = tc.get("function") if isinstance(tc, dict) else None
        if not isinstance(func, dict):
            raise ResolverFailure(f"Resolver returned a malformed tool call: {tc!r}")
        name = func.get("name", "")
        if not isinstance(name, str):
            raise ResolverFailure(f"Resolver returned a malformed tool name: {name!r}")
        raw_args = func.get("arguments") or "{}"
        try:
            args = raw_args if isinstance(raw_args, dict) else json.loads(raw_args)
        except (json.JSONDecodeError, TypeError) as e:
            raise ResolverFailure(
                f"Resolver returned unparseable arguments for "
                f"{func.get('name', '?')}: {raw_args!r}") from e
        if not isinstance(args, dict):
            raise ResolverFailure(
                f"Resolver returned non-object arguments for "
                f"{func.get('name', '?')}")
        blocks.append(ToolUseBlock(
            id=tc.get("id") or f"call_{uuid.uuid4().hex[:24]}",
            name=name,
            input=args,
        ))

    if not blocks:
        blocks.append(TextBlock(text=""))

    has_tool_use = any(b.type == "tool_use" for b in blocks)
    return OpenAICompatResponse(
        content=blocks,
        stop_reason="tool_use" if has_tool_use else "end_turn",
    )
