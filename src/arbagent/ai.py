"""Intent resolver backends.

A backend receives the conversation (Anthropic message format), the system
prompt and the operation catalog, and returns a response whose ``content``
holds ``text`` and/or ``tool_use`` blocks.  Transport and API errors are
raised as ``ResolverFailure``.
"""

import os
import time
from abc import ABC, abstractmethod

from arbagent.errors import APIKeyMissingError, ResolverFailure

OPENAI_BASE_URL = "https://api.openai.com"
OPENAI_MODEL_DEFAULT = "gpt-4o-mini"
CLAUDE_MODEL_DEFAULT = "claude-sonnet-4-5"
MAX_TOKENS = 4096


def cached_system(system: str) -> list[dict]:
    """Wrap system text in a content block with Anthropic cache_control."""
    return [{"type": "text", "text": system,
             "cache_control": {"type": "ephemeral"}}]


def cached_tools(tools: list[dict]) -> list[dict]:
    """Shallow-copy tools and add cache_control to the last definition."""
    if not tools:
        return tools
    result = [*tools]
    result[-1] = {**result[-1], "cache_control": {"type": "ephemeral"}}
    return result


def cached_messages(messages: list[dict]) -> list[dict]:
    """Put a cache breakpoint on the second-to-last message.

    Everything before the newest message is then served from the prompt
    cache on the next call of the same turn loop.
    """
    if len(messages) < 2:
        return messages

    result = list(messages)
    idx = len(result) - 2
    msg = result[idx]
    content = msg.get("content")

    if isinstance(content, str):
        result[idx] = {
            **msg,
            "content": [{
                "type": "text",
                "text": content,
                "cache_control": {"type": "ephemeral"},
            }],
        }
    elif isinstance(content, list) and content:
        new_content = list(content)
        last = new_content[-1]
        if isinstance(last, dict):
            new_content[-1] = {**last, "cache_control": {"type": "ephemeral"}}
        result[idx] = {**msg, "content": new_content}

    return result


class AIBackend(ABC):
    """Abstract base class for intent resolver backends."""

    model: str = ""

    @abstractmethod
    def chat_with_tools(self, messages: list[dict], system: str,
                        tools: list[dict]):
        """Send the conversation with the operation catalog.

        Args:
            messages: Conversation history.
            system: System prompt text.
            tools: Operation catalog in Anthropic tool format.

        Returns:
            Response object with a ``content`` list of text / tool_use blocks.

        Raises:
            ResolverFailure: On transport, API or parse errors.
        """


class ClaudeBackend(AIBackend):
    """Claude API backend via anthropic SDK."""

    def __init__(self, model: str = CLAUDE_MODEL_DEFAULT,
                 api_key: str | None = None, timeout: int = 600):
        import anthropic

        key = api_key or os.environ.get("ANTHROPIC_API_KEY", "")
        if not key or key == "your-api-key-here":
            raise APIKeyMissingError(
                "ANTHROPIC_API_KEY is not set.\n"
                "Get your API key at: https://console.anthropic.com/settings/keys\n"
                "Then add it to .env:\n"
                "  ANTHROPIC_API_KEY=sk-ant-..."
            )
        self._anthropic = anthropic
        self.client = anthropic.Anthropic(api_key=key, timeout=timeout)
        self.model = model

    def chat_with_tools(self, messages: list[dict], system: str,
                        tools: list[dict]):
        try:
            return self.client.messages.create(
                model=self.model,
                max_tokens=MAX_TOKENS,
                temperature=0,
                system=cached_system(system),
                messages=cached_messages(messages),
                tools=cached_tools(tools),
            )
        except self._anthropic.APIError as e:
            raise ResolverFailure(f"Claude API error: {e}") from e


class OpenAICompatBackend(AIBackend):
    """Backend for OpenAI or any compatible API (llama.cpp, Ollama, vLLM, ...)."""

    def __init__(self, model: str = OPENAI_MODEL_DEFAULT,
                 base_url: str = OPENAI_BASE_URL,
                 timeout: int = 600, api_key: str | None = None):
        import requests as _requests
        self._requests = _requests
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY", "")
        if self.base_url == OPENAI_BASE_URL and not self._api_key:
            raise APIKeyMissingError(
                "OPENAI_API_KEY is not set.\n"
                "Add it to .env:\n"
                "  OPENAI_API_KEY=sk-...\n"
                "or point [ai] base_url at a local OpenAI-compatible server."
            )

    def _headers(self) -> dict:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        return {}

    def _post(self, payload: dict) -> dict:
        """POST to /v1/chat/completions and return parsed JSON."""
        url = f"{self.base_url}/v1/chat/completions"
        try:
            resp = self._requests.post(url, json=payload,
                                       headers=self._headers(),
                                       timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except self._requests.RequestException as e:
            raise ResolverFailure(f"Resolver request failed: {e}") from e
        except ValueError as e:
            raise ResolverFailure("Resolver returned invalid JSON") from e

    def chat_with_tools(self, messages: list[dict], system: str,
                        tools: list[dict]):
        from arbagent.openai_compat import (
            anthropic_messages_to_openai,
            anthropic_tools_to_openai,
            openai_response_to_anthropic,
        )
        data = self._post({
            "model": self.model,
            "messages": anthropic_messages_to_openai(messages, system),
            "tools": anthropic_tools_to_openai(tools),
            "temperature": 0,
            "max_tokens": MAX_TOKENS,
        })
        response = openai_response_to_anthropic(data)
        response._raw_openai = data  # attached for LoggingBackend
        return response


class LoggingBackend(AIBackend):
    """Transparent wrapper that logs every resolver call to a ConversationLogger."""

    def __init__(self, backend: AIBackend, conv_logger):
        self._backend = backend
        self._logger = conv_logger

    @property
    def model(self):
        return self._backend.model

    def chat_with_tools(self, messages: list[dict], system: str,
                        tools: list[dict]):
        t0 = time.monotonic()
        error = None
        serialized = None
        try:
            response = self._backend.chat_with_tools(messages, system, tools)
            serialized = response.model_dump(mode="json")
            return response
        except Exception as exc:
            error = str(exc)
            raise
        finally:
            self._logger.log_interaction(
                call_type="chat_with_tools",
                model=self.model,
                system=system,
                messages=messages,
                tools=tools,
                response=serialized,
                duration_ms=int((time.monotonic() - t0) * 1000),
                error=error,
            )


def create_backend(ai_config: dict | None = None) -> AIBackend:
    """Create a resolver backend from the [ai] config section.

    Args:
        ai_config: Dict with ``api_type`` (claude | openai), ``model``,
            ``base_url``.  Defaults to ``config.get_ai_config()``.

    Returns:
        Configured AIBackend instance.

    Raises:
        ValueError: If the API type is not supported.
        APIKeyMissingError: If the backend needs a key that is not set.
    """
    from arbagent.config import get_ai_config, get_ai_timeout
    ai_config = get_ai_config() if ai_config is None else ai_config
    timeout = get_ai_timeout()
    api_type = ai_config.get("api_type", "openai")
    if api_type == "claude":
        return ClaudeBackend(
            model=ai_config.get("model") or CLAUDE_MODEL_DEFAULT,
            timeout=timeout,
        )
    if api_type == "openai":
        return OpenAICompatBackend(
            model=ai_config.get("model") or OPENAI_MODEL_DEFAULT,
            base_url=ai_config.get("base_url") or OPENAI_BASE_URL,
            timeout=timeout,
        )
    raise ValueError(
        f"Unsupported AI API type: '{api_type}'. "
        f"Currently supported: claude, openai"
    )
