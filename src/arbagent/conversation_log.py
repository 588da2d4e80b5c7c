"""Conversation logging for resolver calls: JSONL files with key scrubbing.

One file per session:
  {stamp}-ai-cached.jsonl  : system+tools replaced with "[cached]" when
                             unchanged, for quick reading & cache review
"""

import json
import os
from datetime import datetime, timezone
from pathlib import Path

from arbagent.logging_config import get_log_dir, get_session_stamp, scrub_secrets

_MAX_LOG_FILES = 100


def _cache_key(system, tools) -> str:
    """Return a deterministic string for system+tools to detect changes."""
    return json.dumps({"system": system, "tools": tools}, sort_keys=True,
                      default=str)


class ConversationLogger:
    """Logs resolver interactions to timestamped JSONL files under .logs/."""

    def __init__(self, base_dir: str | Path | None = None,
                 stamp: str | None = None):
        """Open a new JSONL log file for this session."""
        log_dir = get_log_dir(base_dir)
        stamp = stamp or get_session_stamp()

        self._path = log_dir / f"{stamp}-ai-cached.jsonl"

        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        self._file = os.fdopen(fd, "w")

        self._seq = 0
        self._prev_cache_key: str | None = None
        self._prev_msg_count = 0
        self._cleanup(log_dir)

    @property
    def path(self) -> Path:
        return self._path

    def log_interaction(
        self,
        *,
        call_type: str,
        model: str,
        system,
        messages: list[dict],
        tools: list[dict] | None = None,
        response,
        duration_ms: int,
        error: str | None = None,
    ) -> None:
        """Append one interaction record to the JSONL log file."""
        self._seq += 1
        ts = datetime.now(timezone.utc).isoformat()

        current_key = _cache_key(system, tools)
        if self._prev_cache_key is not None and current_key == self._prev_cache_key:
            cached_system = "[cached]"
            cached_tools = "[cached]" if tools is not None else None
        else:
            cached_system = system
            cached_tools = tools
        self._prev_cache_key = current_key

        # Only log new messages since the last call
        prev = self._prev_msg_count
        if prev > 0 and len(messages) > prev:
            cached_messages = [f"[cached {prev} messages]"] + messages[prev:]
        else:
            cached_messages = messages
        self._prev_msg_count = len(messages)

        entry: dict = {
            "timestamp": ts,
            "sequence": self._seq,
            "call_type": call_type,
            "model": model,
            "system": cached_system,
            "messages": cached_messages,
        }
        if cached_tools is not None:
            entry["tools"] = cached_tools
        entry["response"] = response
        entry["duration_ms"] = duration_ms
        entry["error"] = error

        line = scrub_secrets(json.dumps(entry, default=str))
        self._file.write(line + "\n")
        self._file.flush()

    @staticmethod
    def _cleanup(log_dir: Path) -> None:
        """Delete oldest conversation logs beyond _MAX_LOG_FILES."""
        files = sorted(log_dir.glob("*-ai-cached.jsonl"))
        for old in files[:-_MAX_LOG_FILES]:
            old.unlink()

    def close(self) -> None:
        """Flush and close the log file."""
        self._file.close()
