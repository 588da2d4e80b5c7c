"""Tests for ConversationLogger."""

import json
import stat

import pytest

from arbagent.conversation_log import _MAX_LOG_FILES, ConversationLogger
from arbagent.logging_config import _reset_session_stamp

from conftest import TEST_KEY


@pytest.fixture(autouse=True)
def _fresh_session_stamp():
    """Reset the shared session stamp before each test."""
    _reset_session_stamp()


def _log(logger, messages, system="sys", tools=None, response="ok"):
    logger.log_interaction(
        call_type="chat_with_tools",
        model="test-model",
        system=system,
        messages=messages,
        tools=tools,
        response=response,
        duration_ms=10,
    )


def _entries(logger):
    return [json.loads(line) for line in logger.path.read_text().splitlines()]


class TestConversationLogger:

    def test_creates_dir_with_0700(self, tmp_path):
        logger = ConversationLogger(base_dir=tmp_path)
        mode = stat.S_IMODE((tmp_path / ".logs").stat().st_mode)
        assert mode == 0o700
        logger.close()

    def test_creates_file_with_0600(self, tmp_path):
        logger = ConversationLogger(base_dir=tmp_path)
        assert stat.S_IMODE(logger.path.stat().st_mode) == 0o600
        logger.close()

    def test_writes_valid_jsonl(self, tmp_path):
        logger = ConversationLogger(base_dir=tmp_path)
        _log(logger, [{"role": "user", "content": "hello"}])
        _log(logger, [{"role": "user", "content": "bye"}])
        logger.close()

        entries = _entries(logger)
        assert [e["sequence"] for e in entries] == [1, 2]
        assert all("timestamp" in e for e in entries)

    def test_unchanged_system_and_tools_are_cached(self, tmp_path):
        logger = ConversationLogger(base_dir=tmp_path)
        tools = [{"name": "help"}]
        _log(logger, [{"role": "user", "content": "a"}], tools=tools)
        _log(logger, [{"role": "user", "content": "a"}], tools=tools)
        _log(logger, [{"role": "user", "content": "a"}], system="changed", tools=tools)
        logger.close()

        first, second, third = _entries(logger)
        assert first["system"] == "sys" and first["tools"] == tools
        assert second["system"] == "[cached]" and second["tools"] == "[cached]"
        assert third["system"] == "changed"

    def test_only_new_messages_logged(self, tmp_path):
        logger = ConversationLogger(base_dir=tmp_path)
        history = [{"role": "user", "content": "one"}]
        _log(logger, history)
        history = history + [{"role": "assistant", "content": "two"},
                             {"role": "user", "content": "three"}]
        _log(logger, history)
        logger.close()

        second = _entries(logger)[1]
        assert second["messages"][0] == "[cached 1 messages]"
        assert second["messages"][1:] == history[1:]

    def test_private_key_scrubbed(self, tmp_path):
        logger = ConversationLogger(base_dir=tmp_path)
        _log(logger, [{"role": "user", "content": f"set_wallet {TEST_KEY}"}])
        logger.close()

        content = logger.path.read_text()
        assert TEST_KEY[2:] not in content
        assert "[KEY-REDACTED]" in content

    def test_old_files_pruned(self, tmp_path):
        log_dir = tmp_path / ".logs"
        log_dir.mkdir()
        for i in range(_MAX_LOG_FILES + 3):
            (log_dir / f"20200101-{i:06d}-ai-cached.jsonl").write_text("")
        logger = ConversationLogger(base_dir=tmp_path, stamp="20990101-000000")
        logger.close()
        assert len(list(log_dir.glob("*-ai-cached.jsonl"))) == _MAX_LOG_FILES
        assert logger.path.exists()
