"""Agent skills: operation catalog, registry and executor for arbagent."""

from arbagent.skills.definitions import (
    OPERATIONS,
    build_registry,
    get_tool_metadata,
    get_tools_for_anthropic,
)
from arbagent.skills.executor import execute_tool
from arbagent.skills.results import OperationResult

__all__ = [
    "OPERATIONS",
    "OperationResult",
    "build_registry",
    "execute_tool",
    "get_tool_metadata",
    "get_tools_for_anthropic",
]
