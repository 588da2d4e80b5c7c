"""Turn loop: alternate intent resolution and operation execution.

One call to ``run_instruction`` handles one user instruction:

    AWAITING_RESOLUTION --tool_use--> EXECUTING_OPERATION --result--> AWAITING_RESOLUTION
    AWAITING_RESOLUTION --text------> done

The loop stops on a text-only answer, on a ``ResolverFailure``, or after
``max_turns`` resolver calls.  Operation failures are ordinary results and
never stop the loop on their own.

The conversation is kept in Anthropic message format and is only ever
appended to.
"""

import json
from dataclasses import dataclass, field

from arbagent.config import get_max_turns
from arbagent.errors import ResolverFailure
from arbagent.logging_config import get_logger
from arbagent.skills.executor import execute_tool
from arbagent.skills.results import OperationResult

SYSTEM_PROMPT = (
    "You are an AI assistant that helps users interact with the Arbitrum "
    "Sepolia testnet. Use the provided tools to assist the user. The wallet "
    "private key persists until the user explicitly disconnects. "
    "Never ask the user to paste a private key into the chat if a wallet "
    "is already set. Amounts of ETH are in ether. Token amounts are in whole "
    "tokens. When a tool returns an error, explain it to the user and do not "
    "retry the same call with the same arguments."
)

# Outcome statuses
ANSWERED = "answered"
LIMIT_REACHED = "limit_reached"
RESOLVER_FAILED = "resolver_failed"

SEED_WALLET_ID = "seed_set_wallet"


@dataclass
class TurnOutcome:
    """What one instruction produced."""

    status: str
    text: str
    turns: int
    operations: list[tuple[str, OperationResult]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == ANSWERED


def _block_to_dict(block) -> dict:
    """Convert a response content block to a plain dict for messages."""
    if block.type == "text":
        return {"type": "text", "text": block.text}
    if block.type == "tool_use":
        return {
            "type": "tool_use",
            "id": block.id,
            "name": block.name,
            "input": block.input,
        }
    return {"type": block.type}


def append_user_text(messages: list[dict], text: str) -> None:
    """Append a user instruction.

    If the last message is a user turn carrying tool results (e.g. a seeded
    wallet), the text joins that turn so roles keep alternating.
    """
    if messages and messages[-1]["role"] == "user" \
            and isinstance(messages[-1]["content"], list):
        messages[-1]["content"].append({"type": "text", "text": text})
    else:
        messages.append({"role": "user", "content": text})


def seed_wallet(messages: list[dict], ctx, private_key: str) -> OperationResult:
    """Set the wallet without sending the key to the resolver.

    Runs ``set_wallet`` locally and records it in the conversation as a
    tool call whose input is redacted, so the resolver sees the outcome
    (address or error) but never the key.
    """
    result = execute_tool(ctx, "set_wallet", {"private_key": private_key})
    call_id = f"{SEED_WALLET_ID}_{len(messages)}"
    tool_use = {"type": "tool_use", "id": call_id, "name": "set_wallet",
                "input": {"private_key": "[provided by user]"}}
    if messages and messages[-1]["role"] == "assistant":
        # Attach to the previous answer so roles keep alternating
        content = messages[-1]["content"]
        if isinstance(content, str):
            content = [{"type": "text", "text": content}]
        messages[-1]["content"] = [*content, tool_use]
    else:
        messages.append({"role": "assistant", "content": [tool_use]})
    messages.append({
        "role": "user",
        "content": [
            {"type": "tool_result", "tool_use_id": call_id,
             "content": json.dumps(result.to_dict(), default=str)},
        ],
    })
    return result


def run_tool_loop(backend, ctx, messages: list[dict], *,
                  system: str = SYSTEM_PROMPT,
                  max_turns: int | None = None,
                  on_operation=None) -> TurnOutcome:
    """Run resolver/executor rounds until a text-only answer is produced.

    Modifies messages in-place (appends assistant + tool_result messages).

    Args:
        backend: An ``AIBackend``.
        ctx: The conversation's ``AgentContext``.
        messages: Conversation so far, ending with the user instruction.
        system: System prompt.
        max_turns: Upper bound on resolver calls (default from config).
        on_operation: Optional ``callback(name, result)`` after each
            operation, used by the CLI to show progress.

    Returns:
        TurnOutcome with the final text.
    """
    logger = get_logger()
    max_turns = max_turns or get_max_turns()
    tools = ctx.registry.to_anthropic_tools()
    operations: list[tuple[str, OperationResult]] = []

    for turn in range(1, max_turns + 1):
        try:
            response = backend.chat_with_tools(messages, system, tools)
        except ResolverFailure as e:
            logger.error("Resolver failed on turn %d: %s", turn, e)
            text = f"Sorry, I could not process that request: {e}"
            messages.append({"role": "assistant", "content": text})
            return TurnOutcome(RESOLVER_FAILED, text, turn, operations)

        tool_blocks = [b for b in response.content if b.type == "tool_use"]
        if not tool_blocks:
            text = "".join(
                b.text for b in response.content if b.type == "text"
            ).strip()
            text = text or "Done."
            messages.append({"role": "assistant", "content": text})
            return TurnOutcome(ANSWERED, text, turn, operations)

        messages.append({
            "role": "assistant",
            "content": [_block_to_dict(b) for b in response.content],
        })

        tool_results = []
        for block in tool_blocks:
            logger.info("Turn %d: resolver requested %s", turn, block.name)
            result = execute_tool(ctx, block.name, block.input)
            operations.append((block.name, result))
            if on_operation is not None:
                on_operation(block.name, result)
            tool_results.append({
                "type": "tool_result",
                "tool_use_id": block.id,
                "content": json.dumps(result.to_dict(), default=str),
            })
        messages.append({"role": "user", "content": tool_results})

    logger.warning("Turn limit reached (%d resolver calls)", max_turns)
    text = _limit_text(max_turns, operations)
    messages.append({"role": "assistant", "content": text})
    return TurnOutcome(LIMIT_REACHED, text, max_turns, operations)


def _limit_text(max_turns: int, operations) -> str:
    lines = [
        f"Stopped after {max_turns} steps without a final answer. "
        "The request may be incomplete."
    ]
    if operations:
        name, result = operations[-1]
        lines.append(f"Last operation ({name}): {result.message}")
    return "\n".join(lines)


def run_instruction(backend, ctx, messages: list[dict], instruction: str,
                    **kwargs) -> TurnOutcome:
    """Append a user instruction and run the turn loop for it."""
    append_user_text(messages, instruction)
    return run_tool_loop(backend, ctx, messages, **kwargs)
