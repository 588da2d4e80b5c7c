"""Interactive chat: one conversation, one wallet session, many instructions."""

import re

from arbagent.agent import run_instruction, seed_wallet
from arbagent.context import create_context
from arbagent.logging_config import get_logger

_EXIT_WORDS = {"exit", "quit", "/exit", "/quit"}

# "set_wallet <key>" typed at the prompt is handled locally so the key
# never reaches the resolver.
_SET_WALLET_RE = re.compile(r"^\s*/?set_?wallet\s+(\S+)\s*$", re.IGNORECASE)


def _print_operation(name: str, result) -> None:
    marker = "ok" if result.ok else result.error_type
    print(f"  \033[2m[{name}: {marker}]\033[0m")


def _handle_local_wallet(messages, ctx, key: str) -> None:
    result = seed_wallet(messages, ctx, key)
    print(f"\n{result.message}\n")


def run_chat(backend, private_key: str | None = None, *,
             max_turns: int | None = None, input_fn=input) -> None:
    """Run the REPL until the user types exit or sends EOF.

    Args:
        backend: Resolver backend.
        private_key: Optional key to set before the first instruction.
        max_turns: Override for the per-instruction resolver call limit.
        input_fn: Line reader, replaceable in tests.
    """
    logger = get_logger()
    ctx = create_context()
    messages: list[dict] = []

    print("Arbitrum AI Agent. Type 'help' for the list of commands, "
          "'exit' to quit.")
    if private_key:
        _handle_local_wallet(messages, ctx, private_key)

    while True:
        try:
            line = input_fn("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print()
            break
        if not line:
            continue
        if line.lower() in _EXIT_WORDS:
            break

        match = _SET_WALLET_RE.match(line)
        if match:
            _handle_local_wallet(messages, ctx, match.group(1))
            continue

        logger.info("Instruction received (%d chars)", len(line))
        outcome = run_instruction(backend, ctx, messages, line,
                                  max_turns=max_turns,
                                  on_operation=_print_operation)
        print(f"\n{outcome.text}\n")

    ctx.session.clear_credential()
    print("Goodbye.")
