"""
arbagent CLI: natural-language agent for the Arbitrum Sepolia testnet
"""

import sys
from pathlib import Path
from typing import Optional

import typer

from arbagent import __version__
from arbagent.config import (
    CONFIG_FILENAME,
    create_default_config,
    get_server_address,
    set_verbose,
)
from arbagent.errors import APIKeyMissingError

# Click's \b marker prevents paragraph rewrapping in --help
HELP_TEXT = """\
arbagent | Talk to the Arbitrum Sepolia testnet

\b
Setup:
  mkdir my-agent && cd my-agent
  arbagent init
  Add OPENAI_API_KEY (or ANTHROPIC_API_KEY) to .env
\b
Usage:
  arbagent                         Start interactive chat
  arbagent chat                    Same as above (explicit)
  arbagent ask "<instruction>"     Run a single instruction
  arbagent serve                   Serve POST /agent over HTTP
  arbagent operations              List the available operations
\b
Private keys:
  In chat, type:  set_wallet <private_key>
  The key is used locally and never sent to the AI model.
"""

ENV_TEMPLATE = """\
# Intent resolver API key (OpenAI by default, see [ai] in arbagent.toml)
OPENAI_API_KEY=
# ANTHROPIC_API_KEY=
# Optional
# ARBITRUM_RPC_URL=https://sepolia-rollup.arbitrum.io/rpc
# COINGECKO_API_KEY=
"""

GITIGNORE_ENTRIES = [".env", ".logs/"]

app = typer.Typer(
    name="arbagent",
    help=HELP_TEXT,
    invoke_without_command=True,
)


def _version_callback(value: bool):
    if value:
        print(f"arbagent {__version__}")
        raise typer.Exit()


def _create_backend():
    """Create the configured resolver backend wrapped with conversation logging."""
    from arbagent.ai import LoggingBackend, create_backend
    from arbagent.conversation_log import ConversationLogger

    try:
        backend = create_backend()
    except APIKeyMissingError as e:
        print(str(e))
        raise typer.Exit(1)
    except ValueError as e:
        print(f"Invalid [ai] configuration: {e}")
        raise typer.Exit(1)
    return LoggingBackend(backend, ConversationLogger())


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose/--quiet", "-v/-q", help="Write DEBUG lines to the log file"
    ),
    version: bool = typer.Option(
        False, "--version", "-V", help="Show version and exit",
        callback=_version_callback, is_eager=True,
    ),
):
    """Global options for all commands."""
    set_verbose(verbose)
    if ctx.invoked_subcommand is None:
        from arbagent.cli.chat import run_chat
        run_chat(_create_backend())


@app.command()
def chat(
    private_key: Optional[str] = typer.Option(
        None, "--private-key", envvar="ARBAGENT_PRIVATE_KEY",
        help="Wallet private key to set before the first instruction",
    ),
    max_turns: Optional[int] = typer.Option(
        None, "--max-turns", min=1, help="Resolver calls per instruction"
    ),
):
    """Start an interactive chat session."""
    from arbagent.cli.chat import run_chat
    run_chat(_create_backend(), private_key, max_turns=max_turns)


@app.command()
def ask(
    instruction: str = typer.Argument(..., help="What you want the agent to do"),
    private_key: Optional[str] = typer.Option(
        None, "--private-key", envvar="ARBAGENT_PRIVATE_KEY",
        help="Wallet private key for this instruction",
    ),
    max_turns: Optional[int] = typer.Option(
        None, "--max-turns", min=1, help="Resolver calls for this instruction"
    ),
):
    """Run a single instruction and print the answer."""
    from arbagent.agent import run_instruction, seed_wallet
    from arbagent.context import create_context

    backend = _create_backend()
    ctx = create_context()
    messages: list[dict] = []
    if private_key:
        seeded = seed_wallet(messages, ctx, private_key)
        if not seeded.ok:
            print(seeded.message)
            raise typer.Exit(1)
    outcome = run_instruction(backend, ctx, messages, instruction,
                              max_turns=max_turns)
    ctx.session.clear_credential()
    print(outcome.text)
    if not outcome.ok:
        raise typer.Exit(1)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port"),
):
    """Serve the agent over HTTP (POST /agent)."""
    from arbagent.server import AgentService
    from arbagent.server import serve as run_server

    default_host, default_port = get_server_address()
    service = AgentService(_create_backend())
    run_server(service, host or default_host, port or default_port)


@app.command()
def operations():
    """List the operations the agent can run."""
    from arbagent.skills.definitions import build_registry

    for d in build_registry().list_all():
        flags = []
        if d.requires_session:
            flags.append("wallet")
        if d.category == "write":
            flags.append("write")
        suffix = f"  [{', '.join(flags)}]" if flags else ""
        print(f"{d.name:<24} {d.description}{suffix}")


def _ensure_env_file() -> None:
    """Create .env if missing."""
    env_path = Path(".env")
    if env_path.exists():
        print(".env already exists")
        return
    env_path.write_text(ENV_TEMPLATE)
    print("Created .env with API key placeholders")


def _ensure_gitignore() -> None:
    """Create .gitignore or add missing entries."""
    gitignore_path = Path(".gitignore")
    if not gitignore_path.exists():
        gitignore_path.write_text("\n".join(GITIGNORE_ENTRIES) + "\n")
        print("Created .gitignore")
        return

    content = gitignore_path.read_text()
    missing = [e for e in GITIGNORE_ENTRIES if e not in content]
    if missing:
        separator = "" if content.endswith("\n") else "\n"
        gitignore_path.write_text(content + separator + "\n".join(missing) + "\n")
        print(f"Added to .gitignore: {', '.join(missing)}")


@app.command()
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
):
    """Initialize an arbagent project in the current directory."""
    config_path = Path(CONFIG_FILENAME)
    _ensure_env_file()

    if config_path.exists() and not force:
        print(f"{CONFIG_FILENAME} already exists.")
        print("Use --force to overwrite.")
        raise typer.Exit(1)

    _ensure_gitignore()
    config_path.write_text(create_default_config())
    print(f"Created {CONFIG_FILENAME}")
    print()
    print("Next steps:")
    print("  1. Add your resolver API key to .env:")
    print("     OPENAI_API_KEY=sk-...")
    print("  2. Start chatting:")
    print("     arbagent")


def main():
    """Entry point for the CLI."""
    sys.stdout.reconfigure(line_buffering=True)
    sys.stderr.reconfigure(line_buffering=True)

    # Load .env from current directory (if it exists)
    from dotenv import load_dotenv
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=True)

    app()
