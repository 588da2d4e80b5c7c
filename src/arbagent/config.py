"""Configuration management for arbagent.

Loads configuration from arbagent.toml in the project root. Secrets
(API keys, RPC URL overrides) come from the environment, optionally via
a ``.env`` file.
"""

import os
from pathlib import Path
from typing import Optional

import tomllib


# ---------------------------------------------------------------------------
# Network constants (Arbitrum Sepolia)
# ---------------------------------------------------------------------------

DEFAULT_RPC_URL = "https://sepolia-rollup.arbitrum.io/rpc"
DEFAULT_EXPLORER_URL = "https://sepolia.arbiscan.io"
DEFAULT_FAUCET_URL = "https://faucet.triangleplatform.com/arbitrum/sepolia"

COINGECKO_API_URL = "https://api.coingecko.com/api/v3"

# ---------------------------------------------------------------------------
# Agent defaults
# ---------------------------------------------------------------------------

MAX_TURNS_DEFAULT = 10
RECEIPT_TIMEOUT_DEFAULT = 120  # seconds
HISTORY_BLOCKS_DEFAULT = 100
TOKEN_DECIMALS_DEFAULT = 0     # tokens are minted and moved in whole units
AI_TIMEOUT_DEFAULT = 600       # seconds
SERVER_HOST_DEFAULT = "127.0.0.1"
SERVER_PORT_DEFAULT = 3000

ENV_RPC_URL = "ARBITRUM_RPC_URL"
ENV_COINGECKO_API_KEY = "COINGECKO_API_KEY"

DEFAULT_CONFIG = {
    "chain": {},
    "agent": {},
    "ai": {},
    "server": {},
}

CONFIG_FILENAME = "arbagent.toml"

# Module-level cache
_cached_config: Optional[dict] = None
_cached_config_path: Optional[Path] = None

# Module-level verbose flag (controls DEBUG-level logging)
_verbose: bool = False


def set_verbose(enabled: bool) -> None:
    """Set the global verbose flag and switch log level accordingly."""
    global _verbose
    _verbose = enabled
    from arbagent.logging_config import set_debug
    set_debug(enabled)


def is_verbose() -> bool:
    """Return the current verbose flag."""
    return _verbose


def log(msg: str) -> None:
    """Log a message to the arbagent log file (file only)."""
    from arbagent.logging_config import get_logger
    get_logger().debug(msg)


def _project_root() -> str:
    """Return the arbagent project root directory.

    Resolution order:
    1. ARBAGENT_ROOT environment variable (if set)
    2. Current working directory
    """
    return os.environ.get("ARBAGENT_ROOT", os.environ.get("PWD", os.getcwd()))


def find_config() -> Optional[Path]:
    """Find arbagent.toml in cwd or ARBAGENT_ROOT.

    Returns:
        Path to config file if found, None otherwise.
    """
    config_path = Path(_project_root()) / CONFIG_FILENAME
    if config_path.exists():
        return config_path
    return None


def load_config(reload: bool = False) -> dict:
    """Load config from arbagent.toml or return defaults.

    Args:
        reload: If True, reload config even if cached.

    Returns:
        Configuration dictionary with chain, agent, ai and server sections.
    """
    global _cached_config, _cached_config_path

    if _cached_config is not None and not reload:
        return _cached_config

    config_path = find_config()

    if config_path is None:
        _cached_config = {k: dict(v) for k, v in DEFAULT_CONFIG.items()}
        _cached_config_path = None
        return _cached_config

    with open(config_path, "rb") as f:
        config = tomllib.load(f)

    result = {k: dict(v) for k, v in DEFAULT_CONFIG.items()}
    for section in DEFAULT_CONFIG:
        if isinstance(config.get(section), dict):
            result[section].update(config[section])

    _cached_config = result
    _cached_config_path = config_path
    return result


def get_config_path() -> Optional[Path]:
    """Return the path to the loaded config file, or None if using defaults."""
    load_config()
    return _cached_config_path


def _positive_int(value, default: int) -> int:
    """Coerce a config value to a positive int, falling back to default."""
    if value is None:
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


# ---------------------------------------------------------------------------
# [chain]
# ---------------------------------------------------------------------------

def get_rpc_url() -> str:
    """Return the chain RPC endpoint.

    Resolution order:
    1. ARBITRUM_RPC_URL environment variable
    2. ``rpc_url`` in [chain]
    3. DEFAULT_RPC_URL
    """
    env_url = os.environ.get(ENV_RPC_URL, "").strip()
    if env_url:
        return env_url
    return load_config()["chain"].get("rpc_url") or DEFAULT_RPC_URL


def get_explorer_url() -> str:
    """Return the block explorer base URL (no trailing slash)."""
    url = load_config()["chain"].get("explorer_url") or DEFAULT_EXPLORER_URL
    return url.rstrip("/")


def get_faucet_url() -> str:
    """Return the testnet faucet URL."""
    return load_config()["chain"].get("faucet_url") or DEFAULT_FAUCET_URL


def get_receipt_timeout() -> int:
    """Return how long to wait for a transaction receipt, in seconds."""
    return _positive_int(load_config()["chain"].get("receipt_timeout"),
                         RECEIPT_TIMEOUT_DEFAULT)


def get_history_blocks() -> int:
    """Return the block window scanned by get_transaction_history."""
    return _positive_int(load_config()["chain"].get("history_blocks"),
                         HISTORY_BLOCKS_DEFAULT)


def get_token_decimals() -> int:
    """Return the decimal places applied to token amounts.

    0 means amounts are passed to ``transfer`` as raw whole units, which
    matches how create_token mints supply.
    """
    val = load_config()["chain"].get("token_decimals")
    if val is None:
        return TOKEN_DECIMALS_DEFAULT
    try:
        decimals = int(val)
    except (TypeError, ValueError):
        return TOKEN_DECIMALS_DEFAULT
    if 0 <= decimals <= 36:
        return decimals
    return TOKEN_DECIMALS_DEFAULT


# ---------------------------------------------------------------------------
# [agent]
# ---------------------------------------------------------------------------

def get_max_turns() -> int:
    """Return the maximum number of resolver calls per instruction."""
    return _positive_int(load_config()["agent"].get("max_turns"),
                         MAX_TURNS_DEFAULT)


# ---------------------------------------------------------------------------
# [ai]
# ---------------------------------------------------------------------------

def get_ai_config() -> dict:
    """Return the [ai] section (api_type, model, base_url, timeout)."""
    return load_config().get("ai", {})


def get_ai_timeout() -> int:
    """Return AI request timeout in seconds from config or default."""
    return _positive_int(get_ai_config().get("timeout"), AI_TIMEOUT_DEFAULT)


# ---------------------------------------------------------------------------
# [server]
# ---------------------------------------------------------------------------

def get_server_address() -> tuple[str, int]:
    """Return (host, port) for the HTTP server."""
    server = load_config()["server"]
    host = server.get("host") or SERVER_HOST_DEFAULT
    port = _positive_int(server.get("port"), SERVER_PORT_DEFAULT)
    return host, port


def get_coingecko_api_key() -> str:
    """Return the CoinGecko API key, or empty string if not set."""
    return os.environ.get(ENV_COINGECKO_API_KEY, "")


def create_default_config() -> str:
    """Generate default config file content.

    Returns:
        TOML content as string.
    """
    return f'''# arbagent configuration

[chain]
# Overridden by the ARBITRUM_RPC_URL environment variable when set.
rpc_url = "{DEFAULT_RPC_URL}"
explorer_url = "{DEFAULT_EXPLORER_URL}"
faucet_url = "{DEFAULT_FAUCET_URL}"
receipt_timeout = {RECEIPT_TIMEOUT_DEFAULT}
history_blocks = {HISTORY_BLOCKS_DEFAULT}
# Decimal places applied to token amounts in transfers.
# 0 = whole units, matching the supply minted by create_token.
token_decimals = {TOKEN_DECIMALS_DEFAULT}

[agent]
# Upper bound on resolver calls for a single instruction.
max_turns = {MAX_TURNS_DEFAULT}

# Intent resolver.
# Default: OpenAI gpt-4o-mini (API key via OPENAI_API_KEY env var)
#
# Claude:
# [ai]
# api_type = "claude"
# model = "claude-sonnet-4-5"
#
# Any OpenAI-compatible endpoint (llama.cpp, Ollama, vLLM, ...):
# [ai]
# api_type = "openai"
# base_url = "http://localhost:55128"
[ai]
timeout = {AI_TIMEOUT_DEFAULT}

[server]
host = "{SERVER_HOST_DEFAULT}"
port = {SERVER_PORT_DEFAULT}
'''
