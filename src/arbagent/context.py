"""Agent context: everything an operation handler may touch.

One ``AgentContext`` per conversation.  The session is private to the
conversation; the chain client, asset registry and operation registry are
shared across conversations in the same process.
"""

from dataclasses import dataclass

from arbagent.assets import AssetRegistry
from arbagent.chain import ChainClient
from arbagent.config import (
    get_faucet_url,
    get_history_blocks,
    get_token_decimals,
)
from arbagent.session import WalletSession
from arbagent.skills.registry import OperationRegistry


@dataclass
class AgentContext:
    session: WalletSession
    assets: AssetRegistry
    chain: ChainClient
    registry: OperationRegistry
    token_decimals: int = 0
    history_blocks: int = 100
    faucet_url: str = ""


def create_context(*, session: WalletSession | None = None,
                   assets: AssetRegistry | None = None,
                   chain: ChainClient | None = None,
                   registry: OperationRegistry | None = None) -> AgentContext:
    """Build a context from config, reusing any shared pieces passed in."""
    if registry is None:
        from arbagent.skills.definitions import build_registry
        registry = build_registry()
    return AgentContext(
        session=session or WalletSession(),
        assets=assets if assets is not None else AssetRegistry(),
        chain=chain or ChainClient(),
        registry=registry,
        token_decimals=get_token_decimals(),
        history_blocks=get_history_blocks(),
        faucet_url=get_faucet_url(),
    )
