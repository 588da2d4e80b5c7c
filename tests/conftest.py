"""Shared fixtures: isolated project root, fake chain, scripted resolver."""

from types import SimpleNamespace

import pytest
from eth_account import Account

import arbagent.config as cfg
from arbagent.assets import AssetRegistry
from arbagent.chain import TxResult
from arbagent.context import AgentContext
from arbagent.errors import ExecutionFailure
from arbagent.session import WalletSession
from arbagent.skills.definitions import build_registry

# Well-known test keys (never hold real funds)
TEST_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_ADDRESS = Account.from_key(TEST_KEY).address
OTHER_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"

ADDR_A = "0x" + "aa" * 20
ADDR_B = "0x" + "bb" * 20
TOKEN_ADDR = "0x" + "cc" * 20


@pytest.fixture(autouse=True)
def _isolated_root(tmp_path, monkeypatch):
    """Point config and logs at a temp dir; drop env overrides."""
    monkeypatch.setenv("ARBAGENT_ROOT", str(tmp_path))
    monkeypatch.delenv("ARBITRUM_RPC_URL", raising=False)
    monkeypatch.delenv("COINGECKO_API_KEY", raising=False)
    monkeypatch.delenv("ARBAGENT_PRIVATE_KEY", raising=False)
    cfg._cached_config = None
    cfg._cached_config_path = None
    yield
    cfg._cached_config = None
    cfg._cached_config_path = None


class FakeChain:
    """In-memory stand-in for ChainClient that records every call."""

    explorer_url = "https://sepolia.arbiscan.io"

    def __init__(self, nonce: int = 7, fail_nonces=(), balance: int = 0,
                 token_balances=None, gas_price: int = 100_000_000,
                 block_number: int = 1000, logs=None):
        self.nonce = nonce
        self.fail_nonces = set(fail_nonces)
        self.balance = balance
        self.token_balances = token_balances or {}
        self.gas_price = gas_price
        self.block_number = block_number
        self.logs = logs or []
        self.calls: list[tuple] = []
        self._tx_count = 0

    def _next_tx(self, **extra) -> TxResult:
        self._tx_count += 1
        return TxResult(tx_hash=f"0x{self._tx_count:064x}", block_number=1, **extra)

    def tx_url(self, tx_hash):
        return f"{self.explorer_url}/tx/{tx_hash}"

    def address_url(self, address):
        return f"{self.explorer_url}/address/{address}"

    def get_nonce(self, address):
        self.calls.append(("get_nonce", address))
        return self.nonce

    def get_balance(self, address):
        self.calls.append(("get_balance", address))
        return self.balance

    def get_gas_price(self):
        self.calls.append(("get_gas_price",))
        return self.gas_price

    def get_block_number(self):
        self.calls.append(("get_block_number",))
        return self.block_number

    def get_logs(self, address, from_block, to_block):
        self.calls.append(("get_logs", address, from_block, to_block))
        return list(self.logs)

    def token_balance(self, token_address, owner):
        self.calls.append(("token_balance", token_address, owner))
        value = self.token_balances.get(token_address)
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise ExecutionFailure("Failed to fetch token balance: execution reverted")
        return value

    def sign_message(self, account, message):
        self.calls.append(("sign_message", message))
        return "0x" + "ab" * 65

    def send_native(self, account, to, value_wei, nonce=None):
        self.calls.append(("send_native", to, value_wei, nonce))
        if nonce in self.fail_nonces:
            raise ExecutionFailure(f"Failed to sign native transfer: nonce {nonce} rejected")
        return self._next_tx()

    def send_token_transfer(self, account, token_address, to, amount, nonce=None):
        self.calls.append(("send_token_transfer", token_address, to, amount, nonce))
        if nonce in self.fail_nonces:
            raise ExecutionFailure("Failed to send token transfer: insufficient balance")
        return self._next_tx()

    def deploy_token(self, account, name, symbol, initial_supply, nonce=None):
        self.calls.append(("deploy_token", name, symbol, initial_supply))
        return self._next_tx(contract_address=TOKEN_ADDR)

    def call_names(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def assets():
    return AssetRegistry()


@pytest.fixture
def ctx(chain, assets):
    return AgentContext(
        session=WalletSession(),
        assets=assets,
        chain=chain,
        registry=build_registry(),
        token_decimals=0,
        history_blocks=100,
        faucet_url="https://faucet.example/arbitrum/sepolia",
    )


@pytest.fixture
def wallet_ctx(ctx):
    """Context with the test wallet already set."""
    ctx.session.set_credential(TEST_KEY)
    return ctx


# ---------------------------------------------------------------------------
# Scripted resolver responses
# ---------------------------------------------------------------------------

def text_response(text: str):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


def tool_response(name: str, args: dict | None = None, call_id: str = "call_1",
                  text: str | None = None):
    blocks = []
    if text:
        blocks.append(SimpleNamespace(type="text", text=text))
    blocks.append(SimpleNamespace(type="tool_use", id=call_id, name=name,
                                  input=args or {}))
    return SimpleNamespace(content=blocks)
