"""arbagent.chain: JSON-RPC access to the EVM test network via web3.

``ChainClient`` is the only module that talks to the chain.  Every method
is a single logical chain operation; failures (transport errors, RPC
errors, reverted receipts, receipt timeouts) are raised as
``ExecutionFailure`` with a readable reason.

Write methods accept an explicit ``nonce``.  When omitted the pending
transaction count of the sender is used.  All writes are awaited until
the receipt is available.
"""

from dataclasses import dataclass

from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from web3 import Web3

from arbagent.config import (
    get_explorer_url,
    get_receipt_timeout,
    get_rpc_url,
    log,
)
from arbagent.contracts import TOKEN_ABI, TOKEN_BYTECODE
from arbagent.errors import ExecutionFailure
from arbagent.logging_config import get_logger

RECEIPT_POLL_LATENCY = 0.5  # seconds


@dataclass(frozen=True)
class TxResult:
    """Outcome of an included transaction."""

    tx_hash: str
    block_number: int | None = None
    contract_address: str | None = None


def is_valid_address(value) -> bool:
    """True if value is a syntactically valid 20-byte hex address."""
    return isinstance(value, str) and Web3.is_address(value)


def _hex(value) -> str:
    """Render a hash (bytes or HexBytes or str) as 0x-prefixed hex."""
    if isinstance(value, (bytes, bytearray)):
        text = bytes(value).hex()
        return text if text.startswith("0x") else "0x" + text
    return str(value)


def _reason(exc: Exception) -> str:
    """Extract a short human message from a web3 / transport exception."""
    if exc.args and isinstance(exc.args[0], dict):
        message = exc.args[0].get("message")
        if message:
            return str(message)
    text = str(exc).strip()
    return text or type(exc).__name__


class ChainClient:
    """Thin wrapper over ``web3.Web3`` bound to one RPC endpoint."""

    def __init__(self, rpc_url: str | None = None,
                 explorer_url: str | None = None,
                 receipt_timeout: int | None = None,
                 w3: Web3 | None = None):
        self.rpc_url = rpc_url or get_rpc_url()
        self.explorer_url = (explorer_url or get_explorer_url()).rstrip("/")
        self.receipt_timeout = receipt_timeout or get_receipt_timeout()
        self.w3 = w3 or Web3(Web3.HTTPProvider(self.rpc_url))
        self._chain_id: int | None = None

    # ------------------------------------------------------------------
    # Explorer links
    # ------------------------------------------------------------------

    def tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer_url}/tx/{tx_hash}"

    def address_url(self, address: str) -> str:
        return f"{self.explorer_url}/address/{address}"

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    def _call(self, what: str, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except Exception as e:
            get_logger().warning("RPC %s failed: %s", what, e)
            raise ExecutionFailure(f"Failed to {what}: {_reason(e)}") from e

    @property
    def chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = self._call("read chain id",
                                        lambda: self.w3.eth.chain_id)
        return self._chain_id

    def get_balance(self, address: str) -> int:
        """Return the native balance of address, in wei."""
        return self._call("fetch balance", self.w3.eth.get_balance,
                          Web3.to_checksum_address(address))

    def get_nonce(self, address: str) -> int:
        """Return the pending transaction count of address."""
        return self._call("read nonce", self.w3.eth.get_transaction_count,
                          Web3.to_checksum_address(address), "pending")

    def get_gas_price(self) -> int:
        """Return the current gas price, in wei."""
        return self._call("fetch gas price", lambda: self.w3.eth.gas_price)

    def get_block_number(self) -> int:
        return self._call("fetch block number", lambda: self.w3.eth.block_number)

    def get_logs(self, address: str, from_block: int, to_block) -> list[dict]:
        """Return logs emitted by ``address`` in the block range."""
        logs = self._call("fetch logs", self.w3.eth.get_logs, {
            "address": Web3.to_checksum_address(address),
            "fromBlock": from_block,
            "toBlock": to_block,
        })
        return [
            {
                "block_number": entry.get("blockNumber"),
                "tx_hash": _hex(entry.get("transactionHash")),
                "log_index": entry.get("logIndex"),
                "topics": [_hex(t) for t in entry.get("topics", [])],
            }
            for entry in logs
        ]

    def token_balance(self, token_address: str, owner: str) -> int:
        """Return ``balanceOf(owner)`` of a token contract, in raw units."""
        contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(token_address), abi=TOKEN_ABI)
        return self._call(
            "fetch token balance",
            lambda: contract.functions.balanceOf(
                Web3.to_checksum_address(owner)).call(),
        )

    # ------------------------------------------------------------------
    # Signing (local, no chain call)
    # ------------------------------------------------------------------

    @staticmethod
    def sign_message(account: LocalAccount, message: str) -> str:
        """Return the EIP-191 personal signature of message as 0x-hex."""
        try:
            signed = account.sign_message(encode_defunct(text=message))
        except Exception as e:
            raise ExecutionFailure(f"Failed to sign message: {_reason(e)}") from e
        return _hex(signed.signature)

    # ------------------------------------------------------------------
    # State-mutating calls
    # ------------------------------------------------------------------

    def _base_tx(self, account: LocalAccount, nonce: int | None) -> dict:
        if nonce is None:
            nonce = self.get_nonce(account.address)
        return {
            "from": account.address,
            "nonce": nonce,
            "gasPrice": self.get_gas_price(),
            "chainId": self.chain_id,
        }

    def _send(self, account: LocalAccount, tx: dict, what: str) -> TxResult:
        """Sign, broadcast and await one transaction."""
        try:
            signed = account.sign_transaction(tx)
        except Exception as e:
            raise ExecutionFailure(f"Failed to sign {what}: {_reason(e)}") from e

        tx_hash = self._call(f"send {what}", self.w3.eth.send_raw_transaction,
                             signed.raw_transaction)
        tx_hash_hex = _hex(tx_hash)
        get_logger().info("%s sent: %s (nonce %s)", what, tx_hash_hex, tx["nonce"])

        receipt = self._call(
            f"confirm {what}",
            self.w3.eth.wait_for_transaction_receipt,
            tx_hash,
            timeout=self.receipt_timeout,
            poll_latency=RECEIPT_POLL_LATENCY,
        )
        if receipt is None:
            raise ExecutionFailure("Transaction receipt is null or invalid")
        if receipt.get("status") == 0:
            get_logger().warning("%s reverted: %s", what, tx_hash_hex)
            raise ExecutionFailure(f"Transaction reverted: {tx_hash_hex}")

        log(f"{what} included in block {receipt.get('blockNumber')}")
        return TxResult(
            tx_hash=tx_hash_hex,
            block_number=receipt.get("blockNumber"),
            contract_address=receipt.get("contractAddress"),
        )

    def send_native(self, account: LocalAccount, to: str, value_wei: int,
                    nonce: int | None = None) -> TxResult:
        """Transfer native currency and wait for inclusion."""
        tx = self._base_tx(account, nonce)
        tx["to"] = Web3.to_checksum_address(to)
        tx["value"] = value_wei
        tx["gas"] = self._call(
            "estimate gas", self.w3.eth.estimate_gas,
            {"from": account.address, "to": tx["to"], "value": value_wei},
        )
        return self._send(account, tx, "native transfer")

    def send_token_transfer(self, account: LocalAccount, token_address: str,
                            to: str, amount: int,
                            nonce: int | None = None) -> TxResult:
        """Call ``transfer(to, amount)`` on a token contract and wait."""
        contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(token_address), abi=TOKEN_ABI)
        params = self._base_tx(account, nonce)
        tx = self._call(
            "build token transfer",
            lambda: contract.functions.transfer(
                Web3.to_checksum_address(to), amount).build_transaction(params),
        )
        return self._send(account, tx, "token transfer")

    def deploy_token(self, account: LocalAccount, name: str, symbol: str,
                     initial_supply: int,
                     nonce: int | None = None) -> TxResult:
        """Deploy the bundled token contract and wait for its address."""
        factory = self.w3.eth.contract(abi=TOKEN_ABI, bytecode=TOKEN_BYTECODE)
        params = self._base_tx(account, nonce)
        tx = self._call(
            "build token deployment",
            lambda: factory.constructor(name, symbol, initial_supply)
            .build_transaction(params),
        )
        result = self._send(account, tx, "token deployment")
        if not result.contract_address:
            raise ExecutionFailure(
                f"Deployment {result.tx_hash} returned no contract address")
        return result
