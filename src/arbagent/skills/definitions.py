"""Operation catalog for the arbagent resolver.

Each operation has:
- name, description: shown to the resolver (Anthropic tool format)
- an argument model: pydantic, rendered as the tool's input_schema
- requires_session: True for operations that need the wallet
- category: "read" or "write"

``build_registry()`` returns the sealed registry used everywhere else.
"""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from arbagent.chain import is_valid_address
from arbagent.skills import executor
from arbagent.skills.batch import parse_batch
from arbagent.skills.registry import OperationDescriptor, OperationRegistry
from arbagent.units import ether_to_wei, parse_positive_amount


# ---------------------------------------------------------------------------
# Argument models
# ---------------------------------------------------------------------------

class _Args(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)


def _check_address(value: str) -> str:
    if not is_valid_address(value):
        raise ValueError(f"Invalid address: {value}")
    return value


Address = Annotated[str, AfterValidator(_check_address)]


class NoArgs(_Args):
    pass


class SetWalletArgs(_Args):
    private_key: str = Field(
        min_length=1,
        description="Hex private key of the wallet, with or without 0x prefix.",
    )


class TransferArgs(_Args):
    to: Address = Field(description="Recipient address (0x...).")
    amount: str = Field(description="Amount of ETH to send, e.g. '0.01'.")

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, value: str) -> str:
        ether_to_wei(parse_positive_amount(value))
        return value


class SignMessageArgs(_Args):
    message: str = Field(min_length=1, description="Text to sign.")


class HistoryArgs(_Args):
    count: int = Field(
        default=5, ge=1, le=50,
        description="Number of transactions to fetch (default 5).",
    )


class TokenPriceArgs(_Args):
    token: str = Field(
        min_length=1,
        description="CoinGecko coin id, e.g. 'ethereum' or 'arbitrum'.",
    )


class CreateTokenArgs(_Args):
    name: str = Field(min_length=1, max_length=64,
                      description="Token name, e.g. 'My Token'.")
    symbol: str = Field(pattern=r"^\S{1,16}$",
                        description="Token symbol without spaces, e.g. 'MTK'.")
    total_supply: str = Field(
        description="Initial supply in whole tokens, minted to the wallet.")

    @field_validator("total_supply")
    @classmethod
    def _check_supply(cls, value: str) -> str:
        if not value.isdigit() or int(value) <= 0:
            raise ValueError("Invalid total supply: must be a positive whole number")
        return value


class FaucetArgs(_Args):
    address: Address = Field(description="Address to fund (0x...).")


class BatchTransferArgs(_Args):
    transfers: str = Field(
        min_length=1,
        description=(
            "Space-separated transfers: 'ETH <to> <amount>' for ETH and "
            "'TOKEN <to> <amount> <symbol>' for tokens created with "
            "create_token. Example: 'ETH 0xabc... 0.01 TOKEN 0xdef... 10 MTK'."
        ),
    )


def _prepare_batch(ctx, args: BatchTransferArgs):
    return parse_batch(args.transfers, ctx.assets, ctx.token_decimals)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

OPERATIONS: list[OperationDescriptor] = [
    OperationDescriptor(
        name="set_wallet",
        description=(
            "Set the wallet for this conversation from a private key. "
            "The key stays in memory until disconnect_wallet is called."
        ),
        args_model=SetWalletArgs,
        handler=executor._handle_set_wallet,
        category="write",
        usage="set_wallet <private_key> - Set your wallet",
    ),
    OperationDescriptor(
        name="disconnect_wallet",
        description="Disconnect and clear the wallet from memory.",
        args_model=NoArgs,
        handler=executor._handle_disconnect_wallet,
        category="write",
        usage="disconnect_wallet - Disconnect and clear your wallet",
    ),
    OperationDescriptor(
        name="get_wallet_address",
        description="Get the address of the current wallet.",
        args_model=NoArgs,
        handler=executor._handle_get_wallet_address,
        requires_session=True,
        usage="get_wallet_address - Get your wallet address",
    ),
    OperationDescriptor(
        name="get_balance",
        description=(
            "Get the ETH balance of the wallet and the balance of every "
            "token created in this process."
        ),
        args_model=NoArgs,
        handler=executor._handle_get_balance,
        requires_session=True,
        usage="get_balance - Check your ETH and token balances",
    ),
    OperationDescriptor(
        name="transfer_tokens",
        description="Send ETH from the wallet to an address.",
        args_model=TransferArgs,
        handler=executor._handle_transfer_tokens,
        requires_session=True,
        category="write",
        usage="transfer_tokens <to> <amount> - Transfer ETH",
    ),
    OperationDescriptor(
        name="sign_message",
        description="Sign a text message with the wallet (EIP-191).",
        args_model=SignMessageArgs,
        handler=executor._handle_sign_message,
        requires_session=True,
        category="write",
        usage="sign_message <message> - Sign a message",
    ),
    OperationDescriptor(
        name="get_transaction_history",
        description=(
            "Get recent on-chain activity of the wallet address "
            "(logs in the latest blocks)."
        ),
        args_model=HistoryArgs,
        handler=executor._handle_get_transaction_history,
        requires_session=True,
        usage="get_transaction_history [count] - Get recent transactions (default 5)",
    ),
    OperationDescriptor(
        name="get_gas_price",
        description="Get the current gas price of the network in gwei.",
        args_model=NoArgs,
        handler=executor._handle_get_gas_price,
        usage="get_gas_price - Get current gas price",
    ),
    OperationDescriptor(
        name="get_token_price",
        description="Get the USD price of a coin from CoinGecko.",
        args_model=TokenPriceArgs,
        handler=executor._handle_get_token_price,
        usage="get_token_price <token> - Get token price (e.g., ethereum)",
    ),
    OperationDescriptor(
        name="get_trending_tokens",
        description="Get the coins currently trending on CoinGecko.",
        args_model=NoArgs,
        handler=executor._handle_get_trending_tokens,
        usage="get_trending_tokens - Get trending tokens",
    ),
    OperationDescriptor(
        name="create_token",
        description=(
            "Deploy a new ERC-20 token with burn functionality. The whole "
            "supply is minted to the wallet and the symbol becomes usable "
            "in batch_mixed_transfer."
        ),
        args_model=CreateTokenArgs,
        handler=executor._handle_create_token,
        requires_session=True,
        category="write",
        usage="create_token <name> <symbol> <total_supply> - Create a new token",
    ),
    OperationDescriptor(
        name="get_faucet_tokens",
        description="Explain how to request testnet ETH for an address.",
        args_model=FaucetArgs,
        handler=executor._handle_get_faucet_tokens,
        usage="get_faucet_tokens <address> - Request testnet ETH from the faucet",
    ),
    OperationDescriptor(
        name="batch_mixed_transfer",
        description=(
            "Send several ETH and token transfers in one go, in order. "
            "Each transfer is reported separately; a failed transfer does "
            "not stop the ones after it."
        ),
        args_model=BatchTransferArgs,
        handler=executor._handle_batch_mixed_transfer,
        requires_session=True,
        category="write",
        usage=(
            "batch_mixed_transfer <type1> <to1> <amount1> [tokenName1] "
            "<type2> <to2> <amount2> [tokenName2] - Transfer ETH and tokens"
        ),
        prepare=_prepare_batch,
    ),
    OperationDescriptor(
        name="help",
        description="List all available commands.",
        args_model=NoArgs,
        handler=executor._handle_help,
        usage="help - Show this list",
    ),
]


def build_registry() -> OperationRegistry:
    """Register every operation and seal the registry."""
    registry = OperationRegistry()
    for descriptor in OPERATIONS:
        registry.register(descriptor)
    return registry.seal()


def get_tools_for_anthropic() -> list[dict]:
    """Return the catalog in Anthropic API format."""
    return [d.to_anthropic() for d in OPERATIONS]


def get_tool_metadata(name: str) -> OperationDescriptor | None:
    """Return the descriptor for name, or None if not in the catalog."""
    for d in OPERATIONS:
        if d.name == name:
            return d
    return None
