"""Operation executor: validates a proposed call and dispatches it to its handler.

``execute_tool`` never raises for operation-level problems.  Unknown names,
schema mismatches, a missing wallet and chain failures all come back as an
``OperationResult`` with ``status == "error"`` so the turn loop can feed
them to the resolver like any other result.
"""

from pydantic import ValidationError

from arbagent import prices
from arbagent.errors import (
    ExecutionFailure,
    InvalidArguments,
    NoSession,
)
from arbagent.logging_config import get_logger
from arbagent.skills.batch import execute_batch
from arbagent.skills.results import (
    EXECUTION_FAILURE,
    INVALID_ARGUMENTS,
    NO_SESSION,
    OperationResult,
)
from arbagent.units import (
    ether_to_wei,
    format_decimal,
    parse_positive_amount,
    scale_from_integer,
    scale_to_integer,
    wei_to_ether,
    wei_to_gwei,
)


def _format_validation_error(name: str, exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "arguments"
        msg = err.get("msg", "invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        parts.append(f"{loc}: {msg}")
    return f"Invalid arguments for {name}: " + "; ".join(parts)


def execute_tool(ctx, name: str, args: dict | None) -> OperationResult:
    """Execute an operation by name with the given arguments.

    Order of checks: known name, argument schema, operation-specific
    validation (``prepare``), wallet presence.  Only then is the handler
    invoked, under the session's execution lock.

    Args:
        ctx: The conversation's ``AgentContext``.
        name: Operation name proposed by the resolver.
        args: Proposed arguments (a JSON object).

    Returns:
        OperationResult, never raises for operation-level failures.
    """
    logger = get_logger()
    descriptor = ctx.registry.resolve(name)
    if descriptor is None:
        logger.warning("Resolver proposed unknown operation: %s", name)
        return OperationResult.failure(
            INVALID_ARGUMENTS,
            f"Unknown operation: {name}. Use help to list operations.")

    try:
        parsed = descriptor.args_model.model_validate(args or {})
        if descriptor.prepare is not None:
            parsed = descriptor.prepare(ctx, parsed)
    except ValidationError as e:
        message = _format_validation_error(name, e)
        logger.info("%s rejected: %s", name, message)
        return OperationResult.failure(INVALID_ARGUMENTS, message)
    except InvalidArguments as e:
        logger.info("%s rejected: %s", name, e)
        return OperationResult.failure(INVALID_ARGUMENTS, str(e))

    if descriptor.requires_session and ctx.session.get_identity() is None:
        return OperationResult.failure(NO_SESSION, str(NoSession()))

    if descriptor.category == "write":
        logger.info("Executing %s", name)
    else:
        logger.debug("Executing %s", name)

    with ctx.session.execution_lock:
        try:
            return descriptor.handler(ctx, parsed)
        except NoSession as e:
            return OperationResult.failure(NO_SESSION, str(e))
        except InvalidArguments as e:
            return OperationResult.failure(INVALID_ARGUMENTS, str(e))
        except ExecutionFailure as e:
            logger.warning("%s failed: %s", name, e)
            return OperationResult.failure(EXECUTION_FAILURE, str(e))
        except Exception as e:
            logger.exception("%s raised unexpectedly", name)
            return OperationResult.failure(
                EXECUTION_FAILURE, f"{name} failed: {str(e) or type(e).__name__}")


# ---------------------------------------------------------------------------
# Wallet handlers
# ---------------------------------------------------------------------------

def _handle_set_wallet(ctx, args) -> OperationResult:
    identity = ctx.session.set_credential(args.private_key)
    return OperationResult.success(
        f"Wallet set to address: {identity.address}",
        address=identity.address)


def _handle_disconnect_wallet(ctx, args) -> OperationResult:
    ctx.session.clear_credential()
    return OperationResult.success("Wallet disconnected successfully")


def _handle_get_wallet_address(ctx, args) -> OperationResult:
    address = ctx.session.require_account().address
    return OperationResult.success(f"Your wallet address is: {address}",
                                   address=address)


def _handle_get_balance(ctx, args) -> OperationResult:
    """Native balance plus every registered token's balance.

    A token whose balance cannot be read is listed as "Unable to fetch"
    instead of failing the whole operation.
    """
    address = ctx.session.require_account().address
    wei = ctx.chain.get_balance(address)
    ether = format_decimal(wei_to_ether(wei))
    lines = [f"ETH Balance: {ether} ETH"]
    tokens = {}
    for symbol, token_address in ctx.assets.items():
        try:
            raw = ctx.chain.token_balance(token_address, address)
        except ExecutionFailure as e:
            get_logger().warning("Error fetching balance for %s: %s", symbol, e)
            lines.append(f"{symbol} Balance: Unable to fetch")
            tokens[symbol] = None
            continue
        amount = format_decimal(scale_from_integer(raw, ctx.token_decimals))
        lines.append(f"{symbol} Balance: {amount} {symbol}")
        tokens[symbol] = amount
    return OperationResult.success("\n".join(lines), address=address,
                                   eth=ether, tokens=tokens)


def _handle_transfer_tokens(ctx, args) -> OperationResult:
    account = ctx.session.require_account()
    amount = parse_positive_amount(args.amount)
    tx = ctx.chain.send_native(account, args.to, ether_to_wei(amount))
    url = ctx.chain.tx_url(tx.tx_hash)
    return OperationResult.success(
        f"Transferred {format_decimal(amount)} ETH to {args.to}. Tx: {url}",
        tx_hash=tx.tx_hash, explorer_url=url)


def _handle_sign_message(ctx, args) -> OperationResult:
    account = ctx.session.require_account()
    signature = ctx.chain.sign_message(account, args.message)
    return OperationResult.success(f"Message signed: {signature}",
                                   signature=signature)


def _handle_get_transaction_history(ctx, args) -> OperationResult:
    """Logs emitted by the wallet address within the recent block window."""
    address = ctx.session.require_account().address
    latest = ctx.chain.get_block_number()
    from_block = max(latest - (ctx.history_blocks - 1), 0)
    logs = ctx.chain.get_logs(address, from_block, latest)[:args.count]
    if not logs:
        return OperationResult.success(
            f"No transactions found in the last {ctx.history_blocks} blocks.",
            transactions=[])
    transactions = [
        {
            "block_number": entry["block_number"],
            "explorer_url": ctx.chain.tx_url(entry["tx_hash"]),
        }
        for entry in logs
    ]
    lines = [f"Recent {len(transactions)} transactions:"]
    for tx in transactions:
        lines.append(f"- Block {tx['block_number']}: {tx['explorer_url']}")
    return OperationResult.success("\n".join(lines), transactions=transactions)


# ---------------------------------------------------------------------------
# Network & market handlers
# ---------------------------------------------------------------------------

def _handle_get_gas_price(ctx, args) -> OperationResult:
    wei = ctx.chain.get_gas_price()
    gwei = format_decimal(wei_to_gwei(wei))
    return OperationResult.success(f"Current gas price: {gwei} gwei",
                                   gas_price_wei=wei)


def _handle_get_token_price(ctx, args) -> OperationResult:
    price = prices.get_usd_price(args.token)
    if price is None:
        return OperationResult.success(f"Price not found for {args.token}",
                                       price_usd=None)
    return OperationResult.success(f"Price of {args.token}: ${price} USD",
                                   price_usd=price)


def _handle_get_trending_tokens(ctx, args) -> OperationResult:
    coins = prices.get_trending()
    if not coins:
        return OperationResult.success("No trending tokens right now.",
                                       coins=[])
    lines = ["Trending tokens on CoinGecko:"]
    for i, coin in enumerate(coins, start=1):
        rank = coin.get("market_cap_rank")
        rank_text = f" (market cap rank #{rank})" if rank else ""
        lines.append(f"{i}. {coin['name']} ({coin['symbol']}){rank_text}")
    return OperationResult.success("\n".join(lines), coins=coins)


def _handle_get_faucet_tokens(ctx, args) -> OperationResult:
    return OperationResult.success(
        f"To get testnet ETH for {args.address}, visit {ctx.faucet_url}, "
        f"paste your address ({args.address}), and follow the instructions "
        "to claim tokens.",
        faucet_url=ctx.faucet_url)


# ---------------------------------------------------------------------------
# Token handlers
# ---------------------------------------------------------------------------

def _handle_create_token(ctx, args) -> OperationResult:
    """Deploy the bundled token and register its symbol."""
    account = ctx.session.require_account()
    try:
        supply = scale_to_integer(parse_positive_amount(args.total_supply),
                                  ctx.token_decimals)
    except ValueError as e:
        raise InvalidArguments(str(e)) from e
    tx = ctx.chain.deploy_token(account, args.name, args.symbol, supply)
    ctx.assets.register(args.symbol, tx.contract_address)
    url = ctx.chain.address_url(tx.contract_address)
    return OperationResult.success(
        f"Token {args.name} ({args.symbol}) created successfully at {url}",
        contract_address=tx.contract_address, tx_hash=tx.tx_hash,
        explorer_url=url)


def _handle_batch_mixed_transfer(ctx, items) -> OperationResult:
    """Run a pre-validated batch (see ``skills.batch``)."""
    account = ctx.session.require_account()
    record = execute_batch(ctx.chain, account, items)
    get_logger().info("Batch finished: %d succeeded, %d failed",
                      record.succeeded, record.failed)
    return OperationResult.success(record.report(), **record.to_dict())


def _handle_help(ctx, args) -> OperationResult:
    lines = [
        d.usage or f"{d.name} - {d.description}"
        for d in ctx.registry.list_all()
    ]
    return OperationResult.success("Available commands:\n" + "\n".join(lines),
                                   operations=ctx.registry.names())

