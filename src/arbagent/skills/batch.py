"""Batch transfer executor: mixed native and token transfers in one call.

Input is a single whitespace-separated string::

    ETH <recipient> <amount> TOKEN <recipient> <amount> <symbol> ...

``ETH`` items move native currency (amount in ether); ``TOKEN`` items call
``transfer`` on a token registered by ``create_token``.  Markers are
case-insensitive.

The whole string is validated before any chain call.  Execution reads the
sender's nonce once, then submits item ``i`` at ``base_nonce + i`` and waits
for it before moving on.  A failing item is recorded and the batch
continues with the next nonce.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from arbagent.assets import AssetRegistry
from arbagent.chain import is_valid_address
from arbagent.errors import InvalidArguments
from arbagent.logging_config import get_logger
from arbagent.units import (
    ether_to_wei,
    format_decimal,
    parse_positive_amount,
    scale_to_integer,
)

NATIVE = "NATIVE"
ASSET = "ASSET"

_MARKERS = {"ETH": NATIVE, "TOKEN": ASSET}
_WIDTH = {NATIVE: 3, ASSET: 4}

USAGE = (
    "Use: batch_mixed_transfer <type1> <to1> <amount1> [tokenName1] "
    "<type2> <to2> <amount2> [tokenName2] ..."
)


@dataclass(frozen=True)
class TransferItem:
    """One validated transfer, ready to submit."""

    kind: str
    recipient: str
    amount: Decimal
    raw_amount: int
    asset_name: str | None = None
    asset_address: str | None = None

    @property
    def unit(self) -> str:
        return "ETH" if self.kind == NATIVE else self.asset_name


@dataclass(frozen=True)
class ItemOutcome:
    """Result of submitting one item: a tx on success, a reason on failure."""

    item: TransferItem
    nonce: int
    tx_hash: str | None = None
    tx_url: str | None = None
    reason: str | None = None

    @property
    def success(self) -> bool:
        return self.reason is None


@dataclass
class BatchRecord:
    """Ordered outcomes of one batch, one per input item."""

    base_nonce: int
    outcomes: list[ItemOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.succeeded

    def report(self) -> str:
        """Enumerated, human-readable summary of every item."""
        entries = []
        for index, outcome in enumerate(self.outcomes, start=1):
            item = outcome.item
            lines = [
                f"{index}. **{item.unit} Transfer to {item.recipient}**:",
                f"   - Amount: {format_decimal(item.amount)} {item.unit}",
            ]
            if outcome.success:
                lines.append("   - Status: Successful")
                lines.append(
                    f"   - Transaction Link: [View Transaction]({outcome.tx_url})")
            else:
                lines.append("   - Status: Failed")
                lines.append(f"   - Error: {outcome.reason}")
            entries.append("\n".join(lines))
        return (
            f"The batch mixed transfer completed with {len(self.outcomes)} "
            f"operations:\n\n" + "\n\n".join(entries)
        )

    def to_dict(self) -> dict:
        return {
            "base_nonce": self.base_nonce,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "items": [
                {
                    "type": o.item.unit,
                    "recipient": o.item.recipient,
                    "amount": format_decimal(o.item.amount),
                    "nonce": o.nonce,
                    "status": "success" if o.success else "failure",
                    **({"tx_hash": o.tx_hash} if o.success else {"error": o.reason}),
                }
                for o in self.outcomes
            ],
        }


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _check_item(kind: str, recipient: str, amount_text: str,
                asset_name: str | None, assets: AssetRegistry,
                token_decimals: int) -> tuple[TransferItem | None, list[str]]:
    problems = []
    if not is_valid_address(recipient):
        problems.append(f"invalid address {recipient}")

    amount = None
    try:
        amount = parse_positive_amount(amount_text)
    except ValueError:
        problems.append(f"invalid amount {amount_text}")

    asset_address = None
    if kind == ASSET:
        asset_address = assets.resolve(asset_name)
        if asset_address is None:
            problems.append(
                f"token {asset_name} not found. "
                "Please create it first using create_token")

    raw_amount = None
    if amount is not None:
        try:
            if kind == NATIVE:
                raw_amount = ether_to_wei(amount)
            else:
                raw_amount = scale_to_integer(amount, token_decimals)
        except ValueError as e:
            problems.append(str(e))

    if problems:
        return None, problems
    return TransferItem(
        kind=kind,
        recipient=recipient,
        amount=amount,
        raw_amount=raw_amount,
        asset_name=asset_name,
        asset_address=asset_address,
    ), []


def parse_batch(text: str, assets: AssetRegistry,
                token_decimals: int = 0) -> list[TransferItem]:
    """Tokenize and validate a batch string.

    Every item is checked; all problems are reported together by position.
    An unknown marker or a truncated item stops the walk, since the
    remaining tokens can no longer be attributed to items.

    Raises:
        InvalidArguments: If anything is wrong.  No chain call is made.
    """
    tokens = (text or "").split()
    if not tokens:
        raise InvalidArguments(f"Invalid format. {USAGE}")

    items: list[TransferItem] = []
    errors: list[str] = []
    i = 0
    position = 0
    while i < len(tokens):
        position += 1
        marker = tokens[i]
        kind = _MARKERS.get(marker.upper())
        if kind is None:
            errors.append(
                f"Item {position}: invalid type '{marker}'. Use 'ETH' or 'TOKEN'")
            break

        fields = tokens[i + 1:i + _WIDTH[kind]]
        if kind == ASSET and len(fields) == 3 and fields[2].upper() in _MARKERS:
            # "TOKEN <to> <amount> ETH ..." : the symbol was left out
            errors.append(
                f"Item {position}: missing token name for TOKEN transfer")
            i += 3
            continue
        if len(fields) < _WIDTH[kind] - 1:
            if kind == ASSET and len(fields) == 2:
                errors.append(
                    f"Item {position}: missing token name for TOKEN transfer")
            else:
                errors.append(
                    f"Item {position}: incomplete {marker.upper()} transfer")
            break
        i += _WIDTH[kind]

        recipient, amount_text = fields[0], fields[1]
        asset_name = fields[2] if kind == ASSET else None
        item, problems = _check_item(kind, recipient, amount_text, asset_name,
                                     assets, token_decimals)
        if problems:
            errors.append(
                f"Item {position} ({marker.upper()} to {recipient}): "
                + "; ".join(problems))
        else:
            items.append(item)

    if errors:
        raise InvalidArguments(
            "Batch rejected, no transfers were sent:\n"
            + "\n".join(f"- {e}" for e in errors)
            + f"\n{USAGE}")
    return items


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

def execute_batch(chain, account, items: list[TransferItem]) -> BatchRecord:
    """Submit validated items in order, one nonce each.

    The base nonce is read once.  Item ``i`` is always sent at
    ``base_nonce + i``, whether or not earlier items succeeded.

    Args:
        chain: A ``ChainClient`` (or compatible fake).
        account: The signing account from the session.
        items: Output of ``parse_batch``.

    Returns:
        BatchRecord with exactly one outcome per item, in input order.
    """
    logger = get_logger()
    base_nonce = chain.get_nonce(account.address)
    record = BatchRecord(base_nonce=base_nonce)
    logger.info("Batch of %d transfers from %s, base nonce %d",
                len(items), account.address, base_nonce)

    for index, item in enumerate(items):
        nonce = base_nonce + index
        try:
            if item.kind == NATIVE:
                tx = chain.send_native(account, item.recipient,
                                       item.raw_amount, nonce=nonce)
            else:
                tx = chain.send_token_transfer(account, item.asset_address,
                                               item.recipient, item.raw_amount,
                                               nonce=nonce)
        except Exception as e:
            reason = str(e) or type(e).__name__
            logger.warning("Batch item %d (%s to %s, nonce %d) failed: %s",
                           index + 1, item.unit, item.recipient, nonce, reason)
            record.outcomes.append(
                ItemOutcome(item=item, nonce=nonce, reason=reason))
            continue

        logger.info("Batch item %d (%s %s to %s, nonce %d): %s",
                    index + 1, format_decimal(item.amount), item.unit,
                    item.recipient, nonce, tx.tx_hash)
        record.outcomes.append(ItemOutcome(
            item=item,
            nonce=nonce,
            tx_hash=tx.tx_hash,
            tx_url=chain.tx_url(tx.tx_hash),
        ))

    return record
