"""Pure unit-conversion helpers for EVM amounts.

No RPC calls, no side effects, just arithmetic on ``Decimal`` and ``int``.

Unit conventions
----------------
- Native amounts are written in **ether** and sent in **wei**
  (``1 ether = 10^18 wei``).
- Gas prices are reported in **gwei** (``1 gwei = 10^9 wei``).
- Token amounts are written in display units and sent as raw integers:
  ``raw = amount * 10^token_decimals``.  The bundled token has 0 decimals,
  so by default the raw value equals the written amount.
"""

from decimal import Decimal, DecimalException

WEI_PER_ETHER: int = 10 ** 18
WEI_PER_GWEI: int = 10 ** 9

# Largest value an EVM uint256 can hold
MAX_UINT256: int = 2 ** 256 - 1
_MAX_UINT256_DIGITS: int = len(str(MAX_UINT256))


def parse_positive_amount(text) -> Decimal:
    """Parse a user-supplied amount into a positive finite Decimal.

    Raises:
        ValueError: If the text is not a number, not finite, or not > 0.
    """
    try:
        value = Decimal(str(text).strip())
    except (DecimalException, ValueError):
        raise ValueError(f"Invalid amount: {text}") from None
    if not value.is_finite() or value <= 0:
        raise ValueError(f"Invalid amount: {text}")
    return value


def scale_to_integer(amount: Decimal, decimals: int) -> int:
    """Scale a display amount to raw integer units.

    Scaling is exact integer arithmetic on the digits, never rounded to a
    context precision.

    Raises:
        ValueError: If the amount has more precision than ``decimals``, or
            the result does not fit in a uint256.
    """
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {amount}")
    sign, digits, exponent = amount.as_tuple()
    digits = list(digits)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    shift = exponent + decimals
    if shift < 0:
        raise ValueError(
            f"Amount {amount} has more than {decimals} decimal places"
        )
    if len(digits) + shift > _MAX_UINT256_DIGITS:
        raise ValueError(f"Amount {amount} is too large")
    raw = int("".join(map(str, digits))) * 10 ** shift
    if raw > MAX_UINT256:
        raise ValueError(f"Amount {amount} is too large")
    return -raw if sign else raw


def ether_to_wei(amount: Decimal) -> int:
    """Convert ether to wei. Example: Decimal("0.01") -> 10_000_000_000_000_000."""
    return scale_to_integer(amount, 18)


def scale_from_integer(raw: int, decimals: int) -> Decimal:
    """Exact inverse of :func:`scale_to_integer`. Example: (150, 2) -> 1.50."""
    sign = 1 if raw < 0 else 0
    digits = tuple(int(d) for d in str(abs(raw)))
    return Decimal((sign, digits, -decimals))


def wei_to_ether(wei: int) -> Decimal:
    """Convert wei to ether."""
    return scale_from_integer(wei, 18)


def wei_to_gwei(wei: int) -> Decimal:
    """Convert wei to gwei."""
    return scale_from_integer(wei, 9)


def format_decimal(value: Decimal) -> str:
    """Render a Decimal without exponent or trailing zeros.

    Example: Decimal("1.500") -> "1.5", Decimal("1E+2") -> "100".
    """
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"
