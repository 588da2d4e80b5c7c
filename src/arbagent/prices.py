"""arbagent.prices: CoinGecko price and trending lookups.

Pass-through external reads.  Network and HTTP errors surface as
``ExecutionFailure``; a token CoinGecko does not know returns None.
"""

import requests

from arbagent.config import COINGECKO_API_URL, get_coingecko_api_key, log
from arbagent.errors import ExecutionFailure
from arbagent.http_utils import get_with_retry

TRENDING_LIMIT = 7


def _headers() -> dict:
    api_key = get_coingecko_api_key()
    return {"x-cg-api-key": api_key} if api_key else {}


def _get_json(path: str, params: dict | None = None):
    url = f"{COINGECKO_API_URL}{path}"
    try:
        resp = get_with_retry(url, params=params, headers=_headers())
    except requests.RequestException as e:
        raise ExecutionFailure(f"CoinGecko request failed: {e}") from e
    if resp.status_code != 200:
        log(f"CoinGecko {path} returned HTTP {resp.status_code}: {resp.text[:200]}")
        raise ExecutionFailure(f"CoinGecko returned HTTP {resp.status_code}")
    try:
        return resp.json()
    except ValueError as e:
        raise ExecutionFailure("CoinGecko returned invalid JSON") from e


def get_usd_price(token: str) -> float | None:
    """Return the USD price of a CoinGecko coin id, or None if unknown.

    Args:
        token: CoinGecko coin id, e.g. ``ethereum`` or ``arbitrum``.
            Case-insensitive.
    """
    coin_id = token.strip().lower()
    data = _get_json("/simple/price",
                     params={"ids": coin_id, "vs_currencies": "usd"})
    price = (data.get(coin_id) or {}).get("usd")
    if price is None:
        return None
    return float(price)


def get_trending(limit: int = TRENDING_LIMIT) -> list[dict]:
    """Return the top trending coins as ``{name, symbol, market_cap_rank}``."""
    data = _get_json("/search/trending")
    coins = []
    for entry in data.get("coins", [])[:limit]:
        item = entry.get("item", {})
        coins.append({
            "name": item.get("name", ""),
            "symbol": item.get("symbol", ""),
            "market_cap_rank": item.get("market_cap_rank"),
        })
    return coins
