"""Named asset registry: user-chosen token symbols -> contract addresses.

Populated only by ``create_token``.  One instance is shared by every
conversation in the process, so all access goes through a lock.  Entries
are never removed; re-registering a symbol replaces the address (last
writer wins).
"""

import threading

from arbagent.logging_config import get_logger


class AssetRegistry:
    """Thread-safe in-memory map of token symbol to contract address."""

    def __init__(self):
        self._assets: dict[str, str] = {}
        self._lock = threading.Lock()

    def register(self, name: str, address: str) -> None:
        """Record (or replace) the contract address for a symbol."""
        with self._lock:
            previous = self._assets.get(name)
            self._assets[name] = address
        if previous and previous != address:
            get_logger().info("Asset %s re-registered: %s -> %s",
                              name, previous, address)
        else:
            get_logger().info("Asset %s registered at %s", name, address)

    def resolve(self, name: str) -> str | None:
        """Return the contract address for a symbol, or None if unknown."""
        with self._lock:
            return self._assets.get(name)

    def items(self) -> list[tuple[str, str]]:
        """Return a snapshot of (symbol, address) pairs in insertion order."""
        with self._lock:
            return list(self._assets.items())

    def __contains__(self, name: str) -> bool:
        return self.resolve(name) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._assets)
