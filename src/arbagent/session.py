"""Wallet session: at most one unlocked signing key per conversation.

A ``WalletSession`` is created empty when a conversation starts and is
mutated only by ``set_credential`` / ``clear_credential``.  Concurrent
conversations each own their own instance; nothing here is global.
"""

import threading
from dataclasses import dataclass

from eth_account import Account
from eth_account.signers.local import LocalAccount

from arbagent.errors import InvalidCredential, NoSession
from arbagent.logging_config import get_logger


@dataclass(frozen=True)
class Identity:
    """Public identity derived from the session credential."""

    address: str


class WalletSession:
    """Holds the signing credential for one conversation.

    ``execution_lock`` serialises operations within the session so two
    batches can never read the same base nonce.  Credential replacement is
    last-write-wins.
    """

    def __init__(self):
        self._account: LocalAccount | None = None
        self.execution_lock = threading.RLock()

    def set_credential(self, material: str) -> Identity:
        """Unlock a signing key from private-key material.

        Replaces any existing credential.

        Raises:
            InvalidCredential: If the material is not a valid private key.
        """
        if not isinstance(material, str) or not material.strip():
            raise InvalidCredential("Private key is empty.")
        key = material.strip()
        try:
            account = Account.from_key(key)
        except Exception as e:
            # Never echo the key material back.
            raise InvalidCredential(
                f"Invalid private key ({type(e).__name__})."
            ) from None
        self._account = account
        get_logger().info("Wallet set to address: %s", account.address)
        return Identity(address=account.address)

    def clear_credential(self) -> None:
        """Forget the credential. Safe to call when nothing is set."""
        if self._account is not None:
            get_logger().info("Wallet cleared from memory (%s)", self._account.address)
        self._account = None

    def get_identity(self) -> Identity | None:
        """Return the current identity, or None when no wallet is set."""
        if self._account is None:
            return None
        return Identity(address=self._account.address)

    @property
    def has_credential(self) -> bool:
        return self._account is not None

    def require_account(self) -> LocalAccount:
        """Return the signing account.

        Raises:
            NoSession: If no wallet is set.
        """
        if self._account is None:
            raise NoSession()
        return self._account
