"""arbagent: natural-language agent for Arbitrum Sepolia wallets and tokens."""

__version__ = "0.3.0"
