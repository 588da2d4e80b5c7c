"""Exception hierarchy for arbagent.

Operation-level errors (``NoSession``, ``InvalidArguments``,
``ExecutionFailure``) are raised inside handlers and converted into
failure results by the executor; they never escape a turn.
``RegistryError`` is a startup-time programming error.
``ResolverFailure`` ends the current turn.
"""


class ArbAgentError(Exception):
    """Base class for all arbagent errors."""


class NoSession(ArbAgentError):
    """A signing operation was attempted without a wallet in the session."""

    def __init__(self, message: str = ""):
        super().__init__(
            message or "No wallet set. Please set a wallet with your private key first."
        )


class InvalidArguments(ArbAgentError):
    """Arguments failed schema or domain validation. No chain call was made."""


class ExecutionFailure(ArbAgentError):
    """A chain call (or external read) was attempted and failed."""


class InvalidCredential(InvalidArguments):
    """Key material could not be parsed into a signing key."""


class RegistryError(ArbAgentError):
    """Operation catalog misconfiguration."""


class DuplicateOperation(RegistryError):
    """An operation name was registered twice."""


class UnknownOperation(RegistryError):
    """An operation name is not in the catalog."""


class ResolverFailure(ArbAgentError):
    """The intent resolver errored or returned an unusable response."""


class APIKeyMissingError(ArbAgentError):
    """Raised when a required API key is not configured."""
