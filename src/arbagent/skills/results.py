"""Operation results: the explicit success / failure value every handler returns."""

from dataclasses import dataclass, field

STATUS_OK = "ok"
STATUS_ERROR = "error"

# Failure kinds
NO_SESSION = "no_session"
INVALID_ARGUMENTS = "invalid_arguments"
EXECUTION_FAILURE = "execution_failure"


@dataclass
class OperationResult:
    """Outcome of one operation.

    ``message`` is the human-readable text shown to the user (and fed back
    to the resolver).  ``data`` carries structured fields such as a tx hash
    or contract address.
    """

    status: str
    message: str
    error_type: str | None = None
    data: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    @classmethod
    def success(cls, message: str, **data) -> "OperationResult":
        return cls(status=STATUS_OK, message=message, data=data)

    @classmethod
    def failure(cls, error_type: str, message: str, **data) -> "OperationResult":
        return cls(status=STATUS_ERROR, message=message,
                   error_type=error_type, data=data)

    def to_dict(self) -> dict:
        """Render as the JSON-able dict sent back in a tool_result block."""
        if self.ok:
            return {"status": STATUS_OK, "message": self.message, **self.data}
        return {
            "status": STATUS_ERROR,
            "error_type": self.error_type,
            "error": self.message,
            **self.data,
        }
