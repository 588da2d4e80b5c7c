"""File-only logging for arbagent. Thread-safe by design.

Security properties:
- Log file created with 0600 (owner read/write only)
- Log directory created with 0700 (owner access only)
- Default level: INFO (debug detail requires --verbose or ARBAGENT_VERBOSE=1)
- Private keys are NEVER logged (scrubbed by filter)

In ``chat`` and ``ask`` mode (one process = one session), ``get_logger()``
returns the global logger which writes to a single ``*-arbagent.log``.

In ``serve`` mode (one process = many sessions), each request calls
``create_session_logger`` + ``set_session_logger`` so that ``get_logger()``
returns a per-session file logger on the current thread.  The global logger
is used for server-level events (startup, requests).
"""

import logging
import os
import re
import threading
from datetime import datetime, timezone
from pathlib import Path

# Key material next to a field name or a set_wallet command. Bare 64-hex
# strings are left alone because transaction hashes share that shape.
_PRIVATE_KEY_PATTERN = re.compile(
    r'(?i)((?:"?private_?key"?\s*[:=]\s*"?)|(?:set_?wallet\s+))'
    r'(?:0x)?[0-9a-f]{64}'
)

_MAX_SESSION_LOGS = 100

_session_stamp: str | None = None

# Thread-local storage for per-session loggers (used in ``serve`` mode).
_thread_local = threading.local()


def scrub_secrets(text: str) -> str:
    """Replace private-key material in text with a redaction marker."""
    return _PRIVATE_KEY_PATTERN.sub(r"\1[KEY-REDACTED]", text)


def get_session_stamp() -> str:
    """Return the session timestamp (YYYYMMDD-HHMMSS), generated once."""
    global _session_stamp
    if _session_stamp is None:
        _session_stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return _session_stamp


def _reset_session_stamp() -> None:
    """Reset the cached session stamp (for tests only)."""
    global _session_stamp
    _session_stamp = None


class _KeyScrubFilter(logging.Filter):
    """Safety net: redact any private key that appears in a log message."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Scrub key material from the fully formatted message."""
        # The key and its label may sit in different %-args
        message = record.getMessage()
        scrubbed = scrub_secrets(message)
        if scrubbed != message:
            record.msg = scrubbed
            record.args = None
        return True


def _cleanup_session_logs(log_dir: Path) -> None:
    """Delete oldest session logs beyond _MAX_SESSION_LOGS."""
    files = sorted(log_dir.glob("*-arbagent.log"))
    for old in files[:-_MAX_SESSION_LOGS]:
        old.unlink()


def get_log_dir(base_dir: str | Path | None = None) -> Path:
    """Return (and create) the ``.logs/`` directory of the project root."""
    root = Path(base_dir) if base_dir else Path(
        os.environ.get("ARBAGENT_ROOT", ".")
    )
    log_dir = root / ".logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    os.chmod(log_dir, 0o700)
    return log_dir


def _make_file_handler(log_path: Path) -> logging.StreamHandler:
    """Create a file handler with 0600 perms, key scrubbing, and formatter."""
    fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
    fh = logging.StreamHandler(os.fdopen(fd, "w"))
    if os.environ.get("ARBAGENT_VERBOSE", "").strip() in ("1", "true", "yes"):
        fh.setLevel(logging.DEBUG)
    else:
        fh.setLevel(logging.INFO)
    fh.setFormatter(
        logging.Formatter("%(asctime)s %(threadName)s %(levelname)s %(message)s")
    )
    fh.addFilter(_KeyScrubFilter())
    return fh


# ---- Global logger (one per process) --------------------------------------

def _get_global_logger() -> logging.Logger:
    """Return the global arbagent logger (file-only, no StreamHandler)."""
    logger = logging.getLogger("arbagent")
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)

    log_dir = get_log_dir()
    log_path = log_dir / f"{get_session_stamp()}-arbagent.log"
    logger.addHandler(_make_file_handler(log_path))

    _cleanup_session_logs(log_dir)

    return logger


# ---- Thread-local session logger (for ``serve`` mode) ---------------------

def set_session_logger(logger: logging.Logger) -> None:
    """Set a per-session logger for the current thread."""
    _thread_local.logger = logger


def clear_session_logger() -> None:
    """Remove the per-session logger from the current thread."""
    logger = getattr(_thread_local, "logger", None)
    _thread_local.logger = None
    if logger is not None and logger is not logging.getLogger("arbagent"):
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


def create_session_logger(
    stamp: str,
    base_dir: str | Path | None = None,
    suffix: str = "-arbagent.log",
) -> logging.Logger:
    """Create a new logger that writes to ``{stamp}{suffix}``.

    Each call creates an independent ``logging.Logger`` with its own file
    handler, safe to use from any thread.
    """
    log_dir = get_log_dir(base_dir)
    log_path = log_dir / f"{stamp}{suffix}"

    logger = logging.getLogger(f"arbagent.session.{stamp}")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.addHandler(_make_file_handler(log_path))

    _cleanup_session_logs(log_dir)
    return logger


# ---- Public API ------------------------------------------------------------

def get_logger() -> logging.Logger:
    """Return the session logger (thread-local) or the global fallback."""
    session_logger = getattr(_thread_local, "logger", None)
    if session_logger is not None:
        return session_logger
    return _get_global_logger()


def set_debug(enabled: bool) -> None:
    """Switch file handler between DEBUG and INFO level."""
    logger = get_logger()
    level = logging.DEBUG if enabled else logging.INFO
    for handler in logger.handlers:
        handler.setLevel(level)
