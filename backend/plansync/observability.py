import logging
from enum import Enum
from typing import Optional

log = logging.getLogger("plansync")

class Severity(str, Enum):
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"
    fatal = "fatal"

    @property
    def level(self) -> int:
        return _LEVELS[self]

_LEVELS = {
    Severity.debug: logging.DEBUG,
    Severity.info: logging.INFO,
    Severity.warning: logging.WARNING,
    Severity.error: logging.ERROR,
    Severity.fatal: logging.CRITICAL,
}

class ObservabilitySink:
    """Where background failures and recoverable oddities get reported."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.log = logger or log

    def log_warning(self, message: str) -> None:
        self.log.warning(message)

    def log_error(self, error: BaseException, severity: Severity = Severity.error) -> None:
        # Tracebacks only for real errors; info-level reports are expected failures.
        exc_info = error if severity.level >= logging.ERROR else None
        self.log.log(severity.level, "%s: %s", type(error).__name__, error, exc_info=exc_info)

def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
