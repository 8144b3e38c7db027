import logging
from typing import Any, Dict

from src.app.services.event_recorder import IEventRecorder

SENSITIVE_FIELDS = frozenset(
    {"password", "new_password", "code", "token", "reset_token", "temp_token", "totp_secret"}
)


def mask_sensitive(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: ("******" if k in SENSITIVE_FIELDS and v else v) for k, v in fields.items()}


class LoggingEventRecorder(IEventRecorder):
    """Writes events to the standard logging tree with secrets masked.

    Events named ``*_failed`` are logged at WARNING, everything else at INFO.
    """

    def __init__(self, logger_name: str = "authenticator.events"):
        self.logger = logging.getLogger(logger_name)

    def record(self, event: str, **fields: Any) -> None:
        level = logging.WARNING if event.endswith("_failed") else logging.INFO
        self.logger.log(level, f"{event} {mask_sensitive(fields)}")
