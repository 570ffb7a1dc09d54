"""
Runtime settings read from the environment.

Environment Variables:
    STATETREE_DEBUG: Enable combine() validation and get_state() reentrancy
        checks (1/0, true/false, yes/no, on/off) - default: 1
    STATETREE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    STATETREE_LOG_FORMAT: Log format (json, text) - default: json
    STATETREE_EVENT_LOG: Default event log path for the CLI
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_EVENT_LOG = "./statetree-events.log"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _env_bool(key: str, default: bool) -> bool:
    val = os.getenv(key)
    if not val:
        return default
    val = val.strip().lower()
    if val in _TRUE:
        return True
    if val in _FALSE:
        return False
    return default


@dataclass(frozen=True)
class Settings:
    debug: bool = True
    log_level: str = "INFO"
    log_format: str = "json"
    event_log: str = DEFAULT_EVENT_LOG

    @staticmethod
    def from_env() -> "Settings":
        log_format = os.getenv("STATETREE_LOG_FORMAT", "json").strip().lower()
        if log_format not in ("json", "text"):
            log_format = "json"
        return Settings(
            debug=_env_bool("STATETREE_DEBUG", True),
            log_level=os.getenv("STATETREE_LOG_LEVEL", "INFO").strip().upper(),
            log_format=log_format,
            event_log=os.getenv("STATETREE_EVENT_LOG") or DEFAULT_EVENT_LOG,
        )


def debug_enabled(override: Optional[bool] = None) -> bool:
    """Resolve an explicit debug= argument against STATETREE_DEBUG."""
    if override is not None:
        return override
    return _env_bool("STATETREE_DEBUG", True)
