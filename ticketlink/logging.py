"""Logging from config and env.

Levels (inclusive):
- ERROR: failed runs only
- WARNING: skipped best-effort calls and ERROR
- INFO: pipeline progress, WARNING, and ERROR
- DEBUG: request details from ticketlink, requests and urllib3

Configure via config.yaml (logging.level, logging.format) or env (LOGGING_LEVEL, LOGGING_FORMAT).
Inside GitHub Actions, warnings and errors are also printed as workflow
annotations so they show up on the run summary.
"""

import logging
import os
import sys

from ticketlink.config import LoggingConfig

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# HTTP client loggers; their connection chatter only shows at DEBUG
NOISY_LOGGERS = ("urllib3", "requests")


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to INFO if unknown.
    """
    return LEVELS.get(level.upper().strip(), logging.INFO)


def _escape_annotation(text: str) -> str:
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionsAnnotationHandler(logging.StreamHandler):
    """Writes WARNING and ERROR records as ::warning:: / ::error:: commands."""

    def __init__(self, stream=None) -> None:
        super().__init__(stream if stream is not None else sys.stdout)
        self.setLevel(logging.WARNING)

    def format(self, record: logging.LogRecord) -> str:
        command = "error" if record.levelno >= logging.ERROR else "warning"
        return f"::{command}::{_escape_annotation(record.getMessage())}"


def in_github_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS", "").lower() == "true"


class TicketLinkLogging:
    """Configures root logger from LoggingConfig (YAML + env LOGGING_*).

    Built without a config (e.g. when the config itself failed to load) it
    uses INFO and the default format.
    """

    def __init__(self, config: LoggingConfig | None = None, annotations: bool | None = None) -> None:
        config = config or LoggingConfig(level=DEFAULT_LEVEL, format=DEFAULT_FORMAT)
        self._level = _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT
        self._annotations = in_github_actions() if annotations is None else annotations

    def setup(self) -> None:
        """Apply level and format to the root logger."""
        logging.basicConfig(
            level=self._level,
            format=self._format,
            force=True,
        )
        noisy_level = logging.DEBUG if self._level <= logging.DEBUG else logging.WARNING
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(noisy_level)
        if self._annotations:
            logging.root.addHandler(ActionsAnnotationHandler())
