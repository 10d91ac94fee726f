"""Logging setup for spendwise.

Log records go to stderr through rich's RichHandler so they do not mix with
the tables printed on stdout.
"""

import logging
import logging.config
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


def make_rich_handler(**kwargs: Any) -> logging.Handler:
    """Build a RichHandler writing to stderr."""
    return RichHandler(console=Console(stderr=True), **kwargs)


def build_logging_config(level: str = "WARNING") -> dict[str, Any]:
    """Build a dictConfig mapping routing the spendwise loggers to rich."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(name)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "default": {
                "()": "spendwise.log.make_rich_handler",
                "formatter": "default",
                "level": "DEBUG",
                "rich_tracebacks": True,
                "show_time": True,
                "show_path": False,
                "log_time_format": "%Y-%m-%d %H:%M:%S",
            },
        },
        "loggers": {
            "spendwise": {
                "handlers": ["default"],
                "level": level,
                "propagate": False,
            },
            "urllib3": {
                "handlers": ["default"],
                "level": "WARNING",
                "propagate": False,
            },
        },
    }


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for a CLI run.

    Args:
        verbose: Log at DEBUG instead of WARNING.
    """
    logging.config.dictConfig(build_logging_config("DEBUG" if verbose else "WARNING"))
