"""
Logging setup.

Every module obtains its logger through setup_logger(__name__). Records
propagate to the root logger; the application entry point installs the
console handler once with setup_logging().
"""

import logging
import sys

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str) -> logging.Logger:
    """Get a module logger under the autoschedule namespace."""
    if name == "autoschedule" or name.startswith("autoschedule."):
        return logging.getLogger(name)
    return logging.getLogger(f"autoschedule.{name}")


def setup_logging(level: str = "INFO") -> None:
    """
    Configure application logging.

    Sets the autoschedule level and, when the host process has not configured
    the root logger yet, attaches a stderr handler to it. Handlers installed
    by the host (uvicorn, pytest) are left untouched.
    """
    logging.getLogger("autoschedule").setLevel(level.upper())

    root = logging.getLogger()
    if root.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT))
    root.addHandler(handler)
