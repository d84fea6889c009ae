"""
Logging setup shared by the API, the CLI and the report scripts.

Lines look like the rest of our tooling output:  [issuance.controller] message
"""

from __future__ import annotations
import logging

LOG_FORMAT = "[%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)
