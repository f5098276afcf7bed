"""Logging setup for hosts that embed the results list engine."""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from results_list.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def configure_logging(settings: "Settings") -> None:
    """Configure root logging from settings. DEBUG forces the DEBUG level."""
    level = logging.DEBUG if settings.DEBUG else settings.log_level_value
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        force=True,
    )
