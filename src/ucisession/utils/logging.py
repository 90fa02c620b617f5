"""Logging configuration utilities.

Every line exchanged with an engine is logged at TRACE through a logger
bound with ``TRAFFIC_KEY``. ``setup_logging(trace_traffic=True)`` shows
that traffic without lowering the level for everything else.
"""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger

TRAFFIC_KEY = "uci_traffic"


def traffic_filter(level: str, trace_traffic: bool) -> Callable[[dict[str, Any]], bool]:
    """Build a loguru filter for engine traffic.

    Args:
        level: Minimum level for ordinary records.
        trace_traffic: Whether ``UCI send`` / ``UCI recv`` records pass
            regardless of ``level``.
    """
    min_level = logger.level(level).no

    def accept(record: dict[str, Any]) -> bool:
        if record["extra"].get(TRAFFIC_KEY):
            return trace_traffic
        return record["level"].no >= min_level

    return accept


def setup_logging(
    level: str = "INFO",
    *,
    trace_traffic: bool = False,
    log_file: str | Path | None = None,
) -> None:
    """Configure loguru for engine sessions.

    Args:
        level: Minimum level for everything except engine traffic.
        trace_traffic: Log every line sent to and received from engines.
        log_file: Optional file that receives the same records as stderr.
    """
    logger.remove()
    accept = traffic_filter(level, trace_traffic)

    logger.add(
        sys.stderr,
        level="TRACE",
        filter=accept,
        format="<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        colorize=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_path, level="TRACE", filter=accept, format="{time:HH:mm:ss.SSS} | {level} | {message}")
