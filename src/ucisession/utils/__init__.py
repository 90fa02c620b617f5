"""Shared utilities for ucisession."""

from ucisession.utils.config import (
    EngineConfig,
    engine_config_from_dict,
    engine_config_to_dict,
    load_config,
    load_engine_config,
    save_config,
)
from ucisession.utils.logging import TRAFFIC_KEY, setup_logging, traffic_filter

__all__ = [
    "TRAFFIC_KEY",
    "EngineConfig",
    "engine_config_from_dict",
    "engine_config_to_dict",
    "load_config",
    "load_engine_config",
    "save_config",
    "setup_logging",
    "traffic_filter",
]
