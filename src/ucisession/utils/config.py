"""Configuration loading utilities.

Engine settings live under an ``engine`` key in a YAML file:

    engine:
      command: /usr/bin/stockfish
      args: []
      timeout: 30.0
      new_game_on_start: true
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from omegaconf import DictConfig, OmegaConf


@dataclass
class EngineConfig:
    """How to start and talk to an engine."""

    command: str = "stockfish"
    args: list[str] = field(default_factory=list)
    cwd: Path | None = None
    env: dict[str, str] | None = None
    timeout: float | None = None  # Seconds per output line; None waits forever
    encoding: str = "utf-8"
    new_game_on_start: bool = False

    def __post_init__(self) -> None:
        """Normalize types and validate."""
        if not self.command:
            msg = "engine.command must not be empty"
            raise ValueError(msg)

        self.command = str(self.command)
        self.args = [str(arg) for arg in self.args]

        if isinstance(self.cwd, str):
            self.cwd = Path(self.cwd)

        if self.timeout is not None:
            self.timeout = float(self.timeout)
            if self.timeout <= 0:
                msg = f"engine.timeout must be positive or null, got {self.timeout}"
                raise ValueError(msg)


def engine_config_from_dict(data: dict[str, Any]) -> EngineConfig:
    """Create an EngineConfig from a plain dictionary.

    Unknown keys are rejected so typos do not pass silently.
    """
    known = set(EngineConfig.__dataclass_fields__)
    unknown = set(data) - known
    if unknown:
        msg = f"Unknown engine config keys: {sorted(unknown)}"
        raise ValueError(msg)
    return EngineConfig(**data)


def engine_config_to_dict(config: EngineConfig) -> dict[str, Any]:
    """Convert an EngineConfig to a dictionary for serialization."""
    result = asdict(config)
    if result["cwd"] is not None:
        result["cwd"] = str(result["cwd"])
    return result


def load_config(config_path: str | Path, overrides: list[str] | None = None) -> DictConfig:
    """Load a configuration file with optional overrides.

    Args:
        config_path: Path to the YAML configuration file.
        overrides: Optional list of CLI-style overrides (e.g., ["engine.timeout=10"]).

    Returns:
        Merged configuration as a DictConfig.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        msg = f"Config file not found: {config_path}"
        raise FileNotFoundError(msg)

    config = OmegaConf.load(config_path)

    if overrides:
        override_conf = OmegaConf.from_dotlist(overrides)
        config = OmegaConf.merge(config, override_conf)

    return config


def load_engine_config(config_path: str | Path, overrides: list[str] | None = None) -> EngineConfig:
    """Load the ``engine`` section of a YAML file as an EngineConfig."""
    config = load_config(config_path, overrides)
    section = config.get("engine")
    if section is None:
        msg = f"No 'engine' section in {config_path}"
        raise ValueError(msg)
    data = OmegaConf.to_container(section, resolve=True)
    return engine_config_from_dict(data)


def save_config(config: DictConfig | EngineConfig | dict[str, Any], path: str | Path) -> None:
    """Save a configuration to a YAML file.

    An EngineConfig is written under the ``engine`` key so that
    ``load_engine_config`` reads it back.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(config, EngineConfig):
        config = {"engine": engine_config_to_dict(config)}
    if isinstance(config, dict):
        config = OmegaConf.create(config)

    OmegaConf.save(config, path)
