"""
Engine configuration for the congruence closure decision procedure.

Configuration can be built directly, loaded from a YAML file, or read from
environment variables:

    FOL_EQ_STRATEGY   closure strategy, "worklist" (default) or "naive"
    FOL_EQ_CACHE      "true"/"false", cache the premise closure across queries

YAML layout:

    engine:
      strategy: worklist
      cache_closure: true
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError


class ClosureStrategy(Enum):
    """
    How the congruence fixpoint is computed.

    Both strategies produce the same partition; NAIVE re-scans every function
    term each pass and is kept as the reference implementation.
    """
    WORKLIST = "worklist"
    NAIVE = "naive"


_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class EngineConfig:
    """
    Attributes:
        strategy: Congruence fixpoint strategy.
        cache_closure: Reuse the closure built for a premise across queries.
            When False every query builds its own closure.
    """

    strategy: ClosureStrategy = ClosureStrategy.WORKLIST
    cache_closure: bool = True

    def validate(self) -> None:
        """Validate configuration parameters."""
        errors = []

        if not isinstance(self.strategy, ClosureStrategy):
            errors.append(f"strategy must be a ClosureStrategy, got {self.strategy!r}")

        if not isinstance(self.cache_closure, bool):
            errors.append(f"cache_closure must be a bool, got {self.cache_closure!r}")

        if errors:
            raise ConfigError("Invalid engine configuration:\n" + "\n".join(f"  - {e}" for e in errors))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        if not isinstance(data, dict):
            raise ConfigError(f"Engine config must be a mapping, got {type(data).__name__}")
        unknown = sorted(set(data) - {"strategy", "cache_closure"})
        if unknown:
            raise ConfigError(f"Unknown engine config keys: {', '.join(unknown)}")

        config = cls(
            strategy=parse_strategy(data.get("strategy", ClosureStrategy.WORKLIST.value)),
            cache_closure=_parse_bool("cache_closure", data.get("cache_closure", True)),
        )
        config.validate()
        return config

    @classmethod
    def from_file(cls, path: Path | str) -> "EngineConfig":
        """Load the ``engine`` section of a YAML config file."""
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found at: {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Error reading config file: {path}") from e
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing YAML config file: {path}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"Malformed config file: top level must be a mapping in {path}")
        return cls.from_dict(data.get("engine") or {})

    @classmethod
    def from_env(cls) -> "EngineConfig":
        config = cls(
            strategy=parse_strategy(os.getenv("FOL_EQ_STRATEGY", ClosureStrategy.WORKLIST.value)),
            cache_closure=_parse_bool("FOL_EQ_CACHE", os.getenv("FOL_EQ_CACHE", "true")),
        )
        config.validate()
        return config

    def with_strategy(self, strategy: ClosureStrategy | str) -> "EngineConfig":
        return EngineConfig(strategy=parse_strategy(strategy), cache_closure=self.cache_closure)


def parse_strategy(value: ClosureStrategy | str) -> ClosureStrategy:
    if isinstance(value, ClosureStrategy):
        return value
    try:
        return ClosureStrategy(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(s.value for s in ClosureStrategy)
        raise ConfigError(f"Unknown closure strategy '{value}' (expected one of: {choices})") from None


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


DEFAULT_CONFIG = EngineConfig()


def resolve_config(config: Optional[EngineConfig]) -> EngineConfig:
    return DEFAULT_CONFIG if config is None else config
