"""Interpreter configuration.

Settings live in a small YAML mapping:

    integer_bits: 32
    max_call_depth: 64
    enable_builtins: true
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InterpreterConfig:
    """Limits and switches for a single interpreter instance."""

    integer_bits: int = 32          # width of the signed integer type
    max_call_depth: int = 64        # nested function calls before E601
    enable_builtins: bool = True    # resolve len/push when no binding exists

    def __post_init__(self) -> None:
        if not isinstance(self.integer_bits, int) or isinstance(self.integer_bits, bool) \
                or self.integer_bits < 2:
            raise ValueError(f"integer_bits must be an integer >= 2, got {self.integer_bits!r}")
        if not isinstance(self.max_call_depth, int) or isinstance(self.max_call_depth, bool) \
                or self.max_call_depth < 1:
            raise ValueError(f"max_call_depth must be a positive integer, got {self.max_call_depth!r}")
        if not isinstance(self.enable_builtins, bool):
            raise ValueError(f"enable_builtins must be a boolean, got {self.enable_builtins!r}")

    @property
    def int_min(self) -> int:
        return -(1 << (self.integer_bits - 1))

    @property
    def int_max(self) -> int:
        return (1 << (self.integer_bits - 1)) - 1

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_CONFIG = InterpreterConfig()


def config_from_mapping(data: Mapping[str, Any]) -> InterpreterConfig:
    """Build a config from a mapping, rejecting unknown keys."""
    known = {f.name for f in fields(InterpreterConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown configuration key(s): {', '.join(unknown)}")
    return InterpreterConfig(**dict(data))


def load_config(path: Path | str) -> InterpreterConfig:
    """Load a config from a YAML file. An empty file yields the defaults."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config not found: {config_path}")
    with config_path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError(f"config must be a mapping: {config_path}")
    config = config_from_mapping(data)
    logger.debug("loaded config from %s: %s", config_path, config.to_dict())
    return config


def save_config(config: InterpreterConfig, path: Path | str) -> None:
    """Write a config to a YAML file."""
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as fp:
        yaml.safe_dump(config.to_dict(), fp, sort_keys=False)
