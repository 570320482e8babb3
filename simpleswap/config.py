"""
Runtime configuration for SimpleSwap.

Sources, lowest to highest precedence:
- dataclass defaults
- a YAML file (``load_config``)
- environment variables (``SIMPLESWAP_POOL_ADDRESS``, ``SIMPLESWAP_LOG_LEVEL``)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml


DEFAULT_POOL_ADDRESS = "simpleswap-pool"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Configuration file or environment value is malformed."""


@dataclass(frozen=True)
class PoolConfig:
    # Ledger identity that holds the pool's reserves.
    pool_address: str = DEFAULT_POOL_ADDRESS
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if not isinstance(self.pool_address, str) or not self.pool_address.strip():
            raise ConfigError("pool_address must be a non-empty string")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(_LOG_LEVELS)}: {self.log_level!r}")


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def config_from_mapping(data: Mapping[str, Any], base: Optional[PoolConfig] = None) -> PoolConfig:
    """Overlay ``data`` on ``base`` (defaults when None). Unknown keys are rejected."""
    if not isinstance(data, Mapping):
        raise ConfigError("config must be a mapping")
    known = {f.name for f in fields(PoolConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(map(str, unknown))}")
    return replace(base or PoolConfig(), **dict(data))


def load_config(path: Union[str, Path], base: Optional[PoolConfig] = None) -> PoolConfig:
    """Load a YAML config file. An empty file yields ``base`` unchanged."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        obj = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    if obj is None:
        return base or PoolConfig()
    return config_from_mapping(obj, base)


def config_from_env(base: Optional[PoolConfig] = None) -> PoolConfig:
    cfg = base or PoolConfig()
    return replace(
        cfg,
        pool_address=_env_str("SIMPLESWAP_POOL_ADDRESS", cfg.pool_address),
        log_level=_env_str("SIMPLESWAP_LOG_LEVEL", cfg.log_level),
    )


def resolve_config(path: Optional[Union[str, Path]] = None) -> PoolConfig:
    """Defaults, then the optional YAML file, then the environment."""
    cfg = load_config(path) if path is not None else PoolConfig()
    return config_from_env(cfg)


def configure_logging(level: str = "WARNING") -> None:
    """Install a root handler for command-line use. The library itself never does this."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
