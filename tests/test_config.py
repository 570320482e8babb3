# [TESTER] v1

from __future__ import annotations

from pathlib import Path

import pytest

from simpleswap.config import (
    DEFAULT_POOL_ADDRESS,
    ConfigError,
    PoolConfig,
    config_from_env,
    config_from_mapping,
    load_config,
    resolve_config,
)
from simpleswap.core.pool import SimpleSwap


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SIMPLESWAP_POOL_ADDRESS", raising=False)
    monkeypatch.delenv("SIMPLESWAP_LOG_LEVEL", raising=False)


def test_defaults() -> None:
    cfg = PoolConfig()
    assert cfg.pool_address == DEFAULT_POOL_ADDRESS
    assert cfg.log_level == "WARNING"


@pytest.mark.parametrize("kwargs", [{"pool_address": ""}, {"pool_address": "  "}, {"log_level": "LOUD"}])
def test_rejects_bad_values(kwargs: dict) -> None:
    with pytest.raises(ConfigError):
        PoolConfig(**kwargs)


def test_log_level_is_case_insensitive() -> None:
    assert PoolConfig(log_level="debug").log_level == "debug"


def test_mapping_rejects_unknown_keys() -> None:
    with pytest.raises(ConfigError, match="fee_bps"):
        config_from_mapping({"fee_bps": 30})


def test_load_yaml(tmp_path: Path) -> None:
    path = tmp_path / "pool.yaml"
    path.write_text("pool_address: vault\nlog_level: INFO\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg == PoolConfig(pool_address="vault", log_level="INFO")


def test_load_empty_yaml_keeps_base(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    base = PoolConfig(pool_address="vault")
    assert load_config(path, base) is base


@pytest.mark.parametrize("text", ["pool_address: [unclosed\n", "- just\n- a list\n"])
def test_load_malformed_yaml(tmp_path: Path, text: str) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SIMPLESWAP_POOL_ADDRESS", " env-pool ")
    monkeypatch.setenv("SIMPLESWAP_LOG_LEVEL", "")
    cfg = config_from_env()
    assert cfg.pool_address == "env-pool"
    assert cfg.log_level == "WARNING"


def test_resolve_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "pool.yaml"
    path.write_text("pool_address: file-pool\nlog_level: ERROR\n", encoding="utf-8")
    monkeypatch.setenv("SIMPLESWAP_LOG_LEVEL", "DEBUG")
    cfg = resolve_config(path)
    assert cfg.pool_address == "file-pool"
    assert cfg.log_level == "DEBUG"


def test_resolve_without_file_or_env_is_default() -> None:
    assert resolve_config() == PoolConfig()


def test_pool_from_config() -> None:
    pool = SimpleSwap.from_config(PoolConfig(pool_address="vault"))
    assert pool.pool_address == "vault"
    assert pool.total_issued() == 0
