"""
Command-line interface for SimpleSwap.

Subcommands:
- ``quote``: preview an exact-input swap from raw reserves
- ``price``: fixed-point price from raw reserves
- ``run``: replay a YAML scenario against in-memory ledgers and print a JSON report

Scenario format::

    pool_address: pool            # optional, overrides config
    now: 1700000000               # default clock for every step
    mint:
      - {holder: alice, asset: TKA, amount: 1000}
    approve:                      # spender defaults to the pool
      - {owner: alice, asset: TKA, amount: 1000}
    steps:
      - action: add_liquidity
        caller: alice
        now: 1700000001           # optional per-step clock
        expect: slippage_exceeded # optional expected rejection code
        args: {...}
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .config import ConfigError, PoolConfig, configure_logging, resolve_config
from .core.engine import Command, parse_action, step
from .core.pool import SimpleSwap
from .core.pricing import get_amount_out, price_from_reserves
from .errors import PoolError
from .state.balances import InMemoryAssetLedger
from .state.shares import InMemoryShareLedger
from .state.snapshot import snapshot_commitment, snapshot_ledgers

logger = logging.getLogger(__name__)


class ScenarioError(ValueError):
    """Scenario file is malformed."""


def _require_mapping(value: Any, *, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ScenarioError(f"{name} must be a mapping")
    return value


def _require_list(value: Any, *, name: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ScenarioError(f"{name} must be a list")
    return value


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ScenarioError(f"{name} must be an int")
    return value


def load_scenario(path: Path) -> Dict[str, Any]:
    try:
        obj = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ScenarioError(f"invalid YAML in {path}: {exc}") from exc
    return dict(_require_mapping(obj, name="scenario"))


def build_pool(scenario: Mapping[str, Any], config: PoolConfig) -> SimpleSwap:
    """Create the pool and seed balances/allowances from the scenario."""
    pool_address = scenario.get("pool_address", config.pool_address)
    if not isinstance(pool_address, str) or not pool_address:
        raise ScenarioError("pool_address must be a non-empty string")

    assets = InMemoryAssetLedger()
    for i, entry in enumerate(_require_list(scenario.get("mint"), name="mint")):
        entry = _require_mapping(entry, name=f"mint[{i}]")
        assets.mint(str(entry["holder"]), str(entry["asset"]), _require_int(entry["amount"], name=f"mint[{i}].amount"))
    for i, entry in enumerate(_require_list(scenario.get("approve"), name="approve")):
        entry = _require_mapping(entry, name=f"approve[{i}]")
        assets.approve(
            str(entry["owner"]),
            str(entry.get("spender", pool_address)),
            str(entry["asset"]),
            _require_int(entry["amount"], name=f"approve[{i}].amount"),
        )
    return SimpleSwap(assets, InMemoryShareLedger(), pool_address=pool_address)


def run_scenario(scenario: Mapping[str, Any], config: PoolConfig) -> Dict[str, Any]:
    """Replay every step and return the report. ``report["ok"]`` is False if any step diverged."""
    try:
        pool = build_pool(scenario, config)
    except KeyError as exc:
        raise ScenarioError(f"missing field: {exc.args[0]}") from exc
    except PoolError as exc:
        raise ScenarioError(f"cannot seed ledgers: {exc}") from exc
    default_now = _require_int(scenario.get("now", 0), name="now")

    results = []
    all_ok = True
    for i, raw in enumerate(_require_list(scenario.get("steps"), name="steps")):
        raw = _require_mapping(raw, name=f"steps[{i}]")
        if "action" not in raw:
            raise ScenarioError(f"steps[{i}] is missing 'action'")
        try:
            action = parse_action(raw["action"])
        except PoolError as exc:
            raise ScenarioError(f"steps[{i}]: {exc}") from exc
        command = Command(
            action=action,
            args=dict(_require_mapping(raw.get("args", {}), name=f"steps[{i}].args")),
            caller=raw.get("caller"),
        )
        now = _require_int(raw.get("now", default_now), name=f"steps[{i}].now")
        expect = raw.get("expect")

        result = step(pool, command, now)
        ok = (result.accepted and expect is None) or (not result.accepted and result.rejection == expect)
        all_ok = all_ok and ok
        if not ok:
            logger.warning("step %d (%s) diverged: rejection=%s expect=%s", i, action.value, result.rejection, expect)
        results.append(
            {
                "index": i,
                "action": action.value,
                "accepted": result.accepted,
                "ok": ok,
                "rejection": result.rejection,
                "output": result.output,
                "events": [event.to_dict() for event in result.events],
            }
        )

    snapshot = snapshot_ledgers(pool.asset_ledger, pool.share_ledger, pool_address=pool.pool_address)
    return {
        "ok": all_ok,
        "steps": results,
        "snapshot": snapshot,
        "commitment": snapshot_commitment(snapshot),
    }


def _cmd_quote(args: argparse.Namespace) -> int:
    print(get_amount_out(args.amount_in, args.reserve_in, args.reserve_out))
    return 0


def _cmd_price(args: argparse.Namespace) -> int:
    print(price_from_reserves(args.reserve_a, args.reserve_b))
    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    try:
        config = resolve_config(args.config)
    except (ConfigError, OSError) as exc:
        print(f"[simpleswap] config error: {exc}", file=sys.stderr)
        return 2
    configure_logging(args.log_level or config.log_level)

    try:
        report = run_scenario(load_scenario(Path(args.scenario)), config)
    except (ScenarioError, OSError) as exc:
        print(f"[simpleswap] scenario error: {exc}", file=sys.stderr)
        return 2

    print(json.dumps(report, indent=2, sort_keys=True))
    return 0 if report["ok"] else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="simpleswap", description="Two-asset constant-product pool")
    sub = parser.add_subparsers(dest="command", required=True)

    quote = sub.add_parser("quote", help="preview an exact-input swap")
    quote.add_argument("--amount-in", type=int, required=True)
    quote.add_argument("--reserve-in", type=int, required=True)
    quote.add_argument("--reserve-out", type=int, required=True)
    quote.set_defaults(func=_cmd_quote)

    price = sub.add_parser("price", help="price of A in units of B, scaled by 1e18")
    price.add_argument("--reserve-a", type=int, required=True)
    price.add_argument("--reserve-b", type=int, required=True)
    price.set_defaults(func=_cmd_price)

    run = sub.add_parser("run", help="replay a YAML scenario")
    run.add_argument("scenario")
    run.add_argument("--config", default=None, help="YAML config file")
    run.add_argument("--log-level", default=None)
    run.set_defaults(func=_cmd_run)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except PoolError as exc:
        print(f"[simpleswap] {exc.code}: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
