"""Dispatch-table command engine over a ``SimpleSwap`` pool.

``step(pool, command, now)`` is the single entry point for replaying
operations from data (scenario files, queues). It:

1. Resolves the action and checks the argument names.
2. Dispatches to the pool operation.
3. Returns a ``StepResult`` (accepted with output and events, or rejected
   with the failing error's ``code``).

``step`` never raises ``PoolError``; ``step_or_raise`` does.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..errors import InvalidCommand, PoolError
from .events import PoolEvent
from .pool import SimpleSwap


@unique
class Action(Enum):
    """One member per public pool operation."""
    ADD_LIQUIDITY = "add_liquidity"
    REMOVE_LIQUIDITY = "remove_liquidity"
    SWAP_EXACT_TOKENS_FOR_TOKENS = "swap_exact_tokens_for_tokens"
    GET_PRICE = "get_price"
    GET_AMOUNT_OUT = "get_amount_out"


@dataclass(frozen=True)
class Command:
    action: Action
    args: Mapping[str, Any] = field(default_factory=dict)
    # Required for mutating actions; ignored by the read-only ones.
    caller: Optional[str] = None


@dataclass(frozen=True)
class StepResult:
    accepted: bool
    output: Optional[Dict[str, Any]] = None
    events: Tuple[PoolEvent, ...] = ()
    rejection: Optional[str] = None
    error: Optional[PoolError] = None


Handler = Callable[[SimpleSwap, Optional[str], int, Mapping[str, Any]], Dict[str, Any]]


def _add_liquidity(pool: SimpleSwap, caller: Optional[str], now: int, args: Mapping[str, Any]) -> Dict[str, Any]:
    amount_a, amount_b, shares = pool.add_liquidity(caller=caller, now=now, **args)
    return {"amount_a": amount_a, "amount_b": amount_b, "shares_issued": shares}


def _remove_liquidity(pool: SimpleSwap, caller: Optional[str], now: int, args: Mapping[str, Any]) -> Dict[str, Any]:
    amount_a, amount_b = pool.remove_liquidity(caller=caller, now=now, **args)
    return {"amount_a": amount_a, "amount_b": amount_b}


def _swap(pool: SimpleSwap, caller: Optional[str], now: int, args: Mapping[str, Any]) -> Dict[str, Any]:
    amounts = pool.swap_exact_tokens_for_tokens(caller=caller, now=now, **args)
    return {"amounts": amounts}


def _get_price(pool: SimpleSwap, caller: Optional[str], now: int, args: Mapping[str, Any]) -> Dict[str, Any]:
    return {"price": pool.get_price(**args)}


def _get_amount_out(pool: SimpleSwap, caller: Optional[str], now: int, args: Mapping[str, Any]) -> Dict[str, Any]:
    return {"amount_out": pool.get_amount_out(**args)}


# action -> (argument names, needs caller, handler)
_DISPATCH: Dict[Action, Tuple[Tuple[str, ...], bool, Handler]] = {
    Action.ADD_LIQUIDITY: (
        (
            "asset_a", "asset_b", "amount_a_desired", "amount_b_desired",
            "amount_a_min", "amount_b_min", "to", "deadline",
        ),
        True,
        _add_liquidity,
    ),
    Action.REMOVE_LIQUIDITY: (
        ("asset_a", "asset_b", "shares", "amount_a_min", "amount_b_min", "to", "deadline"),
        True,
        _remove_liquidity,
    ),
    Action.SWAP_EXACT_TOKENS_FOR_TOKENS: (
        ("amount_in", "amount_out_min", "path", "to", "deadline"),
        True,
        _swap,
    ),
    Action.GET_PRICE: (("asset_a", "asset_b"), False, _get_price),
    Action.GET_AMOUNT_OUT: (("amount_in", "reserve_in", "reserve_out"), False, _get_amount_out),
}


# Ledger identities and asset ids must be strings.
_IDENTITY_ARGS = frozenset({"asset_a", "asset_b", "to"})


def parse_action(name: Any) -> Action:
    if isinstance(name, Action):
        return name
    try:
        return Action(name)
    except ValueError:
        raise InvalidCommand(f"unknown_action:{name}") from None


def _check_args(action: Action, command: Command) -> None:
    names, needs_caller, _handler = _DISPATCH[action]
    missing = sorted(set(names) - set(command.args))
    extra = sorted(set(command.args) - set(names))
    if missing or extra:
        detail = ",".join([f"missing={m}" for m in missing] + [f"extra={e}" for e in extra])
        raise InvalidCommand(f"bad_args:{detail}")
    if needs_caller and not command.caller:
        raise InvalidCommand("bad_args:missing=caller")
    if command.caller is not None and not isinstance(command.caller, str):
        raise InvalidCommand("bad_args:type=caller")
    for name in sorted(_IDENTITY_ARGS.intersection(names)):
        if not isinstance(command.args[name], str):
            raise InvalidCommand(f"bad_args:type={name}")


def step(pool: SimpleSwap, command: Command, now: int) -> StepResult:
    """Execute one command against ``pool`` at time ``now``.

    Returns ``StepResult`` with ``accepted=True`` on success, or
    ``accepted=False`` with a ``rejection`` reason string.
    """
    try:
        action = parse_action(command.action)
        _check_args(action, command)
    except InvalidCommand as exc:
        return StepResult(accepted=False, rejection=exc.reason, error=exc)

    _names, _needs_caller, handler = _DISPATCH[action]
    seen = len(pool.events)
    try:
        output = handler(pool, command.caller, now, command.args)
    except PoolError as exc:
        return StepResult(accepted=False, rejection=exc.code, error=exc)

    return StepResult(accepted=True, output=output, events=tuple(pool.events.events[seen:]))


def step_or_raise(pool: SimpleSwap, command: Command, now: int) -> StepResult:
    """Like ``step()`` but re-raises the rejecting ``PoolError``."""
    result = step(pool, command, now)
    if not result.accepted and result.error is not None:
        raise result.error
    return result
