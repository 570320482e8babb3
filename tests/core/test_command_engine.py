# [TESTER] v1

from __future__ import annotations

import pytest

from simpleswap.core.engine import Action, Command, parse_action, step, step_or_raise
from simpleswap.core.events import LiquidityAdded, TokensSwapped
from simpleswap.core.pool import SimpleSwap
from simpleswap.errors import DeadlineExpired, InvalidCommand, SlippageExceeded
from simpleswap.state.balances import InMemoryAssetLedger
from simpleswap.state.shares import InMemoryShareLedger

POOL = "pool"
TOKEN_A = "TKA"
TOKEN_B = "TKB"
ALICE = "alice"
NOW = 1_700_000_000
DEADLINE = NOW + 1200


def _pool() -> SimpleSwap:
    assets = InMemoryAssetLedger()
    for asset in (TOKEN_A, TOKEN_B):
        assets.mint(ALICE, asset, 10_000)
        assets.approve(ALICE, POOL, asset, 10_000)
    return SimpleSwap(assets, InMemoryShareLedger(), pool_address=POOL)


def _add(amount_a: int = 500, amount_b: int = 500, **overrides) -> Command:
    args = {
        "asset_a": TOKEN_A,
        "asset_b": TOKEN_B,
        "amount_a_desired": amount_a,
        "amount_b_desired": amount_b,
        "amount_a_min": 0,
        "amount_b_min": 0,
        "to": ALICE,
        "deadline": DEADLINE,
    }
    args.update(overrides)
    return Command(Action.ADD_LIQUIDITY, args, caller=ALICE)


def _swap(amount_in: int = 10, amount_out_min: int = 0) -> Command:
    return Command(
        Action.SWAP_EXACT_TOKENS_FOR_TOKENS,
        {
            "amount_in": amount_in,
            "amount_out_min": amount_out_min,
            "path": [TOKEN_A, TOKEN_B],
            "to": ALICE,
            "deadline": DEADLINE,
        },
        caller=ALICE,
    )


class TestAccepted:
    def test_add_liquidity(self):
        pool = _pool()
        result = step(pool, _add(), NOW)
        assert result.accepted
        assert result.output == {"amount_a": 500, "amount_b": 500, "shares_issued": 500}
        assert result.events == (LiquidityAdded(TOKEN_A, TOKEN_B, 500, 500, 500, ALICE),)
        assert result.rejection is None and result.error is None

    def test_swap_reports_only_its_own_events(self):
        pool = _pool()
        step(pool, _add(), NOW)
        result = step(pool, _swap(), NOW)
        assert result.output == {"amounts": [10, 9]}
        assert result.events == (TokensSwapped(ALICE, TOKEN_A, TOKEN_B, 10, 9),)

    def test_remove_liquidity(self):
        pool = _pool()
        step(pool, _add(), NOW)
        command = Command(
            "remove_liquidity",  # type: ignore[arg-type]
            {
                "asset_a": TOKEN_A,
                "asset_b": TOKEN_B,
                "shares": 100,
                "amount_a_min": 0,
                "amount_b_min": 0,
                "to": ALICE,
                "deadline": DEADLINE,
            },
            caller=ALICE,
        )
        result = step(pool, command, NOW)
        assert result.accepted
        assert result.output == {"amount_a": 100, "amount_b": 100}

    def test_read_only_actions_need_no_caller(self):
        pool = _pool()
        step(pool, _add(500, 1000), NOW)
        price = step(pool, Command(Action.GET_PRICE, {"asset_a": TOKEN_A, "asset_b": TOKEN_B}), NOW)
        quote = step(
            pool,
            Command(Action.GET_AMOUNT_OUT, {"amount_in": 10, "reserve_in": 500, "reserve_out": 500}),
            NOW,
        )
        assert price.output == {"price": 2 * 10**18}
        assert quote.output == {"amount_out": 9}
        assert price.events == () and quote.events == ()


class TestRejected:
    def test_rejection_uses_error_code(self):
        pool = _pool()
        result = step(pool, _add(deadline=NOW - 1), NOW)
        assert not result.accepted
        assert result.rejection == "deadline_expired"
        assert isinstance(result.error, DeadlineExpired)
        assert result.events == ()

    def test_slippage_rejection_leaves_pool_untouched(self):
        pool = _pool()
        step(pool, _add(), NOW)
        result = step(pool, _swap(amount_out_min=10), NOW)
        assert result.rejection == "slippage_exceeded"
        assert pool.reserves(TOKEN_A, TOKEN_B) == (500, 500)

    def test_read_only_rejection(self):
        result = step(_pool(), Command(Action.GET_PRICE, {"asset_a": TOKEN_A, "asset_b": TOKEN_B}), NOW)
        assert result.rejection == "insufficient_reserves"

    def test_unknown_action(self):
        result = step(_pool(), Command("mint_free_money", {}), NOW)  # type: ignore[arg-type]
        assert not result.accepted
        assert result.rejection == "unknown_action:mint_free_money"

    def test_missing_and_extra_args(self):
        command = Command(Action.GET_PRICE, {"asset_a": TOKEN_A, "asset_c": TOKEN_B})
        result = step(_pool(), command, NOW)
        assert result.rejection == "bad_args:missing=asset_b,extra=asset_c"

    def test_mutating_action_requires_caller(self):
        command = Command(Action.SWAP_EXACT_TOKENS_FOR_TOKENS, _swap().args)
        result = step(_pool(), command, NOW)
        assert result.rejection == "bad_args:missing=caller"

    def test_malformed_deadline_is_rejected_not_raised(self):
        result = step(_pool(), _add(deadline="soon"), NOW)
        assert not result.accepted
        assert result.rejection == "invalid_amount"

    def test_malformed_path_is_rejected_not_raised(self):
        command = Command(Action.SWAP_EXACT_TOKENS_FOR_TOKENS, {**_swap().args, "path": 5}, caller=ALICE)
        assert step(_pool(), command, NOW).rejection == "invalid_path"

    def test_non_string_identity_args(self):
        assert step(_pool(), _add(asset_a=["TKA"]), NOW).rejection == "bad_args:type=asset_a"
        assert step(_pool(), _add(to=7), NOW).rejection == "bad_args:type=to"
        command = Command(Action.ADD_LIQUIDITY, _add().args, caller=42)  # type: ignore[arg-type]
        assert step(_pool(), command, NOW).rejection == "bad_args:type=caller"


class TestStepOrRaise:
    def test_returns_result_on_success(self):
        result = step_or_raise(_pool(), _add(), NOW)
        assert result.accepted

    def test_raises_pool_error(self):
        pool = _pool()
        step(pool, _add(), NOW)
        with pytest.raises(SlippageExceeded):
            step_or_raise(pool, _swap(amount_out_min=10), NOW)

    def test_raises_invalid_command(self):
        with pytest.raises(InvalidCommand) as exc_info:
            step_or_raise(_pool(), Command("nope", {}), NOW)  # type: ignore[arg-type]
        assert exc_info.value.reason == "unknown_action:nope"


def test_parse_action_accepts_names_and_members() -> None:
    assert parse_action("get_price") is Action.GET_PRICE
    assert parse_action(Action.GET_PRICE) is Action.GET_PRICE
    with pytest.raises(InvalidCommand):
        parse_action("GET_PRICE")
