"""
Liquidity accounting: deposit sizing, share issuance and redemption.

Share issuance rules (observable behaviour, pinned by tests):

    First deposit (total_issued == 0):
        amount_a = amount_a_desired
        amount_b = amount_b_desired
        shares   = amount_a_desired

    Top-up deposit (total_issued > 0):
        lq1 = floor(amount_a_desired * total_issued / reserve_a)
        lq2 = floor(amount_b_desired * total_issued / reserve_b)
        lq1 <  lq2:  amount_a = amount_a_desired
                     amount_b = amount_a * price(A in B)            (scaled, not divided by SCALE)
        lq1 >= lq2:  amount_b = amount_b_desired
                     amount_a = floor(amount_b * price(B in A) / SCALE)
        shares   = total_issued                                     (pre-call supply)

    Redemption:
        amount_a = floor(shares * reserve_a / total_issued)
        amount_b = floor(shares * reserve_b / total_issued)

Top-up deposits mint the pre-call supply rather than min(lq1, lq2), and only
the B-side branch divides the scale back out. Both are kept as-is because they
define the redemption economics existing holders rely on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from ..errors import EmptyPool, InsufficientReserves, SameAsset
from ..state.balances import Amount, AssetId, Holder
from .context import PoolContext
from .events import LiquidityAdded, LiquidityRemoved
from .guards import require_amounts, require_deadline, require_min, require_owner
from .pricing import SCALE, price_from_reserves

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepositPlan:
    amount_a: Amount
    amount_b: Amount
    shares_issued: Amount
    # "initial", "a_side" or "b_side"
    branch: str


def size_deposit(
    *,
    total_issued: Amount,
    reserve_a: Amount,
    reserve_b: Amount,
    amount_a_desired: Amount,
    amount_b_desired: Amount,
) -> DepositPlan:
    """Compute the amounts pulled and shares issued for a deposit."""
    if total_issued == 0:
        return DepositPlan(
            amount_a=amount_a_desired,
            amount_b=amount_b_desired,
            shares_issued=amount_a_desired,
            branch="initial",
        )

    if reserve_a == 0 or reserve_b == 0:
        raise InsufficientReserves(reserve_a, reserve_b)

    lq1 = amount_a_desired * total_issued // reserve_a
    lq2 = amount_b_desired * total_issued // reserve_b
    if lq1 < lq2:
        amount_a = amount_a_desired
        amount_b = amount_a * price_from_reserves(reserve_a, reserve_b)
        branch = "a_side"
    else:
        amount_b = amount_b_desired
        amount_a = amount_b * price_from_reserves(reserve_b, reserve_a) // SCALE
        branch = "b_side"

    logger.debug(
        "size_deposit: supply=%d reserves=(%d, %d) lq=(%d, %d) branch=%s amounts=(%d, %d)",
        total_issued, reserve_a, reserve_b, lq1, lq2, branch, amount_a, amount_b,
    )
    return DepositPlan(amount_a=amount_a, amount_b=amount_b, shares_issued=total_issued, branch=branch)


def compute_redemption(
    shares: Amount,
    reserve_a: Amount,
    reserve_b: Amount,
    total_issued: Amount,
) -> Tuple[Amount, Amount]:
    """Proportional slice of both reserves for ``shares`` (floor rounding)."""
    if total_issued <= 0:
        raise EmptyPool()
    return shares * reserve_a // total_issued, shares * reserve_b // total_issued


class LiquidityAccounting:
    def __init__(self, context: PoolContext) -> None:
        self._ctx = context

    def add_liquidity(
        self,
        caller: Holder,
        asset_a: AssetId,
        asset_b: AssetId,
        amount_a_desired: Amount,
        amount_b_desired: Amount,
        amount_a_min: Amount,
        amount_b_min: Amount,
        to: Holder,
        deadline: int,
        now: int,
    ) -> Tuple[Amount, Amount, Amount]:
        """
        Deposit a pair of assets and mint shares to ``to``.

        Returns:
            Tuple of (amount_a, amount_b, shares_issued)

        Raises:
            DeadlineExpired: If deadline < now
            SlippageExceeded: If a sized amount is below its minimum
            LedgerError: If either asset transfer fails (nothing is applied)
        """
        require_amounts(
            amount_a_desired=amount_a_desired,
            amount_b_desired=amount_b_desired,
            amount_a_min=amount_a_min,
            amount_b_min=amount_b_min,
        )
        require_deadline(deadline, now)

        ctx = self._ctx
        with ctx.atomic("add_liquidity"):
            total_issued = ctx.share_ledger.total_issued()
            reserve_a, reserve_b = ctx.reserves(asset_a, asset_b)
            plan = size_deposit(
                total_issued=total_issued,
                reserve_a=reserve_a,
                reserve_b=reserve_b,
                amount_a_desired=amount_a_desired,
                amount_b_desired=amount_b_desired,
            )
            if plan.branch != "initial" and asset_a == asset_b:
                raise SameAsset(asset_a)

            require_min("amount_a", plan.amount_a, amount_a_min)
            require_min("amount_b", plan.amount_b, amount_b_min)

            ctx.pull(asset_a, caller, plan.amount_a)
            ctx.pull(asset_b, caller, plan.amount_b)
            ctx.share_ledger.mint(to, plan.shares_issued)
            ctx.emit(
                LiquidityAdded(
                    asset_a=asset_a,
                    asset_b=asset_b,
                    amount_a=plan.amount_a,
                    amount_b=plan.amount_b,
                    shares_issued=plan.shares_issued,
                    to=to,
                )
            )

        return plan.amount_a, plan.amount_b, plan.shares_issued

    def remove_liquidity(
        self,
        caller: Holder,
        asset_a: AssetId,
        asset_b: AssetId,
        shares: Amount,
        amount_a_min: Amount,
        amount_b_min: Amount,
        to: Holder,
        deadline: int,
        now: int,
    ) -> Tuple[Amount, Amount]:
        """
        Burn ``shares`` held by ``caller`` and pay out the proportional reserves.

        Returns:
            Tuple of (amount_a, amount_b)

        Raises:
            NotOwner: If to != caller
            EmptyPool: If no shares are issued
            DeadlineExpired: If deadline < now
            SlippageExceeded: If a payout is below its minimum
            LedgerError: If the burn or a transfer fails (nothing is applied)
        """
        require_amounts(shares=shares, amount_a_min=amount_a_min, amount_b_min=amount_b_min)
        require_owner(caller, to)

        ctx = self._ctx
        total_issued = ctx.share_ledger.total_issued()
        if total_issued == 0:
            raise EmptyPool()
        require_deadline(deadline, now)

        with ctx.atomic("remove_liquidity"):
            reserve_a, reserve_b = ctx.reserves(asset_a, asset_b)
            amount_a, amount_b = compute_redemption(shares, reserve_a, reserve_b, total_issued)
            logger.debug(
                "remove_liquidity: shares=%d supply=%d reserves=(%d, %d) payout=(%d, %d)",
                shares, total_issued, reserve_a, reserve_b, amount_a, amount_b,
            )

            require_min("amount_a", amount_a, amount_a_min)
            require_min("amount_b", amount_b, amount_b_min)

            ctx.share_ledger.burn(caller, shares)
            ctx.push(asset_a, to, amount_a)
            ctx.push(asset_b, to, amount_b)
            ctx.emit(
                LiquidityRemoved(
                    asset_a=asset_a,
                    asset_b=asset_b,
                    amount_a=amount_a,
                    amount_b=amount_b,
                    shares_burned=shares,
                    to=to,
                )
            )

        return amount_a, amount_b
