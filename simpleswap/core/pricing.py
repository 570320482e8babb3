"""
Pricing oracle: pure price and quote functions over pool reserves.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Floor Rounding
- Price scale: SCALE = 10**18 units of asset B per unit of asset A
- Quote: zero-fee constant product, amount_out = floor(amount_in * r_out / (r_in + amount_in))
"""

from __future__ import annotations

from typing import Tuple

from ..errors import InsufficientReserves, SameAsset, ZeroAmount
from ..state.balances import Amount, AssetId
from .context import PoolContext
from .guards import require_amounts

# Fixed-point scale of get_price results.
SCALE = 10**18


def price_from_reserves(reserve_a: Amount, reserve_b: Amount) -> Amount:
    """
    Units of B per unit of A, scaled by SCALE:
        price = floor(reserve_b * SCALE / reserve_a)
    """
    if reserve_a == 0 or reserve_b == 0:
        raise InsufficientReserves(reserve_a, reserve_b)
    return reserve_b * SCALE // reserve_a


def constant_product_out(amount_in: Amount, reserve_in: Amount, reserve_out: Amount) -> Amount:
    """
    Exact-input output amount for a zero-fee constant-product pool.

    No argument validation beyond the zero-denominator case; the swap engine
    uses this directly so a zero ``amount_in`` quotes to zero.
    """
    denominator = reserve_in + amount_in
    if denominator == 0:
        raise InsufficientReserves(reserve_in, reserve_out)
    return amount_in * reserve_out // denominator


def get_amount_out(amount_in: Amount, reserve_in: Amount, reserve_out: Amount) -> Amount:
    """
    Quote an exact-input swap without executing it.

    Args:
        amount_in: Exact input amount
        reserve_in: Reserve of the input asset
        reserve_out: Reserve of the output asset

    Returns:
        floor(amount_in * reserve_out / (amount_in + reserve_in))

    Raises:
        ZeroAmount: If amount_in == 0
        InsufficientReserves: If either reserve is zero
    """
    require_amounts(amount_in=amount_in, reserve_in=reserve_in, reserve_out=reserve_out)
    if amount_in == 0:
        raise ZeroAmount("amount_in")
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientReserves(reserve_in, reserve_out)
    return constant_product_out(amount_in, reserve_in, reserve_out)


class PricingOracle:
    """Price/quote functions bound to the pool's live reserves."""

    def __init__(self, context: PoolContext) -> None:
        self._ctx = context

    def reserves(self, asset_a: AssetId, asset_b: AssetId) -> Tuple[Amount, Amount]:
        return self._ctx.reserves(asset_a, asset_b)

    def get_price(self, asset_a: AssetId, asset_b: AssetId) -> Amount:
        """
        Price of ``asset_a`` in units of ``asset_b``, scaled by SCALE.

        The reserve check runs before the same-asset check.

        Raises:
            InsufficientReserves: If either reserve is zero
            SameAsset: If asset_a == asset_b
        """
        reserve_a, reserve_b = self._ctx.reserves(asset_a, asset_b)
        if reserve_a == 0 or reserve_b == 0:
            raise InsufficientReserves(reserve_a, reserve_b)
        if asset_a == asset_b:
            raise SameAsset(asset_a)
        return price_from_reserves(reserve_a, reserve_b)

    def get_amount_out(self, amount_in: Amount, reserve_in: Amount, reserve_out: Amount) -> Amount:
        return get_amount_out(amount_in, reserve_in, reserve_out)
