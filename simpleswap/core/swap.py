"""
Swap engine: single-hop exact-input swaps against the pool reserves.

    amount_out = floor(amount_in * reserve_out / (reserve_in + amount_in))

Reserves are read before the input transfer lands. No fee is retained, so the
reserve product is preserved up to floor rounding (which only ever favours
the pool).
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from ..errors import InsufficientReserves
from ..state.balances import Amount, Holder
from .context import PoolContext
from .events import TokensSwapped
from .guards import require_amounts, require_deadline, require_min, require_pair_path
from .pricing import constant_product_out

logger = logging.getLogger(__name__)


class SwapEngine:
    def __init__(self, context: PoolContext) -> None:
        self._ctx = context

    def swap_exact_tokens_for_tokens(
        self,
        caller: Holder,
        amount_in: Amount,
        amount_out_min: Amount,
        path: Sequence[str],
        to: Holder,
        deadline: int,
        now: int,
    ) -> List[Amount]:
        """
        Swap exactly ``amount_in`` of ``path[0]`` for as much ``path[1]`` as the formula gives.

        Returns:
            [amount_in, amount_out]

        Raises:
            InvalidPath: If path is not two distinct assets
            DeadlineExpired: If deadline < now
            InsufficientReserves: If reserve_in + amount_in == 0
            SlippageExceeded: If amount_out < amount_out_min
            LedgerError: If either transfer fails (nothing is applied)
        """
        asset_in, asset_out = require_pair_path(path)
        require_deadline(deadline, now)
        require_amounts(amount_in=amount_in, amount_out_min=amount_out_min)

        ctx = self._ctx
        with ctx.atomic("swap_exact_tokens_for_tokens"):
            reserve_in, reserve_out = ctx.reserves(asset_in, asset_out)
            if reserve_in + amount_in == 0:
                raise InsufficientReserves(reserve_in, reserve_out)

            ctx.pull(asset_in, caller, amount_in)
            amount_out = constant_product_out(amount_in, reserve_in, reserve_out)
            logger.debug(
                "swap: %s->%s reserves=(%d, %d) in=%d out=%d",
                asset_in, asset_out, reserve_in, reserve_out, amount_in, amount_out,
            )
            require_min("amount_out", amount_out, amount_out_min)

            ctx.push(asset_out, to, amount_out)
            ctx.emit(
                TokensSwapped(
                    caller=caller,
                    asset_in=asset_in,
                    asset_out=asset_out,
                    amount_in=amount_in,
                    amount_out=amount_out,
                )
            )

        return [amount_in, amount_out]
