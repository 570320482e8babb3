"""Guard checks shared by the pool operations.

Each guard returns nothing and raises the matching ``PoolError`` when the
condition is not satisfied, so operations can call them in the order their
failure kinds must be reported.
"""

from __future__ import annotations

from typing import Any, Sequence, Tuple

from ..errors import DeadlineExpired, InvalidPath, NotOwner, SlippageExceeded
from ..state.balances import require_amount


def require_deadline(deadline: int, now: int) -> None:
    """A mutating call is valid while ``deadline >= now``. Both must be non-negative ints."""
    require_amount("deadline", deadline)
    require_amount("now", now)
    if deadline < now:
        raise DeadlineExpired(deadline, now)


def require_owner(caller: str, to: str) -> None:
    if to != caller:
        raise NotOwner(caller, to)


def require_min(name: str, amount: int, minimum: int) -> None:
    if amount < minimum:
        raise SlippageExceeded(name, amount, minimum)


def require_pair_path(path: Sequence[str]) -> Tuple[str, str]:
    """Return ``(asset_in, asset_out)`` for a single-hop path of two distinct asset ids."""
    if isinstance(path, (str, bytes)) or not isinstance(path, Sequence) or len(path) != 2:
        raise InvalidPath(path)
    asset_in, asset_out = path[0], path[1]
    if not isinstance(asset_in, str) or not isinstance(asset_out, str) or asset_in == asset_out:
        raise InvalidPath(path)
    return asset_in, asset_out


def require_amounts(**amounts: Any) -> None:
    """Validate every keyword argument as a non-negative int amount."""
    for name, value in amounts.items():
        require_amount(name, value)
