"""
Share ledger: liquidity claims issued by the pool.

Structurally the same as the asset ledger, but tracks a single instrument (the
pool's own shares), so holders are the only key.
"""

from __future__ import annotations

from typing import Any, Dict, Protocol, Tuple, runtime_checkable

from ..errors import InsufficientShares
from .balances import Amount, Holder, require_amount


@runtime_checkable
class ShareLedger(Protocol):
    """External share ledger interface. Failures are raised as ``LedgerError``."""

    def mint(self, holder: Holder, amount: Amount) -> None: ...

    def burn(self, holder: Holder, amount: Amount) -> None: ...

    def total_issued(self) -> Amount: ...

    def balance_of(self, holder: Holder) -> Amount: ...

    def checkpoint(self) -> Any: ...

    def rollback(self, checkpoint: Any) -> None: ...


class InMemoryShareLedger:
    """
    Share balance table mapping holder -> amount.

    Notes:
    - The running total always equals the sum of stored balances.
    - Zero balances are omitted to keep the table sparse.
    """

    def __init__(self) -> None:
        self._balances: Dict[Holder, Amount] = {}
        self._total: Amount = 0

    def balance_of(self, holder: Holder) -> Amount:
        return self._balances.get(holder, 0)

    def total_issued(self) -> Amount:
        return self._total

    def mint(self, holder: Holder, amount: Amount) -> None:
        require_amount("amount", amount)
        if amount == 0:
            return
        self._balances[holder] = self.balance_of(holder) + amount
        self._total += amount

    def burn(self, holder: Holder, amount: Amount) -> None:
        """Destroy ``amount`` of ``holder``'s shares."""
        require_amount("amount", amount)
        balance = self.balance_of(holder)
        if balance < amount:
            raise InsufficientShares(holder, balance, amount)
        remaining = balance - amount
        if remaining:
            self._balances[holder] = remaining
        else:
            self._balances.pop(holder, None)
        self._total -= amount

    def checkpoint(self) -> Tuple[Dict[Holder, Amount], Amount]:
        return dict(self._balances), self._total

    def rollback(self, checkpoint: Any) -> None:
        balances, total = checkpoint
        self._balances = dict(balances)
        self._total = total

    def get_all_balances(self) -> Dict[Holder, Amount]:
        return dict(self._balances)

    def verify_total(self) -> bool:
        """Verify the running total matches the sum of balances."""
        return sum(self._balances.values()) == self._total

    def __repr__(self) -> str:
        return f"InMemoryShareLedger({len(self._balances)} holders, total={self._total})"
