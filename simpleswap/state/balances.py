"""
Asset ledger: multi-asset balance tracking for pool participants.

The pool never owns raw asset balances itself; it reads and moves them through
the ``AssetLedger`` interface. ``InMemoryAssetLedger`` is the reference
implementation used by the CLI and the test suite.
"""

from __future__ import annotations

from typing import Any, Dict, Protocol, Tuple, runtime_checkable

from ..errors import InsufficientAllowance, InsufficientBalance, InvalidAmount


# Type aliases
Holder = str  # ledger identity (account address, pubkey, ...)
AssetId = str  # asset identifier
Amount = int  # Non-negative integer (arbitrary precision)


def require_amount(name: str, value: Any) -> Amount:
    """Reject anything that is not a non-negative int (bools included)."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise InvalidAmount(name, value)
    return value


@runtime_checkable
class AssetLedger(Protocol):
    """
    External asset ledger interface.

    ``transfer`` / ``transfer_from`` return True on success. A failure is
    reported either by returning False or by raising ``LedgerError``; the pool
    handles both.

    ``checkpoint`` / ``rollback`` let the pool undo every mutation of a failed
    operation.
    """

    def balance_of(self, holder: Holder, asset: AssetId) -> Amount: ...

    def transfer(self, asset: AssetId, sender: Holder, to: Holder, amount: Amount) -> bool: ...

    def transfer_from(
        self, asset: AssetId, owner: Holder, spender: Holder, to: Holder, amount: Amount
    ) -> bool: ...

    def checkpoint(self) -> Any: ...

    def rollback(self, checkpoint: Any) -> None: ...


class InMemoryAssetLedger:
    """
    Balance table mapping (holder, asset) -> amount, with ERC-20 style allowances.

    Zero balances and allowances are dropped to keep the tables sparse. Callers
    needing a stable ordering must sort explicitly (see ``state.snapshot``).
    """

    def __init__(self) -> None:
        self._balances: Dict[Tuple[Holder, AssetId], Amount] = {}
        self._allowances: Dict[Tuple[Holder, Holder, AssetId], Amount] = {}

    def balance_of(self, holder: Holder, asset: AssetId) -> Amount:
        """Get balance for (holder, asset). Returns 0 if not found."""
        return self._balances.get((holder, asset), 0)

    def _set(self, holder: Holder, asset: AssetId, amount: Amount) -> None:
        if amount == 0:
            self._balances.pop((holder, asset), None)
        else:
            self._balances[(holder, asset)] = amount

    def mint(self, holder: Holder, asset: AssetId, amount: Amount) -> None:
        """Credit ``amount`` of ``asset`` to ``holder`` out of thin air."""
        require_amount("amount", amount)
        self._set(holder, asset, self.balance_of(holder, asset) + amount)

    def approve(self, owner: Holder, spender: Holder, asset: AssetId, amount: Amount) -> None:
        """Set (not increase) the amount ``spender`` may move out of ``owner``'s balance."""
        require_amount("amount", amount)
        key = (owner, spender, asset)
        if amount == 0:
            self._allowances.pop(key, None)
        else:
            self._allowances[key] = amount

    def allowance(self, owner: Holder, spender: Holder, asset: AssetId) -> Amount:
        return self._allowances.get((owner, spender, asset), 0)

    def transfer(self, asset: AssetId, sender: Holder, to: Holder, amount: Amount) -> bool:
        """
        Move ``amount`` of ``asset`` from ``sender`` to ``to``.

        Raises:
            InsufficientBalance: If ``sender`` holds less than ``amount``
        """
        require_amount("amount", amount)
        balance = self.balance_of(sender, asset)
        if balance < amount:
            raise InsufficientBalance(sender, asset, balance, amount)
        self._set(sender, asset, balance - amount)
        self._set(to, asset, self.balance_of(to, asset) + amount)
        return True

    def transfer_from(
        self, asset: AssetId, owner: Holder, spender: Holder, to: Holder, amount: Amount
    ) -> bool:
        """
        Move ``amount`` of ``asset`` from ``owner`` to ``to`` on behalf of ``spender``.

        The allowance is checked before the balance and consumed on success.

        Raises:
            InsufficientAllowance: If ``spender`` is not approved for ``amount``
            InsufficientBalance: If ``owner`` holds less than ``amount``
        """
        require_amount("amount", amount)
        allowed = self.allowance(owner, spender, asset)
        if allowed < amount:
            raise InsufficientAllowance(owner, spender, asset, allowed, amount)
        self.transfer(asset, owner, to, amount)
        self.approve(owner, spender, asset, allowed - amount)
        return True

    def checkpoint(self) -> Tuple[Dict[Tuple[Holder, AssetId], Amount], Dict[Tuple[Holder, Holder, AssetId], Amount]]:
        return dict(self._balances), dict(self._allowances)

    def rollback(self, checkpoint: Any) -> None:
        balances, allowances = checkpoint
        self._balances = dict(balances)
        self._allowances = dict(allowances)

    def get_all_balances(self) -> Dict[Tuple[Holder, AssetId], Amount]:
        """Return all non-zero balances keyed by (holder, asset)."""
        return dict(self._balances)

    def get_balances_for_asset(self, asset: AssetId) -> Dict[Holder, Amount]:
        result = {}
        for (holder, a), amount in self._balances.items():
            if a == asset:
                result[holder] = amount
        return result

    def __repr__(self) -> str:
        return f"InMemoryAssetLedger({len(self._balances)} balances, {len(self._allowances)} allowances)"
