"""
Shared execution context for the pool components.

``PoolContext`` binds the two external ledgers to the pool's own ledger
identity and provides the all-or-nothing unit of work every mutating
operation runs in. It holds no pool state of its own: reserves are read from
the asset ledger on every call.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from ..errors import TransferFailed
from ..state.balances import Amount, AssetId, AssetLedger, Holder
from ..state.shares import ShareLedger
from .events import EventLog, PoolEvent

logger = logging.getLogger(__name__)


class PoolContext:
    def __init__(
        self,
        asset_ledger: AssetLedger,
        share_ledger: ShareLedger,
        pool_address: Holder,
        events: Optional[EventLog] = None,
    ) -> None:
        if not pool_address:
            raise ValueError("pool_address must be non-empty")
        self.asset_ledger = asset_ledger
        self.share_ledger = share_ledger
        self.pool_address = pool_address
        self.events = events if events is not None else EventLog()
        self._pending: Optional[List[PoolEvent]] = None

    def reserves(self, asset_a: AssetId, asset_b: AssetId) -> Tuple[Amount, Amount]:
        """Current pool balances of ``asset_a`` and ``asset_b``."""
        return (
            self.asset_ledger.balance_of(self.pool_address, asset_a),
            self.asset_ledger.balance_of(self.pool_address, asset_b),
        )

    def pull(self, asset: AssetId, owner: Holder, amount: Amount) -> None:
        """Move ``amount`` from ``owner`` into the pool using the pool's allowance."""
        ok = self.asset_ledger.transfer_from(asset, owner, self.pool_address, self.pool_address, amount)
        if not ok:
            raise TransferFailed(asset, owner, self.pool_address, amount)

    def push(self, asset: AssetId, to: Holder, amount: Amount) -> None:
        """Move ``amount`` out of the pool to ``to``."""
        ok = self.asset_ledger.transfer(asset, self.pool_address, to, amount)
        if not ok:
            raise TransferFailed(asset, self.pool_address, to, amount)

    def emit(self, event: PoolEvent) -> None:
        if self._pending is None:
            raise RuntimeError("events can only be emitted inside an atomic operation")
        self._pending.append(event)

    @contextmanager
    def atomic(self, operation: str) -> Iterator[None]:
        """
        Run one operation as an all-or-nothing unit.

        On any exception both ledgers are rolled back to their state at entry
        and buffered events are dropped; the exception propagates unchanged.
        """
        if self._pending is not None:
            raise RuntimeError(f"{operation}: operations cannot be nested")

        asset_cp = self.asset_ledger.checkpoint()
        share_cp = self.share_ledger.checkpoint()
        self._pending = []
        try:
            yield
        except Exception as exc:
            self.asset_ledger.rollback(asset_cp)
            self.share_ledger.rollback(share_cp)
            logger.debug("%s rolled back: %s", operation, exc)
            raise
        else:
            for event in self._pending:
                logger.info("%s committed: %s", operation, event)
                self.events.publish(event)
        finally:
            self._pending = None
