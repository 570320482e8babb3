"""
Ledger state for the SimpleSwap pool
"""

from .balances import AssetLedger, InMemoryAssetLedger
from .shares import InMemoryShareLedger, ShareLedger
from .snapshot import snapshot_commitment, snapshot_ledgers

__all__ = [
    "AssetLedger",
    "InMemoryAssetLedger",
    "ShareLedger",
    "InMemoryShareLedger",
    "snapshot_ledgers",
    "snapshot_commitment",
]
