"""
Deterministic ledger snapshots.

Goals:
- Stable JSON serialization for diffing scenario runs and hashing.
- Integers only; floats are rejected to avoid representation ambiguity.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, Iterable, Optional

from .balances import InMemoryAssetLedger
from .shares import InMemoryShareLedger


SNAPSHOT_VERSION = 1


def _check_text(text: str) -> None:
    # Lone surrogates are not Unicode scalar values and cannot be UTF-8 encoded.
    if any(0xD800 <= ord(ch) <= 0xDFFF for ch in text):
        raise TypeError("surrogate code points are not allowed in canonical encoding")


def _check_canonical(value: Any) -> None:
    if isinstance(value, float):
        raise TypeError("floats are not allowed in canonical encoding")
    if isinstance(value, str):
        _check_text(value)
    elif isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError("dict keys must be str for canonical encoding")
            _check_text(key)
            _check_canonical(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_canonical(item)


def canonical_json_bytes(value: Any) -> bytes:
    """
    Canonical JSON encoding for hashing.

    Rules:
    - UTF-8
    - sort_keys=True
    - separators=(',', ':') (no whitespace)
    - allow_nan=False
    - floats and lone surrogates rejected
    """
    _check_canonical(value)
    text = json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    return text.encode("utf-8")


def snapshot_ledgers(
    asset_ledger: InMemoryAssetLedger,
    share_ledger: InMemoryShareLedger,
    *,
    pool_address: str,
    assets: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """
    Build a deterministic snapshot of both ledgers.

    ``reserves`` lists the pool's balance of every asset in ``assets`` (or of
    every asset seen in the ledger when omitted), including zero reserves.
    """
    balances = asset_ledger.get_all_balances()
    if assets is None:
        assets = {asset for (_holder, asset) in balances}
    asset_list = sorted(set(assets))

    return {
        "version": SNAPSHOT_VERSION,
        "pool_address": pool_address,
        "reserves": {asset: asset_ledger.balance_of(pool_address, asset) for asset in asset_list},
        "balances": [
            {"holder": holder, "asset": asset, "amount": amount}
            for (holder, asset), amount in sorted(balances.items())
        ],
        "shares": {
            "total_issued": share_ledger.total_issued(),
            "holders": [
                {"holder": holder, "amount": amount}
                for holder, amount in sorted(share_ledger.get_all_balances().items())
            ],
        },
    }


def snapshot_commitment(snapshot: Dict[str, Any]) -> str:
    """sha256 hex digest of the snapshot's canonical encoding."""
    return hashlib.sha256(canonical_json_bytes(snapshot)).hexdigest()
