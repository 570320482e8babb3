"""Exception types for the SimpleSwap pool.

Every failure an operation can raise derives from ``PoolError`` and carries a
stable ``code`` (used as the rejection reason by ``core.engine.step``) and a
``retryable`` flag describing whether the caller may resubmit after adjusting
its inputs or re-reading pool state.
"""

from __future__ import annotations


class PoolError(Exception):
    """Base class for all pool failures."""

    code: str = "pool_error"
    retryable: bool = False


# -- input validation ---------------------------------------------------------


class InputValidationError(PoolError, ValueError):
    """Caller supplied malformed input."""

    code = "invalid_input"


class InvalidPath(InputValidationError):
    """Swap path does not name exactly two distinct assets."""

    code = "invalid_path"

    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(f"swap path must name exactly two distinct assets: {path!r}")


class SameAsset(InputValidationError):
    """Price requested for an asset against itself."""

    code = "same_asset"

    def __init__(self, asset: str) -> None:
        self.asset = asset
        super().__init__(f"cannot calculate price for the same asset: {asset}")


class ZeroAmount(InputValidationError):
    code = "zero_amount"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name} must be positive")


class InvalidAmount(InputValidationError):
    """Amount is not a non-negative int."""

    code = "invalid_amount"

    def __init__(self, name: str, value: object) -> None:
        self.name = name
        self.value = value
        super().__init__(f"{name} must be a non-negative int: {value!r}")


class InvalidCommand(InputValidationError):
    """Command names an unknown action or carries the wrong arguments."""

    code = "invalid_command"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


# -- temporal -----------------------------------------------------------------


class TemporalError(PoolError):
    retryable = True


class DeadlineExpired(TemporalError):
    code = "deadline_expired"

    def __init__(self, deadline: int, now: int) -> None:
        self.deadline = deadline
        self.now = now
        super().__init__(f"deadline {deadline} is before current time {now}")


# -- pool state ---------------------------------------------------------------


class PoolStateError(PoolError):
    """Pool state does not allow the operation; re-query before retrying."""

    retryable = True


class InsufficientReserves(PoolStateError):
    code = "insufficient_reserves"

    def __init__(self, reserve_a: int, reserve_b: int) -> None:
        self.reserve_a = reserve_a
        self.reserve_b = reserve_b
        super().__init__(f"insufficient reserves: ({reserve_a}, {reserve_b})")


class EmptyPool(PoolStateError):
    code = "empty_pool"

    def __init__(self) -> None:
        super().__init__("pool has no issued liquidity shares")


# -- slippage -----------------------------------------------------------------


class SlippageExceeded(PoolError):
    """An amount fell below the caller's minimum-amount guard."""

    code = "slippage_exceeded"
    retryable = True

    def __init__(self, name: str, amount: int, minimum: int) -> None:
        self.name = name
        self.amount = amount
        self.minimum = minimum
        super().__init__(f"{name} ({amount}) < minimum ({minimum})")


# -- authorization ------------------------------------------------------------


class AuthorizationError(PoolError):
    code = "unauthorized"


class NotOwner(AuthorizationError):
    """Only the share holder may redeem their own position."""

    code = "not_owner"

    def __init__(self, caller: str, to: str) -> None:
        self.caller = caller
        self.to = to
        super().__init__(f"only the liquidity provider can burn their shares: caller={caller} to={to}")


# -- ledger -------------------------------------------------------------------


class LedgerError(PoolError):
    """Failure reported by the asset or share ledger; passed through as-is."""

    code = "ledger_error"


class InsufficientBalance(LedgerError):
    code = "insufficient_balance"

    def __init__(self, holder: str, asset: str, balance: int, amount: int) -> None:
        self.holder = holder
        self.asset = asset
        self.balance = balance
        self.amount = amount
        super().__init__(f"insufficient {asset} balance for {holder}: {balance} < {amount}")


class InsufficientAllowance(LedgerError):
    code = "insufficient_allowance"

    def __init__(self, owner: str, spender: str, asset: str, allowance: int, amount: int) -> None:
        self.owner = owner
        self.spender = spender
        self.asset = asset
        self.allowance = allowance
        self.amount = amount
        super().__init__(
            f"insufficient {asset} allowance from {owner} to {spender}: {allowance} < {amount}"
        )


class InsufficientShares(LedgerError):
    code = "insufficient_shares"

    def __init__(self, holder: str, balance: int, amount: int) -> None:
        self.holder = holder
        self.balance = balance
        self.amount = amount
        super().__init__(f"insufficient share balance for {holder}: {balance} < {amount}")


class TransferFailed(LedgerError):
    """Asset ledger refused a transfer."""

    code = "transfer_failed"

    def __init__(self, asset: str, sender: str, to: str, amount: int) -> None:
        self.asset = asset
        self.sender = sender
        self.to = to
        self.amount = amount
        super().__init__(f"transfer of {amount} {asset} from {sender} to {to} failed")
