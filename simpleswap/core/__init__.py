"""
Core pool components
"""

from .context import PoolContext
from .engine import Action, Command, StepResult, step, step_or_raise
from .events import EventLog, LiquidityAdded, LiquidityRemoved, TokensSwapped
from .liquidity import LiquidityAccounting, compute_redemption, size_deposit
from .pool import SimpleSwap
from .pricing import SCALE, PricingOracle, get_amount_out, price_from_reserves
from .swap import SwapEngine

__all__ = [
    "PoolContext",
    "Action",
    "Command",
    "StepResult",
    "step",
    "step_or_raise",
    "EventLog",
    "LiquidityAdded",
    "LiquidityRemoved",
    "TokensSwapped",
    "LiquidityAccounting",
    "compute_redemption",
    "size_deposit",
    "SimpleSwap",
    "SCALE",
    "PricingOracle",
    "get_amount_out",
    "price_from_reserves",
    "SwapEngine",
]
