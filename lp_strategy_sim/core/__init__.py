"""Core fixed-point math for the multi-pool strategy"""

from .errors import (
    RatioEngineError, InvalidIntervalError, TickOutOfRangeError, PriceOutOfDomainError,
    DegenerateCapitalError, PrecisionOverflowError, RatioComputationError
)
from .models import Interval, RatioTriple, CapitalSnapshot, StrategyTvls
from .ratio_engine import RatioEngine, DENOMINATOR, compute_target_ratios, compute_realized_ratio
from .tick_math import Q96, sqrt_price_at_tick, tick_at_sqrt_price, price_x96_from_sqrt_price

__all__ = [
    "RatioEngineError", "InvalidIntervalError", "TickOutOfRangeError", "PriceOutOfDomainError",
    "DegenerateCapitalError", "PrecisionOverflowError", "RatioComputationError",
    "Interval", "RatioTriple", "CapitalSnapshot", "StrategyTvls",
    "RatioEngine", "DENOMINATOR", "compute_target_ratios", "compute_realized_ratio",
    "Q96", "sqrt_price_at_tick", "tick_at_sqrt_price", "price_x96_from_sqrt_price"
]
