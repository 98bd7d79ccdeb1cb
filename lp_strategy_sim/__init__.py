"""
Multi-Pool Strategy Ratio Engine

Fixed-point tooling for a concentrated-liquidity strategy that spreads capital
over a domain interval: target ratios between the ranged position and the two
single-token tails, realized ratios from vault TVLs, and rebalance planning.
"""

__version__ = "1.0.0"

# Core components
from .core.errors import (
    RatioEngineError, InvalidIntervalError, TickOutOfRangeError, PriceOutOfDomainError,
    DegenerateCapitalError, PrecisionOverflowError, RatioComputationError
)
from .core.models import Interval, RatioTriple, CapitalSnapshot, StrategyTvls
from .core.ratio_engine import RatioEngine, DENOMINATOR, compute_target_ratios, compute_realized_ratio
from .core.tick_math import Q96, sqrt_price_at_tick, tick_at_sqrt_price, price_x96_from_sqrt_price
from .core.positions import calculate_new_position, snapshot_from_position
from .core.allocation import TargetAllocation, compute_target_allocation

# Engine
from .engine.config import StrategyParams
from .engine.rebalancer import MultiPoolRebalancer, RebalanceDecision

# Analysis
from .analysis.ratio_curves import RatioCurveAnalyzer

__all__ = [
    # Core
    "RatioEngineError", "InvalidIntervalError", "TickOutOfRangeError", "PriceOutOfDomainError",
    "DegenerateCapitalError", "PrecisionOverflowError", "RatioComputationError",
    "Interval", "RatioTriple", "CapitalSnapshot", "StrategyTvls",
    "RatioEngine", "DENOMINATOR", "compute_target_ratios", "compute_realized_ratio",
    "Q96", "sqrt_price_at_tick", "tick_at_sqrt_price", "price_x96_from_sqrt_price",
    "calculate_new_position", "snapshot_from_position",
    "TargetAllocation", "compute_target_allocation",

    # Engine
    "StrategyParams", "MultiPoolRebalancer", "RebalanceDecision",

    # Analysis
    "RatioCurveAnalyzer"
]
