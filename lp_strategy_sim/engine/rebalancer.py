#!/usr/bin/env python3
"""
Multi-Pool Rebalancer

Decides whether the strategy needs a rebalance: places the new short interval
around the current tick, computes target ratios and compares them with the
ratio realized by the current TVLs.
"""

from dataclasses import dataclass
from typing import Optional

from ..core.allocation import TargetAllocation, compute_target_allocation
from ..core.errors import DegenerateCapitalError, PriceOutOfDomainError
from ..core.models import Interval, RatioTriple, StrategyTvls
from ..core.positions import calculate_new_position
from ..core.ratio_engine import RatioEngine
from ..core.tick_math import price_x96_from_sqrt_price, tick_at_sqrt_price
from .config import StrategyParams


@dataclass
class RebalanceDecision:
    """Outcome of one rebalance evaluation"""
    new_short_interval: Interval
    should_rebalance: bool
    reason: str
    target_ratios: Optional[RatioTriple] = None
    realized_ratio_d: Optional[int] = None
    deviation_d: Optional[int] = None

    @property
    def skipped(self) -> bool:
        return self.target_ratios is None


class MultiPoolRebalancer:
    """Rebalance planning for a strategy spread over several pools of one token pair"""

    def __init__(self, params: StrategyParams = None, engine: RatioEngine = None):
        self.params = params or StrategyParams()
        self.engine = engine or RatioEngine()

    @property
    def domain(self) -> Interval:
        return self.params.domain

    def calculate_new_position(self, tick: int) -> Interval:
        return calculate_new_position(self.domain, self.params.half_of_short_interval, tick)

    def target_ratios(self, short: Interval, sqrt_price_x96: int) -> RatioTriple:
        return self.engine.compute_target_ratios(self.domain, short, sqrt_price_x96)

    def target_allocation(self, tvls: StrategyTvls, short: Interval, sqrt_price_x96: int) -> TargetAllocation:
        """Per-bucket targets for the capital currently held by the strategy"""
        ratios = self.target_ratios(short, sqrt_price_x96)
        total_capital0 = tvls.total.capital_in_token0(price_x96_from_sqrt_price(sqrt_price_x96))
        return compute_target_allocation(
            ratios,
            total_capital0,
            short,
            sqrt_price_x96,
            self.params.uni_v3_weights,
            self.params.erc20_capital_ratio_d
        )

    def evaluate(self, tvls: StrategyTvls, current_short: Interval, sqrt_price_x96: int,
                 tick: int = None) -> RebalanceDecision:
        """
        Compare realized and target allocation.

        Rebalances when the short interval has to move or when the realized
        ranged ratio drifts further than rebalance_threshold_d from target.
        A price outside the domain or an empty strategy skips the cycle.
        """
        if tick is None:
            tick = tick_at_sqrt_price(sqrt_price_x96)
        new_short = self.calculate_new_position(tick)

        try:
            target = self.target_ratios(new_short, sqrt_price_x96)
            realized = self.engine.compute_realized_ratio(tvls, price_x96_from_sqrt_price(sqrt_price_x96))
        except PriceOutOfDomainError as e:
            print(f"⚠️  Skipping rebalance at tick {tick}: {e}")
            return RebalanceDecision(new_short, False, "price outside domain")
        except DegenerateCapitalError as e:
            print(f"⚠️  Skipping rebalance at tick {tick}: {e}")
            return RebalanceDecision(new_short, False, "no capital")

        deviation = self.engine.ratio_deviation(target, realized)

        if new_short != current_short:
            reason = "short interval moved"
        elif deviation > self.params.rebalance_threshold_d:
            reason = "ranged ratio drifted"
        else:
            reason = "within tolerance"

        return RebalanceDecision(
            new_short_interval=new_short,
            should_rebalance=reason != "within tolerance",
            reason=reason,
            target_ratios=target,
            realized_ratio_d=realized,
            deviation_d=deviation,
        )
