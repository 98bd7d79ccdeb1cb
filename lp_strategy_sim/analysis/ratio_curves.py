#!/usr/bin/env python3
"""
Ratio Curve Analysis

Sweeps the current price across the domain (or across one short interval) and
records the target split at every point, for charts and sanity checks.
"""

import numpy as np
import pandas as pd
from typing import Dict, Any, Sequence

from ..core.models import Interval
from ..core.ratio_engine import RATIO_SUM_TOLERANCE, RatioEngine
from ..core.tick_math import Q96, price_x96_from_sqrt_price, sqrt_price_at_tick, tick_at_sqrt_price
from ..engine.config import StrategyParams
from ..engine.rebalancer import MultiPoolRebalancer


class RatioCurveAnalyzer:
    """Tabulates target ratios as a function of price"""

    def __init__(self, params: StrategyParams = None, engine: RatioEngine = None):
        self.rebalancer = MultiPoolRebalancer(params, engine)

    @property
    def denominator(self) -> int:
        return self.rebalancer.engine.denominator

    def domain_sweep(self, num_points: int = 200, recenter: bool = True, short: Interval = None) -> pd.DataFrame:
        """
        One row per tick of an evenly spaced grid over the domain.

        Args:
            num_points: grid size (duplicates after rounding are dropped)
            recenter: place a fresh short interval around every tick, as a
                rebalance at that price would
            short: fixed short interval used when recenter is False; defaults
                to the interval centred on the domain midpoint
        """
        if num_points < 2:
            raise ValueError("num_points must be at least 2")

        domain = self.rebalancer.domain
        if short is None:
            short = self.rebalancer.calculate_new_position((domain.lower + domain.upper) // 2)

        ticks = np.unique(np.rint(np.linspace(domain.lower, domain.upper, num_points)).astype(np.int64))

        rows = []
        for grid_tick in ticks:
            tick = int(grid_tick)
            interval = self.rebalancer.calculate_new_position(tick) if recenter else short
            rows.append(self._row(tick, sqrt_price_at_tick(tick), interval))

        return pd.DataFrame(rows)

    def short_interval_profile(self, short: Interval, num_points: int = 9) -> pd.DataFrame:
        """Target ratios for sqrt prices evenly spaced from sqrtP(short.lower) to sqrtP(short.upper)"""
        if num_points < 2:
            raise ValueError("num_points must be at least 2")

        sqrt_a = sqrt_price_at_tick(short.lower)
        sqrt_b = sqrt_price_at_tick(short.upper)
        rows = []
        for step in range(num_points):
            sqrt_price = sqrt_a + (sqrt_b - sqrt_a) * step // (num_points - 1)
            row = self._row(tick_at_sqrt_price(sqrt_price), sqrt_price, short)
            row['step'] = step
            rows.append(row)

        return pd.DataFrame(rows)

    def _row(self, tick: int, sqrt_price_x96: int, short: Interval) -> Dict[str, Any]:
        ratios = self.rebalancer.target_ratios(short, sqrt_price_x96)
        ranged_share, token0_share, token1_share = ratios.as_fractions()
        return {
            'tick': tick,
            'price': price_x96_from_sqrt_price(sqrt_price_x96) / Q96,
            'short_lower': short.lower,
            'short_upper': short.upper,
            'ranged_ratio_d': ratios.ranged_ratio_d,
            'token0_ratio_d': ratios.token0_ratio_d,
            'token1_ratio_d': ratios.token1_ratio_d,
            'ratio_sum_error': ratios.total - ratios.denominator,
            'ranged_share': ranged_share,
            'token0_share': token0_share,
            'token1_share': token1_share,
        }

    @staticmethod
    def is_unimodal(values: Sequence[int], tolerance: int = 2) -> bool:
        """Non-decreasing up to the maximum, non-increasing after it (within tolerance)"""
        values = list(values)
        if not values:
            return True
        peak = values.index(max(values))
        rising = all(b - a >= -tolerance for a, b in zip(values[:peak], values[1:peak + 1]))
        falling = all(b - a <= tolerance for a, b in zip(values[peak:], values[peak + 1:]))
        return rising and falling

    def summarize(self, curve: pd.DataFrame) -> Dict[str, Any]:
        """Peak ranged share and worst ratio-sum error of a curve"""
        peak_index = curve['ranged_ratio_d'].idxmax()
        max_error = int(curve['ratio_sum_error'].abs().max())
        return {
            'points': len(curve),
            'peak_ranged_ratio_d': int(curve.loc[peak_index, 'ranged_ratio_d']),
            'peak_tick': int(curve.loc[peak_index, 'tick']),
            'max_ratio_sum_error': max_error,
            'ratio_sum_consistent': max_error <= RATIO_SUM_TOLERANCE,
            'unimodal_ranged_ratio': self.is_unimodal(curve['ranged_ratio_d'].tolist()),
        }
