#!/usr/bin/env python3
"""
Liquidity Ratio Engine

Closed-form capital decomposition for a strategy that keeps capital in a
domain interval [A0, B0] and concentrates part of it in a short interval
[A, B]. With sqrt prices a0, a, b, b0 and the current sqrt price c, the value
(in token0, times c / L) of a unit-liquidity position on [lo, hi] is

    c <= lo:       c/lo - c/hi            (token0 only)
    lo < c < hi:   2 - lo/c - c/hi
    c >= hi:       hi/c - lo/c            (token1 only)

The domain value D splits exactly into the ranged bucket [a, b], the token0
tail [b, b0] and the token1 tail [a0, a]. For a <= c <= b this gives

    ranged = (2 - a/c - c/b) / D
    token0 = (c/b - c/b0) / D
    token1 = (a/c - a0/c) / D
    D      = 2 - a0/c - c/b0

All quotients are Q96 fixed point; ratios are numerators over DENOMINATOR.
"""

from .errors import (
    DegenerateCapitalError, InvalidIntervalError, PriceOutOfDomainError,
    RatioComputationError
)
from .models import Interval, RatioTriple, StrategyTvls
from .tick_math import MAX_TICK, MIN_TICK, Q96, mul_div, sqrt_price_at_tick

DENOMINATOR = 10 ** 9
RATIO_SUM_TOLERANCE = 1000


def validate_intervals(domain: Interval, short: Interval):
    """Raise InvalidIntervalError unless domain strictly contains a proper short interval"""
    for name, interval in (("domain", domain), ("short", short)):
        if interval.lower >= interval.upper:
            raise InvalidIntervalError(
                f"{name} interval lower tick {interval.lower} must be below upper tick {interval.upper}"
            )
        if interval.lower < MIN_TICK or interval.upper > MAX_TICK:
            raise InvalidIntervalError(
                f"{name} interval {interval.as_tuple()} outside [{MIN_TICK}, {MAX_TICK}]"
            )
    if not domain.contains(short):
        raise InvalidIntervalError(
            f"short interval {short.as_tuple()} is not contained in domain {domain.as_tuple()}"
        )


def interval_capital_x96(sqrt_lower_x96: int, sqrt_upper_x96: int, sqrt_price_x96: int) -> int:
    """Value of unit liquidity on [lower, upper] in token0, scaled by c / L and by Q96"""
    if sqrt_price_x96 <= sqrt_lower_x96:
        return mul_div(Q96, sqrt_price_x96, sqrt_lower_x96) - mul_div(Q96, sqrt_price_x96, sqrt_upper_x96)
    if sqrt_price_x96 >= sqrt_upper_x96:
        return mul_div(sqrt_upper_x96, Q96, sqrt_price_x96) - mul_div(sqrt_lower_x96, Q96, sqrt_price_x96)
    return (
        2 * Q96
        - mul_div(sqrt_lower_x96, Q96, sqrt_price_x96)
        - mul_div(Q96, sqrt_price_x96, sqrt_upper_x96)
    )


class RatioEngine:
    """Pure functions turning prices into target ratios and TVLs into realized ratios"""

    def __init__(self, denominator: int = DENOMINATOR):
        if denominator <= 0:
            raise ValueError(f"Denominator must be positive, got {denominator}")
        self.denominator = denominator

    def compute_target_ratios(self, domain: Interval, short: Interval,
                              current_sqrt_price_x96: int) -> RatioTriple:
        """
        Target split between the ranged position and the two single-token tails.

        Args:
            domain: outer interval the strategy may hold capital in
            short: active concentrated interval, contained in domain
            current_sqrt_price_x96: pool sqrt price (slot0) in Q64.96

        Returns:
            RatioTriple summing to the denominator within RATIO_SUM_TOLERANCE

        Raises:
            InvalidIntervalError: malformed or uncontained intervals
            PriceOutOfDomainError: current price outside the domain
            RatioComputationError: a ratio came out negative
        """
        validate_intervals(domain, short)

        sqrt_a0 = sqrt_price_at_tick(domain.lower)
        sqrt_b0 = sqrt_price_at_tick(domain.upper)
        sqrt_a = sqrt_price_at_tick(short.lower)
        sqrt_b = sqrt_price_at_tick(short.upper)
        sqrt_c = current_sqrt_price_x96

        if sqrt_c <= 0 or sqrt_c < sqrt_a0 or sqrt_c > sqrt_b0:
            raise PriceOutOfDomainError(
                f"sqrt price {sqrt_c} outside domain [{sqrt_a0}, {sqrt_b0}]",
                sqrt_c, sqrt_a0, sqrt_b0
            )

        domain_capital = interval_capital_x96(sqrt_a0, sqrt_b0, sqrt_c)
        if domain_capital <= 0:
            raise RatioComputationError(f"Domain capital normalizer is {domain_capital}")

        ranged_capital = interval_capital_x96(sqrt_a, sqrt_b, sqrt_c)
        token0_capital = interval_capital_x96(sqrt_b, sqrt_b0, sqrt_c) if sqrt_b < sqrt_b0 else 0
        token1_capital = interval_capital_x96(sqrt_a0, sqrt_a, sqrt_c) if sqrt_a0 < sqrt_a else 0

        for name, value in (("ranged", ranged_capital), ("token0", token0_capital),
                            ("token1", token1_capital)):
            if value < 0:
                raise RatioComputationError(f"Negative {name} capital {value} for sqrt price {sqrt_c}")

        return RatioTriple(
            ranged_ratio_d=mul_div(self.denominator, ranged_capital, domain_capital),
            token0_ratio_d=mul_div(self.denominator, token0_capital, domain_capital),
            token1_ratio_d=mul_div(self.denominator, token1_capital, domain_capital),
            denominator=self.denominator,
        )

    def compute_realized_ratio(self, tvls: StrategyTvls, price_x96: int) -> int:
        """Share of capital currently in ranged positions, over the denominator"""
        if price_x96 <= 0:
            raise PriceOutOfDomainError(f"priceX96 must be positive, got {price_x96}", price_x96)

        capital_total = tvls.total.capital_in_token0(price_x96)
        if capital_total == 0:
            raise DegenerateCapitalError("Total capital is zero, realized ratio is undefined")

        capital_ranged = tvls.total_ranged.capital_in_token0(price_x96)
        return mul_div(self.denominator, capital_ranged, capital_total)

    def ratio_deviation(self, target: RatioTriple, realized_ratio_d: int) -> int:
        """Absolute gap between realized and target ranged ratio"""
        return abs(realized_ratio_d - target.ranged_ratio_d)


_DEFAULT_ENGINE = RatioEngine()


def compute_target_ratios(domain: Interval, short: Interval, current_sqrt_price_x96: int) -> RatioTriple:
    """Module-level shortcut using DENOMINATOR"""
    return _DEFAULT_ENGINE.compute_target_ratios(domain, short, current_sqrt_price_x96)


def compute_realized_ratio(tvls: StrategyTvls, price_x96: int) -> int:
    """Module-level shortcut using DENOMINATOR"""
    return _DEFAULT_ENGINE.compute_realized_ratio(tvls, price_x96)
