#!/usr/bin/env python3
"""
Strategy Value Types

Immutable inputs and outputs of the ratio engine. Nothing here holds shared
state; every evaluation builds these fresh from externally supplied balances.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from .errors import DegenerateCapitalError
from .tick_math import Q96, mul_div


@dataclass(frozen=True)
class Interval:
    """Tick interval [lower, upper)"""
    lower: int
    upper: int

    @property
    def width(self) -> int:
        return self.upper - self.lower

    def contains(self, other: "Interval") -> bool:
        """True when other lies inside this interval (edges may coincide)"""
        return self.lower <= other.lower and other.upper <= self.upper

    def as_tuple(self) -> Tuple[int, int]:
        return self.lower, self.upper


@dataclass(frozen=True)
class RatioTriple:
    """
    Target split of capital, each part a numerator over ``denominator``.

    ranged_ratio_d: share held in the concentrated (short interval) positions
    token0_ratio_d: share held as token0 only (price below the region it covers)
    token1_ratio_d: share held as token1 only
    """
    ranged_ratio_d: int
    token0_ratio_d: int
    token1_ratio_d: int
    denominator: int

    @property
    def total(self) -> int:
        return self.ranged_ratio_d + self.token0_ratio_d + self.token1_ratio_d

    def is_consistent(self, tolerance: int = 1000) -> bool:
        """Parts sum to the denominator within tolerance"""
        return abs(self.total - self.denominator) <= tolerance

    def as_fractions(self) -> Tuple[float, float, float]:
        """Float view for reports and charts only"""
        return (
            self.ranged_ratio_d / self.denominator,
            self.token0_ratio_d / self.denominator,
            self.token1_ratio_d / self.denominator,
        )


@dataclass(frozen=True)
class CapitalSnapshot:
    """Token amounts held by one bucket"""
    amount0: int = 0
    amount1: int = 0

    def __post_init__(self):
        if self.amount0 < 0 or self.amount1 < 0:
            raise DegenerateCapitalError(
                f"Capital amounts must be non-negative, got ({self.amount0}, {self.amount1})"
            )

    def __add__(self, other: "CapitalSnapshot") -> "CapitalSnapshot":
        return CapitalSnapshot(self.amount0 + other.amount0, self.amount1 + other.amount1)

    @property
    def is_empty(self) -> bool:
        return self.amount0 == 0 and self.amount1 == 0

    def capital_in_token0(self, price_x96: int) -> int:
        """amount0 + amount1 converted at priceX96 (token1 per token0, Q96)"""
        return self.amount0 + mul_div(self.amount1, Q96, price_x96)


@dataclass(frozen=True)
class StrategyTvls:
    """TVLs of every bucket of the multi-pool strategy"""
    erc20_vault: CapitalSnapshot = field(default_factory=CapitalSnapshot)
    money_vault: CapitalSnapshot = field(default_factory=CapitalSnapshot)
    uni_v3_vaults: Tuple[CapitalSnapshot, ...] = ()

    @classmethod
    def from_lists(cls, erc20_vault: List[int], money_vault: List[int],
                   uni_v3_vaults: List[List[int]]) -> "StrategyTvls":
        """Build from raw ``tvl()``-style [amount0, amount1] pairs"""
        return cls(
            erc20_vault=CapitalSnapshot(*erc20_vault),
            money_vault=CapitalSnapshot(*money_vault),
            uni_v3_vaults=tuple(CapitalSnapshot(*amounts) for amounts in uni_v3_vaults),
        )

    @property
    def total_ranged(self) -> CapitalSnapshot:
        result = CapitalSnapshot()
        for snapshot in self.uni_v3_vaults:
            result = result + snapshot
        return result

    @property
    def total_idle(self) -> CapitalSnapshot:
        return self.erc20_vault + self.money_vault

    @property
    def total(self) -> CapitalSnapshot:
        return self.total_idle + self.total_ranged
