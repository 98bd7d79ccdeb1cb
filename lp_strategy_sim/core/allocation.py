#!/usr/bin/env python3
"""
Target Capital Allocation

Turns a RatioTriple and the strategy's total capital into per-bucket targets:
ranged capital split across the sub-pools by weight, and the token0/token1
tails split between the ERC20 vault and the money vault.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .models import CapitalSnapshot, Interval, RatioTriple, StrategyTvls
from .positions import liquidity_for_capital, snapshot_from_position
from .tick_math import Q96, mul_div, price_x96_from_sqrt_price


@dataclass(frozen=True)
class TargetAllocation:
    """Where each token unit should sit after a rebalance"""
    ranged_capital: int
    token0_capital: int
    token1_capital: int
    erc20_vault: CapitalSnapshot
    money_vault: CapitalSnapshot
    uni_v3_vaults: Tuple[CapitalSnapshot, ...]
    uni_v3_liquidity: Tuple[int, ...]

    def as_tvls(self) -> StrategyTvls:
        return StrategyTvls(
            erc20_vault=self.erc20_vault,
            money_vault=self.money_vault,
            uni_v3_vaults=self.uni_v3_vaults,
        )


def split_by_weights(amount: int, weights: Sequence[int]) -> List[int]:
    """Split amount proportionally to weights; rounding dust goes to the first weighted pool"""
    if not weights:
        raise ValueError("At least one weight is required")
    if any(weight < 0 for weight in weights):
        raise ValueError(f"Weights must be non-negative, got {list(weights)}")
    total_weight = sum(weights)
    if total_weight == 0:
        raise ValueError("Weights must not all be zero")

    parts = [amount * weight // total_weight for weight in weights]
    remainder = amount - sum(parts)
    if remainder:
        first = next(i for i, weight in enumerate(weights) if weight > 0)
        parts[first] += remainder
    return parts


def compute_target_allocation(
    ratios: RatioTriple,
    total_capital0: int,
    short: Interval,
    sqrt_price_x96: int,
    weights: Sequence[int],
    erc20_capital_ratio_d: int
) -> TargetAllocation:
    """
    Target holdings for every bucket.

    Args:
        ratios: target split from the ratio engine
        total_capital0: strategy capital in token0 terms
        short: interval the ranged positions should cover
        sqrt_price_x96: current pool sqrt price
        weights: relative share of ranged capital per sub-pool
        erc20_capital_ratio_d: share of total capital kept liquid in the ERC20 vault

    Returns:
        TargetAllocation whose buckets add up to total_capital0 up to rounding
    """
    denominator = ratios.denominator
    if not 0 <= erc20_capital_ratio_d <= denominator:
        raise ValueError(f"erc20_capital_ratio_d {erc20_capital_ratio_d} outside [0, {denominator}]")

    ranged_capital = mul_div(total_capital0, ratios.ranged_ratio_d, denominator)
    token0_capital = mul_div(total_capital0, ratios.token0_ratio_d, denominator)
    token1_capital = mul_div(total_capital0, ratios.token1_ratio_d, denominator)

    uni_v3_vaults = []
    uni_v3_liquidity = []
    for pool_capital in split_by_weights(ranged_capital, weights):
        liquidity = liquidity_for_capital(pool_capital, short, sqrt_price_x96)
        uni_v3_liquidity.append(liquidity)
        uni_v3_vaults.append(snapshot_from_position(liquidity, short.lower, short.upper, sqrt_price_x96))

    price_x96 = price_x96_from_sqrt_price(sqrt_price_x96)
    idle = CapitalSnapshot(token0_capital, mul_div(token1_capital, price_x96, Q96))
    idle_capital = token0_capital + token1_capital

    if idle_capital == 0:
        erc20_vault = CapitalSnapshot()
    else:
        erc20_capital = min(mul_div(total_capital0, erc20_capital_ratio_d, denominator), idle_capital)
        erc20_vault = CapitalSnapshot(
            mul_div(idle.amount0, erc20_capital, idle_capital),
            mul_div(idle.amount1, erc20_capital, idle_capital),
        )
    money_vault = CapitalSnapshot(idle.amount0 - erc20_vault.amount0, idle.amount1 - erc20_vault.amount1)

    return TargetAllocation(
        ranged_capital=ranged_capital,
        token0_capital=token0_capital,
        token1_capital=token1_capital,
        erc20_vault=erc20_vault,
        money_vault=money_vault,
        uni_v3_vaults=tuple(uni_v3_vaults),
        uni_v3_liquidity=tuple(uni_v3_liquidity),
    )
