#!/usr/bin/env python3
"""
Strategy Reports

Tabular and console views of TVLs, target allocations and rebalance decisions.
"""

import pandas as pd

from ..core.allocation import TargetAllocation
from ..core.models import StrategyTvls
from ..core.ratio_engine import DENOMINATOR
from ..core.tick_math import format_price_x96, mul_div
from ..engine.rebalancer import RebalanceDecision


def summarize_tvls(tvls: StrategyTvls, price_x96: int, denominator: int = DENOMINATOR) -> pd.DataFrame:
    """Per-bucket amounts, capital in token0 terms and share of the total"""
    buckets = [('erc20', tvls.erc20_vault), ('money', tvls.money_vault)]
    buckets += [(f'uni_v3_{i}', snapshot) for i, snapshot in enumerate(tvls.uni_v3_vaults)]

    total_capital = tvls.total.capital_in_token0(price_x96)
    rows = []
    for name, snapshot in buckets:
        capital = snapshot.capital_in_token0(price_x96)
        rows.append({
            'bucket': name,
            'amount0': snapshot.amount0,
            'amount1': snapshot.amount1,
            'capital0': capital,
            'share_d': mul_div(denominator, capital, total_capital) if total_capital else 0,
        })
    return pd.DataFrame(rows)


def print_allocation(allocation: TargetAllocation, price_x96: int):
    """Console table of a target allocation"""
    print("=" * 60)
    print("TARGET ALLOCATION")
    print("=" * 60)
    print(f"Price (token1 per token0): {format_price_x96(price_x96)}")
    print(f"Ranged capital:  {allocation.ranged_capital:,}")
    print(f"Token0 tail:     {allocation.token0_capital:,}")
    print(f"Token1 tail:     {allocation.token1_capital:,} (token0 terms)")
    print()
    print(f"{'Bucket':<12} {'Amount0':>24} {'Amount1':>30}")
    print("-" * 68)
    print(f"{'erc20':<12} {allocation.erc20_vault.amount0:>24,} {allocation.erc20_vault.amount1:>30,}")
    print(f"{'money':<12} {allocation.money_vault.amount0:>24,} {allocation.money_vault.amount1:>30,}")
    for i, snapshot in enumerate(allocation.uni_v3_vaults):
        print(f"{f'uni_v3_{i}':<12} {snapshot.amount0:>24,} {snapshot.amount1:>30,}")


def print_rebalance_report(decision: RebalanceDecision):
    """Console summary of a rebalance decision"""
    interval = decision.new_short_interval
    print("=" * 60)
    print("REBALANCE CHECK")
    print("=" * 60)
    print(f"New short interval: [{interval.lower}, {interval.upper}]")

    if decision.skipped:
        print(f"⚠️  Skipped: {decision.reason}")
        return

    ranged, token0, token1 = decision.target_ratios.as_fractions()
    print(f"Target ranged ratio:  {ranged:.6%}")
    print(f"Target token0 ratio:  {token0:.6%}")
    print(f"Target token1 ratio:  {token1:.6%}")
    print(f"Realized ranged:      {decision.realized_ratio_d / decision.target_ratios.denominator:.6%}")
    print(f"Deviation:            {decision.deviation_d} / {decision.target_ratios.denominator}")
    status = "🔄 REBALANCE" if decision.should_rebalance else "✅ HOLD"
    print(f"{status} ({decision.reason})")
