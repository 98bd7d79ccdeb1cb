#!/usr/bin/env python3
"""
Example Usage of the Multi-Pool Strategy Ratio Engine

This script demonstrates:
- Target ratios for a single price
- A full rebalance cycle (deposit, deploy, re-check)
- How the split changes as the price crosses the short interval
- Parameter variations (short interval width, pool weights)
"""

from lp_strategy_sim import (
    CapitalSnapshot, Interval, MultiPoolRebalancer, RatioCurveAnalyzer,
    StrategyParams, StrategyTvls
)
from lp_strategy_sim.analysis.reporting import print_allocation, print_rebalance_report, summarize_tvls
from lp_strategy_sim.core.tick_math import price_x96_from_sqrt_price, sqrt_price_at_tick


def example_single_price():
    """Example: target ratios at one tick"""
    print("="*60)
    print("EXAMPLE 1: Target Ratios at Tick 200000")
    print("="*60)

    rebalancer = MultiPoolRebalancer()
    sqrt_price = sqrt_price_at_tick(200000)
    short = rebalancer.calculate_new_position(200000)
    ratios = rebalancer.target_ratios(short, sqrt_price)

    ranged, token0, token1 = ratios.as_fractions()
    print(f"Short interval: {short.as_tuple()}")
    print(f"Ranged: {ranged:.4%}  Token0 tail: {token0:.4%}  Token1 tail: {token1:.4%}")
    print(f"Ratio sum: {ratios.total} / {ratios.denominator}")

    return ratios


def example_rebalance_cycle():
    """Example: deposit into the ERC20 vault, deploy and re-check"""
    print("\n" + "="*60)
    print("EXAMPLE 2: Rebalance Cycle")
    print("="*60)

    rebalancer = MultiPoolRebalancer()
    sqrt_price = sqrt_price_at_tick(200000)
    price_x96 = price_x96_from_sqrt_price(sqrt_price)
    deposit = StrategyTvls(erc20_vault=CapitalSnapshot(10 ** 10, 10 ** 18))

    short = rebalancer.calculate_new_position(200000)
    print_rebalance_report(rebalancer.evaluate(deposit, short, sqrt_price))

    allocation = rebalancer.target_allocation(deposit, short, sqrt_price)
    print_allocation(allocation, price_x96)

    deployed = allocation.as_tvls()
    print(summarize_tvls(deployed, price_x96).to_string(index=False))
    decision = rebalancer.evaluate(deployed, short, sqrt_price)
    print_rebalance_report(decision)

    return decision


def example_short_interval_profile():
    """Example: ranged share as the price crosses the short interval"""
    print("\n" + "="*60)
    print("EXAMPLE 3: Short Interval Profile")
    print("="*60)

    analyzer = RatioCurveAnalyzer()
    profile = analyzer.short_interval_profile(Interval(198000, 201600), 9)

    print(f"{'Tick':<10} {'Ranged':<12} {'Token0':<12} {'Token1':<12}")
    print("-" * 46)
    for _, row in profile.iterrows():
        print(f"{int(row['tick']):<10} {row['ranged_share']:<12.4%} {row['token0_share']:<12.4%} {row['token1_share']:<12.4%}")

    return profile


def example_parameter_variations():
    """Example: wider short intervals hold more capital in range"""
    print("\n" + "="*60)
    print("EXAMPLE 4: Parameter Variations")
    print("="*60)

    sqrt_price = sqrt_price_at_tick(205000)
    print(f"{'Half width':<12} {'Short interval':<20} {'Ranged share':<12}")
    print("-" * 46)
    for half in (600, 1200, 1800, 3600, 7200):
        rebalancer = MultiPoolRebalancer(StrategyParams(half_of_short_interval=half))
        short = rebalancer.calculate_new_position(205000)
        ranged, _, _ = rebalancer.target_ratios(short, sqrt_price).as_fractions()
        print(f"{half:<12} {str(short.as_tuple()):<20} {ranged:<12.4%}")

    weighted = MultiPoolRebalancer(StrategyParams(uni_v3_weights=[3, 2, 1]))
    deposit = StrategyTvls(erc20_vault=CapitalSnapshot(10 ** 10, 0))
    allocation = weighted.target_allocation(deposit, weighted.calculate_new_position(205000), sqrt_price)
    print(f"\nLiquidity per pool with weights [3, 2, 1]: {list(allocation.uni_v3_liquidity)}")


def main():
    """Run all examples"""
    print("Multi-Pool Strategy Ratio Engine - Example Usage")
    print("="*60)

    example_single_price()
    example_rebalance_cycle()
    example_short_interval_profile()
    example_parameter_variations()

    print("\n" + "="*60)
    print("All examples completed successfully!")
    print("="*60)


if __name__ == "__main__":
    main()
