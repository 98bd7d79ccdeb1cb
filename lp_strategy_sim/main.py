#!/usr/bin/env python3
"""
Multi-Pool Strategy Ratio Tool - Main Entry Point

Computes the new short interval, target capital split and per-bucket
allocation for a given pool price, and optionally sweeps the whole domain.
"""

import argparse
import json
import sys
from pathlib import Path

from lp_strategy_sim.analysis.ratio_charts import RatioChartGenerator
from lp_strategy_sim.analysis.ratio_curves import RatioCurveAnalyzer
from lp_strategy_sim.analysis.reporting import print_allocation, print_rebalance_report, summarize_tvls
from lp_strategy_sim.core.errors import RatioEngineError
from lp_strategy_sim.core.models import CapitalSnapshot, Interval, StrategyTvls
from lp_strategy_sim.core.tick_math import (
    format_price_x96, price_to_sqrt_price_x96, price_x96_from_sqrt_price,
    sqrt_price_at_tick, tick_at_sqrt_price
)
from lp_strategy_sim.engine.config import StrategyParams
from lp_strategy_sim.engine.rebalancer import MultiPoolRebalancer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Multi-pool strategy target ratio calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m lp_strategy_sim.main --tick 200000
  python -m lp_strategy_sim.main --price 485165195.4 --capital0 5000000000
  python -m lp_strategy_sim.main --tick 200800 --tvls tvls.json
  python -m lp_strategy_sim.main --config params.json --sweep 400 --csv curve.csv --chart-dir charts
        """
    )

    price_group = parser.add_mutually_exclusive_group()
    price_group.add_argument('--tick', type=int, help='Current pool tick')
    price_group.add_argument('--sqrt-price', type=int, help='Current sqrtPriceX96 (slot0)')
    price_group.add_argument('--price', type=str, help='Current price, token1 per token0, as a decimal')

    parser.add_argument('--config', type=str, help='JSON file with strategy parameters')
    parser.add_argument('--capital0', type=int, default=10 ** 10,
                        help='Capital (token0 units) to allocate (default: 1e10)')
    parser.add_argument('--sweep', type=int, metavar='POINTS',
                        help='Sweep target ratios over the domain with this many grid points')
    parser.add_argument('--profile-points', type=int, default=9,
                        help='Sample points inside the short interval (default: 9)')
    parser.add_argument('--csv', type=str, help='Write the sweep to this CSV file')
    parser.add_argument('--chart-dir', type=str, help='Write ratio charts into this directory')
    parser.add_argument('--tvls', type=str,
                        help='JSON file with current vault TVLs and short interval; runs a rebalance check')
    return parser


def resolve_sqrt_price(args, params: StrategyParams) -> int:
    if args.sqrt_price is not None:
        return args.sqrt_price
    if args.price is not None:
        return price_to_sqrt_price_x96(args.price)
    if args.tick is not None:
        return sqrt_price_at_tick(args.tick)
    return sqrt_price_at_tick((params.domain_lower_tick + params.domain_upper_tick) // 2)


def load_tvls_file(path: str):
    """
    Read a TVL snapshot:
    {"erc20_vault": [a0, a1], "money_vault": [a0, a1],
     "uni_v3_vaults": [[a0, a1], ...], "short_interval": [lower, upper]}
    """
    with open(path, 'r') as file:
        data = json.load(file)

    tvls = StrategyTvls.from_lists(
        data.get('erc20_vault', [0, 0]),
        data.get('money_vault', [0, 0]),
        data.get('uni_v3_vaults', [])
    )
    if 'short_interval' not in data:
        raise ValueError(f"{path} has no short_interval")
    return tvls, Interval(*data['short_interval'])


def main(argv=None) -> int:
    """Main entry point with command-line interface"""
    args = build_parser().parse_args(argv)

    try:
        params = StrategyParams.from_json_file(args.config) if args.config else StrategyParams()
        rebalancer = MultiPoolRebalancer(params)
        sqrt_price = resolve_sqrt_price(args, params)
        tick = tick_at_sqrt_price(sqrt_price)
        price_x96 = price_x96_from_sqrt_price(sqrt_price)
        short = rebalancer.calculate_new_position(tick)
        ratios = rebalancer.target_ratios(short, sqrt_price)
    except (RatioEngineError, ValueError) as e:
        print(f"❌ {e}")
        return 1

    print("=" * 60)
    print("TARGET RATIOS")
    print("=" * 60)
    print(f"Domain:         [{params.domain_lower_tick}, {params.domain_upper_tick}]")
    print(f"Current tick:   {tick}")
    print(f"Current price:  {format_price_x96(price_x96)}")
    print(f"Short interval: [{short.lower}, {short.upper}]")
    ranged, token0, token1 = ratios.as_fractions()
    print(f"Ranged:         {ratios.ranged_ratio_d:>12} ({ranged:.4%})")
    print(f"Token0 tail:    {ratios.token0_ratio_d:>12} ({token0:.4%})")
    print(f"Token1 tail:    {ratios.token1_ratio_d:>12} ({token1:.4%})")
    print(f"Sum check:      {'✅ PASS' if ratios.is_consistent() else '❌ FAIL'}")
    print()

    tvls = StrategyTvls(erc20_vault=CapitalSnapshot(args.capital0, 0))
    print_allocation(rebalancer.target_allocation(tvls, short, sqrt_price), price_x96)

    if args.tvls:
        try:
            current_tvls, current_short = load_tvls_file(args.tvls)
            decision = rebalancer.evaluate(current_tvls, current_short, sqrt_price, tick)
        except (RatioEngineError, ValueError) as e:
            print(f"❌ {e}")
            return 1
        print()
        print(summarize_tvls(current_tvls, price_x96, rebalancer.engine.denominator).to_string(index=False))
        print()
        print_rebalance_report(decision)

    if args.sweep:
        analyzer = RatioCurveAnalyzer(params, rebalancer.engine)
        curve = analyzer.domain_sweep(args.sweep)
        profile = analyzer.short_interval_profile(short, args.profile_points)
        summary = analyzer.summarize(curve)

        print()
        print(f"Domain sweep: {summary['points']} points")
        print(f"  Peak ranged ratio: {summary['peak_ranged_ratio_d']} at tick {summary['peak_tick']}")
        print(f"  Max ratio-sum error: {summary['max_ratio_sum_error']}")
        print(f"  Short interval profile unimodal: {analyzer.is_unimodal(profile['ranged_ratio_d'].tolist())}")

        if args.csv:
            curve.to_csv(args.csv, index=False)
            print(f"✅ Sweep saved: {args.csv}")
        if args.chart_dir:
            RatioChartGenerator().generate_charts(curve, profile, Path(args.chart_dir))

    return 0


if __name__ == "__main__":
    sys.exit(main())
