#!/usr/bin/env python3
"""
Multi-Pool Rebalancer Test Suite

End-to-end rebalance cycles: deposit into the ERC20 vault, deploy the target
allocation and check the realized ranged ratio against the target.
"""

import sys
import os

import pytest

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from lp_strategy_sim.analysis.reporting import print_rebalance_report
from lp_strategy_sim.core.models import CapitalSnapshot, Interval, StrategyTvls
from lp_strategy_sim.core.ratio_engine import DENOMINATOR, RatioEngine
from lp_strategy_sim.core.tick_math import price_x96_from_sqrt_price, sqrt_price_at_tick, tick_at_sqrt_price
from lp_strategy_sim.engine.config import StrategyParams
from lp_strategy_sim.engine.rebalancer import MultiPoolRebalancer


class TestRebalanceCycle:
    """Deposit, rebalance, compare"""

    def setup_method(self):
        self.rebalancer = MultiPoolRebalancer(StrategyParams())
        self.deposit = StrategyTvls(erc20_vault=CapitalSnapshot(10 ** 10, 10 ** 18))

    def deploy(self, sqrt_price):
        short = self.rebalancer.calculate_new_position(tick_at_sqrt_price(sqrt_price))
        allocation = self.rebalancer.target_allocation(self.deposit, short, sqrt_price)
        return short, allocation.as_tvls()

    @pytest.mark.parametrize("tick", [191000, 195123, 200000, 204321, 210000, 219000])
    def test_realized_matches_target(self, tick):
        sqrt_price = sqrt_price_at_tick(tick) + 12345678901234567890
        short, deployed = self.deploy(sqrt_price)

        target = self.rebalancer.target_ratios(short, sqrt_price)
        realized = self.rebalancer.engine.compute_realized_ratio(deployed, price_x96_from_sqrt_price(sqrt_price))

        assert abs(realized - target.ranged_ratio_d) <= DENOMINATOR // 10000 * 5

    def test_deployed_strategy_holds(self):
        sqrt_price = sqrt_price_at_tick(200000) + 12345678901234567890
        short, deployed = self.deploy(sqrt_price)

        decision = self.rebalancer.evaluate(deployed, short, sqrt_price)

        assert decision.reason == "within tolerance"
        assert not decision.should_rebalance
        assert decision.new_short_interval == short
        assert decision.deviation_d <= self.rebalancer.params.rebalance_threshold_d

    def test_idle_strategy_drifts(self):
        sqrt_price = sqrt_price_at_tick(200000)
        short = self.rebalancer.calculate_new_position(200000)

        decision = self.rebalancer.evaluate(self.deposit, short, sqrt_price)

        assert decision.should_rebalance
        assert decision.reason == "ranged ratio drifted"
        assert decision.realized_ratio_d == 0
        assert decision.deviation_d == decision.target_ratios.ranged_ratio_d

    def test_price_move_shifts_short_interval(self):
        sqrt_price = sqrt_price_at_tick(200000)
        short, deployed = self.deploy(sqrt_price)

        moved = sqrt_price_at_tick(203000)
        decision = self.rebalancer.evaluate(deployed, short, moved)

        assert decision.should_rebalance
        assert decision.reason == "short interval moved"
        assert decision.new_short_interval == Interval(201600, 205200)

    def test_explicit_tick_is_used(self):
        sqrt_price = sqrt_price_at_tick(200000)
        decision = self.rebalancer.evaluate(self.deposit, Interval(198000, 201600), sqrt_price, tick=200800)
        assert decision.new_short_interval == Interval(199800, 203400)


class TestSkippedCycles:
    """Recoverable conditions skip the cycle instead of raising"""

    def setup_method(self):
        self.rebalancer = MultiPoolRebalancer()
        self.short = Interval(198000, 201600)

    def test_price_outside_domain(self, capsys):
        tvls = StrategyTvls(erc20_vault=CapitalSnapshot(10 ** 10, 0))
        decision = self.rebalancer.evaluate(tvls, self.short, sqrt_price_at_tick(150000))

        assert not decision.should_rebalance
        assert decision.skipped
        assert decision.reason == "price outside domain"
        assert decision.new_short_interval == Interval(190800, 194400)
        assert "Skipping rebalance" in capsys.readouterr().out

    def test_no_capital(self, capsys):
        decision = self.rebalancer.evaluate(StrategyTvls(), self.short, sqrt_price_at_tick(200000))

        assert not decision.should_rebalance
        assert decision.skipped
        assert decision.reason == "no capital"
        assert "Skipping rebalance" in capsys.readouterr().out

    def test_report_for_skipped_decision(self, capsys):
        decision = self.rebalancer.evaluate(StrategyTvls(), self.short, sqrt_price_at_tick(200000))
        capsys.readouterr()

        print_rebalance_report(decision)
        out = capsys.readouterr().out
        assert "Skipped: no capital" in out
        assert "[198000, 201600]" in out


class TestDefaultParameters:
    """Default deployment: three equally weighted pools"""

    def test_default_ratios(self):
        rebalancer = MultiPoolRebalancer()
        assert rebalancer.params.uni_v3_weights == [1, 1, 1]

        for tick in (190800, 197000, 205200, 214321, 219599):
            sqrt_price = sqrt_price_at_tick(tick)
            ratios = rebalancer.target_ratios(rebalancer.calculate_new_position(tick), sqrt_price)
            assert 0 < ratios.ranged_ratio_d < DENOMINATOR
            assert abs(ratios.total - DENOMINATOR) <= 1000

    def test_report_for_active_decision(self, capsys):
        rebalancer = MultiPoolRebalancer(engine=RatioEngine())
        deposit = StrategyTvls(erc20_vault=CapitalSnapshot(10 ** 10, 10 ** 18))
        decision = rebalancer.evaluate(deposit, Interval(198000, 201600), sqrt_price_at_tick(200000))

        print_rebalance_report(decision)
        out = capsys.readouterr().out
        assert "REBALANCE" in out
        assert "ranged ratio drifted" in out
