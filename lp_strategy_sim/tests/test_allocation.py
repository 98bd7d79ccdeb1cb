#!/usr/bin/env python3
"""
Target Allocation Test Suite

Weight splitting and the per-bucket targets derived from a ratio triple.
"""

import sys
import os

import pytest

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from lp_strategy_sim.core.allocation import compute_target_allocation, split_by_weights
from lp_strategy_sim.core.models import Interval
from lp_strategy_sim.core.ratio_engine import DENOMINATOR, RatioEngine
from lp_strategy_sim.core.tick_math import price_x96_from_sqrt_price, sqrt_price_at_tick


class TestSplitByWeights:
    """Floor split with the remainder on the first weighted pool"""

    @pytest.mark.parametrize("amount,weights,expected", [
        (10, [1, 1, 1], [4, 3, 3]),
        (100, [1, 0, 3], [25, 0, 75]),
        (7, [0, 2, 1], [0, 5, 2]),
        (0, [1, 1], [0, 0]),
        (5, [3], [5]),
    ])
    def test_split(self, amount, weights, expected):
        assert split_by_weights(amount, weights) == expected

    def test_parts_sum_to_amount(self):
        for amount in (1, 99, 10 ** 18 + 7):
            assert sum(split_by_weights(amount, [5, 3, 2, 7])) == amount

    @pytest.mark.parametrize("weights", [[], [0, 0], [1, -1]])
    def test_invalid_weights(self, weights):
        with pytest.raises(ValueError):
            split_by_weights(10, weights)


class TestTargetAllocation:
    """Bucket targets for the default multi-pool layout"""

    def setup_method(self):
        self.engine = RatioEngine()
        self.domain = Interval(190800, 219600)
        self.short = Interval(198000, 201600)
        self.sqrt_price = sqrt_price_at_tick(200000)
        self.price_x96 = price_x96_from_sqrt_price(self.sqrt_price)
        self.capital0 = 10 ** 10
        self.ratios = self.engine.compute_target_ratios(self.domain, self.short, self.sqrt_price)

    def allocate(self, weights=(1, 1, 1), erc20_capital_ratio_d=5_000_000):
        return compute_target_allocation(
            self.ratios, self.capital0, self.short, self.sqrt_price, list(weights), erc20_capital_ratio_d
        )

    def test_capital_is_conserved(self):
        allocation = self.allocate()
        tvls = allocation.as_tvls()
        total = tvls.total.capital_in_token0(self.price_x96)

        assert total <= self.capital0
        assert self.capital0 - total <= self.capital0 // 10 ** 6
        assert allocation.ranged_capital + allocation.token0_capital + allocation.token1_capital <= self.capital0

    def test_one_position_per_weight(self):
        allocation = self.allocate()
        assert len(allocation.uni_v3_vaults) == 3
        assert len(allocation.uni_v3_liquidity) == 3
        assert all(liquidity > 0 for liquidity in allocation.uni_v3_liquidity)
        assert max(allocation.uni_v3_liquidity) - min(allocation.uni_v3_liquidity) <= max(allocation.uni_v3_liquidity) // 10 ** 6

    def test_zero_weight_pool_gets_nothing(self):
        allocation = self.allocate(weights=(1, 0, 3))
        assert allocation.uni_v3_liquidity[1] == 0
        assert allocation.uni_v3_vaults[1].is_empty
        assert allocation.uni_v3_liquidity[2] > allocation.uni_v3_liquidity[0]

    def test_ranged_positions_hold_both_tokens(self):
        for snapshot in self.allocate().uni_v3_vaults:
            assert snapshot.amount0 > 0
            assert snapshot.amount1 > 0

    def test_erc20_share(self):
        allocation = self.allocate()
        erc20_capital = allocation.erc20_vault.capital_in_token0(self.price_x96)
        expected = self.capital0 * 5_000_000 // DENOMINATOR

        assert abs(erc20_capital - expected) <= 3
        assert allocation.money_vault.capital_in_token0(self.price_x96) > erc20_capital

    def test_erc20_capped_by_idle_capital(self):
        allocation = self.allocate(erc20_capital_ratio_d=DENOMINATOR)
        assert allocation.money_vault.is_empty
        assert not allocation.erc20_vault.is_empty

    def test_no_erc20_share(self):
        allocation = self.allocate(erc20_capital_ratio_d=0)
        assert allocation.erc20_vault.is_empty

    def test_full_domain_short_has_no_idle_capital(self):
        ratios = self.engine.compute_target_ratios(self.domain, self.domain, self.sqrt_price)
        allocation = compute_target_allocation(
            ratios, self.capital0, self.domain, self.sqrt_price, [1, 1, 1], 5_000_000
        )
        assert allocation.ranged_capital == self.capital0
        assert allocation.erc20_vault.is_empty
        assert allocation.money_vault.is_empty

    @pytest.mark.parametrize("ratio_d", [-1, DENOMINATOR + 1])
    def test_invalid_erc20_ratio(self, ratio_d):
        with pytest.raises(ValueError):
            self.allocate(erc20_capital_ratio_d=ratio_d)
