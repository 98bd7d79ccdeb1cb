#!/usr/bin/env python3
"""
Command-line interface tests
"""

import sys
import os
import json

import matplotlib
matplotlib.use("Agg")

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from lp_strategy_sim.core.tick_math import sqrt_price_at_tick
from lp_strategy_sim.main import main


class TestMain:
    """End-to-end runs of the CLI"""

    def test_tick(self, capsys):
        assert main(["--tick", "200000"]) == 0

        out = capsys.readouterr().out
        assert "Short interval: [198000, 201600]" in out
        assert "✅ PASS" in out
        assert "TARGET ALLOCATION" in out

    def test_sqrt_price(self, capsys):
        assert main(["--sqrt-price", str(sqrt_price_at_tick(200800))]) == 0
        assert "Short interval: [199800, 203400]" in capsys.readouterr().out

    def test_default_price_is_domain_midpoint(self, capsys):
        assert main([]) == 0
        assert "Current tick:   205200" in capsys.readouterr().out

    def test_price_outside_domain(self, capsys):
        assert main(["--tick", "100"]) == 1
        assert "❌" in capsys.readouterr().out

    def test_invalid_price(self, capsys):
        assert main(["--price", "0"]) == 1

    def test_config_file(self, tmp_path, capsys):
        config = tmp_path / "params.json"
        config.write_text(json.dumps({"domain_lower_tick": -3600, "domain_upper_tick": 3600}))

        assert main(["--config", str(config), "--tick", "-100"]) == 0
        assert "Short interval: [-1800, 1800]" in capsys.readouterr().out

    def test_invalid_config_file(self, tmp_path, capsys):
        config = tmp_path / "params.json"
        config.write_text(json.dumps({"half_of_short_interval": 100}))

        assert main(["--config", str(config)]) == 1

    def test_rebalance_check(self, tmp_path, capsys):
        tvls = tmp_path / "tvls.json"
        tvls.write_text(json.dumps({
            "erc20_vault": [10 ** 10, 10 ** 18],
            "money_vault": [0, 0],
            "uni_v3_vaults": [[0, 0], [0, 0], [0, 0]],
            "short_interval": [198000, 201600],
        }))

        assert main(["--tick", "200000", "--tvls", str(tvls)]) == 0
        out = capsys.readouterr().out
        assert "REBALANCE CHECK" in out
        assert "ranged ratio drifted" in out
        assert "uni_v3_2" in out

    def test_rebalance_check_without_short_interval(self, tmp_path, capsys):
        tvls = tmp_path / "tvls.json"
        tvls.write_text(json.dumps({"erc20_vault": [1, 1]}))

        assert main(["--tick", "200000", "--tvls", str(tvls)]) == 1

    def test_sweep_outputs(self, tmp_path, capsys):
        csv_path = tmp_path / "curve.csv"
        chart_dir = tmp_path / "charts"

        assert main(["--tick", "200000", "--sweep", "20", "--csv", str(csv_path), "--chart-dir", str(chart_dir)]) == 0

        out = capsys.readouterr().out
        assert "Domain sweep: 20 points" in out
        assert csv_path.exists()
        assert (chart_dir / "strategy_domain_ratios.png").exists()
        assert (chart_dir / "strategy_short_interval_profile.png").exists()
