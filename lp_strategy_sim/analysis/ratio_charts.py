#!/usr/bin/env python3
"""
Ratio Chart Generator

Stacked target split across the domain and the ranged-ratio profile inside
one short interval.
"""

import matplotlib.pyplot as plt
import pandas as pd
from pathlib import Path
from typing import List
import seaborn as sns


class RatioChartGenerator:
    """Renders ratio curves produced by RatioCurveAnalyzer"""

    def __init__(self):
        self._setup_styling()

    def _setup_styling(self):
        """Setup clean chart styling"""
        plt.style.use('default')
        sns.set_palette("husl")

        plt.rcParams.update({
            'figure.figsize': (12, 8),
            'font.size': 11,
            'axes.titlesize': 14,
            'axes.labelsize': 12,
            'legend.fontsize': 10,
            'xtick.labelsize': 10,
            'ytick.labelsize': 10
        })

    def generate_charts(self, domain_curve: pd.DataFrame, profile: pd.DataFrame,
                        charts_dir: Path, name: str = "strategy") -> List[Path]:
        """Write both charts into charts_dir and return their paths"""
        charts_dir = Path(charts_dir)
        charts_dir.mkdir(parents=True, exist_ok=True)
        return [
            self.create_domain_chart(domain_curve, charts_dir / f"{name}_domain_ratios.png"),
            self.create_profile_chart(profile, charts_dir / f"{name}_short_interval_profile.png"),
        ]

    def create_domain_chart(self, curve: pd.DataFrame, chart_path: Path) -> Path:
        """Stacked area of ranged / token0 / token1 shares against tick"""
        fig, ax = plt.subplots(figsize=(12, 7))
        ax.stackplot(
            curve['tick'],
            curve['token1_share'] * 100,
            curve['ranged_share'] * 100,
            curve['token0_share'] * 100,
            labels=['Token1 tail', 'Ranged', 'Token0 tail'],
            alpha=0.85
        )
        ax.set_xlabel('Current tick')
        ax.set_ylabel('Share of capital (%)')
        ax.set_ylim(0, 100)
        ax.set_title('Target Capital Split Across the Domain', fontweight='bold')
        ax.legend(loc='upper right')
        ax.grid(True, alpha=0.3)

        plt.tight_layout()
        fig.savefig(chart_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

        print(f"✅ Chart saved: {chart_path}")
        return chart_path

    def create_profile_chart(self, profile: pd.DataFrame, chart_path: Path) -> Path:
        """Ranged share as the price crosses one short interval"""
        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(profile['tick'], profile['ranged_share'] * 100, marker='o', linewidth=2)

        peak = profile.loc[profile['ranged_share'].idxmax()]
        ax.axvline(peak['tick'], color='gray', linestyle='--', alpha=0.6,
                   label=f"Peak {peak['ranged_share']:.4%} at tick {int(peak['tick'])}")

        ax.set_xlabel('Current tick')
        ax.set_ylabel('Ranged share (%)')
        ax.set_title('Ranged Share Inside the Short Interval', fontweight='bold')
        ax.legend()
        ax.grid(True, alpha=0.3)

        plt.tight_layout()
        fig.savefig(chart_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

        print(f"✅ Chart saved: {chart_path}")
        return chart_path
