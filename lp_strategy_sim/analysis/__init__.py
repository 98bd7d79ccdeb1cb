"""Ratio curves, reports and charts"""

from .ratio_curves import RatioCurveAnalyzer
from .reporting import summarize_tvls, print_allocation, print_rebalance_report

__all__ = ["RatioCurveAnalyzer", "summarize_tvls", "print_allocation", "print_rebalance_report"]
