"""Strategy configuration and rebalance planning"""

from .config import StrategyParams
from .rebalancer import MultiPoolRebalancer, RebalanceDecision

__all__ = ["StrategyParams", "MultiPoolRebalancer", "RebalanceDecision"]
