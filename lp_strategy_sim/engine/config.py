#!/usr/bin/env python3
"""
Strategy parameter schema

Pydantic model for the strategy's mutable parameters. Defaults reproduce the
multi-pool deployment: 0.05%/0.3%/1% pools weighted equally, a domain of
[190800, 219600] and a short interval of +-1800 ticks.
"""

import json
from pathlib import Path
from typing import List, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from ..core.models import Interval
from ..core.ratio_engine import DENOMINATOR
from ..core.tick_math import MAX_TICK, MIN_TICK


class StrategyParams(BaseModel):
    """Mutable parameters of the multi-pool strategy"""
    half_of_short_interval: int = Field(1800, gt=0, description="Half width of the short interval in ticks")
    domain_lower_tick: int = Field(190800, ge=MIN_TICK, le=MAX_TICK, description="Lower tick of the domain")
    domain_upper_tick: int = Field(219600, ge=MIN_TICK, le=MAX_TICK, description="Upper tick of the domain")
    tick_spacing: int = Field(600, gt=0, description="Grid every tick parameter must sit on")
    erc20_capital_ratio_d: int = Field(
        5_000_000, ge=0, le=DENOMINATOR, description="Share of capital kept in the ERC20 vault"
    )
    uni_v3_weights: List[int] = Field(default_factory=lambda: [1, 1, 1], description="Ranged capital weight per pool")
    rebalance_threshold_d: int = Field(
        DENOMINATOR // 10000 * 5, ge=0, le=DENOMINATOR,
        description="Allowed gap between realized and target ranged ratio"
    )

    @field_validator('uni_v3_weights')
    @classmethod
    def validate_weights(cls, v):
        """Weights are non-negative with a positive sum"""
        if not v:
            raise ValueError("uni_v3_weights must not be empty")
        if any(weight < 0 for weight in v):
            raise ValueError("uni_v3_weights must be non-negative")
        if sum(v) == 0:
            raise ValueError("uni_v3_weights must not all be zero")
        return v

    @model_validator(mode='after')
    def validate_domain(self):
        """Domain is ordered, on the tick grid and wide enough for the short interval"""
        if self.domain_lower_tick >= self.domain_upper_tick:
            raise ValueError("domain_lower_tick must be below domain_upper_tick")
        for name in ('domain_lower_tick', 'domain_upper_tick', 'half_of_short_interval'):
            if getattr(self, name) % self.tick_spacing != 0:
                raise ValueError(f"{name} must be a multiple of tick_spacing {self.tick_spacing}")
        if 2 * self.half_of_short_interval > self.domain_upper_tick - self.domain_lower_tick:
            raise ValueError("short interval does not fit into the domain")
        return self

    @property
    def domain(self) -> Interval:
        return Interval(self.domain_lower_tick, self.domain_upper_tick)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "StrategyParams":
        """Load parameters from a JSON file; missing keys keep their defaults"""
        with open(path, 'r') as file:
            return cls.model_validate(json.load(file))

    def to_json_file(self, path: Union[str, Path]):
        with open(path, 'w') as file:
            json.dump(self.model_dump(), file, indent=2)
