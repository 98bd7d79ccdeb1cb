#!/usr/bin/env python3
"""
Ranged Position Helpers

Liquidity <-> token amount conversion for concentrated positions (rounding
down, as the position manager reports them) and the placement of a new short
interval around the current tick.
"""

from typing import Tuple

from .errors import InvalidIntervalError, RatioComputationError
from .models import CapitalSnapshot, Interval
from .tick_math import Q96, mul_div, price_x96_from_sqrt_price, sqrt_price_at_tick

# Reference liquidity used to price one unit of a position (uint128 scale)
REFERENCE_LIQUIDITY = 1 << 128


def _ordered(sqrt_a_x96: int, sqrt_b_x96: int) -> Tuple[int, int]:
    if sqrt_a_x96 > sqrt_b_x96:
        return sqrt_b_x96, sqrt_a_x96
    return sqrt_a_x96, sqrt_b_x96


def get_amount0_for_liquidity(sqrt_a_x96: int, sqrt_b_x96: int, liquidity: int) -> int:
    sqrt_a_x96, sqrt_b_x96 = _ordered(sqrt_a_x96, sqrt_b_x96)
    return mul_div(liquidity << 96, sqrt_b_x96 - sqrt_a_x96, sqrt_b_x96) // sqrt_a_x96


def get_amount1_for_liquidity(sqrt_a_x96: int, sqrt_b_x96: int, liquidity: int) -> int:
    sqrt_a_x96, sqrt_b_x96 = _ordered(sqrt_a_x96, sqrt_b_x96)
    return mul_div(liquidity, sqrt_b_x96 - sqrt_a_x96, Q96)


def get_liquidity_for_amount0(sqrt_a_x96: int, sqrt_b_x96: int, amount0: int) -> int:
    sqrt_a_x96, sqrt_b_x96 = _ordered(sqrt_a_x96, sqrt_b_x96)
    intermediate = mul_div(sqrt_a_x96, sqrt_b_x96, Q96)
    return mul_div(amount0, intermediate, sqrt_b_x96 - sqrt_a_x96)


def get_liquidity_for_amount1(sqrt_a_x96: int, sqrt_b_x96: int, amount1: int) -> int:
    sqrt_a_x96, sqrt_b_x96 = _ordered(sqrt_a_x96, sqrt_b_x96)
    return mul_div(amount1, Q96, sqrt_b_x96 - sqrt_a_x96)


def amounts_for_liquidity(sqrt_price_x96: int, sqrt_a_x96: int, sqrt_b_x96: int,
                          liquidity: int) -> Tuple[int, int]:
    """Token amounts held by ``liquidity`` on [a, b] at the current price"""
    sqrt_a_x96, sqrt_b_x96 = _ordered(sqrt_a_x96, sqrt_b_x96)
    if liquidity == 0 or sqrt_a_x96 == sqrt_b_x96:
        return 0, 0

    if sqrt_price_x96 <= sqrt_a_x96:
        return get_amount0_for_liquidity(sqrt_a_x96, sqrt_b_x96, liquidity), 0
    if sqrt_price_x96 < sqrt_b_x96:
        return (
            get_amount0_for_liquidity(sqrt_price_x96, sqrt_b_x96, liquidity),
            get_amount1_for_liquidity(sqrt_a_x96, sqrt_price_x96, liquidity),
        )
    return 0, get_amount1_for_liquidity(sqrt_a_x96, sqrt_b_x96, liquidity)


def liquidity_for_amounts(sqrt_price_x96: int, sqrt_a_x96: int, sqrt_b_x96: int,
                          amount0: int, amount1: int) -> int:
    """Largest liquidity on [a, b] fundable with the given amounts"""
    sqrt_a_x96, sqrt_b_x96 = _ordered(sqrt_a_x96, sqrt_b_x96)

    if sqrt_price_x96 <= sqrt_a_x96:
        return get_liquidity_for_amount0(sqrt_a_x96, sqrt_b_x96, amount0)
    if sqrt_price_x96 < sqrt_b_x96:
        return min(
            get_liquidity_for_amount0(sqrt_price_x96, sqrt_b_x96, amount0),
            get_liquidity_for_amount1(sqrt_a_x96, sqrt_price_x96, amount1),
        )
    return get_liquidity_for_amount1(sqrt_a_x96, sqrt_b_x96, amount1)


def snapshot_from_position(liquidity: int, tick_lower: int, tick_upper: int,
                           sqrt_price_x96: int) -> CapitalSnapshot:
    """CapitalSnapshot from position manager fields (liquidity, tickLower, tickUpper)"""
    amount0, amount1 = amounts_for_liquidity(
        sqrt_price_x96, sqrt_price_at_tick(tick_lower), sqrt_price_at_tick(tick_upper), liquidity
    )
    return CapitalSnapshot(amount0, amount1)


def liquidity_for_capital(capital0: int, interval: Interval, sqrt_price_x96: int) -> int:
    """Liquidity on ``interval`` worth ``capital0`` token0 units at the current price"""
    if capital0 == 0:
        return 0

    reference = snapshot_from_position(REFERENCE_LIQUIDITY, interval.lower, interval.upper, sqrt_price_x96)
    reference_capital = reference.capital_in_token0(price_x96_from_sqrt_price(sqrt_price_x96))
    if reference_capital == 0:
        raise RatioComputationError(f"Interval {interval.as_tuple()} has no value at sqrt price {sqrt_price_x96}")

    return mul_div(REFERENCE_LIQUIDITY, capital0, reference_capital)


def calculate_new_position(domain: Interval, half_of_short_interval: int, tick: int) -> Interval:
    """
    Short interval of width 2 * half_of_short_interval around the current tick.

    The centre is the multiple of half_of_short_interval nearest to tick (ties
    go down). An interval spilling over a domain edge is shifted back inside.
    """
    if half_of_short_interval <= 0:
        raise InvalidIntervalError(f"half_of_short_interval must be positive, got {half_of_short_interval}")
    if domain.lower >= domain.upper or 2 * half_of_short_interval > domain.width:
        raise InvalidIntervalError(
            f"domain {domain.as_tuple()} cannot hold a short interval of width {2 * half_of_short_interval}"
        )

    lower_tick = (tick // half_of_short_interval) * half_of_short_interval
    upper_tick = lower_tick + half_of_short_interval
    centre = lower_tick if tick - lower_tick <= upper_tick - tick else upper_tick

    new_lower = centre - half_of_short_interval
    new_upper = centre + half_of_short_interval

    if new_lower < domain.lower:
        new_lower = domain.lower
        new_upper = new_lower + 2 * half_of_short_interval
    if new_upper > domain.upper:
        new_upper = domain.upper
        new_lower = new_upper - 2 * half_of_short_interval

    return Interval(new_lower, new_upper)
