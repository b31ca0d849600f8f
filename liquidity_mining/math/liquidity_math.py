"""
Liquidity Math - 토큰 수량 ↔ 유동성 변환

포지션 민트 시 원하는 토큰 수량으로 얻을 수 있는 유동성과,
그 유동성에 실제로 필요한 토큰 수량을 계산합니다.

References:
- Uniswap V3 Periphery: contracts/libraries/LiquidityAmounts.sol
- Uniswap V3 Core: contracts/libraries/SqrtPriceMath.sol

핵심 공식:
    L = Δx * √P_a * √P_b / (√P_b - √P_a)   # token0 기준
    L = Δy / (√P_b - √P_a)                 # token1 기준
"""

from typing import Tuple

from ..constants import Q96


def _sorted(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int) -> Tuple[int, int]:
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        return sqrt_ratio_b_x96, sqrt_ratio_a_x96
    return sqrt_ratio_a_x96, sqrt_ratio_b_x96


def _div_rounding_up(numerator: int, denominator: int) -> int:
    """numerator / denominator 올림"""
    return -(-numerator // denominator)


def amount0_for_liquidity(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool = False
) -> int:
    """두 가격 사이에서 유동성에 해당하는 token0 양

    Δx = L * (√P_b - √P_a) / (√P_a * √P_b)
    """
    sqrt_a, sqrt_b = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    numerator = (liquidity << 96) * (sqrt_b - sqrt_a)

    if round_up:
        return _div_rounding_up(_div_rounding_up(numerator, sqrt_b), sqrt_a)
    return numerator // sqrt_b // sqrt_a


def amount1_for_liquidity(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool = False
) -> int:
    """두 가격 사이에서 유동성에 해당하는 token1 양

    Δy = L * (√P_b - √P_a)
    """
    sqrt_a, sqrt_b = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    numerator = liquidity * (sqrt_b - sqrt_a)

    if round_up:
        return _div_rounding_up(numerator, Q96)
    return numerator // Q96


def get_liquidity_for_amounts(
    sqrt_ratio_x96: int,
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount0: int,
    amount1: int
) -> int:
    """토큰 수량에서 민트 가능한 최대 유동성 계산

    Args:
        sqrt_ratio_x96: 현재 sqrtPriceX96
        sqrt_ratio_a_x96: 하한 sqrtPriceX96
        sqrt_ratio_b_x96: 상한 sqrtPriceX96
        amount0: token0 수량
        amount1: token1 수량

    Returns:
        유동성 (두 제약 조건 중 작은 값)
    """
    sqrt_a, sqrt_b = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    if sqrt_a == sqrt_b:
        return 0

    def for_amount0(lower: int, upper: int) -> int:
        return amount0 * (lower * upper // Q96) // (upper - lower)

    def for_amount1(lower: int, upper: int) -> int:
        return amount1 * Q96 // (upper - lower)

    if sqrt_ratio_x96 <= sqrt_a:
        # 가격이 범위 아래: token0만 사용
        return for_amount0(sqrt_a, sqrt_b)
    if sqrt_ratio_x96 < sqrt_b:
        return min(for_amount0(sqrt_ratio_x96, sqrt_b), for_amount1(sqrt_a, sqrt_ratio_x96))
    # 가격이 범위 위: token1만 사용
    return for_amount1(sqrt_a, sqrt_b)


def get_amounts_for_liquidity(
    sqrt_ratio_x96: int,
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool = False
) -> Tuple[int, int]:
    """유동성에서 포지션이 보유하는 토큰 수량 계산

    민트 시 풀이 받아야 하는 수량은 round_up=True 로 계산합니다.

    Returns:
        (amount0, amount1) 튜플
    """
    sqrt_a, sqrt_b = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    if sqrt_ratio_x96 <= sqrt_a:
        return amount0_for_liquidity(sqrt_a, sqrt_b, liquidity, round_up), 0
    if sqrt_ratio_x96 < sqrt_b:
        return (
            amount0_for_liquidity(sqrt_ratio_x96, sqrt_b, liquidity, round_up),
            amount1_for_liquidity(sqrt_a, sqrt_ratio_x96, liquidity, round_up),
        )
    return 0, amount1_for_liquidity(sqrt_a, sqrt_b, liquidity, round_up)
