"""
Price Math - 풀 초기 가격 계산

원하는 두 토큰 수량 비율을 sqrtPriceX96 (Q64.96) 으로 변환합니다.

    ratio = amount1 * 2^192 / amount0
    sqrtPriceX96 = floor(√ratio)

제곱 후 재구성한 비율은 내림 오차만큼 원래 값보다 작을 수 있습니다
(최소 단위 1 이하). 이는 정상적인 정밀도 손실입니다.
"""

from ..constants import Q192
from ..errors import DivisionByZero, DomainError
from .sqrt_math import sqrt


def price_from_ratio(amount0: int, amount1: int) -> int:
    """토큰 수량 비율에서 sqrtPriceX96 계산

    Args:
        amount0: token0 수량 (분모)
        amount1: token1 수량

    Returns:
        sqrtPriceX96

    Raises:
        DivisionByZero: amount0가 0인 경우
        DomainError: 수량이 음수인 경우
    """
    if amount0 == 0:
        raise DivisionByZero()
    if amount0 < 0 or amount1 < 0:
        raise DomainError(f"수량은 음수일 수 없습니다: amount0={amount0}, amount1={amount1}")

    ratio = (amount1 << 192) // amount0
    return sqrt(ratio)


def ratio_from_sqrt_price(sqrt_price_x96: int, amount0: int) -> int:
    """sqrtPriceX96 에서 amount0 에 대응하는 amount1 재구성

    amount1 = amount0 * sqrtPriceX96^2 / 2^192 (내림)

    Args:
        sqrt_price_x96: sqrtPriceX96 값
        amount0: token0 수량

    Returns:
        재구성된 amount1
    """
    return amount0 * sqrt_price_x96 * sqrt_price_x96 // Q192
