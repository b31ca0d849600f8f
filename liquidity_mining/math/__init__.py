"""
Math layer for Liquidity Mining

정수 전용 고정소수점 수학 함수들:
- sqrt_math: 정수 제곱근
- price_math: 토큰 비율 → sqrtPriceX96
- tick_math: Tick ↔ sqrtPriceX96 변환
- liquidity_math: 토큰 수량 ↔ 유동성
"""

from .sqrt_math import sqrt
from .price_math import price_from_ratio, ratio_from_sqrt_price
from .tick_math import (
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
    is_valid_tick_range,
)
from .liquidity_math import (
    get_liquidity_for_amounts,
    get_amounts_for_liquidity,
)
