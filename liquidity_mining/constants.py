"""
Liquidity Mining 상수 정의

- Q96 / Q192: sqrtPriceX96 인코딩 (2^96, 2^192)
- PRECISION: 보상 누적기 고정소수점 스케일
- TICK_SPACINGS: 수수료 티어별 틱 간격
"""

from typing import Dict

# Fixed-point 인코딩 상수
Q96: int = 2 ** 96
Q192: int = 2 ** 192

# accRewardPerLiquidity 스케일 (10^18)
# 반복되는 내림 나눗셈의 누적 손실을 청구당 몇 단위 이내로 유지
PRECISION: int = 10 ** 18

# 원장 전체 초당 보상 방출량 (최소 단위, 18 decimals 기준 1 토큰/초)
DEFAULT_REWARD_RATE_PER_SECOND: int = 10 ** 18

# 수수료 티어 (hundredths of a bip) -> 틱 간격
TICK_SPACINGS: Dict[int, int] = {
    100: 1,
    500: 10,
    3000: 60,
    10000: 200,
}

# 틱 범위 상수
MIN_TICK: int = -887272
MAX_TICK: int = 887272

# TickMath 경계값 (getSqrtRatioAtTick(MIN_TICK), getSqrtRatioAtTick(MAX_TICK))
MIN_SQRT_RATIO: int = 4295128739
MAX_SQRT_RATIO: int = 1461446703485210103287273052203988822378723970342

UINT256_MAX: int = 2 ** 256 - 1
UINT128_MAX: int = 2 ** 128 - 1

ZERO_ADDRESS: str = "0x0000000000000000000000000000000000000000"
