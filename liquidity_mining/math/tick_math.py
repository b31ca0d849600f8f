"""
Tick Math - Tick ↔ sqrtPriceX96 변환

풀의 현재 틱 계산과 포지션 범위 경계 가격에 사용합니다.
온체인 TickMath 와 동일한 정수 연산 결과를 냅니다.

References:
- Uniswap V3 Core: contracts/libraries/TickMath.sol

핵심 공식:
    sqrtPriceX96 = √(1.0001^tick) * 2^96
"""

from typing import Tuple

from ..constants import MIN_TICK, MAX_TICK, MIN_SQRT_RATIO, MAX_SQRT_RATIO, UINT256_MAX


# abs_tick 의 각 비트(0x2 ~ 0x80000)에 대응하는 Q128 곱셈 계수
_TICK_BIT_MULTIPLIERS: Tuple[int, ...] = (
    0xfff97272373d413259a46990580e213a,
    0xfff2e50f5f656932ef12357cf3c7fdcc,
    0xffe5caca7e10e4e61c3624eaa0941cd0,
    0xffcb9843d60f6159c9db58835c926644,
    0xff973b41fa98c081472e6896dfb254c0,
    0xff2ea16466c96a3843ec78b326b52861,
    0xfe5dee046a99a2a811c461f1969c3053,
    0xfcbe86c7900a88aedcffc83b479aa3a4,
    0xf987a7253ac413176f2b074cf7815e54,
    0xf3392b0822b70005940c7a398e4b70f3,
    0xe7159475a2c29b7443b29c7fa6e889d9,
    0xd097f3bdfd2022b8845ad8f792aa5825,
    0xa9f746462d870fdf8a65dc1f90e061e5,
    0x70d869a156d2a1b890bb3df62baf32f7,
    0x31be135f97d08fd981231505542fcfa6,
    0x9aa508b5b7a84e1c677de54f3e99bc9,
    0x5d6af8dedb81196699c329225ee604,
    0x2216e584f5fa1ea926041bedfe98,
    0x48a170391f7dc42444e8fa2,
)

# log_sqrt(1.0001) 변환 계수와 틱 오차 경계
_LOG_SQRT10001: int = 255738958999603826347141
_TICK_LOW_OFFSET: int = 3402992956809132418596140100660247210
_TICK_HIGH_OFFSET: int = 291339464771989622907027621153398088495


def get_sqrt_ratio_at_tick(tick: int) -> int:
    """틱에서 sqrtPriceX96 계산

    Args:
        tick: 틱 인덱스 (MIN_TICK ~ MAX_TICK)

    Returns:
        sqrtPriceX96 (Q64.96, 올림)

    Raises:
        ValueError: 틱이 유효 범위를 벗어난 경우
    """
    if tick < MIN_TICK or tick > MAX_TICK:
        raise ValueError(f"틱이 유효 범위를 벗어났습니다: {tick} (범위: {MIN_TICK} ~ {MAX_TICK})")

    abs_tick = abs(tick)
    ratio = 0xfffcb933bd6fad37aa2d162d1a594001 if abs_tick & 0x1 else 1 << 128

    for bit, multiplier in enumerate(_TICK_BIT_MULTIPLIERS, start=1):
        if abs_tick & (1 << bit):
            ratio = (ratio * multiplier) >> 128

    if tick > 0:
        ratio = UINT256_MAX // ratio

    # Q128.128 -> Q64.96 (올림)
    return (ratio >> 32) + (1 if ratio % (1 << 32) else 0)


def get_tick_at_sqrt_ratio(sqrt_price_x96: int) -> int:
    """sqrtPriceX96 에서 틱 계산

    getSqrtRatioAtTick(tick) <= sqrt_price_x96 을 만족하는 가장 큰 틱.

    Args:
        sqrt_price_x96: sqrtPriceX96 (Q64.96)

    Returns:
        틱 인덱스

    Raises:
        ValueError: sqrtPriceX96이 유효 범위를 벗어난 경우
    """
    if sqrt_price_x96 < MIN_SQRT_RATIO or sqrt_price_x96 >= MAX_SQRT_RATIO:
        raise ValueError(f"sqrtPriceX96이 유효 범위를 벗어났습니다: {sqrt_price_x96}")

    ratio = sqrt_price_x96 << 32
    msb = ratio.bit_length() - 1

    if msb >= 128:
        r = ratio >> (msb - 127)
    else:
        r = ratio << (127 - msb)

    log_2 = (msb - 128) << 64

    # 소수부 14비트
    for i in range(14):
        r = (r * r) >> 127
        f = r >> 128
        log_2 |= f << (63 - i)
        r >>= f

    log_sqrt10001 = log_2 * _LOG_SQRT10001

    tick_low = (log_sqrt10001 - _TICK_LOW_OFFSET) >> 128
    tick_high = (log_sqrt10001 + _TICK_HIGH_OFFSET) >> 128

    if tick_low == tick_high:
        return tick_low

    return tick_high if get_sqrt_ratio_at_tick(tick_high) <= sqrt_price_x96 else tick_low


def is_valid_tick_range(tick_lower: int, tick_upper: int, tick_spacing: int) -> bool:
    """민트 가능한 틱 범위인지 확인 (정렬, 경계, 간격)"""
    return (
        MIN_TICK <= tick_lower < tick_upper <= MAX_TICK
        and tick_lower % tick_spacing == 0
        and tick_upper % tick_spacing == 0
    )
