"""
Position Validator - 스테이킹 가능 여부 판정

포지션 범위가 풀의 현재 틱을 포함할 때만 스테이킹할 수 있습니다.

    tick_lower <= current_tick < tick_upper

범위는 스테이킹 중 고정이므로 스테이킹 시점에만 검사합니다.
"""


def is_in_range(tick_lower: int, tick_upper: int, current_tick: int) -> bool:
    """현재 틱이 포지션 범위 안에 있는지 확인

    하한은 포함, 상한은 제외 (풀의 활성 유동성 규칙과 동일).

    Args:
        tick_lower: 포지션 하한 틱 (i_l)
        tick_upper: 포지션 상한 틱 (i_u)
        current_tick: 풀의 현재 틱 (i_c)

    Returns:
        범위 내이면 True
    """
    return tick_lower <= current_tick < tick_upper
