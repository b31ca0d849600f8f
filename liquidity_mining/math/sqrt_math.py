"""
Sqrt Math - 정수 제곱근

임의 정밀도 정수의 floor(√value)를 이진 탐색으로 계산합니다.
부동소수점을 쓰지 않으므로 수백 자리 값에서도 표현 오차가 없습니다.

핵심 성질:
    sqrt(value)^2 <= value < (sqrt(value) + 1)^2
"""

from ..errors import DomainError


def sqrt(value: int) -> int:
    """정수 제곱근 (내림)

    [1, value // 2 + 1] 구간에서 이진 탐색. O(log value) 비교.

    Args:
        value: 음이 아닌 정수

    Returns:
        floor(√value)

    Raises:
        DomainError: value가 음수인 경우
        TypeError: value가 정수가 아닌 경우
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"정수만 지원합니다: {type(value).__name__}")
    if value < 0:
        raise DomainError()

    if value == 0 or value == 1:
        return value

    low = 1
    # √value 는 value / 2 + 1 을 넘지 않음
    high = value // 2 + 1

    while low <= high:
        mid = low + (high - low) // 2
        mid_squared = mid * mid

        if mid_squared == value:
            return mid
        elif mid_squared < value:
            low = mid + 1
        else:
            high = mid - 1

    return high
