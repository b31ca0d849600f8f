"""
Reward Accumulator - 시간 가중 보상 지수

모든 포지션이 공유하는 전역 누적기. 호출당 O(1) 이며 포지션을 순회하지 않습니다.
포지션 몫은 읽는 시점에 지연 계산합니다.

핵심 공식:
    acc += elapsed × rate × PRECISION / L_total          # refresh
    pending = (acc - reward_debt) × l / PRECISION         # 포지션 미수령 보상
    estimate = (duration × rate × PRECISION / L_total) × l / PRECISION  # 예상 보상

모든 나눗셈은 내림이므로 지급액은 항상 방출량 이하입니다.
스테이킹이 없는 구간의 방출분은 분배되지도, 이월되지도 않습니다.
"""

from dataclasses import replace

from ..constants import PRECISION
from .state import LedgerState, StakeRecord


def accrued_per_liquidity(state: LedgerState, now: int) -> int:
    """last_update_time 부터 now 까지 단위 유동성당 증가분

    Args:
        state: 현재 원장 상태
        now: 현재 시각 (초)

    Returns:
        누적기 증가분 (PRECISION 스케일)
    """
    if now < state.last_update_time:
        raise ValueError(
            f"시각이 역행했습니다: now={now} < last_update_time={state.last_update_time}"
        )
    if state.total_staked_liquidity == 0:
        return 0

    elapsed = now - state.last_update_time
    return elapsed * state.reward_rate_per_second * PRECISION // state.total_staked_liquidity


def refresh(state: LedgerState, now: int) -> LedgerState:
    """누적기를 now 까지 갱신한 새 상태 반환

    스테이킹된 유동성이 없어도 last_update_time 은 항상 now 로 이동합니다.
    모든 상태 변경 연산의 첫 단계입니다.
    """
    return replace(
        state,
        acc_reward_per_liquidity=state.acc_reward_per_liquidity + accrued_per_liquidity(state, now),
        last_update_time=now,
    )


def pending_reward(state: LedgerState, record: StakeRecord) -> int:
    """포지션의 미수령 보상 (state 시점 기준)

    f_u = l × (acc - reward_debt) / PRECISION
    """
    if not record.staked:
        return 0
    return (state.acc_reward_per_liquidity - record.reward_debt) * record.liquidity // PRECISION


def estimate(state: LedgerState, liquidity: int, duration: int) -> int:
    """가상의 유동성을 duration 초 동안 스테이킹했을 때의 예상 보상

    현재 방출률과 현재 L_total 기준. 상태를 변경하지 않습니다.
    refresh 후 pending_reward 와 같은 두 번의 내림을 거치므로
    L_total 이 그대로이고 중간 갱신이 없으면 실제 지급액과 같습니다.
    L_total 이 0이면 liquidity 를 분모로 씁니다 (단독 스테이커).

    Args:
        state: 현재 원장 상태
        liquidity: 가상 유동성
        duration: 스테이킹 기간 (초)

    Returns:
        예상 보상 (최소 단위)
    """
    if liquidity < 0 or duration < 0:
        raise ValueError(f"유동성과 기간은 음수일 수 없습니다: liquidity={liquidity}, duration={duration}")

    total = state.total_staked_liquidity or liquidity
    if total == 0:
        return 0

    per_liquidity = duration * state.reward_rate_per_second * PRECISION // total
    return per_liquidity * liquidity // PRECISION
