"""
원장 상태 타입

LedgerState 는 전역 누적기 값, StakeRecord 는 포지션별 기록입니다.
둘 다 불변이며, 변경은 새 값을 만들어 원장이 커밋합니다.
"""

from dataclasses import dataclass

from ..constants import DEFAULT_REWARD_RATE_PER_SECOND, ZERO_ADDRESS


@dataclass(frozen=True)
class LedgerState:
    """전역 원장 상태

    - total_staked_liquidity: 스테이킹된 기록의 liquidity 합
    - acc_reward_per_liquidity: 단위 유동성당 누적 보상 (PRECISION 스케일, 단조 증가)
    - last_update_time: 마지막 누적기 갱신 시각 (감소하지 않음)
    - reward_rate_per_second: 원장 전체 초당 방출량
    """
    total_staked_liquidity: int = 0
    acc_reward_per_liquidity: int = 0
    last_update_time: int = 0
    reward_rate_per_second: int = DEFAULT_REWARD_RATE_PER_SECOND

    def __post_init__(self):
        if self.total_staked_liquidity < 0:
            raise ValueError("total_staked_liquidity는 음수일 수 없습니다")
        if self.acc_reward_per_liquidity < 0:
            raise ValueError("acc_reward_per_liquidity는 음수일 수 없습니다")
        if self.reward_rate_per_second < 0:
            raise ValueError("reward_rate_per_second는 음수일 수 없습니다")


@dataclass(frozen=True)
class StakeRecord:
    """포지션별 스테이킹 기록

    - owner: 보상과 출금 권리를 가진 주소
    - liquidity: 스테이킹 시점에 고정된 유동성 (l)
    - reward_debt: 마지막 체크포인트 시점의 누적기 값
    - staked: 스테이킹 여부
    """
    owner: str = ZERO_ADDRESS
    liquidity: int = 0
    reward_debt: int = 0
    staked: bool = False


EMPTY_RECORD = StakeRecord()
