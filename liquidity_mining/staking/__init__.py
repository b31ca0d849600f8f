"""
Staking layer

- validator: 포지션 범위 검사
- accumulator: 전역 시간 가중 보상 누적기
- ledger: 스테이킹 원장 상태 머신
"""

from .state import LedgerState, StakeRecord
from .validator import is_in_range
from .accumulator import refresh, pending_reward, estimate
from .ledger import StakingLedger
