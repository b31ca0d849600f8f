"""
Uniswap V3 Liquidity Mining

집중화된 유동성 포지션(NFT)을 스테이킹하고 시간 가중 보상을 지급하는 원장.
모든 계산은 정수 연산만 사용하며, 지급 총액은 실제 방출량을 넘지 않습니다.
"""

__version__ = "0.1.0"

from .constants import Q96, Q192, PRECISION, DEFAULT_REWARD_RATE_PER_SECOND
from .errors import (
    LiquidityMiningError,
    DomainError,
    DivisionByZero,
    PositionOutOfRange,
    AlreadyStaked,
    NotOwnerOrNotStaked,
    InsufficientRewardBalance,
    ReentrancyRejected,
)
from .staking import StakingLedger, LedgerState, StakeRecord
