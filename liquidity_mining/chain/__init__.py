"""
Chain layer for Liquidity Mining

원장이 사용하는 외부 구성요소의 인메모리 구현:
- token: ERC20 토큰
- pool: 풀 가격 상태 (slot0), 풀 레지스트리
- position_manager: 포지션 NFT 민트/커스터디
- clock: 시각 공급자
- journal: 키 단위 되돌리기 기록
"""

from .interfaces import Slot0, PositionInfo, Revertible
from .clock import SystemClock, ManualClock
from .journal import Journal
from .token import Token
from .pool import Pool, PoolRegistry
from .position_manager import PositionManager, MintParams, MintResult
