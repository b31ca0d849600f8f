"""
이벤트 정의

원장과 협력 컨트랙트가 내보내는 이벤트를 불변 dataclass 로 정의합니다.
이벤트는 EventLog 에 발생 순서대로 쌓이고, 각 연산도 자신이 낸 이벤트를 반환합니다.
"""

from dataclasses import dataclass
from typing import Iterator, List, Type, TypeVar


@dataclass(frozen=True)
class Stake:
    """포지션 스테이킹"""
    owner: str
    token_id: int
    liquidity: int


@dataclass(frozen=True)
class Unstake:
    """포지션 언스테이킹

    liquidity 는 언스테이킹 *이후* 의 값 (항상 0, 기록 삭제를 의미)
    """
    owner: str
    token_id: int
    liquidity: int = 0


@dataclass(frozen=True)
class ClaimReward:
    """보상 수령"""
    owner: str
    amount: int


@dataclass(frozen=True)
class Transfer:
    """토큰 전송"""
    token: str
    sender: str
    recipient: str
    amount: int


@dataclass(frozen=True)
class Approval:
    """토큰 허용량 설정"""
    token: str
    owner: str
    spender: str
    amount: int


@dataclass(frozen=True)
class PositionTransfer:
    """포지션 NFT 소유권 이전 (sender 가 zero address 면 민트)"""
    sender: str
    recipient: str
    token_id: int


@dataclass(frozen=True)
class PositionApproval:
    """포지션 NFT 단일 승인"""
    owner: str
    approved: str
    token_id: int


E = TypeVar("E")


class EventLog:
    """순서가 보장되는 이벤트 싱크

    사용법:
        log = EventLog()
        ledger = StakingLedger(..., events=log)
        stakes = log.of_type(Stake)
    """

    def __init__(self):
        self._events: List[object] = []

    def emit(self, event: object) -> object:
        self._events.append(event)
        return event

    def of_type(self, event_type: Type[E]) -> List[E]:
        """특정 타입 이벤트만 발생 순서대로 반환"""
        return [e for e in self._events if isinstance(e, event_type)]

    def truncate(self, length: int):
        """length 이후 이벤트 제거 (연산 롤백용)"""
        del self._events[length:]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[object]:
        return iter(self._events)

    def __getitem__(self, index):
        return self._events[index]
