"""
협력 컨트랙트 인터페이스

원장이 사용하는 외부 구성요소의 최소 인터페이스.
chain 패키지의 인메모리 구현 외에 어떤 구현이든 주입할 수 있습니다.
"""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class Slot0:
    """풀의 현재 가격 상태"""
    sqrt_price_x96: int
    tick: int


@dataclass(frozen=True)
class PositionInfo:
    """포지션 매니저가 보관하는 포지션 정보 (positions(id) 결과)"""
    token_id: int
    token0: str
    token1: str
    fee: int
    tick_lower: int
    tick_upper: int
    liquidity: int


class Clock(Protocol):
    def now(self) -> int: ...


class FungibleToken(Protocol):
    address: str

    def balance_of(self, account: str) -> int: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool: ...

    def transfer_from(self, spender: str, sender: str, recipient: str, amount: int) -> bool: ...

    def approve(self, owner: str, spender: str, amount: int) -> bool: ...

    def total_supply(self) -> int: ...

    def decimals(self) -> int: ...


class PositionCustody(Protocol):
    def positions(self, token_id: int) -> PositionInfo: ...

    def owner_of(self, token_id: int) -> str: ...

    def transfer_from(self, operator: str, sender: str, recipient: str, token_id: int) -> None: ...


class PricePool(Protocol):
    def slot0(self) -> Slot0: ...


@runtime_checkable
class Revertible(Protocol):
    """연산 실패 시 상태를 되돌릴 수 있는 구성요소

    snapshot() 으로 연 체크포인트는 restore() (되돌림) 또는 release() (확정) 로
    연 순서의 역순으로 닫습니다.
    """

    def snapshot(self) -> Any: ...

    def restore(self, snapshot: Any) -> None: ...

    def release(self, snapshot: Any) -> None: ...
