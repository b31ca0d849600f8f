"""
인메모리 ERC20 토큰

보상 토큰과 풀 자산으로 사용합니다. 잔고/허용량이 부족하면 TokenError 를 냅니다.
각 호출은 원자적이며, on_transfer 훅이 예외를 내면 해당 전송도 취소됩니다.
"""

import logging
from typing import Callable, Dict, Optional, Tuple

from ..errors import TokenError
from ..events import Approval, EventLog, Transfer
from .journal import Journal

logger = logging.getLogger(__name__)

TransferHook = Callable[[str, str, int], None]
Snapshot = Tuple[int, int]


class Token:
    """ERC20 토큰

    사용법:
        token = Token("Reward", "RWD", address="0xToken", owner="0xOwner",
                      total_supply=10**26)
        token.transfer("0xOwner", "0xAlice", 10**18)
        token.approve("0xAlice", "0xSpender", 10**18)
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        address: str,
        owner: str,
        total_supply: int,
        decimals: int = 18,
        events: Optional[EventLog] = None
    ):
        """
        Args:
            name: 토큰 이름
            symbol: 토큰 심볼
            address: 토큰 컨트랙트 주소
            owner: 전체 공급량을 받는 주소
            total_supply: 총 공급량 (최소 단위)
            decimals: 소수점 자릿수
            events: 이벤트 싱크
        """
        if total_supply < 0:
            raise ValueError(f"총 공급량은 음수일 수 없습니다: {total_supply}")

        self.name = name
        self.symbol = symbol
        self.address = address
        self._decimals = decimals
        self._total_supply = total_supply
        self._balances: Dict[str, int] = {owner: total_supply}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._journal = Journal()
        self.events = events if events is not None else EventLog()
        self.on_transfer: Optional[TransferHook] = None

    def total_supply(self) -> int:
        return self._total_supply

    def decimals(self) -> int:
        return self._decimals

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        if amount < 0:
            raise TokenError(f"허용량은 음수일 수 없습니다: {amount}")
        self._journal.set(self._allowances, (owner, spender), amount)
        self.events.emit(Approval(token=self.address, owner=owner, spender=spender, amount=amount))
        return True

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        self._move(sender, recipient, amount)
        return True

    def transfer_from(self, spender: str, sender: str, recipient: str, amount: int) -> bool:
        allowed = self.allowance(sender, spender)
        if allowed < amount:
            raise TokenError(
                f"{self.symbol}: 허용량 부족 (owner={sender}, spender={spender}, "
                f"allowance={allowed}, amount={amount})"
            )

        snapshot = self.snapshot()
        try:
            self._journal.set(self._allowances, (sender, spender), allowed - amount)
            self._move(sender, recipient, amount)
        except Exception:
            self.restore(snapshot)
            raise
        self.release(snapshot)
        return True

    def snapshot(self) -> Snapshot:
        """체크포인트 (journal 위치, 이벤트 수)"""
        return self._journal.mark(), len(self.events)

    def restore(self, snapshot: Snapshot):
        mark, event_count = snapshot
        self._journal.rollback(mark)
        self.events.truncate(event_count)

    def release(self, snapshot: Snapshot):
        mark, _ = snapshot
        self._journal.release(mark)

    def _move(self, sender: str, recipient: str, amount: int):
        if amount < 0:
            raise TokenError(f"전송량은 음수일 수 없습니다: {amount}")
        balance = self.balance_of(sender)
        if balance < amount:
            raise TokenError(
                f"{self.symbol}: 잔고 부족 (account={sender}, balance={balance}, amount={amount})"
            )

        snapshot = self.snapshot()
        try:
            self._journal.set(self._balances, sender, balance - amount)
            self._journal.set(self._balances, recipient, self.balance_of(recipient) + amount)
            self.events.emit(Transfer(token=self.address, sender=sender, recipient=recipient, amount=amount))
            logger.debug("%s transfer %s -> %s: %s", self.symbol, sender, recipient, amount)

            if self.on_transfer is not None:
                self.on_transfer(sender, recipient, amount)
        except Exception:
            self.restore(snapshot)
            raise
        self.release(snapshot)
