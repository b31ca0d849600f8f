"""
인메모리 포지션 매니저 (NonfungiblePositionManager)

포지션 NFT 민트, 포지션 정보 조회, 승인 기반 커스터디 이전을 담당합니다.
커스터디는 token_id → 소유자 주소 매핑으로 명시적으로 관리합니다.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from ..constants import ZERO_ADDRESS
from ..errors import PositionCustodyError, UnknownPosition
from ..events import EventLog, PositionApproval, PositionTransfer
from ..math.liquidity_math import get_amounts_for_liquidity, get_liquidity_for_amounts
from ..math.tick_math import get_sqrt_ratio_at_tick, is_valid_tick_range
from .interfaces import Clock, FungibleToken, PositionInfo, Revertible
from .journal import Journal
from .pool import PoolRegistry

logger = logging.getLogger(__name__)

CustodyHook = Callable[[str, str, int], None]
Snapshot = Tuple[int, int]


@dataclass(frozen=True)
class MintParams:
    """포지션 민트 파라미터"""
    token0: str
    token1: str
    fee: int
    tick_lower: int
    tick_upper: int
    amount0_desired: int
    amount1_desired: int
    recipient: str
    amount0_min: int = 0
    amount1_min: int = 0
    deadline: Optional[int] = None


class MintResult(NamedTuple):
    """민트 결과"""
    token_id: int
    liquidity: int
    amount0: int  # 실제 풀에 들어간 token0
    amount1: int  # 실제 풀에 들어간 token1


class PositionManager:
    """포지션 NFT 매니저

    사용법:
        manager = PositionManager(registry, tokens, address="0xNPM")
        token0.approve(alice, manager.address, amount0)
        token1.approve(alice, manager.address, amount1)
        result = manager.mint(params, caller=alice)
        manager.approve(alice, ledger.address, result.token_id)
    """

    def __init__(
        self,
        registry: PoolRegistry,
        tokens: Dict[str, FungibleToken],
        address: str,
        clock: Optional[Clock] = None,
        events: Optional[EventLog] = None
    ):
        """
        Args:
            registry: 풀 레지스트리
            tokens: 주소 → 토큰
            address: 매니저 주소 (민트 시 토큰 transfer_from 의 spender)
            clock: 민트 deadline 검사용 시각 공급자
            events: 이벤트 싱크
        """
        self.registry = registry
        self.tokens = tokens
        self.address = address
        self.clock = clock
        self.events = events if events is not None else EventLog()
        self.on_transfer: Optional[CustodyHook] = None

        self._positions: Dict[int, PositionInfo] = {}
        self._owners: Dict[int, str] = {}
        self._approvals: Dict[int, str] = {}
        self._journal = Journal()
        self._next_id = 1

    # ------------------------------------------------------------------
    # 민트
    # ------------------------------------------------------------------

    def mint(self, params: MintParams, caller: str) -> MintResult:
        """원하는 수량으로 포지션을 민트

        Raises:
            PositionCustodyError: 풀 없음, 잘못된 틱 범위, deadline 초과, 슬리피지 초과
            TokenError: caller 의 잔고/허용량 부족
        """
        if params.deadline is not None and self.clock is not None and self.clock.now() > params.deadline:
            raise PositionCustodyError("Transaction too old")

        pool = self.registry.get_pool(params.token0, params.token1, params.fee)
        if pool is None:
            raise PositionCustodyError(
                f"풀이 없습니다: {params.token0}/{params.token1} fee={params.fee}"
            )
        if not is_valid_tick_range(params.tick_lower, params.tick_upper, pool.tick_spacing):
            raise PositionCustodyError(
                f"잘못된 틱 범위: [{params.tick_lower}, {params.tick_upper}) spacing={pool.tick_spacing}"
            )

        sqrt_price_x96 = pool.slot0().sqrt_price_x96
        sqrt_lower = get_sqrt_ratio_at_tick(params.tick_lower)
        sqrt_upper = get_sqrt_ratio_at_tick(params.tick_upper)

        # 풀 기준 토큰 순서로 수량 정렬
        if pool.token0 == params.token0:
            desired0, desired1 = params.amount0_desired, params.amount1_desired
            min0, min1 = params.amount0_min, params.amount1_min
        else:
            desired0, desired1 = params.amount1_desired, params.amount0_desired
            min0, min1 = params.amount1_min, params.amount0_min

        liquidity = get_liquidity_for_amounts(sqrt_price_x96, sqrt_lower, sqrt_upper, desired0, desired1)
        if liquidity == 0:
            raise PositionCustodyError("유동성이 0인 포지션은 민트할 수 없습니다")

        amount0, amount1 = get_amounts_for_liquidity(
            sqrt_price_x96, sqrt_lower, sqrt_upper, liquidity, round_up=True
        )
        if amount0 < min0 or amount1 < min1:
            raise PositionCustodyError(
                f"Price slippage check: amount0={amount0} (min {min0}), amount1={amount1} (min {min1})"
            )

        token0 = self.tokens[pool.token0]
        token1 = self.tokens[pool.token1]
        saved = token0.snapshot() if isinstance(token0, Revertible) else None
        try:
            if amount0 > 0:
                token0.transfer_from(self.address, caller, pool.address, amount0)
            if amount1 > 0:
                token1.transfer_from(self.address, caller, pool.address, amount1)
        except Exception:
            if saved is not None:
                token0.restore(saved)
            raise
        if saved is not None:
            token0.release(saved)

        pool.add_liquidity(params.tick_lower, params.tick_upper, liquidity)

        token_id = self._next_id
        self._next_id += 1
        self._journal.set(self._positions, token_id, PositionInfo(
            token_id=token_id,
            token0=pool.token0,
            token1=pool.token1,
            fee=pool.fee,
            tick_lower=params.tick_lower,
            tick_upper=params.tick_upper,
            liquidity=liquidity,
        ))
        self._journal.set(self._owners, token_id, params.recipient)
        self.events.emit(PositionTransfer(sender=ZERO_ADDRESS, recipient=params.recipient, token_id=token_id))
        logger.debug(
            "mint token_id=%s recipient=%s liquidity=%s amounts=(%s, %s)",
            token_id, params.recipient, liquidity, amount0, amount1
        )
        return MintResult(token_id=token_id, liquidity=liquidity, amount0=amount0, amount1=amount1)

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------

    def positions(self, token_id: int) -> PositionInfo:
        if token_id not in self._positions:
            raise UnknownPosition(f"Invalid token ID: {token_id}")
        return self._positions[token_id]

    def owner_of(self, token_id: int) -> str:
        if token_id not in self._owners:
            raise UnknownPosition(f"Invalid token ID: {token_id}")
        return self._owners[token_id]

    def get_approved(self, token_id: int) -> str:
        self.owner_of(token_id)
        return self._approvals.get(token_id, ZERO_ADDRESS)

    # ------------------------------------------------------------------
    # 커스터디
    # ------------------------------------------------------------------

    def approve(self, caller: str, approved: str, token_id: int):
        """token_id 의 단일 승인 설정 (소유자만)"""
        owner = self.owner_of(token_id)
        if caller != owner:
            raise PositionCustodyError(f"Not the owner of token {token_id}: {caller}")
        self._journal.set(self._approvals, token_id, approved)
        self.events.emit(PositionApproval(owner=owner, approved=approved, token_id=token_id))

    def transfer_from(self, operator: str, sender: str, recipient: str, token_id: int):
        """sender → recipient 소유권 이전

        operator 는 소유자이거나 token_id 에 대해 승인된 주소여야 합니다.
        이전 후 승인은 초기화됩니다.
        """
        owner = self.owner_of(token_id)
        if owner != sender:
            raise PositionCustodyError(f"Transfer of token {token_id} that is not own: {sender}")
        if operator != owner and self._approvals.get(token_id) != operator:
            raise PositionCustodyError(f"Not approved for token {token_id}: {operator}")

        snapshot = self.snapshot()
        try:
            self._journal.set(self._owners, token_id, recipient)
            self._journal.pop(self._approvals, token_id)
            self.events.emit(PositionTransfer(sender=sender, recipient=recipient, token_id=token_id))
            logger.debug("position %s transfer %s -> %s", token_id, sender, recipient)

            if self.on_transfer is not None:
                self.on_transfer(sender, recipient, token_id)
        except Exception:
            self.restore(snapshot)
            raise
        self.release(snapshot)

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
