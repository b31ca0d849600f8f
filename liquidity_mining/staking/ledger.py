"""
Staking Ledger - 포지션 스테이킹 원장

포지션별 상태 전이:
    Unstaked --stake--> Staked --unstake--> Unstaked
                          |
                    claim_rewards (reward_debt 만 갱신)

각 상태 변경 연산의 순서:
    1. 재진입 가드 진입
    2. 누적기 refresh(now)
    3. 검증 후 원장 상태/기록 변경
    4. 외부 전송 (보상 토큰, 포지션 커스터디)
    5. 이벤트 기록

어느 단계에서든 예외가 나면 원장 상태, 기록, 이벤트, 그리고
되돌릴 수 있는 협력 구성요소의 상태가 연산 시작 시점으로 복원됩니다.
"""

import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Dict, Iterator, List, Optional, Tuple

from ..chain.clock import SystemClock
from ..chain.interfaces import Clock, FungibleToken, PositionCustody, PricePool, Revertible
from ..constants import DEFAULT_REWARD_RATE_PER_SECOND
from ..errors import (
    AlreadyStaked,
    InsufficientRewardBalance,
    NotOwnerOrNotStaked,
    PositionOutOfRange,
    ReentrancyRejected,
)
from ..events import ClaimReward, EventLog, Stake, Unstake
from . import accumulator
from .state import EMPTY_RECORD, LedgerState, StakeRecord
from .validator import is_in_range

logger = logging.getLogger(__name__)


class StakingLedger:
    """Uniswap V3 포지션 스테이킹 원장

    사용법:
        ledger = StakingLedger(
            reward_token=token,
            position_manager=manager,
            pool=pool,
            address="0xMining",
        )
        manager.approve(owner, ledger.address, token_id)
        ledger.stake(token_id, caller=owner)
        ledger.claim_rewards(token_id, caller=owner)
    """

    def __init__(
        self,
        reward_token: FungibleToken,
        position_manager: PositionCustody,
        pool: PricePool,
        address: str,
        reward_rate_per_second: int = DEFAULT_REWARD_RATE_PER_SECOND,
        clock: Optional[Clock] = None,
        events: Optional[EventLog] = None
    ):
        """
        Args:
            reward_token: 보상 토큰
            position_manager: 포지션 NFT 커스터디 매니저
            pool: 현재 틱을 제공하는 풀
            address: 원장 주소 (보상 토큰 잔고, 포지션 커스터디 보유)
            reward_rate_per_second: 원장 전체 초당 방출량
            clock: 시각 공급자. None이면 시스템 시각
            events: 이벤트 싱크. None이면 새 EventLog
        """
        self.reward_token = reward_token
        self.position_manager = position_manager
        self.pool = pool
        self.address = address
        self.clock = clock or SystemClock()
        self.events = events if events is not None else EventLog()

        self._state = LedgerState(
            last_update_time=self.clock.now(),
            reward_rate_per_second=reward_rate_per_second,
        )
        self._records: Dict[int, StakeRecord] = {}
        self._entered = False

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def total_staked_liquidity(self) -> int:
        return self._state.total_staked_liquidity

    @property
    def acc_reward_per_liquidity(self) -> int:
        return self._state.acc_reward_per_liquidity

    def position(self, token_id: int) -> StakeRecord:
        """포지션 기록 조회 (없으면 0으로 채운 기록)"""
        return self._records.get(token_id, EMPTY_RECORD)

    def pending_rewards(self, token_id: int) -> int:
        """현재 시각 기준 미수령 보상 (상태 변경 없음)"""
        projected = accumulator.refresh(self._state, self.clock.now())
        return accumulator.pending_reward(projected, self.position(token_id))

    def reward_balance(self) -> int:
        """원장이 보유한 보상 토큰 잔고"""
        return self.reward_token.balance_of(self.address)

    def estimate_rewards(self, liquidity: int, duration: int) -> int:
        """liquidity 를 duration 초 동안 스테이킹할 때의 예상 보상

        현재 방출률과 현재 총 스테이킹 유동성 기준. 어느 상태에서나 호출 가능.
        """
        return accumulator.estimate(self._state, liquidity, duration)

    # ------------------------------------------------------------------
    # 상태 변경 연산
    # ------------------------------------------------------------------

    def stake(self, token_id: int, caller: str) -> Stake:
        """포지션을 스테이킹하고 커스터디를 가져옴

        Raises:
            AlreadyStaked: 이미 스테이킹된 포지션
            PositionOutOfRange: 포지션 범위가 현재 틱을 포함하지 않음
            PositionCustodyError: caller 가 소유자가 아니거나 원장을 승인하지 않음
        """
        with self._transaction("stake", token_id, caller):
            if self.position(token_id).staked:
                raise AlreadyStaked(f"Token already staked: {token_id}")

            info = self.position_manager.positions(token_id)
            current_tick = self.pool.slot0().tick
            if not is_in_range(info.tick_lower, info.tick_upper, current_tick):
                raise PositionOutOfRange(
                    f"Position is out of range: [{info.tick_lower}, {info.tick_upper}) "
                    f"does not contain tick {current_tick}"
                )

            state = accumulator.refresh(self._state, self.clock.now())
            self._records[token_id] = StakeRecord(
                owner=caller,
                liquidity=info.liquidity,
                reward_debt=state.acc_reward_per_liquidity,
                staked=True,
            )
            self._state = replace(
                state,
                total_staked_liquidity=state.total_staked_liquidity + info.liquidity,
            )

            self.position_manager.transfer_from(self.address, caller, self.address, token_id)

            event = self.events.emit(Stake(owner=caller, token_id=token_id, liquidity=info.liquidity))
            logger.info(
                "stake token_id=%s owner=%s liquidity=%s total=%s",
                token_id, caller, info.liquidity, self._state.total_staked_liquidity
            )
            return event

    def claim_rewards(self, token_id: int, caller: str) -> ClaimReward:
        """미수령 보상을 caller 에게 지급

        Raises:
            NotOwnerOrNotStaked: caller 소유의 스테이킹 기록이 없음
            InsufficientRewardBalance: 원장 보상 토큰 잔고 부족
        """
        with self._transaction("claim_rewards", token_id, caller):
            record = self._require_owned(token_id, caller)
            self._state = accumulator.refresh(self._state, self.clock.now())

            pending = self._settle(token_id, record)
            self._pay(caller, pending)

            event = self.events.emit(ClaimReward(owner=caller, amount=pending))
            logger.info("claim token_id=%s owner=%s amount=%s", token_id, caller, pending)
            return event

    def unstake(self, token_id: int, caller: str) -> List[object]:
        """미수령 보상을 정산하고 포지션 커스터디를 돌려줌

        Returns:
            발생한 이벤트 목록 ([ClaimReward,] Unstake)

        Raises:
            NotOwnerOrNotStaked: caller 소유의 스테이킹 기록이 없음
            InsufficientRewardBalance: 원장 보상 토큰 잔고 부족
        """
        with self._transaction("unstake", token_id, caller):
            record = self._require_owned(token_id, caller)
            self._state = accumulator.refresh(self._state, self.clock.now())

            pending = self._settle(token_id, record)
            self._records[token_id] = EMPTY_RECORD
            self._state = replace(
                self._state,
                total_staked_liquidity=self._state.total_staked_liquidity - record.liquidity,
            )

            self._pay(caller, pending)
            self.position_manager.transfer_from(self.address, self.address, caller, token_id)

            emitted: List[object] = []
            if pending > 0:
                emitted.append(self.events.emit(ClaimReward(owner=caller, amount=pending)))
            emitted.append(self.events.emit(Unstake(owner=caller, token_id=token_id, liquidity=0)))
            logger.info(
                "unstake token_id=%s owner=%s liquidity=%s settled=%s total=%s",
                token_id, caller, record.liquidity, pending, self._state.total_staked_liquidity
            )
            return emitted

    # ------------------------------------------------------------------
    # 내부
    # ------------------------------------------------------------------

    def _require_owned(self, token_id: int, caller: str) -> StakeRecord:
        record = self.position(token_id)
        if not record.staked or record.owner != caller:
            raise NotOwnerOrNotStaked(f"Not the owner or not staked: {token_id}")
        return record

    def _settle(self, token_id: int, record: StakeRecord) -> int:
        """refresh 된 상태 기준으로 pending 계산 후 reward_debt 체크포인트

        전송 전에 잔고를 확인합니다.
        """
        pending = accumulator.pending_reward(self._state, record)
        balance = self.reward_balance()
        if pending > balance:
            raise InsufficientRewardBalance(
                f"Insufficient reward balance: pending={pending}, balance={balance}"
            )
        self._records[token_id] = replace(record, reward_debt=self._state.acc_reward_per_liquidity)
        return pending

    def _pay(self, recipient: str, amount: int):
        if amount > 0:
            self.reward_token.transfer(self.address, recipient, amount)

    def _revertibles(self) -> Iterator[Revertible]:
        for component in (self.reward_token, self.position_manager, self.pool):
            if isinstance(component, Revertible):
                yield component

    @contextmanager
    def _transaction(self, operation: str, token_id: int, caller: str):
        """재진입 가드 + 전부 아니면 전무 실행"""
        if self._entered:
            logger.warning("reentrant %s rejected token_id=%s caller=%s", operation, token_id, caller)
            raise ReentrancyRejected(f"Reentrant call: {operation}")

        self._entered = True
        # 각 연산은 token_id 의 기록 하나만 바꿈
        saved_state = self._state
        saved_record = self._records.get(token_id)
        saved_events = len(self.events)
        saved_components: List[Tuple[Revertible, object]] = [
            (component, component.snapshot()) for component in self._revertibles()
        ]
        try:
            yield
        except Exception as exc:
            self._state = saved_state
            if saved_record is None:
                self._records.pop(token_id, None)
            else:
                self._records[token_id] = saved_record
            self.events.truncate(saved_events)
            for component, snapshot in reversed(saved_components):
                component.restore(snapshot)
            logger.warning(
                "%s reverted token_id=%s caller=%s: %s", operation, token_id, caller, exc
            )
            raise
        else:
            for component, snapshot in reversed(saved_components):
                component.release(snapshot)
        finally:
            self._entered = False
