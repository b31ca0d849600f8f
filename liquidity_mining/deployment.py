"""
인메모리 배포 구성

보상 토큰, 상대 토큰, 풀, 포지션 매니저, 스테이킹 원장을 한 번에 구성합니다.
API 서버와 통합 테스트가 같은 구성을 사용합니다.

기본 구성:
    - 보상 토큰 / 상대 토큰 총 공급량 10^26, 전량 운영자 보유
    - 풀 초기 가격: price_from_ratio(70,000,000 × 10^18, 1 × 10^18), fee 3000
    - 운영자가 초기 전 범위 유동성 공급
    - 원장에 보상 토큰 2 × 10^25 충전
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .chain.clock import ManualClock
from .chain.interfaces import Clock
from .chain.pool import Pool, PoolRegistry
from .chain.position_manager import MintParams, MintResult, PositionManager
from .chain.token import Token
from .constants import DEFAULT_REWARD_RATE_PER_SECOND, MAX_TICK, MIN_TICK, TICK_SPACINGS
from .events import EventLog
from .math.price_math import price_from_ratio
from .staking.ledger import StakingLedger

logger = logging.getLogger(__name__)

OPERATOR_ADDRESS = "0x00000000000000000000000000000000000000a0"
REWARD_TOKEN_ADDRESS = "0x0000000000000000000000000000000000000b01"
QUOTE_TOKEN_ADDRESS = "0x0000000000000000000000000000000000000b02"
POSITION_MANAGER_ADDRESS = "0x0000000000000000000000000000000000000c00"
LEDGER_ADDRESS = "0x0000000000000000000000000000000000000d00"

DEFAULT_TOTAL_SUPPLY = 10 ** 26
DEFAULT_REWARD_FUNDING = 2 * 10 ** 25
DEFAULT_INITIAL_REWARD_AMOUNT = 70_000_000 * 10 ** 18
DEFAULT_INITIAL_QUOTE_AMOUNT = 10 ** 18
DEFAULT_FEE = 3000


def full_range_ticks(fee: int = DEFAULT_FEE):
    """수수료 티어의 틱 간격에 맞춘 전 범위 (tick_lower, tick_upper)"""
    spacing = TICK_SPACINGS[fee]
    return -(-MIN_TICK // spacing) * spacing, (MAX_TICK // spacing) * spacing


@dataclass
class Deployment:
    """구성된 인메모리 배포"""
    operator: str
    reward_token: Token
    quote_token: Token
    registry: PoolRegistry
    pool: Pool
    position_manager: PositionManager
    ledger: StakingLedger
    clock: Clock
    events: EventLog = field(default_factory=EventLog)

    def mint_position(
        self,
        holder: str,
        reward_amount: int,
        quote_amount: int,
        tick_lower: Optional[int] = None,
        tick_upper: Optional[int] = None
    ) -> MintResult:
        """운영자 잔고로 holder 에게 토큰을 나눠주고 holder 명의로 포지션 민트

        tick_lower / tick_upper 를 생략하면 전 범위.
        """
        default_lower, default_upper = full_range_ticks(self.pool.fee)
        tick_lower = default_lower if tick_lower is None else tick_lower
        tick_upper = default_upper if tick_upper is None else tick_upper

        saved_reward = self.reward_token.snapshot()
        saved_quote = self.quote_token.snapshot()
        try:
            self.reward_token.transfer(self.operator, holder, reward_amount)
            self.quote_token.transfer(self.operator, holder, quote_amount)
            self.reward_token.approve(holder, self.position_manager.address, reward_amount)
            self.quote_token.approve(holder, self.position_manager.address, quote_amount)

            result = self.position_manager.mint(
                MintParams(
                    token0=self.reward_token.address,
                    token1=self.quote_token.address,
                    fee=self.pool.fee,
                    tick_lower=tick_lower,
                    tick_upper=tick_upper,
                    amount0_desired=reward_amount,
                    amount1_desired=quote_amount,
                    recipient=holder,
                ),
                caller=holder,
            )
        except Exception:
            # 민트 실패 시 운영자 지급분과 허용량도 되돌림
            self.quote_token.restore(saved_quote)
            self.reward_token.restore(saved_reward)
            raise

        self.quote_token.release(saved_quote)
        self.reward_token.release(saved_reward)
        return result


def build_deployment(
    clock: Optional[Clock] = None,
    reward_rate_per_second: int = DEFAULT_REWARD_RATE_PER_SECOND,
    reward_funding: int = DEFAULT_REWARD_FUNDING,
    initial_reward_amount: int = DEFAULT_INITIAL_REWARD_AMOUNT,
    initial_quote_amount: int = DEFAULT_INITIAL_QUOTE_AMOUNT,
    fee: int = DEFAULT_FEE,
    ledger_address: str = LEDGER_ADDRESS
) -> Deployment:
    """배포 구성

    Args:
        clock: 시각 공급자. None이면 ManualClock(0)
        reward_rate_per_second: 원장 초당 방출량
        reward_funding: 원장에 충전할 보상 토큰
        initial_reward_amount: 초기 유동성의 보상 토큰 수량 (가격 비율의 분모)
        initial_quote_amount: 초기 유동성의 상대 토큰 수량
        fee: 풀 수수료 티어
        ledger_address: 원장 주소

    Returns:
        Deployment 객체
    """
    clock = clock or ManualClock()
    events = EventLog()
    operator = OPERATOR_ADDRESS

    reward_token = Token(
        "Reward Token", "RWD", REWARD_TOKEN_ADDRESS, operator, DEFAULT_TOTAL_SUPPLY, events=events
    )
    quote_token = Token(
        "Quote Token", "QTE", QUOTE_TOKEN_ADDRESS, operator, DEFAULT_TOTAL_SUPPLY, events=events
    )

    # 정렬 후 token0 수량이 분모
    if reward_token.address.lower() < quote_token.address.lower():
        sqrt_price_x96 = price_from_ratio(initial_reward_amount, initial_quote_amount)
    else:
        sqrt_price_x96 = price_from_ratio(initial_quote_amount, initial_reward_amount)

    registry = PoolRegistry()
    pool = registry.create_and_initialize_pool_if_necessary(
        reward_token.address, quote_token.address, fee, sqrt_price_x96
    )

    position_manager = PositionManager(
        registry,
        {reward_token.address: reward_token, quote_token.address: quote_token},
        POSITION_MANAGER_ADDRESS,
        clock=clock,
        events=events,
    )

    ledger = StakingLedger(
        reward_token=reward_token,
        position_manager=position_manager,
        pool=pool,
        address=ledger_address,
        reward_rate_per_second=reward_rate_per_second,
        clock=clock,
        events=events,
    )

    deployment = Deployment(
        operator=operator,
        reward_token=reward_token,
        quote_token=quote_token,
        registry=registry,
        pool=pool,
        position_manager=position_manager,
        ledger=ledger,
        clock=clock,
        events=events,
    )

    # 운영자 초기 전 범위 유동성
    tick_lower, tick_upper = full_range_ticks(fee)
    reward_token.approve(operator, position_manager.address, initial_reward_amount)
    quote_token.approve(operator, position_manager.address, initial_quote_amount)
    position_manager.mint(
        MintParams(
            token0=reward_token.address,
            token1=quote_token.address,
            fee=fee,
            tick_lower=tick_lower,
            tick_upper=tick_upper,
            amount0_desired=initial_reward_amount,
            amount1_desired=initial_quote_amount,
            amount0_min=initial_reward_amount // 100 * 90,
            amount1_min=initial_quote_amount // 100 * 90,
            recipient=operator,
        ),
        caller=operator,
    )

    if reward_funding > 0:
        reward_token.transfer(operator, ledger_address, reward_funding)

    logger.info(
        "deployed pool=%s tick=%s ledger=%s rate=%s funding=%s",
        pool.address, pool.slot0().tick, ledger_address, reward_rate_per_second, reward_funding
    )
    return deployment
