"""
인메모리 풀

원장은 slot0() 의 현재 틱만 읽습니다. 스왑은 지원하지 않습니다.
"""

import logging
from typing import Dict, Optional, Tuple

from ..constants import TICK_SPACINGS
from ..errors import PoolError
from ..math.tick_math import get_tick_at_sqrt_ratio
from .interfaces import Slot0

logger = logging.getLogger(__name__)


class Pool:
    """Uniswap V3 풀 (가격 상태와 활성 유동성만)

    사용법:
        pool = Pool(token0="0xA", token1="0xB", fee=3000, address="0xPool")
        pool.initialize(price_from_ratio(amount0, amount1))
        pool.slot0().tick
    """

    def __init__(self, token0: str, token1: str, fee: int, address: str):
        """
        Args:
            token0: token0 주소 (token0 < token1)
            token1: token1 주소
            fee: 수수료 티어 (100, 500, 3000, 10000)
            address: 풀 주소 (민트된 토큰 보유)
        """
        if fee not in TICK_SPACINGS:
            raise PoolError(f"지원하지 않는 수수료 티어: {fee}")
        if token0.lower() >= token1.lower():
            raise PoolError(f"토큰 순서가 잘못되었습니다: {token0} >= {token1}")

        self.token0 = token0
        self.token1 = token1
        self.fee = fee
        self.tick_spacing = TICK_SPACINGS[fee]
        self.address = address
        self.liquidity = 0
        self._slot0: Optional[Slot0] = None

    @property
    def initialized(self) -> bool:
        return self._slot0 is not None

    def initialize(self, sqrt_price_x96: int) -> Slot0:
        """초기 가격 설정 (한 번만)

        Raises:
            PoolError: 이미 초기화된 경우
            ValueError: sqrtPriceX96 이 유효 범위를 벗어난 경우
        """
        if self._slot0 is not None:
            raise PoolError(f"이미 초기화된 풀입니다: {self.address}")

        self._slot0 = Slot0(sqrt_price_x96=sqrt_price_x96, tick=get_tick_at_sqrt_ratio(sqrt_price_x96))
        logger.debug("pool %s initialized tick=%s", self.address, self._slot0.tick)
        return self._slot0

    def slot0(self) -> Slot0:
        if self._slot0 is None:
            raise PoolError(f"초기화되지 않은 풀입니다: {self.address}")
        return self._slot0

    def add_liquidity(self, tick_lower: int, tick_upper: int, liquidity: int):
        """민트된 포지션의 유동성 반영 (현재 틱이 범위 내일 때만 활성)"""
        tick = self.slot0().tick
        if tick_lower <= tick < tick_upper:
            self.liquidity += liquidity


PoolKey = Tuple[str, str, int]


class PoolRegistry:
    """(token0, token1, fee) 로 풀을 찾는 팩토리"""

    def __init__(self):
        self._pools: Dict[PoolKey, Pool] = {}

    def get_pool(self, token_a: str, token_b: str, fee: int) -> Optional[Pool]:
        return self._pools.get(_pool_key(token_a, token_b, fee))

    def create_and_initialize_pool_if_necessary(
        self,
        token_a: str,
        token_b: str,
        fee: int,
        sqrt_price_x96: int
    ) -> Pool:
        """토큰 주소를 정렬해 풀을 만들고, 초기화되지 않았으면 초기화

        Args:
            token_a: 토큰 주소
            token_b: 토큰 주소
            fee: 수수료 티어
            sqrt_price_x96: 초기 sqrtPriceX96 (token1/token0 기준)

        Returns:
            Pool 객체
        """
        key = _pool_key(token_a, token_b, fee)
        pool = self._pools.get(key)
        if pool is None:
            token0, token1, _ = key
            pool = Pool(token0, token1, fee, address=f"pool:{token0}:{token1}:{fee}")
            self._pools[key] = pool

        if not pool.initialized:
            pool.initialize(sqrt_price_x96)
        return pool


def _pool_key(token_a: str, token_b: str, fee: int) -> PoolKey:
    if token_a.lower() == token_b.lower():
        raise PoolError(f"동일한 토큰으로 풀을 만들 수 없습니다: {token_a}")
    token0, token1 = sorted((token_a, token_b), key=str.lower)
    return token0, token1, fee
