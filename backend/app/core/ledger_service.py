"""
Ledger Service

API 프로세스가 공유하는 인메모리 배포(원장 + 협력 구성요소)를 보관합니다.
"""
import logging
from typing import Optional

from liquidity_mining.chain.clock import SystemClock
from liquidity_mining.chain.interfaces import Clock
from liquidity_mining.deployment import Deployment, build_deployment

from app.config import settings

logger = logging.getLogger(__name__)

# Global deployment (built on first request)
_deployment: Optional[Deployment] = None


def get_deployment() -> Deployment:
    """현재 배포 반환 (없으면 settings 로 구성)"""
    global _deployment
    if _deployment is None:
        _deployment = build_deployment(
            clock=SystemClock(),
            reward_rate_per_second=settings.REWARD_RATE_PER_SECOND,
            reward_funding=settings.REWARD_FUNDING,
            ledger_address=settings.LEDGER_ADDRESS,
        )
        logger.info("ledger deployment built at %s", settings.LEDGER_ADDRESS)
    return _deployment


def reset_deployment(clock: Optional[Clock] = None) -> Deployment:
    """배포를 새로 구성 (테스트, 관리용)"""
    global _deployment
    _deployment = build_deployment(
        clock=clock or SystemClock(),
        reward_rate_per_second=settings.REWARD_RATE_PER_SECOND,
        reward_funding=settings.REWARD_FUNDING,
        ledger_address=settings.LEDGER_ADDRESS,
    )
    return _deployment
