"""
Liquidity Mining 예외 정의

모든 예외는 안정적인 reason 문자열을 가지며, 발생한 연산 전체를 중단시킵니다.
내부에서 재시도하거나 복구하지 않습니다.
"""

from typing import Optional


class LiquidityMiningError(Exception):
    """Liquidity Mining 오류 기본 클래스"""

    reason: str = "Liquidity mining error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.reason)


class DomainError(LiquidityMiningError, ValueError):
    """음수 입력에 대한 제곱근"""
    reason = "Square root of negative numbers is not supported"


class DivisionByZero(LiquidityMiningError, ZeroDivisionError):
    """분모가 0인 비율"""
    reason = "amount0 must be non-zero"


class PositionOutOfRange(LiquidityMiningError):
    """포지션 범위가 현재 틱을 포함하지 않음"""
    reason = "Position is out of range"


class AlreadyStaked(LiquidityMiningError):
    """이미 스테이킹된 포지션"""
    reason = "Token already staked"


class NotOwnerOrNotStaked(LiquidityMiningError):
    """호출자가 소유자가 아니거나 스테이킹되지 않은 포지션"""
    reason = "Not the owner or not staked"


class InsufficientRewardBalance(LiquidityMiningError):
    """원장의 보상 토큰 잔고 부족"""
    reason = "Insufficient reward balance"


class ReentrancyRejected(LiquidityMiningError):
    """진행 중인 원장 연산 안에서의 재진입 호출"""
    reason = "Reentrant call"


class TokenError(LiquidityMiningError):
    """토큰 잔고/허용량 부족"""
    reason = "Token transfer failed"


class PositionCustodyError(LiquidityMiningError):
    """포지션 NFT 소유/승인/민트 오류"""
    reason = "Position custody error"


class UnknownPosition(PositionCustodyError):
    """존재하지 않는 포지션 id"""
    reason = "Invalid token ID"


class PoolError(LiquidityMiningError):
    """풀 초기화 오류"""
    reason = "Pool error"
