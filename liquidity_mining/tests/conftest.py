"""
공용 테스트 fixture

기본 배포(deployment)와 두 홀더를 구성합니다:
- holder_one: 전 범위 포지션 (현재 틱 포함)
- holder_two: 현재 틱 아래 범위 포지션 [-887220, -180660)
"""

import pytest

from ..chain.clock import ManualClock
from ..deployment import build_deployment

START_TIME = 1_700_000_000

HOLDER_ONE = "0x00000000000000000000000000000000000000e1"
HOLDER_TWO = "0x00000000000000000000000000000000000000e2"

# 총 공급량의 1%, 상대 토큰 1개
HOLDER_REWARD_AMOUNT = 10 ** 24
HOLDER_QUOTE_AMOUNT = 10 ** 18

OUT_OF_RANGE_TICKS = (-887220, -180660)


@pytest.fixture
def clock():
    return ManualClock(start=START_TIME)


@pytest.fixture
def deployment(clock):
    return build_deployment(clock=clock)


@pytest.fixture
def ledger(deployment):
    return deployment.ledger


@pytest.fixture
def holder_one_id(deployment):
    result = deployment.mint_position(HOLDER_ONE, HOLDER_REWARD_AMOUNT, HOLDER_QUOTE_AMOUNT)
    deployment.position_manager.approve(HOLDER_ONE, deployment.ledger.address, result.token_id)
    return result.token_id


@pytest.fixture
def holder_two_id(deployment):
    result = deployment.mint_position(
        HOLDER_TWO, HOLDER_REWARD_AMOUNT, HOLDER_QUOTE_AMOUNT, *OUT_OF_RANGE_TICKS
    )
    deployment.position_manager.approve(HOLDER_TWO, deployment.ledger.address, result.token_id)
    return result.token_id
