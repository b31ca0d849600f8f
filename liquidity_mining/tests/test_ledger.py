"""
Staking Ledger 테스트

기본 배포 위에서 stake / claim_rewards / unstake 흐름과
원자성, 재진입 거부를 검증합니다.
"""

import pytest

from ..constants import PRECISION
from ..deployment import build_deployment
from ..errors import (
    AlreadyStaked,
    InsufficientRewardBalance,
    NotOwnerOrNotStaked,
    PositionCustodyError,
    PositionOutOfRange,
    ReentrancyRejected,
)
from ..events import ClaimReward, Stake, Unstake
from ..staking.state import EMPTY_RECORD
from .conftest import HOLDER_ONE, HOLDER_QUOTE_AMOUNT, HOLDER_REWARD_AMOUNT, HOLDER_TWO

RATE = 10 ** 18
HOLDER_ONE_LIQUIDITY = 119522860933439363996
DAY_ESTIMATE = 86399999999999999999943
WEEK_ESTIMATE = 604799999999999999999962


def one_second_reward(liquidity: int) -> int:
    """단독 스테이커가 1초 후 받는 보상"""
    return (RATE * PRECISION // liquidity) * liquidity // PRECISION


@pytest.fixture
def full_range_two_id(deployment):
    """holder_two 의 전 범위 포지션 (holder_one 과 같은 수량)"""
    result = deployment.mint_position(HOLDER_TWO, HOLDER_REWARD_AMOUNT, HOLDER_QUOTE_AMOUNT)
    deployment.position_manager.approve(HOLDER_TWO, deployment.ledger.address, result.token_id)
    return result.token_id


class TestStake:
    """stake 테스트"""

    def test_stake_in_range_position(self, ledger, deployment, holder_one_id):
        event = ledger.stake(holder_one_id, HOLDER_ONE)

        assert event == Stake(owner=HOLDER_ONE, token_id=holder_one_id, liquidity=HOLDER_ONE_LIQUIDITY)
        assert ledger.total_staked_liquidity == HOLDER_ONE_LIQUIDITY
        assert deployment.position_manager.owner_of(holder_one_id) == ledger.address

        record = ledger.position(holder_one_id)
        assert record.staked
        assert record.owner == HOLDER_ONE
        assert record.liquidity == HOLDER_ONE_LIQUIDITY
        assert record.reward_debt == ledger.acc_reward_per_liquidity

    def test_stake_event_logged(self, ledger, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        assert ledger.events.of_type(Stake) == [
            Stake(owner=HOLDER_ONE, token_id=holder_one_id, liquidity=HOLDER_ONE_LIQUIDITY)
        ]

    def test_out_of_range_rejected(self, ledger, deployment, holder_two_id):
        with pytest.raises(PositionOutOfRange) as exc_info:
            ledger.stake(holder_two_id, HOLDER_TWO)

        assert exc_info.value.reason == "Position is out of range"
        assert ledger.total_staked_liquidity == 0
        assert not ledger.position(holder_two_id).staked
        assert deployment.position_manager.owner_of(holder_two_id) == HOLDER_TWO

    def test_double_stake_rejected(self, ledger, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        with pytest.raises(AlreadyStaked):
            ledger.stake(holder_one_id, HOLDER_ONE)
        assert ledger.total_staked_liquidity == HOLDER_ONE_LIQUIDITY

    def test_stake_without_approval_rolls_back(self, ledger, deployment, clock):
        result = deployment.mint_position(HOLDER_ONE, HOLDER_REWARD_AMOUNT, HOLDER_QUOTE_AMOUNT)
        state_before = ledger.state
        events_before = len(ledger.events)
        clock.advance(30)

        with pytest.raises(PositionCustodyError):
            ledger.stake(result.token_id, HOLDER_ONE)

        assert ledger.state == state_before
        assert ledger.position(result.token_id) == EMPTY_RECORD
        assert len(ledger.events) == events_before

    def test_stake_by_non_owner_rejected(self, ledger, deployment, holder_one_id):
        with pytest.raises(PositionCustodyError):
            ledger.stake(holder_one_id, HOLDER_TWO)
        assert deployment.position_manager.owner_of(holder_one_id) == HOLDER_ONE
        assert not ledger.position(holder_one_id).staked

    def test_unknown_token_rejected(self, ledger):
        with pytest.raises(PositionCustodyError):
            ledger.stake(999, HOLDER_ONE)


class TestClaimRewards:
    """claim_rewards 테스트"""

    def test_claim_after_one_second(self, ledger, deployment, clock, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        balance_before = deployment.reward_token.balance_of(HOLDER_ONE)
        clock.advance(1)

        event = ledger.claim_rewards(holder_one_id, HOLDER_ONE)

        assert event.owner == HOLDER_ONE
        assert event.amount == one_second_reward(HOLDER_ONE_LIQUIDITY)
        assert RATE - 120 < event.amount <= RATE
        assert deployment.reward_token.balance_of(HOLDER_ONE) == balance_before + event.amount

    def test_claim_checkpoints_debt(self, ledger, clock, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        clock.advance(1)
        ledger.claim_rewards(holder_one_id, HOLDER_ONE)

        assert ledger.position(holder_one_id).reward_debt == ledger.acc_reward_per_liquidity
        assert ledger.pending_rewards(holder_one_id) == 0

    def test_claim_twice_same_timestamp_pays_zero(self, ledger, deployment, clock, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        clock.advance(5)
        ledger.claim_rewards(holder_one_id, HOLDER_ONE)
        balance = deployment.reward_token.balance_of(HOLDER_ONE)

        event = ledger.claim_rewards(holder_one_id, HOLDER_ONE)

        assert event == ClaimReward(owner=HOLDER_ONE, amount=0)
        assert deployment.reward_token.balance_of(HOLDER_ONE) == balance

    def test_not_owner_rejected(self, ledger, clock, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        clock.advance(1)
        with pytest.raises(NotOwnerOrNotStaked):
            ledger.claim_rewards(holder_one_id, HOLDER_TWO)

    def test_not_staked_rejected(self, ledger, holder_one_id):
        with pytest.raises(NotOwnerOrNotStaked) as exc_info:
            ledger.claim_rewards(holder_one_id, HOLDER_ONE)
        assert exc_info.value.reason == "Not the owner or not staked"

    def test_insufficient_reward_balance_leaves_state(self, clock):
        deployment = build_deployment(clock=clock, reward_funding=10)
        ledger = deployment.ledger
        token_id = deployment.mint_position(HOLDER_ONE, HOLDER_REWARD_AMOUNT, HOLDER_QUOTE_AMOUNT).token_id
        deployment.position_manager.approve(HOLDER_ONE, ledger.address, token_id)
        ledger.stake(token_id, HOLDER_ONE)
        clock.advance(10)

        state_before = ledger.state
        record_before = ledger.position(token_id)
        balance_before = deployment.reward_token.balance_of(HOLDER_ONE)

        with pytest.raises(InsufficientRewardBalance):
            ledger.claim_rewards(token_id, HOLDER_ONE)

        assert ledger.state == state_before
        assert ledger.position(token_id) == record_before
        assert deployment.reward_token.balance_of(HOLDER_ONE) == balance_before
        assert ledger.reward_balance() == 10

    def test_no_accrual_while_nothing_staked(self, ledger, clock, holder_one_id):
        clock.advance(10_000)
        ledger.stake(holder_one_id, HOLDER_ONE)
        assert ledger.acc_reward_per_liquidity == 0

        clock.advance(1)
        event = ledger.claim_rewards(holder_one_id, HOLDER_ONE)
        assert event.amount == one_second_reward(HOLDER_ONE_LIQUIDITY)


class TestUnstake:
    """unstake 테스트"""

    def test_unstake_settles_and_returns_custody(self, ledger, deployment, clock, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        clock.advance(1)
        balance_before = deployment.reward_token.balance_of(HOLDER_ONE)

        events = ledger.unstake(holder_one_id, HOLDER_ONE)

        reward = one_second_reward(HOLDER_ONE_LIQUIDITY)
        assert events == [
            ClaimReward(owner=HOLDER_ONE, amount=reward),
            Unstake(owner=HOLDER_ONE, token_id=holder_one_id, liquidity=0),
        ]
        assert ledger.total_staked_liquidity == 0
        assert ledger.position(holder_one_id) == EMPTY_RECORD
        assert deployment.position_manager.owner_of(holder_one_id) == HOLDER_ONE
        assert deployment.reward_token.balance_of(HOLDER_ONE) == balance_before + reward

    def test_unstake_without_pending_emits_only_unstake(self, ledger, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        events = ledger.unstake(holder_one_id, HOLDER_ONE)
        assert events == [Unstake(owner=HOLDER_ONE, token_id=holder_one_id, liquidity=0)]

    def test_restake_after_unstake(self, ledger, deployment, clock, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        clock.advance(1)
        ledger.unstake(holder_one_id, HOLDER_ONE)

        deployment.position_manager.approve(HOLDER_ONE, ledger.address, holder_one_id)
        ledger.stake(holder_one_id, HOLDER_ONE)

        assert ledger.total_staked_liquidity == HOLDER_ONE_LIQUIDITY
        assert ledger.pending_rewards(holder_one_id) == 0

    def test_not_owner_rejected(self, ledger, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        with pytest.raises(NotOwnerOrNotStaked):
            ledger.unstake(holder_one_id, HOLDER_TWO)
        assert ledger.position(holder_one_id).staked

    def test_unstake_twice_rejected(self, ledger, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        ledger.unstake(holder_one_id, HOLDER_ONE)
        with pytest.raises(NotOwnerOrNotStaked):
            ledger.unstake(holder_one_id, HOLDER_ONE)

    def test_failed_custody_return_rolls_back_payment(self, ledger, deployment, clock, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        clock.advance(60)

        state_before = ledger.state
        record_before = ledger.position(holder_one_id)
        holder_balance = deployment.reward_token.balance_of(HOLDER_ONE)
        ledger_balance = ledger.reward_balance()
        events_before = len(ledger.events)

        def reject_custody(sender, recipient, token_id):
            raise RuntimeError("receiver rejected position")

        deployment.position_manager.on_transfer = reject_custody
        with pytest.raises(RuntimeError):
            ledger.unstake(holder_one_id, HOLDER_ONE)

        assert ledger.state == state_before
        assert ledger.position(holder_one_id) == record_before
        assert deployment.reward_token.balance_of(HOLDER_ONE) == holder_balance
        assert ledger.reward_balance() == ledger_balance
        assert deployment.position_manager.owner_of(holder_one_id) == ledger.address
        assert len(ledger.events) == events_before

        deployment.position_manager.on_transfer = None
        events = ledger.unstake(holder_one_id, HOLDER_ONE)
        assert events[0].amount == ledger_balance - ledger.reward_balance()

    def test_failed_unstake_leaves_other_stakes(self, ledger, deployment, clock, holder_one_id, full_range_two_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        ledger.stake(full_range_two_id, HOLDER_TWO)
        clock.advance(60)
        other_record = ledger.position(full_range_two_id)
        own_record = ledger.position(holder_one_id)

        def reject_custody(sender, recipient, token_id):
            raise RuntimeError("receiver rejected position")

        deployment.position_manager.on_transfer = reject_custody
        with pytest.raises(RuntimeError):
            ledger.unstake(holder_one_id, HOLDER_ONE)

        assert ledger.position(holder_one_id) == own_record
        assert ledger.position(full_range_two_id) == other_record
        assert ledger.total_staked_liquidity == 2 * HOLDER_ONE_LIQUIDITY

    def test_checkpoints_closed_after_operations(self, ledger, deployment, clock, holder_one_id):
        """성공과 실패 뒤 모두 협력 구성요소의 체크포인트가 닫힘"""
        ledger.stake(holder_one_id, HOLDER_ONE)
        clock.advance(1)
        ledger.claim_rewards(holder_one_id, HOLDER_ONE)
        with pytest.raises(NotOwnerOrNotStaked):
            ledger.claim_rewards(holder_one_id, HOLDER_TWO)

        assert deployment.reward_token._journal.depth == 0
        assert deployment.position_manager._journal.depth == 0


class TestReentrancy:
    """재진입 거부 테스트"""

    def test_reentrant_claim_rejected(self, ledger, deployment, clock, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        clock.advance(1)
        rejected = []

        def reenter(sender, recipient, amount):
            try:
                ledger.claim_rewards(holder_one_id, HOLDER_ONE)
            except ReentrancyRejected as exc:
                rejected.append(exc)

        deployment.reward_token.on_transfer = reenter
        balance_before = deployment.reward_token.balance_of(HOLDER_ONE)

        event = ledger.claim_rewards(holder_one_id, HOLDER_ONE)

        assert len(rejected) == 1
        assert deployment.reward_token.balance_of(HOLDER_ONE) == balance_before + event.amount
        assert ledger.events.of_type(ClaimReward) == [event]

    def test_guard_released_after_failure(self, ledger, holder_one_id):
        with pytest.raises(NotOwnerOrNotStaked):
            ledger.claim_rewards(holder_one_id, HOLDER_ONE)
        ledger.stake(holder_one_id, HOLDER_ONE)
        assert ledger.position(holder_one_id).staked


class TestMultipleStakers:
    """여러 스테이커 간 분배"""

    def test_equal_positions_split_evenly(self, ledger, clock, holder_one_id, full_range_two_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        ledger.stake(full_range_two_id, HOLDER_TWO)
        clock.advance(100)

        first = ledger.pending_rewards(holder_one_id)
        second = ledger.pending_rewards(full_range_two_id)

        assert first == second
        assert first + second <= RATE * 100
        assert RATE * 100 - (first + second) < 1000

    def test_late_staker_only_earns_after_joining(self, ledger, clock, holder_one_id, full_range_two_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        clock.advance(10)
        ledger.stake(full_range_two_id, HOLDER_TWO)
        clock.advance(10)

        first = ledger.claim_rewards(holder_one_id, HOLDER_ONE).amount
        second = ledger.claim_rewards(full_range_two_id, HOLDER_TWO).amount

        assert first + second <= RATE * 20
        assert abs(first - 15 * RATE) < 1000
        assert abs(second - 5 * RATE) < 1000

    def test_unstake_does_not_change_others_pending(self, ledger, clock, holder_one_id, full_range_two_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        ledger.stake(full_range_two_id, HOLDER_TWO)
        clock.advance(10)

        pending_two = ledger.pending_rewards(full_range_two_id)
        ledger.unstake(holder_one_id, HOLDER_ONE)

        assert ledger.pending_rewards(full_range_two_id) == pending_two


class TestViews:
    """조회 테스트"""

    def test_pending_rewards_is_read_only(self, ledger, clock, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        clock.advance(1)
        state_before = ledger.state

        assert ledger.pending_rewards(holder_one_id) == one_second_reward(HOLDER_ONE_LIQUIDITY)
        assert ledger.state == state_before

    def test_unknown_position_is_empty(self, ledger):
        assert ledger.position(12345) == EMPTY_RECORD
        assert ledger.pending_rewards(12345) == 0

    def test_estimate_sole_staker(self, ledger, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        assert ledger.estimate_rewards(HOLDER_ONE_LIQUIDITY, 86400) == DAY_ESTIMATE
        assert ledger.estimate_rewards(HOLDER_ONE_LIQUIDITY, 604800) == WEEK_ESTIMATE

    def test_estimate_matches_claim(self, ledger, clock, holder_one_id):
        """예상 보상은 같은 기간 뒤 실제 수령액과 같음"""
        ledger.stake(holder_one_id, HOLDER_ONE)
        estimated = ledger.estimate_rewards(HOLDER_ONE_LIQUIDITY, 86400)
        clock.advance(86400)
        assert ledger.claim_rewards(holder_one_id, HOLDER_ONE).amount == estimated

    def test_estimate_empty_ledger(self, ledger):
        assert ledger.estimate_rewards(HOLDER_ONE_LIQUIDITY, 86400) == DAY_ESTIMATE

    def test_estimate_is_pure(self, ledger, clock, holder_one_id):
        ledger.stake(holder_one_id, HOLDER_ONE)
        clock.advance(100)
        state_before = ledger.state
        ledger.estimate_rewards(10 ** 18, 3600)
        assert ledger.state == state_before

    def test_reward_balance(self, ledger):
        assert ledger.reward_balance() == 2 * 10 ** 25


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
