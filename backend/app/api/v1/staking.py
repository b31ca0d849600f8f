"""
Staking Endpoints

Exposes the ledger's public surface: stake, unstake, claim, estimate,
plus read views of positions and global ledger state.
"""
from dataclasses import asdict
from fastapi import APIRouter, HTTPException, Query
from typing import List

from liquidity_mining.errors import (
    AlreadyStaked,
    LiquidityMiningError,
    NotOwnerOrNotStaked,
    PoolError,
    PositionCustodyError,
    ReentrancyRejected,
    TokenError,
    UnknownPosition,
)
from liquidity_mining.staking.validator import is_in_range

from app.api.schemas import (
    CallerRequest,
    ErrorResponse,
    EstimateResponse,
    EventResponse,
    LedgerStateResponse,
    MintPositionRequest,
    OperationResponse,
    PositionResponse,
    StakeRecordResponse,
)
from app.core.ledger_service import get_deployment

router = APIRouter()

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Rejected by the ledger or a collaborator"},
    403: {"model": ErrorResponse, "description": "Caller does not own the position or stake"},
    404: {"model": ErrorResponse, "description": "Unknown position id"},
    409: {"model": ErrorResponse, "description": "Already staked or reentrant call"},
}

_STATUS_CODES = (
    (UnknownPosition, 404),
    (NotOwnerOrNotStaked, 403),
    (PositionCustodyError, 403),
    (AlreadyStaked, 409),
    (ReentrancyRejected, 409),
)


def _to_http_error(exc: LiquidityMiningError) -> HTTPException:
    """Map a ledger error to an HTTP error

    Ledger errors carry their stable reason; collaborator errors carry their message.
    """
    detail = str(exc) if isinstance(exc, (TokenError, PositionCustodyError, PoolError)) else exc.reason
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=detail)
    return HTTPException(status_code=400, detail=detail)


def _event_response(event: object) -> EventResponse:
    return EventResponse(name=type(event).__name__, **asdict(event))


def _operation_response(events: List[object]) -> OperationResponse:
    return OperationResponse(status="success", events=[_event_response(e) for e in events])


@router.post("/positions", response_model=PositionResponse, responses={400: _ERRORS[400]})
async def mint_position(request: MintPositionRequest):
    """
    Fund a holder from the operator and mint a position in their name
    """
    deployment = get_deployment()
    try:
        result = deployment.mint_position(
            request.holder,
            request.reward_amount,
            request.quote_amount,
            request.tick_lower,
            request.tick_upper,
        )
    except LiquidityMiningError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return await get_position(result.token_id)


@router.get("/positions/{token_id}", response_model=PositionResponse, responses={404: _ERRORS[404]})
async def get_position(token_id: int):
    """
    Position geometry, custodian and whether it is currently stakeable
    """
    deployment = get_deployment()
    try:
        info = deployment.position_manager.positions(token_id)
        owner = deployment.position_manager.owner_of(token_id)
    except UnknownPosition as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return PositionResponse(
        token_id=token_id,
        owner=owner,
        tick_lower=info.tick_lower,
        tick_upper=info.tick_upper,
        liquidity=info.liquidity,
        in_range=is_in_range(info.tick_lower, info.tick_upper, deployment.pool.slot0().tick),
    )


@router.post("/positions/{token_id}/approve", response_model=PositionResponse, responses=_ERRORS)
async def approve_ledger(token_id: int, request: CallerRequest):
    """
    Approve the ledger to take custody of the position
    """
    deployment = get_deployment()
    try:
        deployment.position_manager.approve(request.caller, deployment.ledger.address, token_id)
    except LiquidityMiningError as exc:
        raise _to_http_error(exc)
    return await get_position(token_id)


@router.get("/stakes/{token_id}", response_model=StakeRecordResponse)
async def get_stake(token_id: int):
    """
    Ledger record and pending rewards for a position
    """
    ledger = get_deployment().ledger
    record = ledger.position(token_id)
    return StakeRecordResponse(
        token_id=token_id,
        owner=record.owner,
        liquidity=record.liquidity,
        reward_debt=record.reward_debt,
        staked=record.staked,
        pending_rewards=ledger.pending_rewards(token_id),
    )


@router.post("/stakes/{token_id}", response_model=OperationResponse, responses=_ERRORS)
async def stake(token_id: int, request: CallerRequest):
    """
    Stake a position (the caller must own it and have approved the ledger)
    """
    try:
        event = get_deployment().ledger.stake(token_id, request.caller)
    except LiquidityMiningError as exc:
        raise _to_http_error(exc)
    return _operation_response([event])


@router.post("/stakes/{token_id}/claim", response_model=OperationResponse, responses=_ERRORS)
async def claim_rewards(token_id: int, request: CallerRequest):
    """
    Claim pending rewards for a staked position
    """
    try:
        event = get_deployment().ledger.claim_rewards(token_id, request.caller)
    except LiquidityMiningError as exc:
        raise _to_http_error(exc)
    return _operation_response([event])


@router.post("/stakes/{token_id}/unstake", response_model=OperationResponse, responses=_ERRORS)
async def unstake(token_id: int, request: CallerRequest):
    """
    Settle pending rewards and return the position to its owner
    """
    try:
        events = get_deployment().ledger.unstake(token_id, request.caller)
    except LiquidityMiningError as exc:
        raise _to_http_error(exc)
    return _operation_response(events)


@router.get("/estimate", response_model=EstimateResponse)
async def estimate_rewards(
    liquidity: int = Query(..., ge=0, description="Hypothetical liquidity"),
    duration: int = Query(..., ge=0, description="Staking duration in seconds")
):
    """
    Projected reward for staking `liquidity` for `duration` seconds
    """
    reward = get_deployment().ledger.estimate_rewards(liquidity, duration)
    return EstimateResponse(liquidity=liquidity, duration=duration, reward=reward)


@router.get("/ledger", response_model=LedgerStateResponse)
async def ledger_state():
    """
    Global ledger state
    """
    deployment = get_deployment()
    state = deployment.ledger.state
    return LedgerStateResponse(
        total_staked_liquidity=state.total_staked_liquidity,
        acc_reward_per_liquidity=state.acc_reward_per_liquidity,
        last_update_time=state.last_update_time,
        reward_rate_per_second=state.reward_rate_per_second,
        reward_balance=deployment.ledger.reward_balance(),
        current_tick=deployment.pool.slot0().tick,
    )
