"""
API Request/Response Schemas using Pydantic

Defines data models for the liquidity mining API endpoints.
All token amounts and liquidity values are integers in the smallest unit.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class CallerRequest(BaseModel):
    """Request payload carrying the calling address"""
    caller: str = Field(..., description="Address of the caller (position owner)")

    class Config:
        json_schema_extra = {
            "example": {
                "caller": "0x00000000000000000000000000000000000000e1"
            }
        }


class MintPositionRequest(BaseModel):
    """Request payload for POST /api/v1/positions"""
    holder: str = Field(..., description="Address receiving the funded position")
    reward_amount: int = Field(..., description="Reward token amount to deposit", ge=0)
    quote_amount: int = Field(..., description="Quote token amount to deposit", ge=0)
    tick_lower: Optional[int] = Field(None, description="Lower tick (defaults to full range)")
    tick_upper: Optional[int] = Field(None, description="Upper tick (defaults to full range)")

    class Config:
        json_schema_extra = {
            "example": {
                "holder": "0x00000000000000000000000000000000000000e1",
                "reward_amount": 1000000000000000000000000,
                "quote_amount": 1000000000000000000,
                "tick_lower": -887220,
                "tick_upper": 887220
            }
        }


class PositionResponse(BaseModel):
    """Position geometry and custody"""
    token_id: int = Field(..., description="Position NFT id")
    owner: str = Field(..., description="Current NFT custodian")
    tick_lower: int = Field(..., description="Lower tick")
    tick_upper: int = Field(..., description="Upper tick")
    liquidity: int = Field(..., description="Position liquidity")
    in_range: bool = Field(..., description="Whether the pool's current tick is inside the range")


class StakeRecordResponse(BaseModel):
    """Ledger record for a position"""
    token_id: int = Field(..., description="Position NFT id")
    owner: str = Field(..., description="Address entitled to rewards")
    liquidity: int = Field(..., description="Staked liquidity")
    reward_debt: int = Field(..., description="Accumulator value at last checkpoint")
    staked: bool = Field(..., description="Whether the position is staked")
    pending_rewards: int = Field(..., description="Unclaimed rewards as of now")


class LedgerStateResponse(BaseModel):
    """Global ledger state"""
    total_staked_liquidity: int
    acc_reward_per_liquidity: int
    last_update_time: int
    reward_rate_per_second: int
    reward_balance: int
    current_tick: int
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Response timestamp")


class EventResponse(BaseModel):
    """Event emitted by a ledger operation"""
    name: str = Field(..., description="Event name (Stake, Unstake, ClaimReward)")
    owner: str
    token_id: Optional[int] = None
    liquidity: Optional[int] = None
    amount: Optional[int] = None


class OperationResponse(BaseModel):
    """Response payload for stake/unstake/claim"""
    status: str = Field(..., description="Response status")
    events: List[EventResponse] = Field(..., description="Events emitted in order")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Response timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "success",
                "events": [
                    {"name": "ClaimReward", "owner": "0x00000000000000000000000000000000000000e1",
                     "amount": 999999999999999942}
                ],
                "timestamp": "2024-01-15T10:30:00Z"
            }
        }


class EstimateResponse(BaseModel):
    """Response payload for GET /api/v1/estimate"""
    liquidity: int
    duration: int
    reward: int = Field(..., description="Projected reward at the current rate and total liquidity")


class HealthCheckResponse(BaseModel):
    """Response payload for GET /api/v1/health endpoint"""
    status: str = Field(..., description="Health status (healthy or unhealthy)")
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Health check timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "version": "0.1.0",
                "timestamp": "2024-01-15T10:30:00Z"
            }
        }


class ErrorResponse(BaseModel):
    """Error payload"""
    detail: str = Field(..., description="Stable error reason")
