"""Request and response models for the HTTP command surface."""
from pydantic import BaseModel, Field

from diamond_hunt.config import settings
from diamond_hunt.logic.models import RoundSnapshot


# === Request Models ===


class StakeRequest(BaseModel):
    """POST /stake request body."""

    amount: float = Field(..., description="Must be one of the offered stake values")


class WagerRequest(BaseModel):
    """POST /wager request body."""

    competitorId: int
    amount: float | None = Field(
        default=None, description="Omit to wager the selected stake"
    )


class TopUpRequest(BaseModel):
    """POST /top-up request body; payment itself happens elsewhere."""

    amount: float


# === Response Models ===


class StateResponse(BaseModel):
    """GET /state response."""

    protocolVersion: str = settings.protocol_version
    configHash: str
    state: RoundSnapshot


class WagerResponse(BaseModel):
    protocolVersion: str = settings.protocol_version
    competitorId: int
    newTotal: float
    balance: float


class StakeResponse(BaseModel):
    protocolVersion: str = settings.protocol_version
    stake: float


class BalanceResponse(BaseModel):
    protocolVersion: str = settings.protocol_version
    balance: float
