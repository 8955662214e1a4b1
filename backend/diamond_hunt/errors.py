"""Error codes and the engine exception type."""
from enum import Enum

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from diamond_hunt.config import settings


class ErrorCode(str, Enum):
    """Rejection reasons reported to callers."""

    INVALID_PHASE_FOR_ACTION = "INVALID_PHASE_FOR_ACTION"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    UNKNOWN_COMPETITOR = "UNKNOWN_COMPETITOR"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_PHASE_FOR_ACTION: 409,
    ErrorCode.INSUFFICIENT_FUNDS: 402,
    ErrorCode.INVALID_AMOUNT: 400,
    ErrorCode.UNKNOWN_COMPETITOR: 404,
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.INTERNAL_ERROR: 500,
}

# Every engine rejection leaves the round running, so the player can retry.
ERROR_RECOVERABLE: dict[ErrorCode, bool] = {
    ErrorCode.INVALID_PHASE_FOR_ACTION: True,
    ErrorCode.INSUFFICIENT_FUNDS: True,
    ErrorCode.INVALID_AMOUNT: True,
    ErrorCode.UNKNOWN_COMPETITOR: True,
    ErrorCode.INVALID_REQUEST: False,
    ErrorCode.INTERNAL_ERROR: True,
}


class ErrorBody(BaseModel):
    """Error body shape."""

    code: str
    message: str
    recoverable: bool


class ErrorResponse(BaseModel):
    """Full error response."""

    protocolVersion: str = settings.protocol_version
    error: ErrorBody


class GameError(Exception):
    """Recoverable rejection of a command; never aborts the round timeline."""

    def __init__(self, code: ErrorCode, message: str | None = None):
        self.code = code
        self.message = message or f"Error: {code.value}"
        self.status_code = ERROR_HTTP_STATUS[code]
        self.recoverable = ERROR_RECOVERABLE[code]
        super().__init__(self.message)

    def to_response(self) -> JSONResponse:
        """Convert to JSONResponse."""
        return JSONResponse(
            status_code=self.status_code,
            content=ErrorResponse(
                error=ErrorBody(
                    code=self.code.value,
                    message=self.message,
                    recoverable=self.recoverable,
                )
            ).model_dump(),
        )
