"""Diamond Hunt FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError

from diamond_hunt.config import settings
from diamond_hunt.config_hash import get_config_hash
from diamond_hunt.errors import ErrorCode, GameError
from diamond_hunt.logic.engine import RoundEngine
from diamond_hunt.middleware import ErrorHandlerMiddleware
from diamond_hunt.protocol import (
    BalanceResponse,
    StakeRequest,
    StakeResponse,
    StateResponse,
    TopUpRequest,
    WagerRequest,
    WagerResponse,
)


logger = logging.getLogger(__name__)

# One player per engine instance
round_engine = RoundEngine()


def get_engine() -> RoundEngine:
    """Engine dependency; overridden in tests."""
    return round_engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the round engine on the server's event loop."""
    logging.basicConfig(level=logging.DEBUG if settings.debug else settings.log_level)
    round_engine.start()
    yield
    round_engine.stop()


app = FastAPI(
    title="Diamond Hunt",
    version="0.1.0",
    description="Timed betting round engine for Diamond Hunt",
    lifespan=lifespan,
)

app.add_middleware(ErrorHandlerMiddleware)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies map to INVALID_REQUEST instead of FastAPI's 422."""
    return GameError(ErrorCode.INVALID_REQUEST, "Malformed request body.").to_response()


# Routes are async so commands run on the loop thread that owns the timers.


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/state")
async def state(engine: RoundEngine = Depends(get_engine)) -> dict:
    """Current round snapshot; never includes the luck factor."""
    response = StateResponse(configHash=get_config_hash(engine.config), state=engine.snapshot())
    return response.model_dump()


@app.post("/stake")
async def select_stake(body: StakeRequest, engine: RoundEngine = Depends(get_engine)) -> dict:
    stake = engine.select_stake(body.amount)
    return StakeResponse(stake=stake).model_dump()


@app.post("/wager")
async def place_wager(body: WagerRequest, engine: RoundEngine = Depends(get_engine)) -> dict:
    """
    POST /wager.

    Rejections (wrong phase, unknown competitor, bad amount, insufficient
    funds) come back as error responses; the round clock is unaffected.
    """
    new_total = engine.place_wager(body.competitorId, body.amount)
    return WagerResponse(
        competitorId=body.competitorId,
        newTotal=new_total,
        balance=engine.ledger.balance,
    ).model_dump()


@app.post("/top-up")
async def top_up(body: TopUpRequest, engine: RoundEngine = Depends(get_engine)) -> dict:
    balance = engine.request_top_up(body.amount)
    return BalanceResponse(balance=balance).model_dump()


@app.post("/play-again")
async def play_again(engine: RoundEngine = Depends(get_engine)) -> dict:
    engine.force_play_again()
    return StateResponse(configHash=get_config_hash(engine.config), state=engine.snapshot()).model_dump()
