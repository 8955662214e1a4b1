"""Application configuration with round-engine defaults and environment overrides."""
from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Engine and server settings.

    Timing and outcome fields are bounded so a bad override fails at startup
    rather than inside a timer callback mid-round.
    """

    model_config = ConfigDict(env_prefix="HUNT_")

    # Server
    debug: bool = False
    log_level: str = "INFO"

    # Protocol
    protocol_version: str = "1.0"

    # Wallet
    starting_balance: float = Field(default=10000.0, ge=0)
    stake_values: list[float] = Field(default=[2, 50, 500, 1], min_length=1)

    # Phase timing
    betting_countdown_seconds: int = Field(default=30, ge=1)
    next_round_countdown_seconds: int = Field(default=5, ge=1)
    draw_duration_ms: int = Field(default=2500, gt=0)
    settle_delay_ms: int = Field(default=300, ge=0)
    highlight_interval_ms: int = Field(default=100, gt=0)

    # Outcome selection
    # tilt below 1 keeps every weight positive for luck in [-1, 1]
    luck_weight_tilt: float = Field(default=0.5, ge=0, lt=1)
    bonus_multiplier: int = Field(default=4, ge=1)
    base_multiplier_chance: float = Field(default=0.10, ge=0, le=1)
    multiplier_chance_floor: float = Field(default=0.05, ge=0, le=1)
    multiplier_chance_ceiling: float = Field(default=0.25, ge=0, le=1)

    # Display
    recent_results_limit: int = Field(default=8, ge=1)


settings = Settings()
