from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SimulationSettings(BaseSettings):
    tick_interval_seconds: float = Field(
        default=2.0,
        gt=0.0,
        le=60.0,
        description="Wall-clock (or virtual) seconds between simulation ticks",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["text", "json"] = "text"

    # Motion model
    step_fraction: float = Field(
        default=0.05,
        gt=0.0,
        le=1.0,
        description="Fraction of the remaining gap to the target closed on each tick",
    )
    arrival_metric: Literal["degrees", "haversine"] = Field(
        default="degrees",
        description="degrees: planar distance in coordinate space; haversine: meters",
    )
    arrival_threshold_deg: float = Field(
        default=0.0002,
        gt=0.0,
        le=0.01,
        description="Planar coordinate distance below which a waypoint is reached (~20 m)",
    )
    arrival_threshold_m: float = Field(
        default=20.0,
        ge=1.0,
        le=500.0,
        description="Great-circle distance used when arrival_metric=haversine",
    )

    # Initial leg
    initial_distance_m: float = Field(default=2500.0, ge=0.0)
    initial_eta_seconds: float = Field(default=15 * 60, ge=0.0)

    # Per-tick decay
    distance_decay_m: float = Field(default=50.0, ge=0.0)
    eta_decay_factor: float = Field(
        default=0.95,
        gt=0.0,
        le=1.0,
        description="Multiplier applied to the remaining time-to-ETA on each tick",
    )
    eta_floor_seconds: float = Field(default=60.0, ge=0.0)

    # Leg resets
    pickup_departure_distance_m: float = Field(
        default=100.0,
        ge=0.0,
        description="Vehicle leaves pickup once remaining distance drops below this",
    )
    dropoff_leg_distance_m: float = Field(default=3000.0, ge=0.0)
    dropoff_leg_eta_seconds: float = Field(default=20 * 60, ge=0.0)
    intermediate_leg_distance_m: float = Field(default=2000.0, ge=0.0)
    intermediate_leg_eta_seconds: float = Field(default=10 * 60, ge=0.0)

    # Scheduler
    publish_waypoint_updates: bool = Field(
        default=False,
        description="Emit onTripRemainingWaypointsUpdated when the waypoint cursor moves",
    )
    stop_join_timeout_seconds: float = Field(default=5.0, gt=0.0, le=60.0)

    model_config = SettingsConfigDict(env_prefix="SIM_")

    @model_validator(mode="after")
    def validate_eta_floor(self) -> "SimulationSettings":
        if self.eta_floor_seconds > self.initial_eta_seconds:
            raise ValueError(
                f"eta_floor_seconds ({self.eta_floor_seconds}) cannot exceed "
                f"initial_eta_seconds ({self.initial_eta_seconds})"
            )
        return self


class ProviderSettings(BaseSettings):
    """Fleet provider identity. Carried for the host, never interpreted."""

    provider_id: str = ""
    token: str = ""

    model_config = SettingsConfigDict(env_prefix="PROVIDER_")


class Settings(BaseSettings):
    simulation: SimulationSettings = Field(default_factory=SimulationSettings)
    provider: ProviderSettings = Field(default_factory=ProviderSettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
