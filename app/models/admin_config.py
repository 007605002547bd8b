"""Admin configuration: privileged identities, rate-limit policy, game state."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

GameState = Literal["coming-soon", "active"]


class RateLimitPolicy(BaseModel):
    """Lockout policy for one channel."""

    max_failures: int = Field(ge=1, le=20)
    lock_minutes: int = Field(ge=1, le=1440)


class RateLimitConfig(BaseModel):
    answer: RateLimitPolicy = Field(
        default_factory=lambda: RateLimitPolicy(max_failures=3, lock_minutes=10)
    )
    hint_password: RateLimitPolicy = Field(
        default_factory=lambda: RateLimitPolicy(max_failures=3, lock_minutes=25)
    )


class AdminConfig(BaseModel):
    admin_uuid: str = Field(min_length=1)
    dashboard_uuid: str = Field(min_length=1)
    rate_limit_config: RateLimitConfig = Field(default_factory=RateLimitConfig)
    game_state: GameState = "coming-soon"

    @model_validator(mode="after")
    def _distinct_identities(self) -> "AdminConfig":
        if self.admin_uuid == self.dashboard_uuid:
            raise ValueError("Admin and dashboard UUIDs must be different")
        return self
