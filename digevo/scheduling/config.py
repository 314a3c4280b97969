from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SchedulerConfig(BaseModel):
    """Configuration options controlling the round-robin scheduler."""

    time_slice: int = Field(
        default=30, ge=1, description="CPU cycles per organism per update"
    )
    resource_slice: int = Field(
        default=1, ge=1, description="Resource-update periods per update"
    )
    max_population_size: int = Field(
        default=1024,
        ge=1,
        description="Cap on the population size used to scale the cycle budget",
    )

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _validate_resource_period(self) -> SchedulerConfig:
        """A single organism's budget must cover every resource period."""
        if self.time_slice < self.resource_slice:
            raise ValueError(
                f"time_slice ({self.time_slice}) must be >= resource_slice "
                f"({self.resource_slice}) so no resource period is empty"
            )
        return self
