from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from digevo.scheduling.config import SchedulerConfig


class SimulationConfig(BaseModel):
    """Configuration options controlling a Simulation."""

    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    priority: Literal["fixed", "priority"] = Field(
        default="priority", description="Priority accessor used by the scheduler"
    )
    seed: int | None = Field(default=None, description="Seed for the simulation RNG")
    track_fixation: bool = Field(
        default=True, description="Stamp fixation times at the end of every update"
    )
    lod_interval: int = Field(
        default=0,
        ge=0,
        description="Write the MRCA lineage every N updates (0 = never)",
    )
    output_dir: str = Field(default="output", description="Directory for datafiles")
    compress_lod: bool = Field(default=True, description="Gzip lineage datafiles")
    validate_state: bool = Field(
        default=False,
        description="Recount share-counts and check the ancestry graph after each update",
    )

    model_config = ConfigDict(extra="forbid")
