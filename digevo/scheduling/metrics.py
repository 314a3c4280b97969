from __future__ import annotations

from pydantic import BaseModel, Field


class TickStats(BaseModel):
    """What a single scheduler pass did."""

    budget: int = Field(default=0, description="Cycles available this update")
    consumed: int = Field(default=0, description="Cycles actually granted")
    period_length: int = Field(default=0, description="Cycles per resource period")
    resource_updates: int = Field(
        default=0, description="Resource pool advances performed"
    )
    executions: int = Field(default=0, description="Execute calls issued")
    dead_visits: int = Field(default=0, description="Visits that hit a dead organism")
    population_before: int = Field(default=0, description="Size at the start")
    population_after: int = Field(default=0, description="Size after pruning")
    offspring: int = Field(default=0, description="Organisms appended mid-update")

    @property
    def pruned(self) -> int:
        return self.population_before + self.offspring - self.population_after

    @property
    def budget_exhausted(self) -> bool:
        return self.consumed >= self.budget


class SchedulerMetrics(BaseModel):
    """Cumulative scheduler counters."""

    ticks: int = Field(default=0, description="Total number of scheduler passes")
    cycles_consumed: int = Field(default=0, description="Total cycles granted")
    executions: int = Field(default=0, description="Total execute calls")
    resource_updates: int = Field(default=0, description="Total resource advances")
    offspring: int = Field(default=0, description="Total mid-update births seen")
    pruned: int = Field(default=0, description="Total dead organisms removed")
    early_terminations: int = Field(
        default=0, description="Passes that ended on dead count before the budget"
    )

    def record_tick(self, stats: TickStats) -> None:
        """Record metrics from one scheduler pass."""
        self.ticks += 1
        self.cycles_consumed += stats.consumed
        self.executions += stats.executions
        self.resource_updates += stats.resource_updates
        self.offspring += stats.offspring
        self.pruned += stats.pruned
        if not stats.budget_exhausted and stats.population_before > 0:
            self.early_terminations += 1

    model_config = {"arbitrary_types_allowed": True, "extra": "allow"}
