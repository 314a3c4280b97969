from __future__ import annotations

import copy
from typing import TYPE_CHECKING

from pydantic import Field

from digevo.exceptions import ConfigurationError
from digevo.organisms.organism import Organism
from digevo.resources.pool import Resources

if TYPE_CHECKING:
    from digevo.simulation.simulation import Simulation


class Replicator(Organism):
    """Organism that copies itself every ``replication_cost`` cycles.

    When the population is at capacity a random living organism other than the
    parent is killed to make room. The genome is copied verbatim. With
    ``resource`` set, every copy first collects from that resource of the
    simulation's pool.
    """

    replication_cost: int = Field(default=10, ge=1, description="Cycles per copy")
    stored_cycles: int = Field(default=0, ge=0, description="Cycles not yet spent")
    resource: str | None = Field(
        default=None, description="Resource consumed on each copy"
    )
    collected: float = Field(default=0.0, ge=0.0, description="Resource gathered so far")

    def execute(self, cycles: int, context: Simulation | None = None) -> None:
        super().execute(cycles, context)
        self.stored_cycles += cycles
        if context is None:
            return
        while self.alive and self.stored_cycles >= self.replication_cost:
            self.stored_cycles -= self.replication_cost
            self._replicate(context)

    def _collect(self, context: Simulation) -> None:
        pool = context.resources
        if not isinstance(pool, Resources) or self.resource not in pool:
            raise ConfigurationError(
                f"Resource '{self.resource}' is not in the simulation's pool"
            )
        self.collected += pool.consume(self.resource)

    def _replicate(self, context: Simulation) -> None:
        if self.resource is not None:
            self._collect(context)

        population = context.population
        capacity = context.config.scheduler.max_population_size
        if population.alive_count() >= capacity:
            others = [o for o in population if o.alive and o is not self]
            if not others:
                return
            context.rng.choice(others).kill()

        child = type(self)(
            representation=copy.deepcopy(self.representation),
            priority=self.priority,
            replication_cost=self.replication_cost,
            resource=self.resource,
        )
        context.reproduce([self], child)
