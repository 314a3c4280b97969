from __future__ import annotations

import random
from typing import TYPE_CHECKING

from loguru import logger

from digevo.exceptions import ConfigurationError
from digevo.organisms.organism import Organism
from digevo.organisms.population import Population
from digevo.resources.pool import ResourcePool
from digevo.scheduling.config import SchedulerConfig
from digevo.scheduling.metrics import SchedulerMetrics, TickStats
from digevo.scheduling.priority import FixedPriority, OrganismPriority, PriorityAccessor

if TYPE_CHECKING:
    from digevo.simulation.simulation import Simulation

__all__ = ["WeightedRoundRobinScheduler", "round_robin"]


class WeightedRoundRobinScheduler:
    """
    Weighted round-robin scheduler with resource budgeting.

    Each update every organism present at the start of the update is visited in
    a shuffled round-robin order and granted as many CPU cycles as its priority
    accessor reports, until the cycle budget is spent or a full round's worth of
    visits has landed on dead organisms. The resource pool is advanced once per
    resource period of the budget. Offspring appended while the pass runs are
    not visited until the next update; the pass indexes by position modulo the
    pre-update size.
    """

    def __init__(
        self,
        config: SchedulerConfig,
        accessor: PriorityAccessor | None = None,
    ) -> None:
        self.config = config
        self.accessor = accessor or OrganismPriority()
        self.metrics = SchedulerMetrics()
        self.last_tick: TickStats | None = None

        logger.info(
            "[Scheduler] Init | accessor={}, time_slice={}, resource_slice={}, max_population_size={}",
            type(self.accessor).__name__,
            config.time_slice,
            config.resource_slice,
            config.max_population_size,
        )

    def budget(self, population_size: int) -> tuple[int, float, int]:
        """Return ``(budget, delta_t, period_length)`` for a population size.

        Raises:
            ConfigurationError: if the budget is positive but too small to
                give every resource period at least one cycle.
        """
        effective = min(population_size, self.config.max_population_size)
        budget = self.config.time_slice * effective
        delta_t = 1.0 / self.config.resource_slice
        period_length = budget // self.config.resource_slice
        if budget > 0 and period_length < 1:
            raise ConfigurationError(
                f"Resource period length is 0: budget={budget} "
                f"(time_slice={self.config.time_slice} x {effective} organisms) "
                f"cannot be split into resource_slice={self.config.resource_slice} periods"
            )
        return budget, delta_t, period_length

    def _quantum(self, organism: Organism, remaining: int) -> int:
        granted = max(1, int(self.accessor(organism)))
        return min(granted, remaining)

    def run_tick(
        self,
        population: Population,
        resources: ResourcePool,
        rng: random.Random,
        context: Simulation | None = None,
    ) -> Population:
        """Execute one update and return the pruned population.

        ``population`` is shuffled in place and may grow while the pass runs;
        the returned population holds every member still alive afterwards, in
        relative order, including offspring born during the pass.
        """
        size = len(population)
        if size == 0:
            logger.debug("[Scheduler] Skip: empty population")
            self._record(TickStats())
            return Population()

        budget, delta_t, period_length = self.budget(size)
        population.shuffle(rng)

        consumed = 0
        last_period = -1
        index = 0
        dead_visits = 0
        executions = 0
        resource_updates = 0

        while consumed < budget and dead_visits < size:
            period = consumed // period_length
            while last_period < period:
                resources.advance(delta_t)
                last_period += 1
                resource_updates += 1

            organism = population[index]
            if organism.alive:
                quantum = self._quantum(organism, budget - consumed)
                organism.execute(quantum, context)
                consumed += quantum
                executions += 1
            else:
                dead_visits += 1

            index = (index + 1) % size

        survivors = population.survivors()
        stats = TickStats(
            budget=budget,
            consumed=consumed,
            period_length=period_length,
            resource_updates=resource_updates,
            executions=executions,
            dead_visits=dead_visits,
            population_before=size,
            population_after=len(survivors),
            offspring=len(population) - size,
        )
        self._record(stats)

        if dead_visits >= size and consumed < budget:
            logger.debug(
                "[Scheduler] Early stop: {} dead visits, {}/{} cycles used",
                dead_visits,
                consumed,
                budget,
            )
        logger.debug(
            "[Scheduler] Tick | consumed={}/{}, executions={}, resource_updates={}, offspring={}, size {} -> {}",
            consumed,
            budget,
            executions,
            resource_updates,
            stats.offspring,
            size,
            stats.population_after,
        )
        return survivors

    def _record(self, stats: TickStats) -> None:
        self.last_tick = stats
        self.metrics.record_tick(stats)


def round_robin(config: SchedulerConfig) -> WeightedRoundRobinScheduler:
    """Unweighted round robin: one cycle per visit."""
    return WeightedRoundRobinScheduler(config, FixedPriority())
