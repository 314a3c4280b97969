from __future__ import annotations

import random
from typing import Iterable

from loguru import logger

from digevo.exceptions import InvalidStateError
from digevo.lineage.ancestry import InheritanceEvent
from digevo.lineage.datafiles import MrcaLineageWriter
from digevo.lineage.fixation import FixationTracker
from digevo.lineage.graph import validate_ancestry
from digevo.lineage.line_of_descent import LineOfDescent
from digevo.lineage.mrca import ShareCounter, most_recent_common_ancestor
from digevo.organisms.organism import Organism
from digevo.organisms.population import Population
from digevo.resources.pool import NullResourcePool, ResourcePool
from digevo.scheduling.metrics import TickStats
from digevo.scheduling.priority import accessor_from_name
from digevo.scheduling.scheduler import WeightedRoundRobinScheduler
from digevo.simulation.config import SimulationConfig

__all__ = ["Simulation"]


class Simulation:
    """
    One simulation instance:
    - owns its population, resource pool, RNG and update counter;
    - every birth goes through ``reproduce`` (inheritance hook, share-counts);
    - ``step`` runs one scheduler pass, then the end-of-update ancestry work.
    """

    def __init__(
        self,
        config: SimulationConfig,
        population: Iterable[Organism] = (),
        resources: ResourcePool | None = None,
        rng: random.Random | None = None,
        scheduler: WeightedRoundRobinScheduler | None = None,
    ) -> None:
        self.config = config
        self.rng = rng or random.Random(config.seed)
        self.resources = resources if resources is not None else NullResourcePool()
        self.scheduler = scheduler or WeightedRoundRobinScheduler(
            config.scheduler, accessor_from_name(config.priority)
        )
        self.population = Population(population)
        self.update = 0

        self.shares = ShareCounter()
        self.shares.register_all(self.population)
        self.inheritance = InheritanceEvent()
        self.fixation = FixationTracker() if config.track_fixation else None
        self.lod_writer = (
            MrcaLineageWriter(config.output_dir, compress=config.compress_lod)
            if config.lod_interval
            else None
        )

        logger.info(
            "[Simulation] Init | population={}, resources={}, fixation={}, lod_interval={}",
            len(self.population),
            type(self.resources).__name__,
            self.fixation is not None,
            config.lod_interval,
        )

    def reproduce(self, parents: Iterable[Organism], offspring: Organism) -> None:
        """Place ``offspring`` of ``parents`` into the population.

        Safe to call from inside ``Organism.execute`` while a scheduler pass is
        running; the newcomer is not executed until the next update.
        """
        parents = list(parents)
        offspring.generation = Organism.offspring_generation(parents)
        self.inheritance(parents, offspring)
        self.shares.register(offspring)
        self.population.append(offspring)

    def step(self) -> TickStats:
        """Run one update."""
        current = self.population
        self.population = self.scheduler.run_tick(current, self.resources, self.rng, self)
        self.shares.release_all(current.dead())

        if self.config.validate_state:
            self.validate()

        if self.population:
            if self.fixation is not None:
                self.fixation(self.population, self.update, self.shares.counts)
            if self.lod_writer is not None and (self.update + 1) % self.config.lod_interval == 0:
                self.lod_writer(self.population, self.update, self.shares.counts)
        else:
            logger.warning("[Simulation] Population extinct at update {}", self.update)

        self.update += 1
        return self.scheduler.last_tick

    def run(self, updates: int) -> int:
        """Run up to ``updates`` updates; stops early on extinction.

        Returns:
            Number of updates actually run
        """
        logger.info("[Simulation] Start | updates={}", updates)
        ran = 0
        for _ in range(updates):
            if not self.population:
                break
            self.step()
            ran += 1
        logger.info(
            "[Simulation] Stop | update={}, population={}, births={}",
            self.update,
            len(self.population),
            self.inheritance.births,
        )
        return ran

    def mrca(self) -> Organism:
        return most_recent_common_ancestor(self.population, self.shares.counts)

    def line_of_descent(self) -> LineOfDescent:
        return LineOfDescent().mrca_lineage(self.population, self.shares.counts)

    def validate(self) -> None:
        """Check share-counts against a recount and the ancestry graph for cycles."""
        dead = self.population.dead()
        if dead:
            raise InvalidStateError(
                f"{len(dead)} dead organism(s) left in the population at update {self.update}"
            )
        self.shares.verify(self.population)
        validate_ancestry(self.population)
