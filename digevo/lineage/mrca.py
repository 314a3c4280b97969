"""Most-recent-common-ancestor resolution.

The share-count of an ancestry node is the number of population members whose
lineage passes through it. Walking from any member towards the root the count
never decreases, and it first reaches the population size at the MRCA, so one
backward walk is enough to find it.
"""

from __future__ import annotations

from collections import Counter
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Mapping

from loguru import logger

from digevo.exceptions import InvalidStateError
from digevo.lineage.ancestry import iter_ancestry
from digevo.organisms.organism import Organism

if TYPE_CHECKING:
    from digevo.organisms.population import Population


def count_shares(population: Iterable[Organism]) -> dict[str, int]:
    """Recompute share-counts with one pass over the population."""
    counts: Counter[str] = Counter()
    for member in population:
        for node in iter_ancestry(member):
            counts[node.id] += 1
    return dict(counts)


class ShareCounter:
    """Share-counts maintained incrementally as organisms enter and leave.

    ``register`` is called when an organism joins the population and
    ``release`` when it is pruned; both touch the organism and every ancestor.
    Nodes whose count drops to zero are forgotten.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}

    @property
    def counts(self) -> Mapping[str, int]:
        return MappingProxyType(self._counts)

    def __getitem__(self, organism: Organism) -> int:
        return self._counts.get(organism.id, 0)

    def __len__(self) -> int:
        return len(self._counts)

    def register(self, organism: Organism) -> None:
        for node in iter_ancestry(organism):
            self._counts[node.id] = self._counts.get(node.id, 0) + 1

    def register_all(self, organisms: Iterable[Organism]) -> None:
        for organism in organisms:
            self.register(organism)

    def release(self, organism: Organism) -> None:
        for node in iter_ancestry(organism):
            remaining = self._counts.get(node.id, 0) - 1
            if remaining < 0:
                raise InvalidStateError(
                    f"Share-count underflow at {node.id} releasing {organism.id}"
                )
            if remaining == 0:
                del self._counts[node.id]
            else:
                self._counts[node.id] = remaining

    def release_all(self, organisms: Iterable[Organism]) -> None:
        for organism in organisms:
            self.release(organism)

    def verify(self, population: Iterable[Organism]) -> None:
        """Compare against a full recount; raise on any disagreement."""
        expected = count_shares(population)
        if expected != self._counts:
            diff = {
                k: (self._counts.get(k, 0), expected.get(k, 0))
                for k in set(expected) | set(self._counts)
                if self._counts.get(k, 0) != expected.get(k, 0)
            }
            logger.error("[ShareCounter] {} mismatched node(s)", len(diff))
            raise InvalidStateError(
                f"Incremental share-counts disagree with recount for {len(diff)} node(s)"
            )


def most_recent_common_ancestor(
    population: Population, shares: Mapping[str, int] | None = None
) -> Organism:
    """Return the MRCA of every member of ``population``.

    Args:
        population: Current population; must not be empty.
        shares: Share-counts keyed by organism id. Recomputed from the
            population when omitted.

    Raises:
        InvalidStateError: if the population is empty.
    """
    if len(population) == 0:
        raise InvalidStateError("MRCA requested on an empty population")

    counts = shares if shares is not None else count_shares(population)
    total = len(population)

    offspring = population[0]
    mrca = offspring
    while offspring.has_parents and counts.get(mrca.id, 0) < total:
        parent = offspring.lod_parent
        parent_count = counts.get(parent.id, 0)
        offspring_count = counts.get(offspring.id, 0)

        if parent_count < offspring_count:
            mrca = offspring
        elif parent_count > offspring_count:
            mrca = parent

        offspring = parent

    return mrca
