from __future__ import annotations

from itertools import groupby
from typing import TYPE_CHECKING, Iterable, Iterator, Mapping

from digevo.exceptions import InvalidStateError
from digevo.lineage.mrca import most_recent_common_ancestor
from digevo.organisms.organism import Organism, OrganismSnapshot

if TYPE_CHECKING:
    from digevo.organisms.population import Population


def lineage(organism: Organism) -> list[Organism]:
    """Walk back from ``organism`` to its root ancestor.

    The result is ordered ancestor first and ends with ``organism``.

    Raises:
        MultipleParentsUnsupportedError: if any node on the way has more than
            one parent.
        InvalidStateError: if the walk revisits a node.
    """
    chain = [organism]
    seen = {organism.id}
    current = organism
    while current.has_parents:
        current = current.lod_parent
        if current.id in seen:
            raise InvalidStateError(f"Ancestry cycle through organism {current.id}")
        seen.add(current.id)
        chain.append(current)
    chain.reverse()
    return chain


class LineOfDescent:
    """A standalone, ancestor-first line of descent.

    Holds references into the ancestry graph but never modifies it; every
    operation here only edits this object's own list. Asexual only.
    """

    def __init__(self, organisms: Iterable[Organism] = ()) -> None:
        self._lod: list[Organism] = list(organisms)

    @classmethod
    def of(cls, organism: Organism) -> LineOfDescent:
        return cls(lineage(organism))

    @property
    def lineage(self) -> list[Organism]:
        return self._lod

    def __len__(self) -> int:
        return len(self._lod)

    def __iter__(self) -> Iterator[Organism]:
        return iter(self._lod)

    def __reversed__(self) -> Iterator[Organism]:
        return reversed(self._lod)

    def __getitem__(self, index: int) -> Organism:
        return self._lod[index]

    def __repr__(self) -> str:
        return f"LineOfDescent(size={len(self._lod)})"

    def mrca_lineage(
        self, population: Population, shares: Mapping[str, int] | None = None
    ) -> LineOfDescent:
        """Replace this lineage with the one ending at the population's MRCA."""
        self._lod = lineage(most_recent_common_ancestor(population, shares))
        return self

    def remove_default_ancestor(self) -> Organism:
        if not self._lod:
            raise InvalidStateError("Cannot remove the ancestor of an empty lineage")
        return self._lod.pop(0)

    def deduplicate_keep_latest(self) -> int:
        """Collapse runs of equal genomes, keeping the most recent of each run.

        The first and last entries of the lineage are always kept. Returns the
        number of entries removed.
        """
        return self._collapse(keep_latest=True)

    def deduplicate_keep_earliest(self) -> int:
        """Collapse runs of equal genomes, keeping the oldest of each run.

        The root ancestor and the final entry are always kept. Returns the
        number of entries removed.
        """
        return self._collapse(keep_latest=False)

    def _collapse(self, keep_latest: bool) -> int:
        if len(self._lod) < 2:
            return 0

        last = len(self._lod) - 1
        kept: list[Organism] = []
        start = 0
        for _, group in groupby(self._lod, key=lambda o: o.representation):
            run = list(group)
            end = start + len(run) - 1
            keep = {len(run) - 1} if keep_latest else {0}
            if start == 0:
                keep.add(0)
            if end == last:
                keep.add(len(run) - 1)
            kept.extend(run[k] for k in sorted(keep))
            start = end + 1

        removed = len(self._lod) - len(kept)
        self._lod = kept
        return removed

    def snapshots(self) -> list[OrganismSnapshot]:
        return [o.snapshot() for o in self._lod]
