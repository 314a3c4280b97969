from __future__ import annotations

from typing import Iterable, Iterator

from loguru import logger

from digevo.exceptions import InvalidStateError
from digevo.organisms.organism import Organism


def notify_birth(parents: Iterable[Organism], offspring: Organism) -> None:
    """Inheritance hook: record every parent in the offspring's parent set.

    Must be called exactly once per birth, before the offspring enters the
    population. Parents themselves are not touched.
    """
    for parent in parents:
        offspring.parents.add(parent)


class InheritanceEvent:
    """Chains offspring to their parents; called for every birth.

    Wraps :func:`notify_birth` and refuses births that would break the
    ancestry graph (no parents, self-parenting, or a second call for the same
    offspring).
    """

    def __init__(self) -> None:
        self.births = 0

    def __call__(self, parents: Iterable[Organism], offspring: Organism) -> None:
        parents = list(parents)
        if not parents:
            raise InvalidStateError(f"Birth of {offspring.id} has no parents")
        if offspring.has_parents:
            raise InvalidStateError(
                f"Organism {offspring.id} already has recorded parents"
            )
        if any(p is offspring or p.id == offspring.id for p in parents):
            raise InvalidStateError(f"Organism {offspring.id} cannot parent itself")

        notify_birth(parents, offspring)
        self.births += 1
        logger.trace(
            "[Inheritance] {} <- {}", offspring.id, ", ".join(p.id for p in parents)
        )


def iter_ancestry(organism: Organism) -> Iterator[Organism]:
    """Yield ``organism`` and each of its distinct ancestors once."""
    seen: set[str] = set()
    stack = [organism]
    while stack:
        node = stack.pop()
        if node.id in seen:
            continue
        seen.add(node.id)
        yield node
        stack.extend(node.parents)
