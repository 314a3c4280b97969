from __future__ import annotations

import random
from typing import Any

from digevo.lineage.ancestry import notify_birth
from digevo.lineage.line_of_descent import lineage
from digevo.organisms.organism import Organism


def birth(parent: Organism, representation: Any = None, **kwargs: Any) -> Organism:
    """Asexual offspring of ``parent`` wired through the inheritance hook."""
    child = Organism(
        representation=parent.representation if representation is None else representation,
        generation=Organism.offspring_generation([parent]),
        **kwargs,
    )
    notify_birth([parent], child)
    return child


def descend(parent: Organism, depth: int) -> list[Organism]:
    """A straight chain of ``depth`` descendants below ``parent``."""
    chain = []
    for _ in range(depth):
        parent = birth(parent)
        chain.append(parent)
    return chain


def random_tree(seed: int, size: int) -> tuple[Organism, list[Organism]]:
    """Random ancestry tree: each new node picks a random existing parent."""
    rng = random.Random(seed)
    root = Organism.ancestor(representation=0)
    nodes = [root]
    for i in range(1, size):
        nodes.append(birth(rng.choice(nodes), representation=i))
    return root, nodes


def depth(organism: Organism) -> int:
    return len(lineage(organism)) - 1
