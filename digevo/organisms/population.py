from __future__ import annotations

import random
from typing import Iterable, Iterator, overload

from digevo.organisms.organism import Organism


class Population:
    """Ordered, index-addressable and growable sequence of organisms.

    Offspring may be appended while a scheduler is in the middle of a pass, so
    callers that iterate during a tick must address members by position.
    """

    def __init__(self, organisms: Iterable[Organism] = ()) -> None:
        self._members: list[Organism] = list(organisms)

    def __len__(self) -> int:
        return len(self._members)

    @overload
    def __getitem__(self, index: int) -> Organism: ...

    @overload
    def __getitem__(self, index: slice) -> list[Organism]: ...

    def __getitem__(self, index):
        return self._members[index]

    def __iter__(self) -> Iterator[Organism]:
        return iter(self._members)

    def __contains__(self, organism: object) -> bool:
        return organism in self._members

    def __bool__(self) -> bool:
        return bool(self._members)

    def __repr__(self) -> str:
        return f"Population(size={len(self._members)}, alive={self.alive_count()})"

    def append(self, organism: Organism) -> None:
        self._members.append(organism)

    def extend(self, organisms: Iterable[Organism]) -> None:
        self._members.extend(organisms)

    def shuffle(self, rng: random.Random) -> None:
        rng.shuffle(self._members)

    def alive_count(self) -> int:
        return sum(1 for o in self._members if o.alive)

    def survivors(self) -> Population:
        """Living members, in their current relative order."""
        return Population(o for o in self._members if o.alive)

    def dead(self) -> list[Organism]:
        return [o for o in self._members if not o.alive]
