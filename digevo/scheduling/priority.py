from abc import ABC, abstractmethod

from digevo.exceptions import ConfigurationError
from digevo.organisms.organism import Organism


class PriorityAccessor(ABC):
    """Maps an organism to the CPU cycles it receives per scheduling visit."""

    @abstractmethod
    def __call__(self, organism: Organism) -> float:
        """Return the number of cycles granted to ``organism`` on this visit."""


class FixedPriority(PriorityAccessor):
    """Every organism gets a single cycle per visit (plain round robin)."""

    def __call__(self, organism: Organism) -> float:
        return 1.0


class OrganismPriority(PriorityAccessor):
    """Grants cycles equal to the organism's stored priority.

    The value is read on every visit, so changes made during a tick apply to
    the next visit immediately.
    """

    def __call__(self, organism: Organism) -> float:
        return organism.priority


_ACCESSORS: dict[str, type[PriorityAccessor]] = {
    "fixed": FixedPriority,
    "priority": OrganismPriority,
}


def accessor_from_name(name: str) -> PriorityAccessor:
    try:
        return _ACCESSORS[name]()
    except KeyError:
        raise ConfigurationError(
            f"Unknown priority accessor '{name}'. Available: {sorted(_ACCESSORS)}"
        ) from None
