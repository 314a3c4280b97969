from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator

from digevo.exceptions import InvalidStateError, MultipleParentsUnsupportedError

if TYPE_CHECKING:
    from digevo.simulation.simulation import Simulation

ANCESTOR_GENERATION = -1.0


class OrganismSnapshot(BaseModel):
    """Persisted shape of one organism on a line of descent."""

    id: str = Field(..., min_length=1, description="Identifier of the organism")
    representation: Any = Field(default=None, description="Opaque genome")
    generation: float = Field(default=0.0, description="Generation number")
    priority: float = Field(default=1.0, description="Scheduling weight")
    fixation_time: int | None = Field(
        default=None, description="Update at which the organism fixed"
    )

    model_config = ConfigDict(extra="forbid")


class Organism(BaseModel):
    """An executable member of the population.

    Organisms are shared by the live population, by the parent sets of their
    offspring and by any lineage snapshot that holds them. The parent set is
    filled in by the inheritance hook at birth and never changes afterwards.
    """

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique organism identifier",
    )
    representation: Any = Field(default=None, description="Opaque genome")
    priority: float = Field(
        default=1.0, ge=0.0, description="Fitness-like scheduling weight"
    )
    alive: bool = Field(default=True, description="Liveness flag")
    generation: float = Field(
        default=0.0, description="Generation number; negative marks an ancestor"
    )
    parents: set[Organism] = Field(
        default_factory=set,
        exclude=True,
        repr=False,
        description="Parent references recorded at birth",
    )
    fixation_time: int | None = Field(
        default=None, description="Update at which this organism fixed"
    )
    cycles_executed: int = Field(
        default=0, ge=0, description="Total CPU cycles granted so far"
    )

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v:
            raise ValueError("Organism id must not be empty")
        return v

    def execute(self, cycles: int, context: Simulation | None = None) -> None:
        """Run this organism for ``cycles`` CPU cycles.

        Subclasses implement the actual instruction semantics and may call
        ``context.reproduce`` to place offspring in the population.
        """
        self.cycles_executed += cycles

    def kill(self) -> None:
        self.alive = False

    @property
    def has_parents(self) -> bool:
        return len(self.parents) > 0

    @property
    def lod_parent(self) -> Organism:
        """The single parent of an asexually produced organism."""
        if len(self.parents) > 1:
            raise MultipleParentsUnsupportedError(
                f"Organism {self.id} has {len(self.parents)} parents; "
                "lines of descent are asexual only"
            )
        if not self.parents:
            raise InvalidStateError(f"Organism {self.id} has no parents")
        return next(iter(self.parents))

    @property
    def is_ancestor(self) -> bool:
        return self.generation < 0.0

    def mark_fixed(self, update: int) -> bool:
        """Stamp the fixation time unless one is already recorded."""
        if self.fixation_time is not None:
            return False
        self.fixation_time = update
        return True

    def snapshot(self) -> OrganismSnapshot:
        return OrganismSnapshot(
            id=self.id,
            representation=self.representation,
            generation=self.generation,
            priority=self.priority,
            fixation_time=self.fixation_time,
        )

    @classmethod
    def from_snapshot(cls, snapshot: OrganismSnapshot) -> Organism:
        return cls(
            id=snapshot.id,
            representation=snapshot.representation,
            generation=snapshot.generation,
            priority=snapshot.priority,
            fixation_time=snapshot.fixation_time,
        )

    @classmethod
    def ancestor(cls, representation: Any = None, **kwargs: Any) -> Organism:
        """Create a founding ancestor."""
        return cls(representation=representation, generation=ANCESTOR_GENERATION, **kwargs)

    @staticmethod
    def offspring_generation(parents: Iterable[Organism]) -> float:
        generations = [p.generation for p in parents]
        if not generations:
            raise ValueError("At least one parent is required")
        return max(max(generations), 0.0) + 1.0

    def __hash__(self) -> int:
        return hash(self.id)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Organism) and self.id == other.id
