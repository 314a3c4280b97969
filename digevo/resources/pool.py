from __future__ import annotations

from abc import ABC, abstractmethod

from loguru import logger
from pydantic import BaseModel, Field


class ResourcePool(ABC):
    """Environmental resource state advanced by the scheduler."""

    @abstractmethod
    def advance(self, delta_t: float) -> None:
        """Advance resource state by a fractional time step."""


class NullResourcePool(ResourcePool):
    """Pool without state; only records how often and how far it advanced."""

    def __init__(self) -> None:
        self.updates = 0
        self.elapsed = 0.0

    def advance(self, delta_t: float) -> None:
        self.updates += 1
        self.elapsed += delta_t


class Resource(BaseModel, ABC):
    """A single named environmental resource."""

    name: str = Field(..., min_length=1, description="Resource name")

    @abstractmethod
    def advance(self, delta_t: float) -> None: ...

    @abstractmethod
    def consume(self) -> float:
        """Remove and return the amount available to one consumer."""


class UnlimitedResource(Resource):
    """Resource that always yields the same quantity."""

    quantity: float = Field(default=1.0, ge=0.0)

    def advance(self, delta_t: float) -> None:
        pass

    def consume(self) -> float:
        return self.quantity


class BasicResource(Resource):
    """Chemostat-style resource with inflow, outflow and partial consumption."""

    initial: float = Field(default=0.0, ge=0.0, description="Starting level")
    inflow: float = Field(default=0.0, ge=0.0, description="Units added per update")
    outflow: float = Field(
        default=0.0, ge=0.0, le=1.0, description="Fraction of the level lost per update"
    )
    consumption_fraction: float = Field(
        default=0.0, ge=0.0, le=1.0, description="Fraction taken by one consume()"
    )
    level: float | None = Field(
        default=None, ge=0.0, description="Current level; starts at `initial`"
    )

    def model_post_init(self, __context) -> None:
        if self.level is None:
            self.level = self.initial

    def advance(self, delta_t: float) -> None:
        self.level = max(0.0, self.level + delta_t * (self.inflow - self.outflow * self.level))

    def consume(self) -> float:
        taken = self.level * self.consumption_fraction
        self.level -= taken
        return taken


class Resources(ResourcePool):
    """Named collection of resources advanced together."""

    def __init__(self, resources: list[Resource] | None = None) -> None:
        self._resources: dict[str, Resource] = {}
        self.updates = 0
        for r in resources or []:
            self.add(r)

    def add(self, resource: Resource) -> None:
        if resource.name in self._resources:
            raise ValueError(f"Resource '{resource.name}' already registered")
        self._resources[resource.name] = resource
        logger.debug("[Resources] added {} ({})", resource.name, type(resource).__name__)

    def __getitem__(self, name: str) -> Resource:
        return self._resources[name]

    def __contains__(self, name: object) -> bool:
        return name in self._resources

    def __len__(self) -> int:
        return len(self._resources)

    def advance(self, delta_t: float) -> None:
        self.updates += 1
        for resource in self._resources.values():
            resource.advance(delta_t)

    def consume(self, name: str) -> float:
        return self._resources[name].consume()

    def levels(self) -> dict[str, float]:
        return {
            name: r.level if isinstance(r, BasicResource) else r.quantity
            for name, r in self._resources.items()
        }
