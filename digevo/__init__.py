from __future__ import annotations

from digevo.exceptions import (
    ConfigurationError,
    DigEvoError,
    FormatError,
    InvalidStateError,
    MultipleParentsUnsupportedError,
)
from digevo.organisms import Organism, OrganismSnapshot, Population, Replicator
from digevo.simulation import Simulation, SimulationConfig

__version__ = "0.1.0"
