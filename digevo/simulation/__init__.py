from __future__ import annotations

from digevo.simulation.config import SimulationConfig
from digevo.simulation.simulation import Simulation
