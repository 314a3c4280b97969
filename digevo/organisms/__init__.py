from __future__ import annotations

from digevo.organisms.organism import ANCESTOR_GENERATION, Organism, OrganismSnapshot
from digevo.organisms.population import Population
from digevo.organisms.replicator import Replicator
