from __future__ import annotations

from digevo.scheduling.config import SchedulerConfig
from digevo.scheduling.metrics import SchedulerMetrics, TickStats
from digevo.scheduling.priority import (
    FixedPriority,
    OrganismPriority,
    PriorityAccessor,
    accessor_from_name,
)
from digevo.scheduling.scheduler import WeightedRoundRobinScheduler, round_robin
