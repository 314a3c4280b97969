from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from loguru import logger

from digevo.lineage.line_of_descent import LineOfDescent

if TYPE_CHECKING:
    from digevo.organisms.population import Population


class FixationTracker:
    """Tracks the update at which organisms on the line of descent fixed.

    Called once per update: organisms at the recent end of the MRCA lineage
    that carry no fixation time yet are stamped with the current update. The
    walk stops at the first stamped organism, since all of its ancestors were
    stamped at an earlier update.
    """

    def __init__(self) -> None:
        self.total_fixed = 0

    def __call__(
        self,
        population: Population,
        update: int,
        shares: Mapping[str, int] | None = None,
    ) -> int:
        lod = LineOfDescent().mrca_lineage(population, shares)

        stamped = 0
        for organism in reversed(lod):
            if not organism.mark_fixed(update):
                break
            stamped += 1

        self.total_fixed += stamped
        if stamped:
            logger.debug(
                "[Fixation] update {}: {} organism(s) fixed, MRCA lineage length {}",
                update,
                stamped,
                len(lod),
            )
        return stamped
