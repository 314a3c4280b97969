from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Mapping

from loguru import logger

from digevo.lineage.line_of_descent import LineOfDescent
from digevo.lineage.persistence import save_lineage

if TYPE_CHECKING:
    from digevo.organisms.population import Population


class MrcaLineageWriter:
    """Saves the lineage from the root ancestor to the current MRCA.

    One file per call, named after the update: ``lod_<update>.jsonl`` (with a
    ``.gz`` suffix when compressing).
    """

    def __init__(self, output_dir: str | Path, compress: bool = True) -> None:
        self.output_dir = Path(output_dir)
        self.compress = compress
        self.files_written = 0

    def path_for(self, update: int) -> Path:
        suffix = ".jsonl.gz" if self.compress else ".jsonl"
        return self.output_dir / f"lod_{update}{suffix}"

    def __call__(
        self,
        population: Population,
        update: int,
        shares: Mapping[str, int] | None = None,
    ) -> Path:
        lod = LineOfDescent().mrca_lineage(population, shares)
        path = self.path_for(update)
        save_lineage(lod, path)
        self.files_written += 1
        logger.info(
            "[LOD] update {}: MRCA lineage of {} organism(s) -> {}", update, len(lod), path
        )
        return path
