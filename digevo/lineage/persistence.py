"""
Line-of-descent serialization.

A saved lineage is JSON lines: one header record carrying the lineage size,
followed by exactly that many organism snapshots, ancestor first. Paths ending
in ``.gz`` are gzip-compressed. Loading either returns the complete lineage or
raises ``FormatError``; it never hands back a partial one.
"""

from __future__ import annotations

import gzip
import io
from pathlib import Path
from typing import IO, Iterator, Union
import zlib

from loguru import logger
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from digevo.exceptions import FormatError
from digevo.lineage.ancestry import notify_birth
from digevo.lineage.line_of_descent import LineOfDescent
from digevo.organisms.organism import Organism, OrganismSnapshot
from digevo.utils.json import JSONDecodeError, dumps, loads

FORMAT_NAME = "digevo.lod"
FORMAT_VERSION = 1

PathOrStream = Union[str, Path, IO[str]]


def _is_gzip(path: Path) -> bool:
    return path.suffix == ".gz"


def _open_text(path: Path, mode: str) -> IO[str]:
    if _is_gzip(path):
        return gzip.open(path, mode + "t", encoding="utf-8")
    return open(path, mode, encoding="utf-8")


def _encode(lod: LineOfDescent) -> str:
    header = {"format": FORMAT_NAME, "version": FORMAT_VERSION, "lineage_size": len(lod)}
    lines = [dumps(header)]
    for snapshot in lod.snapshots():
        try:
            lines.append(dumps(snapshot.model_dump(mode="json")))
        except (TypeError, PydanticSerializationError) as exc:
            raise FormatError(
                f"Organism {snapshot.id} has a representation that cannot be serialized: {exc}"
            ) from exc
    return "\n".join(lines) + "\n"


def write_lineage(lod: LineOfDescent, stream: IO[str]) -> None:
    """Write ``lod`` to a text stream.

    Every entry is encoded before anything is written, so a lineage that
    cannot be serialized leaves the stream untouched.
    """
    stream.write(_encode(lod))


def save_lineage(lod: LineOfDescent, target: PathOrStream) -> None:
    """Save ``lod`` to a path (gzip when it ends in ``.gz``) or text stream."""
    if isinstance(target, (str, Path)):
        path = Path(target)
        text = _encode(lod)
        path.parent.mkdir(parents=True, exist_ok=True)
        with _open_text(path, "w") as f:
            f.write(text)
        logger.debug("[LOD] saved {} organism(s) to {}", len(lod), path)
    else:
        write_lineage(lod, target)


def dumps_lineage(lod: LineOfDescent) -> str:
    return _encode(lod)


def _parse_header(line: str) -> int:
    try:
        header = loads(line)
    except JSONDecodeError as exc:
        raise FormatError(f"Unreadable lineage header: {exc}") from exc

    if not isinstance(header, dict) or header.get("format") != FORMAT_NAME:
        raise FormatError("Not a digevo lineage: missing or wrong format marker")
    if header.get("version") != FORMAT_VERSION:
        raise FormatError(f"Unsupported lineage format version: {header.get('version')}")

    size = header.get("lineage_size")
    if not isinstance(size, int) or isinstance(size, bool) or size < 0:
        raise FormatError(f"Invalid lineage_size in header: {size!r}")
    return size


def _parse_entry(line: str, position: int) -> OrganismSnapshot:
    try:
        return OrganismSnapshot.model_validate(loads(line))
    except (JSONDecodeError, ValidationError) as exc:
        raise FormatError(f"Invalid lineage entry at position {position}: {exc}") from exc


def _records(stream: IO[str]) -> Iterator[str]:
    for raw in stream:
        line = raw.strip()
        if line:
            yield line


def read_lineage(stream: IO[str]) -> LineOfDescent:
    """Read a lineage from a text stream.

    The organisms are rebuilt as a parent-to-child chain, so the result can
    be walked like any other ancestry.
    """
    try:
        records = _records(stream)
        header = next(records, None)
        if header is None:
            raise FormatError("Empty lineage stream")
        size = _parse_header(header)

        snapshots: list[OrganismSnapshot] = []
        for line in records:
            if len(snapshots) == size:
                raise FormatError(f"Lineage has more entries than the declared {size}")
            snapshots.append(_parse_entry(line, len(snapshots)))
    except (OSError, EOFError, zlib.error, UnicodeDecodeError) as exc:
        raise FormatError(f"Unreadable lineage stream: {exc}") from exc

    if len(snapshots) != size:
        raise FormatError(
            f"Truncated lineage: header declares {size} entries, found {len(snapshots)}"
        )

    organisms: list[Organism] = []
    for snapshot in snapshots:
        organism = Organism.from_snapshot(snapshot)
        if organisms:
            notify_birth([organisms[-1]], organism)
        organisms.append(organism)
    return LineOfDescent(organisms)


def load_lineage(source: PathOrStream) -> LineOfDescent:
    """Load a lineage from a path (gzip when it ends in ``.gz``) or text stream."""
    if isinstance(source, (str, Path)):
        path = Path(source)
        with _open_text(path, "r") as f:
            lod = read_lineage(f)
        logger.debug("[LOD] loaded {} organism(s) from {}", len(lod), path)
        return lod
    return read_lineage(source)


def loads_lineage(text: str) -> LineOfDescent:
    return read_lineage(io.StringIO(text))
