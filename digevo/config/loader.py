"""Helpers turning OmegaConf / YAML configuration into digevo objects."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

from loguru import logger
from omegaconf import DictConfig, OmegaConf
from pydantic import ValidationError

from digevo.exceptions import ConfigurationError
from digevo.resources.pool import BasicResource, Resource, Resources, UnlimitedResource
from digevo.simulation.config import SimulationConfig

_RESOURCE_KINDS: dict[str, type[Resource]] = {
    "basic": BasicResource,
    "unlimited": UnlimitedResource,
}


def _as_config(source: str | Path | Mapping[str, Any] | DictConfig) -> DictConfig:
    if isinstance(source, (str, Path)):
        cfg = OmegaConf.load(source)
    elif isinstance(source, DictConfig):
        cfg = source
    else:
        cfg = OmegaConf.create(dict(source))
    return cfg


def load_simulation_config(
    source: str | Path | Mapping[str, Any] | DictConfig,
    overrides: Sequence[str] = (),
) -> SimulationConfig:
    """Build a SimulationConfig from a YAML path, mapping or DictConfig.

    A top-level ``simulation`` key is used when present, so a full run config
    can be passed as is. ``overrides`` are dotlist entries such as
    ``"scheduler.time_slice=10"`` applied to the simulation section.

    Raises:
        ConfigurationError: if the values do not validate.
    """
    cfg = _as_config(source)
    if "simulation" in cfg:
        cfg = cfg.simulation
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(list(overrides)))

    data = OmegaConf.to_container(cfg, resolve=True)
    try:
        config = SimulationConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid simulation config: {exc}") from exc

    logger.debug("[Config] simulation config: {}", config.model_dump())
    return config


def build_resources(entries: Sequence[Mapping[str, Any]] | None) -> Resources:
    """Build a Resources pool from entries like ``{kind: basic, name: food, ...}``."""
    resources = Resources()
    for entry in entries or []:
        entry = dict(entry)
        kind = entry.pop("kind", "basic")
        if kind not in _RESOURCE_KINDS:
            raise ConfigurationError(
                f"Unknown resource kind '{kind}'. Available: {sorted(_RESOURCE_KINDS)}"
            )
        try:
            resource = _RESOURCE_KINDS[kind].model_validate(entry)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid resource {entry.get('name')!r}: {exc}") from exc
        try:
            resources.add(resource)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
    return resources
