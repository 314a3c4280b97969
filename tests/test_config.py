from pathlib import Path

from omegaconf import OmegaConf
from pydantic import ValidationError
import pytest

from digevo.config import build_resources, load_simulation_config
from digevo.exceptions import ConfigurationError
from digevo.resources import BasicResource, UnlimitedResource
from digevo.scheduling import SchedulerConfig

REPO_CONFIG = Path(__file__).resolve().parent.parent / "config" / "config.yaml"


def test_defaults_from_empty_mapping():
    config = load_simulation_config({})
    assert config.scheduler.time_slice == 30
    assert config.priority == "priority"
    assert config.lod_interval == 0


def test_load_from_yaml_file(tmp_path):
    path = tmp_path / "sim.yaml"
    path.write_text(
        "scheduler:\n"
        "  time_slice: 12\n"
        "  resource_slice: 3\n"
        "priority: fixed\n"
        "seed: 9\n"
    )

    config = load_simulation_config(path)

    assert config.scheduler.time_slice == 12
    assert config.scheduler.resource_slice == 3
    assert config.priority == "fixed"
    assert config.seed == 9


def test_simulation_section_and_overrides():
    cfg = OmegaConf.create(
        {"simulation": {"scheduler": {"time_slice": 5}, "seed": 1}, "updates": 10}
    )

    config = load_simulation_config(cfg, overrides=["scheduler.time_slice=7", "lod_interval=4"])

    assert config.scheduler.time_slice == 7
    assert config.lod_interval == 4
    assert config.seed == 1


@pytest.mark.parametrize(
    "data",
    [
        {"scheduler": {"time_slice": 0}},
        {"scheduler": {"resource_slice": -1}},
        {"priority": "lottery"},
        {"lod_interval": -2},
        {"unknown_option": True},
        {"scheduler": {"time_slice": 1, "resource_slice": 4}},
    ],
)
def test_invalid_values_raise_configuration_error(data):
    with pytest.raises(ConfigurationError):
        load_simulation_config(data)


def test_repo_config_loads():
    config = load_simulation_config(REPO_CONFIG)
    assert config.scheduler.max_population_size == 256
    assert config.lod_interval == 100

    cfg = OmegaConf.load(REPO_CONFIG)
    resources = build_resources(OmegaConf.to_container(cfg.resources, resolve=True))
    assert "food" in resources


def test_build_resources():
    resources = build_resources(
        [
            {"kind": "basic", "name": "food", "initial": 5.0, "inflow": 1.0},
            {"kind": "unlimited", "name": "light", "quantity": 2.0},
            {"name": "water"},
        ]
    )

    assert len(resources) == 3
    assert isinstance(resources["food"], BasicResource)
    assert isinstance(resources["light"], UnlimitedResource)
    assert isinstance(resources["water"], BasicResource)
    assert resources.levels() == {"food": 5.0, "light": 2.0, "water": 0.0}


def test_build_resources_empty():
    assert len(build_resources(None)) == 0


@pytest.mark.parametrize(
    "specs",
    [
        [{"kind": "magic", "name": "x"}],
        [{"kind": "basic"}],
        [{"kind": "basic", "name": "food", "outflow": 2.0}],
        [{"name": "food"}, {"name": "food"}],
    ],
)
def test_build_resources_errors(specs):
    with pytest.raises(ConfigurationError):
        build_resources(specs)


def test_scheduler_config_rejects_slices_that_leave_empty_resource_periods():
    with pytest.raises(ValidationError, match="resource_slice"):
        SchedulerConfig(time_slice=1, resource_slice=4)

    config = SchedulerConfig(time_slice=4, resource_slice=4)
    assert config.time_slice == config.resource_slice
