import random

import pytest

from digevo import Organism, Replicator, Simulation, SimulationConfig
from digevo.exceptions import ConfigurationError, InvalidStateError
from digevo.lineage import count_shares, load_lineage, notify_birth
from digevo.resources import BasicResource, Resources
from digevo.scheduling import FixedPriority, SchedulerConfig, round_robin


def make_config(tmp_path, **overrides):
    values = {
        "scheduler": SchedulerConfig(time_slice=10, resource_slice=2, max_population_size=20),
        "seed": 3,
        "output_dir": str(tmp_path / "lod"),
        "validate_state": True,
    }
    values.update(overrides)
    return SimulationConfig(**values)


def seeded(simulation, founders=4, cost=5):
    ancestor = Replicator.ancestor(representation=[0, 0], replication_cost=cost, alive=False)
    for _ in range(founders):
        simulation.reproduce([ancestor], Replicator(representation=[0, 0], replication_cost=cost))
    return ancestor


class Mortal(Organism):
    """Dies after ``lifetime`` cycles."""

    lifetime: int = 3

    def execute(self, cycles, context=None):
        super().execute(cycles, context)
        if self.cycles_executed >= self.lifetime:
            self.kill()


def test_replicators_fill_population_and_keep_state_consistent(tmp_path):
    simulation = Simulation(make_config(tmp_path))
    ancestor = seeded(simulation)

    ran = simulation.run(15)

    assert ran == 15
    assert simulation.update == 15
    assert 0 < len(simulation.population) <= 2 * 20
    assert all(o.alive for o in simulation.population)
    assert simulation.inheritance.births > 4
    assert dict(simulation.shares.counts) == count_shares(simulation.population)
    assert simulation.line_of_descent()[0] is ancestor
    assert ancestor.fixation_time == 0


def test_reproduce_sets_generation_and_registers_shares(tmp_path):
    simulation = Simulation(make_config(tmp_path))
    ancestor = seeded(simulation, founders=2)
    first = simulation.population[0]

    child = Organism()
    simulation.reproduce([first], child)

    assert child.generation == 2.0
    assert child.parents == {first}
    assert child in simulation.population
    assert simulation.shares[ancestor] == 3
    assert simulation.shares[first] == 2


def test_offspring_added_during_a_step_are_kept(tmp_path):
    simulation = Simulation(make_config(tmp_path, track_fixation=False))
    seeded(simulation, founders=2, cost=5)

    stats = simulation.step()

    # 20 cycles split over 2 founders is 2 copies each
    assert stats.offspring == 4
    assert len(simulation.population) == 6
    assert all(o.cycles_executed == 0 for o in simulation.population[2:])


def test_mrca_of_founders_is_the_ancestor(tmp_path):
    simulation = Simulation(make_config(tmp_path))
    ancestor = seeded(simulation, founders=3)
    assert simulation.mrca() is ancestor


def test_lineage_files_are_written_on_interval(tmp_path):
    config = make_config(tmp_path, lod_interval=2, compress_lod=False)
    simulation = Simulation(config)
    ancestor = seeded(simulation)

    simulation.run(5)

    written = sorted(p.name for p in (tmp_path / "lod").iterdir())
    assert written == ["lod_1.jsonl", "lod_3.jsonl"]
    assert simulation.lod_writer.files_written == 2
    assert load_lineage(tmp_path / "lod" / "lod_3.jsonl")[0].id == ancestor.id


def test_no_writer_or_tracker_when_disabled(tmp_path):
    simulation = Simulation(make_config(tmp_path, track_fixation=False, lod_interval=0))
    ancestor = seeded(simulation)

    simulation.run(3)

    assert simulation.fixation is None
    assert simulation.lod_writer is None
    assert ancestor.fixation_time is None
    assert not (tmp_path / "lod").exists()


def test_extinction_stops_the_run(tmp_path):
    ancestor = Organism.ancestor(alive=False)
    mortals = []
    for _ in range(3):
        m = Mortal(lifetime=2)
        notify_birth([ancestor], m)
        mortals.append(m)
    simulation = Simulation(make_config(tmp_path), population=mortals)

    ran = simulation.run(10)

    assert ran == 1
    assert len(simulation.population) == 0
    assert len(simulation.shares) == 0


def test_resources_advance_every_update(tmp_path):
    food = BasicResource(name="food", initial=10.0, inflow=4.0, outflow=0.0)
    resources = Resources([food])
    simulation = Simulation(make_config(tmp_path), resources=resources)
    seeded(simulation, founders=2, cost=1000)

    simulation.run(3)

    assert resources.updates == 6
    assert food.level == pytest.approx(10.0 + 3 * 4.0)


def test_injected_rng_and_scheduler_are_used(tmp_path):
    config = make_config(tmp_path, priority="priority")
    scheduler = round_robin(config.scheduler)
    rng = random.Random(0)
    simulation = Simulation(config, rng=rng, scheduler=scheduler)

    assert simulation.rng is rng
    assert isinstance(simulation.scheduler.accessor, FixedPriority)


def test_same_seed_same_history(tmp_path):
    def history():
        simulation = Simulation(make_config(tmp_path, track_fixation=False))
        seeded(simulation)
        sizes = []
        for _ in range(8):
            simulation.step()
            sizes.append(len(simulation.population))
        return sizes

    assert history() == history()


def test_validate_catches_stale_share_counts(tmp_path):
    simulation = Simulation(make_config(tmp_path))
    seeded(simulation, founders=2)
    stray = simulation.population[0]
    simulation.shares.register(stray)

    with pytest.raises(InvalidStateError):
        simulation.validate()


def test_validate_catches_dead_members(tmp_path):
    simulation = Simulation(make_config(tmp_path))
    seeded(simulation, founders=2)
    simulation.population[1].kill()

    with pytest.raises(InvalidStateError, match="dead"):
        simulation.validate()


def test_validate_catches_ancestry_cycle(tmp_path):
    simulation = Simulation(make_config(tmp_path))
    ancestor = seeded(simulation, founders=1)
    founder = simulation.population[0]
    ancestor.parents.add(founder)
    # keep share-counts in step with the tampered graph so only the cycle is reported
    simulation.shares = type(simulation.shares)()
    simulation.shares.register_all(simulation.population)

    with pytest.raises(InvalidStateError, match="Cycle"):
        simulation.validate()


def test_replicators_drain_their_resource(tmp_path):
    food = BasicResource(name="food", initial=100.0, consumption_fraction=0.5)
    simulation = Simulation(
        make_config(tmp_path, track_fixation=False), resources=Resources([food])
    )
    ancestor = Replicator.ancestor(representation=[0], replication_cost=5, alive=False)
    founders = [Replicator(representation=[0], replication_cost=5, resource="food") for _ in range(2)]
    for founder in founders:
        simulation.reproduce([ancestor], founder)

    simulation.step()

    # four copies, each taking half of what is left
    assert food.level == pytest.approx(100.0 / 16)
    assert sum(f.collected for f in founders) == pytest.approx(100.0 - food.level)
    assert all(o.resource == "food" for o in simulation.population)


@pytest.mark.parametrize("with_pool", [True, False])
def test_replicator_with_missing_resource_is_a_configuration_error(tmp_path, with_pool):
    resources = Resources([BasicResource(name="water")]) if with_pool else None
    simulation = Simulation(make_config(tmp_path), resources=resources)
    ancestor = Replicator.ancestor(representation=[0], replication_cost=1, alive=False)
    simulation.reproduce([ancestor], Replicator(representation=[0], replication_cost=1, resource="food"))

    with pytest.raises(ConfigurationError, match="food"):
        simulation.step()


def test_empty_resource_registry_is_kept(tmp_path):
    resources = Resources()
    simulation = Simulation(make_config(tmp_path), resources=resources)
    assert simulation.resources is resources
