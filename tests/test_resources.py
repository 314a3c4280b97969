import pytest

from digevo.resources import BasicResource, NullResourcePool, Resources, UnlimitedResource


def test_basic_resource_starts_at_initial_level():
    assert BasicResource(name="food", initial=3.0).level == 3.0
    assert BasicResource(name="food", initial=3.0, level=1.0).level == 1.0


def test_basic_resource_inflow_and_outflow():
    food = BasicResource(name="food", initial=10.0, inflow=2.0, outflow=0.5)

    food.advance(0.5)

    # 10 + 0.5 * (2 - 0.5 * 10)
    assert food.level == pytest.approx(8.5)


def test_basic_resource_never_goes_negative():
    food = BasicResource(name="food", initial=1.0, outflow=1.0)
    food.advance(5.0)
    assert food.level == 0.0


def test_basic_resource_consume_takes_a_fraction():
    food = BasicResource(name="food", initial=8.0, consumption_fraction=0.25)

    assert food.consume() == pytest.approx(2.0)
    assert food.level == pytest.approx(6.0)


def test_unlimited_resource():
    light = UnlimitedResource(name="light", quantity=3.0)
    light.advance(1.0)
    assert light.consume() == 3.0
    assert light.consume() == 3.0


def test_resources_advance_all_members():
    food = BasicResource(name="food", inflow=1.0)
    water = BasicResource(name="water", inflow=2.0)
    pool = Resources([food, water])

    pool.advance(0.5)
    pool.advance(0.5)

    assert pool.updates == 2
    assert pool.levels() == pytest.approx({"food": 1.0, "water": 2.0})
    assert "food" in pool
    assert pool.consume("food") == 0.0


def test_resources_reject_duplicates():
    pool = Resources([BasicResource(name="food")])
    with pytest.raises(ValueError):
        pool.add(BasicResource(name="food"))


def test_null_pool_records_advances():
    pool = NullResourcePool()
    pool.advance(0.25)
    pool.advance(0.25)
    assert pool.updates == 2
    assert pool.elapsed == pytest.approx(0.5)
