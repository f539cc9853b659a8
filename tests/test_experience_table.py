import pytest

from sotasave.errors import ContractViolation
from sotasave.progression.experience import ExperienceTable, find_floor_index


def test_floor_lookup_examples():
    table = ExperienceTable([100, 250, 500, 1000])
    assert table.level_for(250) == 2
    assert table.level_for(300) == 2
    assert table.level_for(99) is None
    assert table.level_for(100) == 1
    assert table.level_for(10 ** 12) == 4


def test_find_floor_index():
    values = [0, 10, 20]
    assert find_floor_index(0, values) == 0
    assert find_floor_index(15, values) == 1
    assert find_floor_index(20, values) == 2
    assert find_floor_index(-1, values) is None


def test_repeated_thresholds_resolve_to_the_highest_level():
    values = [0, 10, 10, 20]
    assert find_floor_index(10, values) == 2
    table = ExperienceTable(values)
    assert table.level_for(5) == 1
    assert table.level_for(10) == 3
    assert table.level_for(15) == 3
    assert table.level_for(20) == 4


def test_level_experience_inverse_for_every_level():
    table = ExperienceTable(i * i * 10 for i in range(200))
    assert table.max_level == 200
    for level in range(1, 201):
        assert table.level_for(table.experience_for(level)) == level


def test_experience_for_rejects_out_of_range_levels():
    table = ExperienceTable([0, 10, 20])
    with pytest.raises(ContractViolation):
        table.experience_for(0)
    with pytest.raises(ContractViolation):
        table.experience_for(4)


def test_table_must_be_ascending_and_non_empty():
    with pytest.raises(ValueError):
        ExperienceTable([10, 5])
    with pytest.raises(ValueError):
        ExperienceTable([])


def test_table_is_immutable():
    table = ExperienceTable([1, 2, 3])
    assert table.thresholds == (1, 2, 3)
    with pytest.raises(AttributeError):
        table.thresholds = (4,)
