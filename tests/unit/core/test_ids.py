import pytest

from unweaver.core.ids import RandomIdGenerator, SequentialIdGenerator, make_id_generator

pytestmark = pytest.mark.unit


def test_sequential_ids():
    new_id = SequentialIdGenerator()
    assert [new_id() for _ in range(3)] == ["0000", "0001", "0002"]


def test_sequential_prefix_and_start():
    new_id = SequentialIdGenerator(prefix="doc-", start=41, width=2)
    assert new_id() == "doc-41"
    assert new_id() == "doc-42"


def test_random_ids_shape():
    new_id = RandomIdGenerator()
    ids = {new_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(len(i) == 9 and i.isalnum() and i == i.lower() for i in ids)


def test_make_id_generator():
    assert make_id_generator("sequential", prefix="c")() == "c0000"
    assert isinstance(make_id_generator("random"), RandomIdGenerator)

    with pytest.raises(ValueError):
        make_id_generator("uuid")
