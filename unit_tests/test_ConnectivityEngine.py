import numpy as np
import pytest
from pyclusterlink.ConnectivityEngine import ConnectivityEngine


def test_initial_components():
    engine = ConnectivityEngine(5)
    assert len(engine) == 5
    assert engine.component_count() == 5
    assert engine.is_pristine
    for i in range(5):
        assert engine.find(i) == i
        assert engine.component_size(i) == 1
        assert engine.is_connected(i, i)


def test_union_merges_components():
    engine = ConnectivityEngine(4)
    assert engine.union(0, 1) is True
    assert engine.is_connected(0, 1)
    assert engine.component_count() == 3
    assert engine.component_size(0) == engine.component_size(1) == 2
    assert not engine.is_pristine


def test_union_is_idempotent():
    engine = ConnectivityEngine(4)
    engine.union(0, 1)
    engine.union(1, 2)
    roots = engine.labels().copy()
    assert engine.union(2, 0) is False
    assert engine.union(0, 0) is False
    assert engine.component_count() == 2
    assert engine.component_size(0) == 3
    assert np.array_equal(engine.labels(), roots)


def test_union_by_size_keeps_larger_root():
    engine = ConnectivityEngine(5)
    engine.union(0, 1)
    engine.union(2, 3)
    engine.union(2, 4)
    assert engine.find(4) == 2
    engine.union(0, 2)  # size 2 joins size 3
    assert engine.find(0) == 2
    assert engine.component_size(1) == 5


def test_equal_sizes_keep_lower_root():
    engine = ConnectivityEngine(4)
    engine.union(3, 2)
    assert engine.find(3) == 2
    engine.union(1, 0)
    engine.union(2, 0)
    assert engine.find(3) == 0


def test_find_compresses_path():
    engine = ConnectivityEngine(4)
    engine.union(0, 1)
    engine.union(2, 3)
    engine.union(0, 2)
    assert engine._parent[3] == 2
    assert engine.find(3) == 0
    assert engine._parent[3] == 0


def test_all_component_sizes_ordering():
    engine = ConnectivityEngine(7)
    engine.union(4, 5)
    engine.union(0, 1)
    engine.union(6, 2)
    engine.union(6, 3)
    assert engine.all_component_sizes() == [3, 2, 2]
    assert engine.clusters() == [[2, 3, 6], [0, 1], [4, 5]]


def test_clusters_and_labels_agree():
    engine = ConnectivityEngine(6)
    engine.union(0, 5)
    engine.union(1, 4)
    labels = engine.labels()
    assert labels.shape == (6,)
    for members in engine.clusters():
        assert len(set(labels[members].tolist())) == 1
    assert sorted(n for c in engine.clusters() for n in c) == list(range(6))


def test_len_reflects_component_count():
    engine = ConnectivityEngine(6)
    assert len(engine) == 6
    engine.union(0, 1)
    engine.union(1, 2)
    engine.union(3, 4)
    assert len(engine) == 3
    engine.union(2, 3)
    assert len(engine) == 2
    engine.union(5, 0)
    assert len(engine) == 1
    assert engine.is_saturated


def test_size_conservation_over_random_unions():
    rng = np.random.default_rng(7)
    engine = ConnectivityEngine(50)
    previous_count = engine.component_count()
    previous_sizes = [1] * 50
    for a, b in rng.integers(0, 50, size=(200, 2)):
        engine.union(int(a), int(b))
        assert sum(engine.all_component_sizes()) == 50
        assert engine.component_count() <= previous_count
        sizes = [engine.component_size(i) for i in range(50)]
        assert all(now >= before for now, before in zip(sizes, previous_sizes))
        previous_count = engine.component_count()
        previous_sizes = sizes


def test_empty_and_single_node_engines():
    empty = ConnectivityEngine(0)
    assert empty.component_count() == 0
    assert empty.all_component_sizes() == []
    assert empty.is_saturated
    single = ConnectivityEngine(1)
    assert single.all_component_sizes() == [1]
    assert single.is_saturated


def test_invalid_indices_raise():
    engine = ConnectivityEngine(3)
    with pytest.raises(IndexError):
        engine.find(3)
    with pytest.raises(IndexError):
        engine.union(0, -1)
    with pytest.raises(ValueError):
        ConnectivityEngine(-1)
