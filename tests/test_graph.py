"""Tests for zk3col.graph."""
import pytest

from zk3col.errors import OutOfRange
from zk3col.gen_3col import gen_3col
from zk3col.graph import (ColourGraph, dump_colouring, dump_graph, load_colouring, load_graph,
                          sample_colouring, sample_graph, used_colours)


def triangle():
    return ColourGraph.from_edges(3, [(0, 1), (1, 2), (2, 0)])


@pytest.mark.parametrize('u, v', [(-1, 0), (0, 3), (5, 1), (0, 1.0)])
def test_add_edge_out_of_range(u, v):
    G = ColourGraph(3)
    with pytest.raises(OutOfRange):
        G.add_edge(u, v)


def test_add_edge_self_loop():
    with pytest.raises(OutOfRange):
        ColourGraph(3).add_edge(1, 1)


def test_out_of_range_is_index_error():
    with pytest.raises(IndexError):
        ColourGraph(2).neighbours(2)


def test_edges_once_canonical():
    G = ColourGraph.from_edges(4, [(3, 0), (0, 3), (2, 1), (1, 0)])
    assert G.edges() == [(0, 1), (0, 3), (1, 2)]
    assert G.num_edges == 3


def test_neighbours_snapshot():
    G = triangle()
    G.add_edge(0, 1)
    ns = G.neighbours(0)
    assert ns == [1, 2]
    ns.append(7)
    assert G.neighbours(0) == [1, 2]


def test_valid_colouring_triangle():
    assert triangle().is_valid_colouring(['RED', 'GREEN', 'BLUE'])
    assert triangle().is_valid_colouring({0: 'RED', 1: 'GREEN', 2: 'BLUE'})


def test_invalid_colouring_adjacent_equal():
    assert not triangle().is_valid_colouring(['RED', 'RED', 'BLUE'])


def test_invalid_colouring_missing_vertex():
    assert not triangle().is_valid_colouring({0: 'RED', 1: 'GREEN'})


def test_invalid_colouring_extra_vertex():
    assert not triangle().is_valid_colouring({0: 'RED', 1: 'GREEN', 2: 'BLUE', 3: 'RED'})


def test_invalid_colouring_four_colours():
    # A path is 2-colourable, but a coloring with 4 labels is still rejected.
    G = ColourGraph.from_edges(4, [(0, 1), (1, 2), (2, 3)])
    assert not G.is_valid_colouring(['RED', 'GREEN', 'BLUE', 'PINK'])
    assert G.is_valid_colouring(['RED', 'GREEN', 'RED', 'GREEN'])


def test_invalid_colouring_bad_label():
    assert not triangle().is_valid_colouring(['RED', 'GR:EEN', 'BLUE'])


def test_sample_graph():
    G = sample_graph()
    assert G.num_vertices == 10
    assert G.num_edges == 19
    assert G.neighbours(0) == [1, 2, 4, 5]


def test_sample_colouring_valid():
    G = sample_graph()
    for _ in range(20):
        colouring = sample_colouring()
        assert G.is_valid_colouring(colouring)
        assert len(used_colours(colouring)) == 3


def test_graph_file_roundtrip(tmp_path):
    G = sample_graph()
    dump_graph(G, tmp_path / 'g.json')
    H = load_graph(tmp_path / 'g.json')
    assert H.num_vertices == G.num_vertices
    assert H.edges() == G.edges()


def test_colouring_file_roundtrip(tmp_path):
    colouring = sample_colouring()
    dump_colouring(colouring, tmp_path / 'c.json')
    assert load_colouring(tmp_path / 'c.json') == colouring


def test_gen_3col():
    G, colouring = gen_3col(60, 6)
    assert G.num_vertices == 60
    assert G.is_valid_colouring(colouring)
    assert len(used_colours(colouring)) == 3
