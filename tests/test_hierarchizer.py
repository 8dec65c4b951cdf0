from collections import namedtuple

import networkx as nx
import pytest

from gempp.hierarchizer import (
    Hierarchizer,
    are_chainable,
    are_mergeable,
    is_admissible_chain,
)

Edge = namedtuple("Edge", "origin target")


def test_are_chainable_shared_endpoint():
    assert are_chainable(Edge("a", "b"), Edge("c", "b"))
    assert are_chainable(Edge("a", "b"), Edge("a", "c"))


def test_are_chainable_disjoint():
    assert not are_chainable(Edge("a", "b"), Edge("c", "d"))


def test_are_mergeable():
    assert are_mergeable([Edge("a", "b")], [Edge("x", "y"), Edge("b", "c")])
    assert not are_mergeable([Edge("a", "b")], [Edge("x", "y")])


@pytest.mark.parametrize(
    "chain, expected",
    [
        ([Edge("a", "b")], True),
        ([Edge("a", "b"), Edge("b", "c")], True),
        ([Edge("a", "b"), Edge("b", "c"), Edge("c", "a")], False),
        ([Edge("a", "a")], False),
        ([Edge("a", "b"), Edge("c", "d")], False),
    ],
)
def test_is_admissible_chain(chain, expected):
    assert is_admissible_chain(chain) is expected


def test_output_is_none_before_extract():
    h = Hierarchizer(nx.path_graph(3))
    assert h.output is None
    assert h.cycles == []


def test_empty_graph():
    out = Hierarchizer(nx.Graph()).extract()
    assert out.number_of_nodes() == 0
    assert out.number_of_edges() == 0


def test_triangle_becomes_one_vertex():
    g = nx.Graph([("a", "b"), ("b", "c"), ("c", "a")])
    h = Hierarchizer(g)
    out = h.extract()
    assert h.cycles == [{"a", "b", "c"}]
    assert h.chains == []
    assert list(out.nodes) == ["a_b_c"]
    assert out.number_of_edges() == 0
    inner = out.nodes["a_b_c"]["graph"]
    assert set(inner.nodes) == {"a", "b", "c"}
    assert inner.number_of_edges() == 3


def test_path_becomes_one_chain_vertex():
    g = nx.Graph([("a", "b"), ("b", "c")])
    h = Hierarchizer(g)
    out = h.extract()
    assert h.cycles == []
    assert len(h.chains) == 1
    assert is_admissible_chain(h.chains[0])
    assert list(out.nodes) == ["a_b_c"]
    assert out.nodes["a_b_c"]["graph"].number_of_edges() == 2


def test_star_is_unchanged():
    g = nx.star_graph(3)
    h = Hierarchizer(g)
    out = h.extract()
    assert h.cycles == []
    assert h.chains == []
    assert set(out.nodes) == set(g.nodes)
    assert out.number_of_edges() == g.number_of_edges()


def test_edges_are_redirected_to_cycle_vertex():
    g = nx.Graph([("a", "b"), ("b", "c"), ("c", "a"), ("a", "d"), ("a", "e"), ("a", "f")])
    h = Hierarchizer(g)
    out = h.extract()
    assert h.chains == []
    assert set(out.nodes) == {"a_b_c", "d", "e", "f"}
    ends = {frozenset(edge) for edge in out.edges()}
    assert ends == {frozenset({"a_b_c", leaf}) for leaf in "def"}


def test_cycle_then_tail_is_nested():
    g = nx.Graph([("a", "b"), ("b", "c"), ("c", "a"), ("a", "d"), ("d", "e")])
    h = Hierarchizer(g)
    out = h.extract()
    assert h.cycles == [{"a", "b", "c"}]
    assert out.number_of_nodes() == 1
    (name,) = out.nodes
    outer = out.nodes[name]["graph"]
    assert "a_b_c" in outer.nodes
    assert set(outer.nodes["a_b_c"]["graph"].nodes) == {"a", "b", "c"}


def test_directed_cycle_keeps_direction():
    g = nx.DiGraph([("a", "b"), ("b", "c"), ("c", "a")])
    out = Hierarchizer(g).extract()
    assert out.is_directed()
    inner = out.nodes["a_b_c"]["graph"]
    assert inner.is_directed()
    assert set(inner.edges()) == {("a", "b"), ("b", "c"), ("c", "a")}


def test_cycles_sharing_a_vertex_are_fused():
    g = nx.Graph([("a", "b"), ("b", "c"), ("c", "a"), ("c", "d"), ("d", "e"), ("e", "c")])
    h = Hierarchizer(g)
    h.extract()
    assert h.cycles == [{"a", "b", "c", "d", "e"}]


def test_only_component_of_first_vertex_is_searched_for_cycles():
    g = nx.Graph([("a", "b"), ("b", "c"), ("c", "a"), ("x", "y"), ("y", "z"), ("z", "x")])
    h = Hierarchizer(g)
    h.extract()
    assert h.cycles == [{"a", "b", "c"}]


def test_attributes_are_kept_and_input_untouched():
    g = nx.Graph()
    g.add_node("a", label="C")
    g.add_node("b", label="O")
    g.add_edge("a", "b", bond=2)
    out = Hierarchizer(g).extract()
    inner = out.nodes["a_b"]["graph"]
    assert inner.nodes["a"]["label"] == "C"
    assert [d["bond"] for _, _, d in inner.edges(data=True)] == [2]
    assert set(g.nodes) == {"a", "b"}
    assert g.number_of_edges() == 1


def test_extract_twice_gives_same_result():
    g = nx.Graph([("a", "b"), ("b", "c"), ("c", "a"), ("a", "d")])
    h = Hierarchizer(g)
    first = h.extract()
    second = h.extract()
    assert set(first.nodes) == set(second.nodes)
    assert len(h.cycles) == 1