"""Hierarchization of molecule graphs: cycles and chains become nested vertices.

A graph is read from any networkx graph. Cycles reachable from the first
vertex are found by a depth-first search. Cycles that share a vertex are
fused. Each cycle is then replaced by one vertex that holds the induced
subgraph in its ``graph`` attribute. The same is done afterwards for chains
of simple edges, whose endpoints have degree at most two.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Iterable

import networkx as nx


@dataclass(eq=False)
class _Edge:
    """A mutable edge; identity is what tells two parallel edges apart."""

    origin: Hashable
    target: Hashable
    attributes: dict[str, Any] = field(default_factory=dict)


def are_chainable(edge1, edge2) -> bool:
    """Tell whether two edges have an endpoint in common."""
    return (
        edge1.origin == edge2.origin
        or edge1.origin == edge2.target
        or edge1.target == edge2.origin
        or edge1.target == edge2.target
    )


def are_mergeable(chain1: Iterable, chain2: Iterable) -> bool:
    """Tell whether some edge of one chain touches some edge of the other."""
    second = list(chain2)
    return any(are_chainable(edge1, edge2) for edge1 in chain1 for edge2 in second)


def is_admissible_chain(chain: Iterable) -> bool:
    """Tell whether a set of edges forms an open chain (no cycle, connected)."""
    edges = list(chain)
    vertices = {vertex for edge in edges for vertex in (edge.origin, edge.target)}
    return len(vertices) == len(edges) + 1


def _is_admissible_cycle(cycle: set) -> bool:
    return True


def _fuse(groups: list[set], mergeable: Callable[[set, set], bool], admissible: Callable[[set], bool]) -> None:
    """Merge groups pairwise until no mergeable, admissible pair is left."""
    i = 0
    while i < len(groups):
        for j in range(i + 1, len(groups)):
            if mergeable(groups[i], groups[j]):
                union = groups[i] | groups[j]
                if admissible(union):
                    del groups[j]
                    groups[i] = union
                    i = 0
                    break
        else:
            i += 1


class Hierarchizer:
    """Detects cycles and chains of a graph and nests them into single vertices."""

    def __init__(self, graph: nx.Graph) -> None:
        self.input = graph
        self.output: nx.Graph | None = None
        self.cycles: list[set] = []
        self.chains: list[set[_Edge]] = []
        self._nodes: dict[Hashable, dict[str, Any]] = {}
        self._edges: list[_Edge] = []

    def extract(self) -> nx.Graph:
        """Run the extraction and return the hierarchical graph."""
        self.cycles = []
        self.chains = []
        self._load()
        self._extract_cycles()
        self._extract_chains()
        self.output = self._build(self._nodes, self._edges)
        return self.output

    # Model

    def _load(self) -> None:
        graph = self.input
        self._nodes = {node: dict(data) for node, data in graph.nodes(data=True)}
        if graph.is_multigraph():
            triples = ((u, v, d) for u, v, _, d in graph.edges(keys=True, data=True))
        else:
            triples = graph.edges(data=True)
        self._edges = [_Edge(u, v, dict(d)) for u, v, d in triples]

    def _new_graph(self) -> nx.Graph:
        return nx.MultiDiGraph() if self.input.is_directed() else nx.MultiGraph()

    def _build(self, nodes: dict[Hashable, dict[str, Any]], edges: Iterable[_Edge]) -> nx.Graph:
        graph = self._new_graph()
        for node, data in nodes.items():
            graph.add_node(node, **data)
        for edge in edges:
            graph.add_edge(edge.origin, edge.target, **edge.attributes)
        return graph

    def _induced(self, vertices: set) -> nx.Graph:
        nodes = {node: dict(data) for node, data in self._nodes.items() if node in vertices}
        edges = [e for e in self._edges if e.origin in vertices and e.target in vertices]
        return self._build(nodes, edges)

    def _incident(self, vertex: Hashable) -> list[_Edge]:
        return [e for e in self._edges if e.origin == vertex or e.target == vertex]

    def _collapse(self, vertices: set, dropped: Callable[[_Edge], bool]) -> None:
        """Replace the vertices by one vertex holding their induced subgraph."""
        subgraph = self._induced(vertices)
        name = "_".join(sorted(str(vertex) for vertex in vertices))
        for vertex in vertices:
            self._nodes.pop(vertex, None)
        self._nodes[name] = {"graph": subgraph}
        kept = []
        for edge in self._edges:
            if dropped(edge):
                continue
            if edge.origin in vertices:
                edge.origin = name
            if edge.target in vertices:
                edge.target = name
            kept.append(edge)
        self._edges = kept

    # Cycles

    def _extract_cycles(self) -> None:
        self._dfs_cycles()
        self.cycles = [cycle for cycle in self.cycles if _is_admissible_cycle(cycle)]
        _fuse(self.cycles, lambda a, b: not a.isdisjoint(b), _is_admissible_cycle)
        for cycle in self.cycles:
            self._collapse(cycle, lambda e, c=cycle: e.origin in c and e.target in c)

    def _dfs_cycles(self) -> None:
        if not self._nodes:
            return
        visited_vertices: set = set()
        visited_edges: set[_Edge] = set()
        root = next(iter(self._nodes))
        visited_vertices.add(root)
        stack = [(root, [root], iter(self._incident(root)))]
        while stack:
            vertex, parents, edges = stack[-1]
            for edge in edges:
                if edge in visited_edges:
                    continue
                visited_edges.add(edge)
                neighbour = edge.target if edge.origin == vertex else edge.origin
                if neighbour in visited_vertices:
                    self.cycles.append(self._cycle(neighbour, parents))
                    continue
                visited_vertices.add(neighbour)
                stack.append((neighbour, [neighbour, *parents], iter(self._incident(neighbour))))
                break
            else:
                stack.pop()

    @staticmethod
    def _cycle(root: Hashable, parents: list) -> set:
        cycle = {root}
        for parent in parents:
            if parent == root:
                break
            cycle.add(parent)
        return cycle

    # Chains

    def _extract_chains(self) -> None:
        degree: Counter = Counter()
        for edge in self._edges:
            degree[edge.origin] += 1
            degree[edge.target] += 1
        self.chains = [
            {edge}
            for edge in self._edges
            if degree[edge.origin] <= 2 and degree[edge.target] <= 2
        ]
        _fuse(self.chains, are_mergeable, is_admissible_chain)
        self.chains = [chain for chain in self.chains if is_admissible_chain(chain)]
        for chain in self.chains:
            vertices = {v for edge in chain for v in (edge.origin, edge.target)}
            self._collapse(vertices, lambda e, c=chain: e in c)