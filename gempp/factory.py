"""Building matching applications with their description and positional arguments."""

from __future__ import annotations

import math
from typing import Any

import networkx as nx
from networkx.algorithms import isomorphism

from gempp.matching import Loader, Matcher, MatchingApplication, MatchingConfig, ProblemType

_GED_DESCRIPTION = (
    "A graph edit distance implementation using binary programming, that\n"
    "finds the optimal edit path that matches a graph to another graph.\n"
    "There are two available formulations (option -f) :\n"
    "  * l(inear)    -> exact GED using binary linear programming;\n"
    "  * b(ipartite) -> approximate GED using bipartite graph matching.\n"
    "If multiple solutions are searched ('-n' option), one of the two\n"
    "available cut strategies must be chosen with the '--cut' option:\n"
    "  * s(olution) : cuts exactly the present optimal solution (default);\n"
    "  * m(atching) : prevent further solutions from matching pairs\n"
    "                 of vertices that were already matched.\n"
)

_SUBGRAPH_DESCRIPTION = (
    "A subgraph matching implementation using binary linear programming,\n"
    "that attempts to find the subgraph of the target that best matches the\n"
    "query graph. There are three levels of tolerance (-t option):\n"
    "  * e(xact)    -> not tolerant (perfect matching);\n"
    "  * l(abel)    -> tolerant to label errors;\n"
    "  * t(opology) -> tolerant to label and topology errors (default).\n"
)

_CUT_DESCRIPTION = (
    "If multiple solutions are searched ('-n' option), one of the three\n"
    "available cut strategies must be chosen with the '--cut' option:\n"
    "  * s(olution) : cuts exactly the present optimal solution (default);\n"
    "  * m(atching) : prevent further solutions from matching pairs\n"
    "                 of vertices that were already matched.\n"
    "  * e(lements) : prevent further solutions from matching vertices\n"
    "                 that were already matched with any other vertex.\n"
)

_MULTI_DESCRIPTION = (
    "\nThis application works on multiple graphs, and you may output all\n"
    "best objective values (-m option) and matching solutions (-O option).\n"
)


def _same(first: dict, second: dict) -> bool:
    return first == second


def _default_matcher(query: Any, target: Any, cfg: MatchingConfig) -> float:
    """Solve one problem with networkx: exact edit distance or subgraph search."""
    if cfg.matching_type is ProblemType.GED:
        distance = nx.graph_edit_distance(
            query,
            target,
            node_match=_same,
            edge_match=_same,
            timeout=cfg.time_limit or None,
        )
        return math.inf if distance is None else float(distance)
    if cfg.matching_type is ProblemType.SUBGRAPH:
        matcher_class = isomorphism.DiGraphMatcher if target.is_directed() else isomorphism.GraphMatcher
        matcher = matcher_class(target, query, node_match=_same, edge_match=_same)
        found = matcher.subgraph_is_isomorphic() if cfg.induced else matcher.subgraph_is_monomorphic()
        return 0.0 if found else math.inf
    raise ValueError(f"Cannot solve a problem of type '{cfg.matching_type.label}'.")


def create_application(
    problem_type: ProblemType,
    multi: bool,
    matcher: Matcher | None = None,
    loader: Loader | None = None,
) -> MatchingApplication:
    """Create a matching application described for its problem type and mode."""
    app = MatchingApplication(
        problem_type,
        multi,
        matcher if matcher is not None else _default_matcher,
        loader,
    )
    app.description = f"\n-- {app.name} : {problem_type.label}{'s' if multi else ''} --\n"

    if problem_type is ProblemType.GED:
        app.append_description(_GED_DESCRIPTION)
        if multi:
            app.add_positional_argument("dir1", "Directory containing graphs", "dir1")
            app.add_positional_argument("dir2", "Directory containing other graphs", "dir2")
        else:
            app.add_positional_argument("graph1.[gml|gxl|xml]", "A directed or undirected graph", "graph1")
            app.add_positional_argument("graph2.[gml|gxl|xml]", "Another graph of the same type", "graph2")
    elif problem_type is ProblemType.SUBGRAPH:
        app.append_description(_SUBGRAPH_DESCRIPTION)
        if multi:
            app.add_positional_argument("queries", "Directory containing query graphs", "queries")
            app.add_positional_argument("targets", "Directory containing target graphs", "targets")
        else:
            app.add_positional_argument("query.[gml|gxl|xml]", "A directed or undirected query graph", "query")
            app.add_positional_argument("target.[gml|gxl|xml]", "A graph of the same type", "target")

    app.append_description(_CUT_DESCRIPTION)
    if multi:
        app.append_description(_MULTI_DESCRIPTION)
    app.append_description(f"Version : {app.version}")
    return app