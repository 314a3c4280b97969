from __future__ import annotations

from typing import Iterable

import networkx as nx

from digevo.exceptions import InvalidStateError
from digevo.organisms.organism import Organism


def build_ancestry_graph(organisms: Iterable[Organism]) -> nx.DiGraph:
    """Parent -> child graph over the given organisms and all their ancestors.

    Nodes are organism ids; each node carries the organism under ``"organism"``.
    """
    G = nx.DiGraph()
    seen: set[str] = set()
    stack = list(organisms)
    while stack:
        node = stack.pop()
        if node.id in seen:
            continue
        seen.add(node.id)
        G.add_node(node.id, organism=node)
        for parent in node.parents:
            G.add_edge(parent.id, node.id)
            stack.append(parent)
    return G


def validate_ancestry(organisms: Iterable[Organism]) -> nx.DiGraph:
    """Build the ancestry graph and check that it is acyclic.

    Raises:
        InvalidStateError: if a cycle is found.
    """
    G = build_ancestry_graph(organisms)
    if not nx.is_directed_acyclic_graph(G):
        cycle_edges = nx.find_cycle(G, orientation="original")
        cycle_nodes = [cycle_edges[0][0]] + [v for (_, v, *_) in cycle_edges]
        raise InvalidStateError(
            f"Cycle detected in ancestry graph: {' -> '.join(cycle_nodes)}"
        )
    return G


def root_ancestors(G: nx.DiGraph) -> list[Organism]:
    """Organisms in the graph without parents."""
    return [G.nodes[n]["organism"] for n, degree in G.in_degree() if degree == 0]
