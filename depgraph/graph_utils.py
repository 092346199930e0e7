"""
Graph helpers shared by the builder and the analyzers
"""

from collections import deque
from typing import Dict, Iterable, List, Optional, Union

import networkx as nx

from .config import Config
from .graph_model import GraphModel

GraphLike = Union[GraphModel, nx.DiGraph]


def _as_digraph(graph: GraphLike) -> nx.DiGraph:
    if isinstance(graph, GraphModel):
        return graph.graph
    return graph


def find_roots(graph: GraphLike) -> List[str]:
    """Nodes nothing depends on, in node order"""
    digraph = _as_digraph(graph)
    return [node for node in digraph.nodes if digraph.in_degree(node) == 0]


def calculate_depths(graph: GraphLike, roots: Optional[Iterable[str]] = None) -> Dict[str, int]:
    """Breadth-first distance of every reachable node from the nearest root"""
    digraph = _as_digraph(graph)
    if roots is None:
        roots = find_roots(digraph)

    depths: Dict[str, int] = {}
    queue = deque((root, 0) for root in roots if root in digraph)

    while queue:
        node, depth = queue.popleft()
        if node in depths:
            continue
        depths[node] = depth

        for neighbor in digraph.successors(node):
            if neighbor not in depths:
                queue.append((neighbor, depth + 1))

    return depths


def find_all_paths(graph: GraphLike, start: str, end: str,
                   max_depth: int = Config.PATH_SEARCH_MAX_DEPTH) -> List[List[str]]:
    """All simple paths from start to end with at most max_depth edges"""
    digraph = _as_digraph(graph)
    if start not in digraph or end not in digraph:
        return []

    paths: List[List[str]] = []

    def walk(current: str, path: List[str], visited: set, depth: int):
        if depth > max_depth:
            return
        if current == end:
            paths.append(path + [current])
            return

        visited.add(current)
        for neighbor in digraph.successors(current):
            if neighbor not in visited:
                # Each branch gets its own copy so sibling paths may share nodes
                walk(neighbor, path + [current], set(visited), depth + 1)

    walk(start, [], set(), 0)
    return paths
