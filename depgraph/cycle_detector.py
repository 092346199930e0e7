"""
Cycle Detector
Detects cyclic dependencies and finds strongly connected components
"""

import logging
from typing import Dict, List, Optional

from .config import Config
from .graph_model import GraphModel
from .models import (
    EDGE_DIRECT,
    EDGE_OPTIONAL,
    EDGE_PEER,
    SCC,
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    Cycle,
)

logger = logging.getLogger(__name__)


class CycleDetector:
    """Reports one cycle per back edge found by a depth-first search

    Several overlapping cycles may be reported for a single entangled region;
    use SCCFinder when each region should be flagged once.
    """

    def __init__(self, error_threshold: int = Config.CYCLE_ERROR_THRESHOLD,
                 log: Optional[logging.Logger] = None):
        self.error_threshold = error_threshold
        self.logger = log or logger

    def detect(self, model: GraphModel) -> List[Cycle]:
        """Detect cycles, starting a search from every unvisited node in node order"""
        cycles: List[Cycle] = []
        visited = set()
        graph = model.graph

        for start in graph.nodes:
            if start in visited:
                continue

            # path holds the recursion stack; positions gives O(1) membership and slicing
            path = [start]
            positions = {start: 0}
            visited.add(start)
            pending = [iter(graph.successors(start))]

            while pending:
                for neighbor in pending[-1]:
                    if neighbor not in visited:
                        visited.add(neighbor)
                        positions[neighbor] = len(path)
                        path.append(neighbor)
                        pending.append(iter(graph.successors(neighbor)))
                        break
                    if neighbor in positions and neighbor != path[-1]:
                        # A self-loop is not a cycle of two or more distinct modules
                        closed = path[positions[neighbor]:] + [neighbor]
                        cycles.append(Cycle(tuple(closed), self.severity_for(closed)))
                else:
                    pending.pop()
                    del positions[path.pop()]

        self.logger.info(f"Found {len(cycles)} cycles in dependency graph")
        return cycles

    def severity_for(self, cycle_path: List[str]) -> str:
        """Long cycles are errors, short ones warnings"""
        return SEVERITY_ERROR if len(cycle_path) > self.error_threshold else SEVERITY_WARNING

    def find_breaking_points(self, model: GraphModel, cycle: Cycle) -> List[Dict]:
        """Rank the edges of a cycle by how cheaply they could be removed"""
        impacts = {EDGE_OPTIONAL: 'low', EDGE_PEER: 'medium', EDGE_DIRECT: 'high'}
        suggestions = {
            EDGE_OPTIONAL: "Optional dependency, consider dropping it or loading it lazily",
            EDGE_PEER: "Review peer dependency relationship, consider architectural refactoring",
            EDGE_DIRECT: "Refactor to extract common functionality or use dependency injection",
        }

        breaking_points = []
        for current, next_node in zip(cycle.path, cycle.path[1:]):
            if not model.graph.has_edge(current, next_node):
                continue
            kind = model.graph[current][next_node].get('kind', EDGE_DIRECT)
            breaking_points.append({
                'from': current,
                'to': next_node,
                'kind': kind,
                'suggestion': suggestions.get(kind, suggestions[EDGE_DIRECT]),
                'impact': impacts.get(kind, 'high'),
            })

        order = {'low': 0, 'medium': 1, 'high': 2}
        breaking_points.sort(key=lambda point: order[point['impact']])
        return breaking_points


class SCCFinder:
    """Finds strongly connected components with Kosaraju's two-pass method"""

    def __init__(self, include_self_loops: bool = False, log: Optional[logging.Logger] = None):
        self.include_self_loops = include_self_loops
        self.logger = log or logger

    def find(self, model: GraphModel) -> List[SCC]:
        graph = model.graph
        finish_order = self._finish_order(model)

        components: List[SCC] = []
        assigned = set()

        while finish_order:
            root = finish_order.pop()
            if root in assigned:
                continue

            # Collect everything that reaches root and is still unassigned
            assigned.add(root)
            members = [root]
            pending = [iter(graph.predecessors(root))]
            while pending:
                for neighbor in pending[-1]:
                    if neighbor not in assigned:
                        assigned.add(neighbor)
                        members.append(neighbor)
                        pending.append(iter(graph.predecessors(neighbor)))
                        break
                else:
                    pending.pop()

            if len(members) > 1:
                components.append(SCC(tuple(members)))
            elif self.include_self_loops and graph.has_edge(root, root):
                components.append(SCC((root,)))

        self.logger.info(f"Found {len(components)} significant strongly connected components")
        return components

    @staticmethod
    def _finish_order(model: GraphModel) -> List[str]:
        """First pass: nodes in the order their forward search finishes"""
        graph = model.graph
        visited = set()
        order: List[str] = []

        for start in graph.nodes:
            if start in visited:
                continue
            visited.add(start)
            stack = [(start, iter(graph.successors(start)))]
            while stack:
                node, neighbors = stack[-1]
                for neighbor in neighbors:
                    if neighbor not in visited:
                        visited.add(neighbor)
                        stack.append((neighbor, iter(graph.successors(neighbor))))
                        break
                else:
                    stack.pop()
                    order.append(node)

        return order
