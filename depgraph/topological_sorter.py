"""
Topological Sorter
Orders modules so every dependency comes after its dependent (Kahn's algorithm)
"""

import logging
from collections import deque
from typing import List, Optional

from .graph_model import GraphModel

logger = logging.getLogger(__name__)


class TopologicalSorter:
    """Produces a full topological order, or None when the graph has a cycle"""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.logger = log or logger

    def sort(self, model: GraphModel) -> Optional[List[str]]:
        graph = model.graph
        in_degree = {node: graph.in_degree(node) for node in graph.nodes}

        # Seed in node order so the result is deterministic
        queue = deque(node for node, degree in in_degree.items() if degree == 0)
        order: List[str] = []

        while queue:
            node = queue.popleft()
            order.append(node)
            for neighbor in graph.successors(node):
                in_degree[neighbor] -= 1
                if in_degree[neighbor] == 0:
                    queue.append(neighbor)

        if len(order) != len(in_degree):
            # Never hand out a partial order
            self.logger.info(f"No topological order: {len(in_degree) - len(order)} modules are in or behind a cycle")
            return None

        return order

    def is_acyclic(self, model: GraphModel) -> bool:
        return self.sort(model) is not None
