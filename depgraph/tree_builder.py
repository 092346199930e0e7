"""
Dependency Tree Builder
Projects the dependency graph into rooted trees for visualization
"""

import logging
from typing import List, Optional

from .config import Config
from .graph_model import GraphModel
from .graph_utils import find_roots
from .models import TreeNode

logger = logging.getLogger(__name__)


class DependencyTreeBuilder:
    """Builds one tree per root module

    Roots are the modules nothing depends on. Every branch carries its own
    copy of the visited set, so a module reachable along several paths shows
    up once per path; a module is never repeated inside its own ancestry.
    """

    def __init__(self, max_depth: int = Config.TREE_MAX_DEPTH, log: Optional[logging.Logger] = None):
        self.max_depth = max_depth
        self.logger = log or logger

    def build(self, model: GraphModel) -> List[TreeNode]:
        if model.is_empty():
            return []

        roots = find_roots(model)
        if not roots:
            # Fully cyclic graph: fall back to the first module
            roots = [model.node_ids[0]]
            self.logger.debug(f"No root modules found, using {roots[0]} as tree root")

        trees = []
        for root in roots:
            tree = self._build_tree(model, root, set(), 0)
            if tree is not None:
                trees.append(tree)

        return trees

    def _build_tree(self, model: GraphModel, node_id: str, visited: set, depth: int) -> Optional[TreeNode]:
        if depth > self.max_depth or node_id in visited:
            return None

        node = model.get_node(node_id)
        if node is None:
            return None

        visited.add(node_id)
        tree = TreeNode(name=node.name, id=node.id, depth=depth, size=node.size)

        if depth < self.max_depth:
            for child_id in model.successors(node_id):
                child = self._build_tree(model, child_id, set(visited), depth + 1)
                if child is not None:
                    tree.children.append(child)

        return tree
