"""
Dependency Graph Builder
Turns the resolved module list into an immutable GraphModel
"""

import json
import logging
from typing import Dict, List, Mapping, Optional, Sequence

import networkx as nx

from .config import Config
from .graph_model import GraphModel
from .graph_utils import calculate_depths
from .models import (
    EDGE_DIRECT,
    NODE_TYPE_MODULE,
    NODE_TYPE_PACKAGE,
    Module,
    ModuleValidationError,
    load_modules,
    validate_modules,
)

logger = logging.getLogger(__name__)


class DependencyGraphBuilder:
    """Builds dependency graphs from module records"""

    def __init__(self, dependency_dir_marker: str = Config.DEPENDENCY_DIR_MARKER,
                 log: Optional[logging.Logger] = None):
        self.dependency_dir_marker = dependency_dir_marker
        self.logger = log or logger

    def build(self, modules: Sequence[Module],
              dependencies: Optional[Mapping[str, Sequence[str]]] = None) -> GraphModel:
        """Build the dependency graph

        ``dependencies`` maps a module name (or id) to extra dependency
        references; they are treated as direct dependencies of that module.
        References that match no module are dropped.
        """
        validate_modules(modules)
        dependencies = dependencies or {}

        graph = nx.DiGraph()
        for module in modules:
            graph.add_node(module.id,
                           name=module.name,
                           size=module.size,
                           type=self.classify(module),
                           path=module.path)

        lookup = self._build_lookup(modules)
        dropped = 0

        for module in modules:
            for reference, kind in self._collect_references(module, dependencies):
                target = lookup.get(reference)
                if target is None:
                    dropped += 1
                    continue
                self._add_dependency(graph, module.id, target, kind)

        if dropped:
            self.logger.debug(f"Dropped {dropped} unresolved dependency references")

        for node_id, depth in calculate_depths(graph).items():
            graph.nodes[node_id]['depth'] = depth

        model = GraphModel(graph)
        self.logger.info(f"Built dependency graph with {model.number_of_nodes()} nodes "
                         f"and {model.number_of_edges()} edges")
        return model

    def build_from_json(self, content: str,
                        dependencies: Optional[Mapping[str, Sequence[str]]] = None) -> GraphModel:
        """Build the graph from a JSON array of module records"""
        try:
            modules = load_modules(content)
        except json.JSONDecodeError as e:
            self.logger.error(f"Failed to parse module list: {e}")
            raise ModuleValidationError("list", f"malformed JSON ({e})") from e
        return self.build(modules, dependencies)

    def classify(self, module: Module) -> str:
        """Package when the path sits under the dependency directory, module otherwise"""
        location = module.path if module.path is not None else module.name
        if self.dependency_dir_marker and self.dependency_dir_marker in location:
            return NODE_TYPE_PACKAGE
        return NODE_TYPE_MODULE

    @staticmethod
    def _build_lookup(modules: Sequence[Module]) -> Dict[str, str]:
        """Map every module name and id to its id; ids win over names"""
        lookup = {}
        for module in modules:
            lookup.setdefault(module.name, module.id)
        for module in modules:
            lookup[module.id] = module.id
        return lookup

    @staticmethod
    def _collect_references(module: Module, dependencies: Mapping[str, Sequence[str]]):
        refs = [(ref, EDGE_DIRECT) for ref in module.dependencies]

        extra = dependencies.get(module.name)
        if extra is None and module.id != module.name:
            extra = dependencies.get(module.id)
        refs.extend((ref, EDGE_DIRECT) for ref in extra or ())

        refs.extend(ref for ref in module.references() if ref[1] != EDGE_DIRECT)
        return refs

    @staticmethod
    def _add_dependency(graph: nx.DiGraph, source: str, target: str, kind: str):
        """Add an edge unless the pair already exists; the first kind seen wins"""
        if graph.has_edge(source, target):
            return
        graph.add_edge(source, target, kind=kind)

    @staticmethod
    def get_graph_stats(model: GraphModel) -> Dict:
        """Get statistics about the dependency graph"""
        graph = model.graph
        node_count = graph.number_of_nodes()
        return {
            'total_modules': node_count,
            'total_dependencies': graph.number_of_edges(),
            'packages': sum(1 for node in model.nodes if node.type == NODE_TYPE_PACKAGE),
            'is_connected': nx.is_weakly_connected(graph) if node_count > 0 else False,
            'density': nx.density(graph),
            'average_degree': sum(dict(graph.degree()).values()) / node_count if node_count > 0 else 0,
        }

    @staticmethod
    def get_module_dependencies(model: GraphModel, module_id: str) -> List[str]:
        """Get direct dependencies of a module"""
        if model.has_node(module_id):
            return list(model.successors(module_id))
        return []

    @staticmethod
    def get_module_dependents(model: GraphModel, module_id: str) -> List[str]:
        """Get modules that depend on this module"""
        if model.has_node(module_id):
            return list(model.predecessors(module_id))
        return []
