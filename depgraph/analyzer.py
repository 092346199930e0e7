"""
Dependency Analyzer
Builds the graph once and runs every analysis over it
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Union

from .centrality import CentralityCalculator
from .config import Config
from .cycle_detector import CycleDetector, SCCFinder
from .duplicate_detector import DuplicateDetector, VersionConflictChecker
from .graph_builder import DependencyGraphBuilder
from .graph_model import GraphModel
from .models import SCC, SEVERITY_ERROR, Cycle, DuplicateDependency, Module, TreeNode, VersionConflict
from .topological_sorter import TopologicalSorter
from .tree_builder import DependencyTreeBuilder

logger = logging.getLogger(__name__)


@dataclass
class DependencyAnalysisResult:
    """Data model for dependency analysis results"""
    graph: GraphModel
    cycles: List[Cycle] = field(default_factory=list)
    strongly_connected_components: List[SCC] = field(default_factory=list)
    topological_order: Optional[List[str]] = None
    duplicates: List[DuplicateDependency] = field(default_factory=list)
    version_conflicts: List[VersionConflict] = field(default_factory=list)
    trees: List[TreeNode] = field(default_factory=list)
    centrality: Dict[str, int] = field(default_factory=dict)

    @property
    def is_dag(self) -> bool:
        return self.topological_order is not None

    def summary(self) -> Dict:
        sccs = self.strongly_connected_components
        return {
            'total_nodes': self.graph.number_of_nodes(),
            'total_edges': self.graph.number_of_edges(),
            'is_dag': self.is_dag,
            'cycle_count': len(self.cycles),
            'error_cycles': sum(1 for cycle in self.cycles if cycle.severity == SEVERITY_ERROR),
            'scc_count': len(sccs),
            'largest_component_size': max((scc.size for scc in sccs), default=0),
            'duplicate_count': len(self.duplicates),
            'duplicate_size': sum(dup.total_size for dup in self.duplicates),
            'version_conflict_count': len(self.version_conflicts),
        }

    def to_dict(self) -> Dict:
        return {
            'graph': self.graph.to_dict(),
            'circular': [cycle.to_dict() for cycle in self.cycles],
            'stronglyConnected': [scc.to_dict() for scc in self.strongly_connected_components],
            'topologicalOrder': self.topological_order,
            'duplicates': [dup.to_dict() for dup in self.duplicates],
            'versionConflicts': [conflict.to_dict() for conflict in self.version_conflicts],
            'trees': [tree.to_dict() for tree in self.trees],
            'centrality': dict(self.centrality),
            'summary': self.summary(),
        }


class DependencyAnalyzer:
    """Fans a single immutable graph out to every analyzer"""

    def __init__(self, config=Config, log: Optional[logging.Logger] = None):
        self.config = config
        self.logger = log or logger

        marker = config.DEPENDENCY_DIR_MARKER
        self.graph_builder = DependencyGraphBuilder(marker, log=self.logger)
        self.cycle_detector = CycleDetector(config.CYCLE_ERROR_THRESHOLD, log=self.logger)
        self.scc_finder = SCCFinder(log=self.logger)
        self.sorter = TopologicalSorter(log=self.logger)
        self.duplicate_detector = DuplicateDetector(marker, log=self.logger)
        self.version_checker = VersionConflictChecker(marker, log=self.logger)
        self.tree_builder = DependencyTreeBuilder(config.TREE_MAX_DEPTH, log=self.logger)
        self.centrality = CentralityCalculator(log=self.logger)

    def analyze(self, modules: Sequence[Module],
                dependencies: Optional[Mapping[str, Sequence[str]]] = None,
                project_path: Optional[Union[str, Path]] = None) -> DependencyAnalysisResult:
        """Run every analysis; installed versions are only checked when project_path is given"""
        graph = self.graph_builder.build(modules, dependencies)

        version_conflicts = []
        if project_path is not None:
            version_conflicts = self.version_checker.check_project(project_path)

        result = DependencyAnalysisResult(
            graph=graph,
            cycles=self.cycle_detector.detect(graph),
            strongly_connected_components=self.scc_finder.find(graph),
            topological_order=self.sorter.sort(graph),
            duplicates=self.duplicate_detector.detect(modules),
            version_conflicts=version_conflicts,
            trees=self.tree_builder.build(graph),
            centrality=self.centrality.calculate(graph),
        )

        self.logger.info(f"Dependency analysis finished: {result.summary()}")
        return result
