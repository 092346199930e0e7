"""
Dependency graph analysis engine
Builds a read-only dependency graph from module records and derives cycles,
strongly connected components, topological order, duplicates and tree projections
"""

from .analyzer import DependencyAnalysisResult, DependencyAnalyzer
from .centrality import CentralityCalculator
from .config import Config
from .cycle_detector import CycleDetector, SCCFinder
from .duplicate_detector import DuplicateDetector, VersionConflictChecker, scan_installed_packages
from .graph_builder import DependencyGraphBuilder
from .graph_model import GraphModel
from .models import (
    SCC,
    Cycle,
    DuplicateDependency,
    Edge,
    InstalledPackage,
    Module,
    ModuleValidationError,
    Node,
    TreeNode,
    VersionConflict,
    VersionRequirement,
    load_modules,
    validate_modules,
)
from .topological_sorter import TopologicalSorter
from .tree_builder import DependencyTreeBuilder

__all__ = [
    'CentralityCalculator', 'Config', 'Cycle', 'CycleDetector', 'DependencyAnalysisResult',
    'DependencyAnalyzer', 'DependencyGraphBuilder', 'DependencyTreeBuilder', 'DuplicateDependency',
    'DuplicateDetector', 'Edge', 'GraphModel', 'InstalledPackage', 'Module', 'ModuleValidationError',
    'Node', 'SCC', 'SCCFinder', 'TopologicalSorter', 'TreeNode', 'VersionConflict',
    'VersionConflictChecker', 'VersionRequirement', 'load_modules', 'scan_installed_packages',
    'validate_modules',
]
