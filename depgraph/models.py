"""
Data models for the dependency graph engine
Input module records, graph nodes/edges and the report objects produced by the analyzers
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

NODE_TYPE_PACKAGE = 'package'
NODE_TYPE_MODULE = 'module'

EDGE_DIRECT = 'direct'
EDGE_PEER = 'peer'
EDGE_OPTIONAL = 'optional'
EDGE_KINDS = (EDGE_DIRECT, EDGE_PEER, EDGE_OPTIONAL)

SEVERITY_WARNING = 'warning'
SEVERITY_ERROR = 'error'


class ModuleValidationError(ValueError):
    """Raised when the module list violates the input contract"""

    def __init__(self, module_ref: str, reason: str):
        self.module_ref = module_ref
        self.reason = reason
        super().__init__(f"Invalid module {module_ref}: {reason}")


# =============================================================================
# INPUT
# =============================================================================

@dataclass(frozen=True)
class Module:
    """A unit of code with a size and its declared dependency references"""
    id: str
    name: str
    size: int = 0
    path: Optional[str] = None
    dependencies: Tuple[str, ...] = ()
    peer_dependencies: Tuple[str, ...] = ()
    optional_dependencies: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Module':
        """Build a module from its JSON record (camelCase keys accepted)"""
        return cls(
            id=data.get('id'),
            name=data.get('name', data.get('id')),
            size=data.get('size', 0),
            path=data.get('path'),
            dependencies=_as_tuple(data.get('dependencies')),
            peer_dependencies=_as_tuple(data.get('peer_dependencies', data.get('peerDependencies'))),
            optional_dependencies=_as_tuple(data.get('optional_dependencies', data.get('optionalDependencies'))),
        )

    def references(self) -> List[Tuple[str, str]]:
        """All dependency references as (reference, edge kind) pairs"""
        refs = [(ref, EDGE_DIRECT) for ref in self.dependencies]
        refs.extend((ref, EDGE_PEER) for ref in self.peer_dependencies)
        refs.extend((ref, EDGE_OPTIONAL) for ref in self.optional_dependencies)
        return refs


def _as_tuple(value) -> Tuple:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    # Leave anything else for validate_modules to reject
    return value


def load_modules(content: str) -> List[Module]:
    """Parse a JSON array of module records"""
    data = json.loads(content)
    if isinstance(data, dict):
        data = data.get('modules', [])
    return [Module.from_dict(item) for item in data]


def validate_modules(modules: Sequence[Module]) -> None:
    """Reject the whole module list on the first contract violation"""
    seen_ids = set()
    for index, module in enumerate(modules):
        module_id = getattr(module, 'id', None)
        if not isinstance(module_id, str) or not module_id:
            raise ModuleValidationError(f"at index {index}", "missing id")
        if module_id in seen_ids:
            raise ModuleValidationError(module_id, "duplicate id")
        seen_ids.add(module_id)

        if not isinstance(module.name, str):
            raise ModuleValidationError(module_id, "name must be a string")
        if module.path is not None and not isinstance(module.path, str):
            raise ModuleValidationError(module_id, f"path must be a string, got {module.path!r}")

        size = module.size
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise ModuleValidationError(module_id, f"size must be a non-negative integer, got {size!r}")

        for attr in ('dependencies', 'peer_dependencies', 'optional_dependencies'):
            refs = getattr(module, attr)
            if not isinstance(refs, (list, tuple)):
                raise ModuleValidationError(module_id, f"{attr} must be a sequence of strings")
            if not all(isinstance(ref, str) for ref in refs):
                raise ModuleValidationError(module_id, f"{attr} must only contain strings")


# =============================================================================
# GRAPH
# =============================================================================

@dataclass(frozen=True)
class Node:
    id: str
    name: str
    size: int
    type: str
    path: Optional[str] = None
    depth: Optional[int] = None

    def to_dict(self) -> Dict:
        data = {'id': self.id, 'name': self.name, 'size': self.size, 'type': self.type}
        if self.path is not None:
            data['path'] = self.path
        if self.depth is not None:
            data['depth'] = self.depth
        return data


@dataclass(frozen=True)
class Edge:
    source: str
    target: str
    kind: str = EDGE_DIRECT

    def to_dict(self) -> Dict:
        return {'source': self.source, 'target': self.target, 'type': self.kind}


# =============================================================================
# REPORTS
# =============================================================================

@dataclass(frozen=True)
class Cycle:
    """A closed walk; the first node is repeated at the end"""
    path: Tuple[str, ...]
    severity: str

    @property
    def nodes(self) -> frozenset:
        return frozenset(self.path)

    def to_dict(self) -> Dict:
        return {'cycle': list(self.path), 'severity': self.severity}


@dataclass(frozen=True)
class SCC:
    members: Tuple[str, ...]

    @property
    def size(self) -> int:
        return len(self.members)

    def to_dict(self) -> Dict:
        return {'members': list(self.members)}


@dataclass(frozen=True)
class DuplicateDependency:
    """Several physical copies of one package at different versions"""
    package_identity: str
    versions: Tuple[str, ...]
    locations: Tuple[str, ...]
    total_size: int

    def to_dict(self) -> Dict:
        return {
            'name': self.package_identity,
            'versions': list(self.versions),
            'locations': list(self.locations),
            'totalSize': self.total_size,
        }


@dataclass(frozen=True)
class InstalledPackage:
    """One package.json found in the installed dependency directory"""
    name: str
    version: str
    path: str
    required_by: Optional[str] = None


@dataclass(frozen=True)
class VersionRequirement:
    version: str
    required_by: Tuple[str, ...] = ()

    def to_dict(self) -> Dict:
        return {'version': self.version, 'requiredBy': list(self.required_by)}


@dataclass(frozen=True)
class VersionConflict:
    package: str
    versions: Tuple[VersionRequirement, ...]
    recommended: Optional[str] = None

    def to_dict(self) -> Dict:
        data = {'package': self.package, 'versions': [v.to_dict() for v in self.versions]}
        if self.recommended is not None:
            data['recommended'] = self.recommended
        return data


@dataclass
class TreeNode:
    """One node of the tree projection; shared descendants are duplicated per path"""
    name: str
    id: str
    depth: int
    size: Optional[int] = None
    children: List['TreeNode'] = field(default_factory=list)

    def count(self) -> int:
        """Number of nodes in this subtree"""
        return 1 + sum(child.count() for child in self.children)

    def max_depth(self) -> int:
        if not self.children:
            return self.depth
        return max(child.max_depth() for child in self.children)

    def to_dict(self) -> Dict:
        data = {'name': self.name, 'id': self.id}
        if self.size is not None:
            data['size'] = self.size
        data['children'] = [child.to_dict() for child in self.children]
        data['depth'] = self.depth
        return data
