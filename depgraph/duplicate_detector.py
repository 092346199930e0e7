"""
Duplicate Detector
Finds packages bundled at several versions and packages installed at conflicting versions
"""

import json
import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from .config import Config
from .models import (
    DuplicateDependency,
    InstalledPackage,
    Module,
    VersionConflict,
    VersionRequirement,
)

logger = logging.getLogger(__name__)

VERSION_PATTERN = r'\d+(?:\.\d+)*(?:[-+][0-9A-Za-z.+-]*)?'


def version_sort_key(version: str) -> Tuple:
    """Numeric-aware key: 4.17.21 > 4.9.0, and a release sorts above its prereleases"""
    release, _, prerelease = version.partition('-')
    numbers = tuple(int(part) if part.isdigit() else -1 for part in release.split('.'))
    return numbers, 0 if prerelease else 1


def sort_versions(versions: Iterable[str]) -> List[str]:
    """Newest first; versions with equal keys keep lexicographic order"""
    ordered = sorted(set(versions))
    ordered.sort(key=version_sort_key, reverse=True)
    return ordered


class DuplicateDetector:
    """Groups bundled modules by the package they were installed from

    The package identity and version are read from the module path, so this
    is a heuristic: a copy whose version cannot be read is reported as
    ``unknown`` and still counts as a distinct version.
    """

    def __init__(self, dependency_dir_marker: str = Config.DEPENDENCY_DIR_MARKER,
                 log: Optional[logging.Logger] = None):
        self.dependency_dir_marker = dependency_dir_marker
        self.logger = log or logger
        self._marker_re = re.compile(r'(?:^|/)' + re.escape(dependency_dir_marker) + r'/')

    def detect(self, modules: Sequence[Module]) -> List[DuplicateDependency]:
        groups: Dict[str, List[Tuple[Module, str]]] = {}

        for module in modules:
            location = module.path if module.path is not None else module.name
            extracted = self.extract_package(location)
            if extracted is None:
                continue
            identity, version = extracted
            groups.setdefault(identity, []).append((module, version))

        duplicates = []
        for identity, members in groups.items():
            versions = list(dict.fromkeys(version for _, version in members))
            if len(versions) < 2:
                continue
            duplicates.append(DuplicateDependency(
                package_identity=identity,
                versions=tuple(versions),
                locations=tuple(m.path if m.path is not None else m.name for m, _ in members),
                total_size=sum(m.size for m, _ in members),
            ))

        # Largest first
        duplicates.sort(key=lambda dup: dup.total_size, reverse=True)

        self.logger.info(f"Found {len(duplicates)} duplicated packages")
        return duplicates

    def extract_package(self, location: str) -> Optional[Tuple[str, str]]:
        """Return (package identity, version) for a path under the dependency directory"""
        location = location.replace('\\', '/')
        matches = list(self._marker_re.finditer(location))
        if not matches:
            return None

        rest = location[matches[-1].end():]
        parts = rest.split('/')
        if parts[0].startswith('@') and len(parts) > 1 and '@' not in parts[0][1:]:
            # Scoped package: @scope/name[@version]
            segment = f"{parts[0]}/{parts[1]}"
        else:
            segment = parts[0]

        if not segment:
            return None

        identity, version = self._split_version(segment)
        if version is None:
            # pnpm style layouts keep the version in an earlier path segment
            earlier = re.search(r"(?:^|/)" + re.escape(identity) + r'@(' + VERSION_PATTERN + r')', location)
            version = earlier.group(1) if earlier else Config.UNKNOWN_VERSION

        return identity, version

    @staticmethod
    def _split_version(segment: str) -> Tuple[str, Optional[str]]:
        at = segment.rfind('@')
        if at <= 0:
            return segment, None
        candidate = segment[at + 1:]
        if re.fullmatch(VERSION_PATTERN, candidate):
            return segment[:at], candidate
        return segment, None


class VersionConflictChecker:
    """Reports packages installed at more than one version"""

    def __init__(self, dependency_dir_marker: str = Config.DEPENDENCY_DIR_MARKER,
                 log: Optional[logging.Logger] = None):
        self.dependency_dir_marker = dependency_dir_marker
        self.logger = log or logger

    def check(self, installed: Iterable[InstalledPackage]) -> List[VersionConflict]:
        by_name: Dict[str, Dict[str, List[str]]] = {}

        for package in installed:
            dependents = by_name.setdefault(package.name, {}).setdefault(package.version, [])
            if package.required_by and package.required_by not in dependents:
                dependents.append(package.required_by)

        conflicts = []
        for name in sorted(by_name):
            versions = by_name[name]
            if len(versions) < 2:
                continue
            ordered = sort_versions(versions)
            conflicts.append(VersionConflict(
                package=name,
                versions=tuple(VersionRequirement(v, tuple(versions[v])) for v in ordered),
                # Newest installed version
                recommended=ordered[0],
            ))

        self.logger.info(f"Found {len(conflicts)} version conflicts")
        return conflicts

    def check_project(self, project_path: Union[str, Path]) -> List[VersionConflict]:
        """Scan the project's installed packages and check them"""
        return self.check(scan_installed_packages(project_path, self.dependency_dir_marker, self.logger))


def scan_installed_packages(project_path: Union[str, Path],
                            dependency_dir_marker: str = Config.DEPENDENCY_DIR_MARKER,
                            log: Optional[logging.Logger] = None) -> List[InstalledPackage]:
    """Read every package.json under the project's dependency directory, nested installs included"""
    log = log or logger
    project = Path(project_path)
    install_dir = project / dependency_dir_marker
    if not install_dir.is_dir():
        return []

    root_name = _read_manifest(project / 'package.json', log).get('name') or project.name
    found: List[InstalledPackage] = []
    _scan_install_dir(install_dir, root_name, dependency_dir_marker, found, set(), log)
    log.info(f"Scanned {len(found)} installed packages in {install_dir}")
    return found


def _scan_install_dir(install_dir: Path, required_by: str, marker: str,
                      found: List[InstalledPackage], seen: Set[Path], log: logging.Logger):
    for entry in _child_dirs(install_dir, log):
        if entry.name.startswith('@'):
            for scoped in _child_dirs(entry, log):
                _read_package(scoped, f"{entry.name}/{scoped.name}", required_by, marker, found, seen, log)
        else:
            _read_package(entry, entry.name, required_by, marker, found, seen, log)


def _read_package(package_dir: Path, dir_name: str, required_by: str, marker: str,
                  found: List[InstalledPackage], seen: Set[Path], log: logging.Logger):
    manifest_path = package_dir / 'package.json'
    if not manifest_path.is_file():
        return

    # Symlinked workspace packages can point back at each other
    real_dir = package_dir.resolve()
    if real_dir in seen:
        return
    seen.add(real_dir)

    manifest = _read_manifest(manifest_path, log)
    name = manifest.get('name') or dir_name
    version = manifest.get('version')
    if version:
        found.append(InstalledPackage(name=name, version=str(version),
                                      path=str(package_dir), required_by=required_by))

    nested = package_dir / marker
    if nested.is_dir():
        _scan_install_dir(nested, name, marker, found, seen, log)


def _read_manifest(path: Path, log: logging.Logger) -> Dict:
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        log.warning(f"Skipping unreadable package manifest {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def _child_dirs(directory: Path, log: logging.Logger) -> List[Path]:
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        log.warning(f"Could not list {directory}: {e}")
        return []
    return [entry for entry in entries if entry.is_dir() and not entry.name.startswith('.')]
