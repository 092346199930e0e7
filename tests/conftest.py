"""Shared fixtures for the dependency graph tests."""

import json
from pathlib import Path

import pytest

from depgraph import DependencyGraphBuilder, Module


def chain(*ids):
    """Modules where each one depends on the next."""
    modules = []
    for index, module_id in enumerate(ids):
        deps = (ids[index + 1],) if index + 1 < len(ids) else ()
        modules.append(Module(id=module_id, name=module_id, size=100, dependencies=deps))
    return modules


def build(modules, dependencies=None):
    return DependencyGraphBuilder().build(modules, dependencies)


@pytest.fixture
def cyclic_modules():
    """A -> B -> C -> A"""
    return [
        Module(id="A", name="A", size=10, dependencies=("B",)),
        Module(id="B", name="B", size=20, dependencies=("C",)),
        Module(id="C", name="C", size=30, dependencies=("A",)),
    ]


@pytest.fixture
def cyclic_graph(cyclic_modules):
    return build(cyclic_modules)


@pytest.fixture
def diamond_graph():
    """app -> (left, right) -> shared"""
    return build([
        Module(id="app", name="app", size=1, dependencies=("left", "right")),
        Module(id="left", name="left", size=2, dependencies=("shared",)),
        Module(id="right", name="right", size=3, dependencies=("shared",)),
        Module(id="shared", name="shared", size=4),
    ])


@pytest.fixture
def write_package(tmp_path: Path):
    """Write a package.json under tmp_path and return its directory."""

    def _write(relative: str, name: str, version: str) -> Path:
        package_dir = tmp_path / relative
        package_dir.mkdir(parents=True, exist_ok=True)
        (package_dir / "package.json").write_text(json.dumps({"name": name, "version": version}))
        return package_dir

    return _write
