"""
Tests for the dependency tree projection
========================================
"""

from conftest import build, chain
from depgraph import DependencyTreeBuilder, Module


def tree_ids(tree):
    return [tree.id] + [node_id for child in tree.children for node_id in tree_ids(child)]


class TestDependencyTreeBuilder:
    """Tests for rooted tree projection."""

    def test_one_tree_per_root(self):
        modules = [
            Module(id="app", name="app", dependencies=("lib",)),
            Module(id="cli", name="cli", dependencies=("lib",)),
            Module(id="lib", name="lib"),
        ]
        trees = DependencyTreeBuilder().build(build(modules))

        assert [t.id for t in trees] == ["app", "cli"]
        assert [t.children[0].id for t in trees] == ["lib", "lib"]

    def test_shared_descendant_duplicated_per_path(self, diamond_graph):
        tree = DependencyTreeBuilder().build(diamond_graph)[0]

        assert tree_ids(tree) == ["app", "left", "shared", "right", "shared"]
        assert tree.count() == 5
        left_shared = tree.children[0].children[0]
        right_shared = tree.children[1].children[0]
        assert left_shared is not right_shared
        assert left_shared.depth == right_shared.depth == 2

    def test_fully_cyclic_graph_falls_back_to_first_node(self, cyclic_graph):
        trees = DependencyTreeBuilder().build(cyclic_graph)

        assert len(trees) == 1
        assert tree_ids(trees[0]) == ["A", "B", "C"]

    def test_cycle_below_root_is_cut_at_ancestor(self):
        modules = [
            Module(id="root", name="root", dependencies=("x",)),
            Module(id="x", name="x", dependencies=("y",)),
            Module(id="y", name="y", dependencies=("x",)),
        ]
        tree = DependencyTreeBuilder().build(build(modules))[0]

        assert tree_ids(tree) == ["root", "x", "y"]

    def test_depth_is_bounded(self):
        ids = [f"m{i}" for i in range(50)]
        tree = DependencyTreeBuilder().build(build(chain(*ids)))[0]

        assert tree.max_depth() == 20
        assert tree.count() == 21

    def test_depth_bound_on_dense_cyclic_graph(self):
        ids = [f"n{i}" for i in range(6)]
        modules = [Module(id=i, name=i, dependencies=tuple(j for j in ids if j != i)) for i in ids]

        trees = DependencyTreeBuilder(max_depth=3).build(build(modules))

        assert trees[0].max_depth() <= 3

    def test_sizes_and_dict_shape(self):
        modules = [
            Module(id="1", name="a", size=10, dependencies=("b",)),
            Module(id="2", name="b", size=20),
        ]
        tree = DependencyTreeBuilder().build(build(modules))[0]

        assert tree.to_dict() == {
            "name": "a", "id": "1", "size": 10, "depth": 0,
            "children": [{"name": "b", "id": "2", "size": 20, "children": [], "depth": 1}],
        }

    def test_empty_graph(self):
        assert DependencyTreeBuilder().build(build([])) == []
