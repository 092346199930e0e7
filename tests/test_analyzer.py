"""
Integration tests for the dependency analyzer
=============================================

End-to-end scenarios through the fan-out analyzer:
- A three module cycle
- Independent modules
- Duplicated installed packages
- A long acyclic chain
"""

import json
import logging

from conftest import chain
from depgraph import Config, DependencyAnalyzer, Module


class DepsConfig(Config):
    DEPENDENCY_DIR_MARKER = "deps"


class TestScenarios:
    """Tests for the reference scenarios."""

    def test_three_module_cycle(self, cyclic_modules):
        result = DependencyAnalyzer().analyze(cyclic_modules)

        assert len(result.cycles) == 1
        ring = list(result.cycles[0].path[:-1])
        assert ring[ring.index("A"):] + ring[:ring.index("A")] == ["A", "B", "C"]
        assert [set(c.members) for c in result.strongly_connected_components] == [{"A", "B", "C"}]
        assert result.topological_order is None
        assert result.is_dag is False

    def test_independent_modules(self):
        result = DependencyAnalyzer().analyze([Module(id="X", name="X"), Module(id="Y", name="Y")])

        assert result.cycles == []
        assert result.strongly_connected_components == []
        assert sorted(result.topological_order) == ["X", "Y"]
        assert [t.id for t in result.trees] == ["X", "Y"]

    def test_duplicate_installed_copies(self):
        modules = [
            Module(id="1", name="utils-lib", size=500_000, path="/p/deps/utils-lib@4.17.21/index.js"),
            Module(id="2", name="utils-lib", size=300_000, path="/p/deps/x/deps/utils-lib@3.10.1/index.js"),
        ]
        result = DependencyAnalyzer(config=DepsConfig).analyze(modules)

        assert len(result.duplicates) == 1
        assert result.duplicates[0].package_identity == "utils-lib"
        assert set(result.duplicates[0].versions) == {"4.17.21", "3.10.1"}
        assert result.duplicates[0].total_size == 800_000
        assert all(node.type == "package" for node in result.graph.nodes)

    def test_long_chain(self):
        ids = [f"A{i}" for i in range(1, 1001)]
        result = DependencyAnalyzer().analyze(chain(*ids))

        assert result.topological_order == ids
        assert result.cycles == []
        assert result.strongly_connected_components == []
        assert result.centrality["A1"] == 0
        assert all(result.centrality[node] == 1 for node in ids[1:])
        assert result.trees[0].max_depth() == Config.TREE_MAX_DEPTH


class TestDependencyAnalyzer:
    """Tests for the analyzer facade."""

    def test_empty_input(self):
        result = DependencyAnalyzer().analyze([])

        assert result.to_dict()["graph"] == {"nodes": [], "edges": []}
        assert result.cycles == []
        assert result.topological_order == []
        assert result.trees == []
        assert result.summary()["total_nodes"] == 0

    def test_version_conflicts_only_with_project_path(self, tmp_path, write_package):
        write_package("node_modules/debug", "debug", "4.3.4")
        write_package("node_modules/send/node_modules/debug", "debug", "2.6.9")
        write_package("node_modules/send", "send", "0.18.0")
        modules = [Module(id="a", name="a")]

        assert DependencyAnalyzer().analyze(modules).version_conflicts == []
        conflicts = DependencyAnalyzer().analyze(modules, project_path=tmp_path).version_conflicts
        assert [c.recommended for c in conflicts] == ["4.3.4"]

    def test_report_is_json_serializable(self, cyclic_modules):
        data = json.loads(json.dumps(DependencyAnalyzer().analyze(cyclic_modules).to_dict()))

        assert data["circular"][0]["severity"] == "warning"
        assert data["stronglyConnected"][0]["members"]
        assert data["topologicalOrder"] is None
        assert data["summary"]["scc_count"] == 1
        assert data["centrality"] == {"A": 1, "B": 1, "C": 1}

    def test_config_threshold_applies(self, cyclic_modules):
        class StrictConfig(Config):
            CYCLE_ERROR_THRESHOLD = 2

        result = DependencyAnalyzer(config=StrictConfig).analyze(cyclic_modules)

        assert result.cycles[0].severity == "error"
        assert result.summary()["error_cycles"] == 1

    def test_injected_logger_receives_diagnostics(self, cyclic_modules, caplog):
        log = logging.getLogger("tests.injected")

        with caplog.at_level(logging.INFO, logger="tests.injected"):
            DependencyAnalyzer(log=log).analyze(cyclic_modules)

        records = [r for r in caplog.records if r.name == "tests.injected"]
        assert any("Found 1 cycles" in r.getMessage() for r in records)

    def test_every_analyzer_shares_the_injected_logger(self, cyclic_modules, caplog):
        log = logging.getLogger("tests.shared")
        analyzer = DependencyAnalyzer(config=Config, log=log)

        with caplog.at_level(logging.DEBUG, logger="tests.shared"):
            result = analyzer.analyze(cyclic_modules)

        assert analyzer.centrality.logger is log
        assert analyzer.scc_finder.logger is log
        assert any("centrality" in r.getMessage() for r in caplog.records if r.name == "tests.shared")
        assert result.to_dict()["stronglyConnected"] == [
            scc.to_dict() for scc in result.strongly_connected_components
        ]

    def test_input_is_not_mutated(self, cyclic_modules):
        before = list(cyclic_modules)

        DependencyAnalyzer().analyze(cyclic_modules)

        assert cyclic_modules == before
