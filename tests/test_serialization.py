"""Tests for the input document, the structured result document and the text map."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from repo_mapper.analysis.analyzer import RepositoryAnalyzer
from repo_mapper.analysis.diff import diff_results
from repo_mapper.errors import UnknownComponentError
from repo_mapper.models import (
    AnalyzerConfig,
    ComponentKind,
    EdgeType,
    ReferenceFact,
    SymbolRecord,
    Visibility,
)
from repo_mapper.render import render_repository_map
from repo_mapper.serialization import (
    AnalysisInput,
    from_document,
    from_json,
    load_input,
    stale_fields,
    to_document,
    to_json,
)

FIXTURES = Path(__file__).parent / "fixtures"


def _sample_result():
    document = load_input(FIXTURES / "sample_repo.json")
    return RepositoryAnalyzer().analyze(document.to_records(), document.to_facts())


def _chain(count):
    ids = [f"c{i:02d}" for i in range(count)]
    symbols = [
        SymbolRecord(id=i, name=f"name_{i}", kind=ComponentKind.FUNCTION,
                     file_path="src/chain.py", start_line=n + 1, end_line=n + 1)
        for n, i in enumerate(ids)
    ]
    refs = [ReferenceFact(a, b) for a, b in zip(ids, ids[1:])]
    return RepositoryAnalyzer().analyze(symbols, refs)


# ── Input document ────────────────────────────────────────────

class TestInputDocument:
    def test_load_fixture(self):
        document = load_input(FIXTURES / "sample_repo.json")
        assert len(document.symbols) == 11
        assert len(document.references) == 11

    def test_kind_and_edge_aliases(self):
        document = AnalysisInput.model_validate({
            "symbols": [
                {"id": "a", "name": "A", "kind": "class", "file_path": "a.py"},
                {"id": "b", "name": "B", "kind": "Trait", "file_path": "b.py",
                 "visibility": "Internal"},
            ],
            "references": [{"from_id": "a", "to_id": "b", "edge_type": "ModuleImport"}],
        })
        records = document.to_records()
        assert records[0].kind == ComponentKind.TYPE
        assert records[1].kind == ComponentKind.INTERFACE
        assert records[1].visibility == Visibility.INTERNAL
        assert document.to_facts()[0].edge_type == EdgeType.IMPORT

    def test_id_derived_from_path_and_qualified_name(self):
        document = AnalysisInput.model_validate({
            "symbols": [{"name": "run", "qualified_name": "App.run",
                         "file_path": "src/app.py", "kind": "method"}],
        })
        assert document.to_records()[0].id == "src/app.py::App.run"

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            AnalysisInput.model_validate({
                "symbols": [{"id": "a", "name": "a", "kind": "banana", "file_path": "a.py"}],
            })

    def test_null_complexity_is_zero(self):
        document = AnalysisInput.model_validate({
            "symbols": [{"id": "a", "name": "a", "file_path": "a.py", "complexity_score": None}],
        })
        assert document.to_records()[0].complexity_score == 0


# ── Structured result document ────────────────────────────────

class TestResultDocument:
    def test_stable_field_names(self):
        data = json.loads(to_json(_sample_result()))
        for key in (
            "components", "edges", "cycles", "entry_points",
            "most_connected_components", "processing_order",
        ):
            assert key in data
        assert data["total_components"] == 10
        assert len(data["unresolved_references"]) == 1
        assert len(data["rejected_symbols"]) == 1

    def test_sample_analysis(self):
        result = _sample_result()
        assert result.cycles == [["src/core/events.py::EventBus", "src/core/events.py::Handler"]]
        assert list(result.insights.entry_points) == [
            "src/app/main.py::App",
            "src/core/repo.py::Repository",
            "src/util/log.py::get_logger",
        ]
        assert result.insights.most_connected_components[0] == "src/app/main.py::App.run"
        assert result.unresolved_references[0].missing_id == "src/app/config.py::load_config"
        assert result.rejected_symbols[0].component_id == "src/util/broken.py::broken"

    def test_round_trip(self):
        result = _sample_result()
        restored = from_json(to_json(result))
        assert restored == result
        assert restored.insights == result.insights
        assert restored.topological_order == result.topological_order

    def test_round_trip_from_dict(self):
        result = _sample_result()
        restored = from_document(to_document(result).model_dump(mode="json"))
        assert restored == result

    def test_derived_fields_recomputed_from_graph(self, caplog):
        result = _sample_result()
        data = to_document(result).model_dump(mode="json")
        data["entry_points"] = []
        data["processing_order"] = []
        data["cycles"] = []
        data["cycles_present"] = False
        data["most_connected_components"] = ["not-a-component"]

        with caplog.at_level("WARNING", logger="repo_mapper.serialization"):
            restored = from_document(data)

        assert restored == result
        assert len(restored.topological_order) == len(restored.graph.store)
        assert restored.cycles == [["src/core/events.py::EventBus", "src/core/events.py::Handler"]]
        assert restored.cycles_present is True
        assert "entry_points" in caplog.text
        assert "processing_order" in caplog.text
        # The restored result renders without touching unknown ids
        assert "Key Components:" in render_repository_map(restored)

    def test_fresh_document_has_no_stale_fields(self):
        document = to_document(_sample_result())
        assert stale_fields(document, to_document(from_document(document))) == []

    def test_ranking_limits_round_trip(self):
        document = load_input(FIXTURES / "sample_repo.json")
        config = AnalyzerConfig(most_connected_limit=2, hotspot_limit=1, complex_files_limit=3)
        result = RepositoryAnalyzer(config).analyze(document.to_records(), document.to_facts())
        assert len(result.insights.most_connected_components) == 2

        restored = from_json(to_json(result))
        assert restored.insights == result.insights
        assert restored.config.most_connected_limit == 2

    def test_limits_must_be_positive(self):
        data = to_document(_sample_result()).model_dump(mode="json")
        data["limits"]["most_connected"] = 0
        with pytest.raises(ValidationError):
            from_document(data)

    def test_edge_to_unknown_component_rejected(self):
        data = to_document(_sample_result()).model_dump(mode="json")
        data["edges"].append({"from_id": "ghost", "to_id": "src/app/main.py::App", "edge_type": "call"})
        with pytest.raises(UnknownComponentError):
            from_document(data)

    def test_serialization_is_deterministic(self):
        assert to_json(_sample_result()) == to_json(_sample_result())

    def test_enums_serialized_by_value(self):
        data = json.loads(to_json(_sample_result()))
        kinds = {c["kind"] for c in data["components"]}
        assert kinds <= {"function", "method", "type", "module", "interface"}
        assert {e["edge_type"] for e in data["edges"]} >= {"call", "inheritance", "import"}


# ── Text map ──────────────────────────────────────────────────

class TestRenderMap:
    def test_processing_order_truncated(self):
        text = render_repository_map(_chain(15), show_order=True)
        lines = text.split("\n")
        assert "  1. name_c14" in lines
        assert "  10. name_c05" in lines
        assert "  11. name_c04" not in lines
        assert "  ... and 5 more" in lines

    def test_no_suffix_at_ten(self):
        text = render_repository_map(_chain(10), show_order=True)
        assert "more" not in text

    def test_structure_grouped_by_file(self):
        text = render_repository_map(_sample_result(), repository="sample")
        assert text.startswith("Repository Map\n==============\n")
        assert "Path: sample" in text
        assert "10 components, 3 entry points, 1 cycles" in text
        assert "  src/core/repo.py" in text
        assert "    pub iface Repository (0→2)" in text
        assert "    type SqlRepository (1→1)" in text

    def test_focus(self):
        text = render_repository_map(_sample_result(), focus="Repository")
        assert "Focus: Repository" in text
        assert "  ← get_user (src/core/service.py)" in text

    def test_focus_not_found(self):
        text = render_repository_map(_sample_result(), focus="nope")
        assert "Component 'nope' not found" in text

    def test_edges_listing(self):
        text = render_repository_map(_chain(13), show_dependencies=True)
        assert "  name_c00 → name_c01 [call]" in text
        assert "  ... and 2 more" in text.split("\n")


# ── Diff ──────────────────────────────────────────────────────

class TestDiff:
    def test_diff_between_runs(self):
        old = _sample_result()
        document = load_input(FIXTURES / "sample_repo.json")
        refs = [
            f for f in document.to_facts()
            if f.from_id != "src/core/events.py::Handler"
        ]
        records = document.to_records() + [
            SymbolRecord(id="src/util/cache.py::Cache", name="Cache",
                         kind=ComponentKind.TYPE, file_path="src/util/cache.py",
                         start_line=1, end_line=20),
        ]
        new = RepositoryAnalyzer().analyze(records, refs)

        diff = diff_results(old, new)
        assert diff["added"] == ["src/util/cache.py::Cache"]
        assert diff["removed"] == []
        assert diff["resolved_cycles"] == [
            ["src/core/events.py::EventBus", "src/core/events.py::Handler"],
        ]
        assert diff["new_cycles"] == []
        changed = {m["id"] for m in diff["modified"]}
        assert changed == {"src/core/events.py::EventBus", "src/core/events.py::Handler"}

    def test_diff_identical(self):
        diff = diff_results(_sample_result(), _sample_result())
        assert diff["modified"] == []
        assert diff["unchanged"] == 10
