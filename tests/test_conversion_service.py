import json

import pytest

from animgraph.ir.codec import decode
from animgraph.ir.model import ClipRef
from animgraph.ir.records import GraphDecodeError
from animgraph.runtime import InMemoryRuntimeGraph
from animgraph.services.conversion_service import (
    export_runtime,
    generate,
    import_document,
    import_into_runtime,
    save_transition_data,
)
from animgraph.tools.file_storage import FileAssetStore


class FakeResolver:
    def find(self, name, search_scope):
        return ClipRef(name=name)


def _document(*pairs, conditions=None):
    return json.dumps(
        {
            "transitions": [
                {
                    "startState": {"type": "Animation", "animationName": a},
                    "endState": {"type": "Animation", "animationName": b},
                    "conditions": conditions or [],
                }
                for a, b in pairs
            ]
        }
    )


def test_import_document_without_existing_graph():
    result = import_document(_document(("Idle", "Run")))
    assert result.valid
    assert (result.imported, result.existing) == (1, 0)
    assert len(result.graph) == 1


def test_import_document_merges_existing_after_imported():
    existing = decode(_document(("Idle", "Jump")))
    result = import_document(_document(("Idle", "Run"), ("Run", "Idle")), existing=existing)
    assert (result.imported, result.existing) == (2, 1)
    assert [t.to_state.name for t in result.graph.transitions] == ["Run", "Idle", "Jump"]


def test_validation_diagnostics_do_not_block_import():
    text = _document(("Idle", "Run"), conditions=[{"name": "", "type": "Bool"}])
    result = import_document(text)
    assert not result.valid
    assert result.diagnostics == ["Transition[0] Condition[0] is missing name."]
    assert len(result.graph) == 1


def test_import_document_propagates_decode_errors():
    with pytest.raises(GraphDecodeError):
        import_document("{ broken")


def test_import_into_runtime_reads_existing_transitions():
    runtime = InMemoryRuntimeGraph()
    generate(_document(("Idle", "Jump")), runtime, resolver=FakeResolver())
    result = import_into_runtime(_document(("Idle", "Run")), runtime)
    assert (result.imported, result.existing) == (1, 1)
    assert [t.to_state.name for t in result.graph.transitions] == ["Run", "Jump"]


def test_generate_materializes_document():
    runtime = InMemoryRuntimeGraph()
    result, report = generate(
        _document(("Idle", "Run"), conditions=[{"name": "Go", "type": "Trigger"}]),
        runtime,
        resolver=FakeResolver(),
    )
    assert result.valid
    assert report.ok
    assert report.states == ["Idle", "Run"]
    assert runtime.summary()["transitions"] == [
        {"from": "Idle", "to": "Run", "conditions": [{"parameter": "Go", "mode": "if", "threshold": 0.0}]}
    ]


def test_generate_then_regenerate_reuses_states():
    runtime = InMemoryRuntimeGraph()
    generate(_document(("Idle", "Run")), runtime, resolver=FakeResolver())
    _, report = generate(_document(("Run", "Idle")), runtime, resolver=FakeResolver())
    assert report.reused == ["Run", "Idle"]
    assert len(runtime.states) == 2


def test_export_runtime():
    runtime = InMemoryRuntimeGraph()
    generate(_document(("Idle", "Run")), runtime, resolver=FakeResolver())
    text = export_runtime(runtime)
    assert json.loads(text)["version"] == 1
    assert decode(text) == decode(_document(("Idle", "Run")))


def test_save_transition_data(tmp_path):
    store = FileAssetStore(str(tmp_path))
    graph = decode(_document(("Idle", "Run")))
    path = save_transition_data(graph, store, "graphs/locomotion.json")
    assert path == tmp_path / "graphs" / "locomotion.json"
    assert decode(store.read_text("graphs/locomotion.json")) == graph


class CountingResolver:
    def __init__(self):
        self.lookups = []

    def find(self, name, search_scope):
        self.lookups.append(name)
        return None


def test_generate_resolves_each_clip_once():
    resolver = CountingResolver()
    document = json.dumps(
        {
            "transitions": [
                {
                    "startState": {"type": "Animation", "animationName": "Idle"},
                    "endState": {
                        "type": "BlendTree",
                        "animationName": "Locomotion",
                        "blendTree": {
                            "parameterName": "Speed",
                            "blendType": "OneD",
                            "motions": [{"animationName": "Walk", "threshold": 0.0}],
                        },
                    },
                }
            ]
        }
    )
    _, report = generate(document, InMemoryRuntimeGraph(), resolver=resolver, search_scope="Assets")
    assert resolver.lookups == ["Idle", "Walk"]
    assert len(report.warnings) == 2
