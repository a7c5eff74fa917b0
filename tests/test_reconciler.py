from animgraph.ir.model import Graph, State, Transition
from animgraph.reconciler import merge


def _graph(*pairs):
    return Graph(transitions=[Transition(State(name=a), State(name=b)) for a, b in pairs])


def test_imported_transitions_come_first():
    imported = _graph(("Idle", "Run"), ("Run", "Idle"))
    existing = _graph(("Idle", "Jump"))
    merged = merge(imported, existing)
    assert len(merged) == 3
    assert merged.transitions[:2] == imported.transitions
    assert merged.transitions[2] is existing.transitions[0]


def test_duplicates_are_kept():
    imported = _graph(("Idle", "Run"))
    existing = _graph(("Idle", "Run"))
    merged = merge(imported, existing)
    assert len(merged) == 2
    assert merged.transitions[0] == merged.transitions[1]


def test_inputs_are_not_modified():
    imported = _graph(("Idle", "Run"))
    existing = _graph(("Run", "Idle"))
    merged = merge(imported, existing)
    merged.transitions.append(Transition(State(name="A"), State(name="B")))
    assert len(imported) == 1
    assert len(existing) == 1


def test_merge_with_empty_graphs():
    imported = _graph(("Idle", "Run"))
    assert len(merge(imported, Graph())) == 1
    assert len(merge(Graph(), imported)) == 1
    assert len(merge(Graph(), Graph())) == 0
