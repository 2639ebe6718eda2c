"""Tests for registry introspection and rendering."""

from __future__ import annotations

import json
import types
from pathlib import Path

import pytest

from lass import (
    HARD_ABSENT,
    Registry,
    UsageError,
    describe_class,
    describe_registry,
    format_class,
    hierarchy_graph,
    linearize,
    print_hierarchy,
    schema_digest,
    write_registry_document,
)
from lass.runtime import analysis


def _speak(self):
    return "..."


@pytest.fixture
def registry():
    registry = Registry()
    registry.define_class(
        "Animal",
        body={
            "name": "",
            "protected__legs": 4,
            "private__secret": 1,
            "const__kingdom": "animalia",
            "speak": _speak,
        },
    )
    registry.define_class("Cat", ["Animal"], {"purr": True, "mood": HARD_ABSENT})
    registry.define_external_adapter("Socket", object)
    return registry


def test_describe_class_lists_merged_fields(registry):
    doc = describe_class(registry.get("Cat"))

    assert doc["name"] == "Cat"
    assert doc["adapter"] is False
    assert doc["parents"] == ["Animal"]
    assert doc["composition"] == ["Animal"]
    fields = {field["name"]: field for field in doc["fields"]}
    assert set(fields) == {"Animal", "name", "legs", "secret", "kingdom", "speak", "purr", "mood"}
    assert fields["secret"]["visibility"] == "private"
    assert fields["secret"]["owner"] == "Animal"
    assert fields["legs"]["owner"] is None
    assert fields["speak"]["default"] == "<method Animal.speak>"
    assert fields["Animal"]["default"] == "<super Animal>"
    assert fields["mood"]["default"] == "HardAbsent"
    assert fields["purr"]["origin"] == "Cat"
    json.dumps(doc)


def test_describe_adapter(registry):
    doc = describe_class(registry.get("Socket"))

    assert doc == {
        "name": "Socket",
        "adapter": True,
        "parents": [],
        "composition": [],
        "fields": [],
    }


def test_describe_registry_includes_config(registry):
    doc = describe_registry(registry)

    assert doc["config"] == {"undefined": "strict", "access": "checked"}
    assert [entry["name"] for entry in doc["classes"]] == ["Animal", "Cat", "Socket"]


def test_schema_digest_is_stable_and_sensitive(registry):
    digest = schema_digest(registry.get("Animal"))

    assert len(digest) == 64
    assert digest == schema_digest(registry.get("Animal"))
    assert digest != schema_digest(registry.get("Cat"))

    other = Registry()
    other.define_class(
        "Animal",
        body={
            "name": "",
            "protected__legs": 4,
            "private__secret": 1,
            "const__kingdom": "animalia",
            "speak": _speak,
        },
    )
    assert schema_digest(other.get("Animal")) == digest


def test_write_registry_document(registry, tmp_path, capsys):
    target = tmp_path / "schema.json"

    doc = write_registry_document(registry, target)

    assert json.loads(target.read_text(encoding="utf-8")) == doc
    assert "Class schema exported" in capsys.readouterr().out


def test_linearize_follows_merge_priority():
    registry = Registry()
    registry.define_class("A")
    registry.define_class("B", ["A"])
    registry.define_class("C", ["A"])
    registry.define_class("D", ["B", "C"])

    assert linearize(registry, "D") == ["D", "B", "A", "C"]
    with pytest.raises(UsageError):
        linearize(registry, "Ghost")


def test_hierarchy_graph_edges_point_to_children(registry):
    registry.define_class("Lion", ["Cat"])
    graph = hierarchy_graph(registry)

    assert set(graph.nodes) == {"Animal", "Cat", "Socket", "Lion"}
    assert graph.has_edge("Animal", "Cat")
    assert graph.has_edge("Cat", "Lion")
    assert graph.edges["Animal", "Cat"]["priority"] == 0
    assert graph.nodes["Socket"]["adapter"] is True


def test_format_class_shows_own_fields(registry):
    assert format_class(registry.get("Animal")) == [
        "Animal",
        "  + kingdom = 'animalia' [const]",
        "  # legs = 4",
        "  + name = ''",
        "  - secret = 1",
        "  + speak = <method Animal.speak> [method]",
    ]
    assert format_class(registry.get("Cat")) == [
        "Cat : Animal",
        "  + mood = HardAbsent",
        "  + purr = True",
    ]
    assert format_class(registry.get("Socket")) == ["Socket [adapter]"]


def test_print_hierarchy_lists_parents_first(registry, capsys):
    print_hierarchy(registry)
    lines = capsys.readouterr().out.splitlines()

    headers = [line for line in lines if not line.startswith("  ")]
    assert headers == ["Animal", "Cat : Animal", "Socket [adapter]"]


def test_export_graphviz_with_stub(registry, monkeypatch, tmp_path, capsys):
    class FakeNode:
        def __init__(self, name, **kwargs):
            self.name = name
            self.attrs = kwargs

    class FakeEdge:
        def __init__(self, src, dst, **kwargs):
            self.src = src
            self.dst = dst

    class FakeDot:
        def __init__(self, *args, **kwargs):
            self.nodes = []
            self.edges = []

        def add_node(self, node):
            self.nodes.append(node)

        def add_edge(self, edge):
            self.edges.append(edge)

        def write_svg(self, path):
            Path(path).write_text("<svg/>", encoding="utf-8")

    fake_pydot = types.SimpleNamespace(Dot=FakeDot, Node=FakeNode, Edge=FakeEdge)
    monkeypatch.setattr(analysis, "pydot", fake_pydot)

    output = tmp_path / "diagrams" / "classes.svg"
    analysis.export_graphviz(registry, output)

    assert output.read_text(encoding="utf-8") == "<svg/>"
    assert "Graphviz class diagram exported" in capsys.readouterr().out
