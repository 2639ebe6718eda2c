"""Introspection, hashing and visualization of a registry's classes."""
from __future__ import annotations

import hashlib
import json
from pathlib import Path

import networkx as nx
import pydot

from ..constants import ADAPTER_COLOR, CLASS_COLOR, PRIVATE, PROTECTED, PUBLIC
from .core import Absent, ExternalAdapter, describe_scope, scope_owner
from .instance import Method, Super

VISIBILITY_MARKERS = {PUBLIC: "+", PROTECTED: "#", PRIVATE: "-"}


def _printable(value):
    if isinstance(value, Absent):
        return value.kind
    if isinstance(value, Method):
        return f"<method {value.owner}.{value.name}>"
    if isinstance(value, Super):
        return f"<super {value._lass_definition.name}>"
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if callable(value):
        return f"<function {getattr(value, '__qualname__', type(value).__name__)}>"
    return repr(value)


def _render(value):
    if isinstance(value, str):
        return repr(value)
    return str(_printable(value))


def describe_field(field):
    return {
        "name": str(field.name),
        "visibility": describe_scope(field.visibility),
        "owner": scope_owner(field.visibility),
        "default": _printable(field.default),
        "constant": field.constant,
        "reference": field.reference,
        "instance": field.instance,
        "method": field.method,
        "origin": field.origin,
    }


def describe_class(definition):
    """Return a JSON-safe description of a class definition."""
    if isinstance(definition, ExternalAdapter):
        return {
            "name": definition.name,
            "adapter": True,
            "parents": [],
            "composition": [],
            "fields": [],
        }
    return {
        "name": definition.name,
        "adapter": False,
        "parents": list(definition.parents),
        "composition": sorted(definition.composition),
        "fields": [
            describe_field(field)
            for field in sorted(definition.fields.values(), key=lambda f: str(f.name))
        ],
    }


def describe_registry(registry):
    return {
        "config": registry.config.to_dict(),
        "classes": [describe_class(registry.get(name)) for name in sorted(registry)],
    }


def schema_digest(definition):
    """SHA-256 of the canonical description of a class."""
    data = json.dumps(
        describe_class(definition), sort_keys=True, separators=(",", ":")
    ).encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def write_registry_document(registry, filename):
    """Persist a registry description as JSON."""
    doc = describe_registry(registry)
    with open(filename, "w", encoding="utf-8") as f:
        json.dump(doc, f, indent=2)
    print(f"  ✓ Class schema exported → {filename}")
    return doc


def linearize(registry, name):
    """Return *name* and its ancestors, highest merge priority first."""

    order: list[str] = []

    def visit(current):
        if current in order:
            return
        order.append(current)
        for parent in registry.get(current).parents:
            visit(parent)

    visit(registry.get(name).name)
    return order


def hierarchy_graph(registry):
    """Build a ``networkx`` DiGraph with parent → child edges."""

    graph = nx.DiGraph()
    for name in registry:
        definition = registry.get(name)
        adapter = isinstance(definition, ExternalAdapter)
        graph.add_node(name, adapter=adapter, fields=len(definition.fields))
    for name in registry:
        for priority, parent in enumerate(registry.get(name).parents):
            graph.add_edge(parent, name, priority=priority)
    return graph


def _visibility_key(field):
    return PRIVATE if field.private else field.visibility


def format_class(definition):
    """Render a class as text lines: a header and one line per own field."""

    if isinstance(definition, ExternalAdapter):
        return [f"{definition.name} [adapter]"]
    header = definition.name
    if definition.parents:
        header += " : " + ", ".join(definition.parents)
    lines = [header]
    for field in sorted(definition.fields.values(), key=lambda f: str(f.name)):
        if field.origin != definition.name:
            continue
        marker = VISIBILITY_MARKERS[_visibility_key(field)]
        flags = [
            flag
            for flag, enabled in (
                ("const", field.constant and not field.method),
                ("reference", field.reference),
                ("instance", field.instance),
                ("method", field.method),
            )
            if enabled
        ]
        suffix = f" [{', '.join(flags)}]" if flags else ""
        lines.append(f"  {marker} {field.name} = {_render(field.default)}{suffix}")
    return lines


def print_hierarchy(registry):
    for name in nx.lexicographical_topological_sort(hierarchy_graph(registry)):
        for line in format_class(registry.get(name)):
            print(line)


def export_graphviz(registry, output_path):  # pragma: no cover
    """Export a UML-like class diagram as SVG."""

    graph = pydot.Dot(
        "lass_classes",
        graph_type="digraph",
        rankdir="BT",
        fontname="Helvetica",
    )
    node_ids = {}
    for index, name in enumerate(sorted(registry)):
        definition = registry.get(name)
        node_ids[name] = f"class_{index}"
        if isinstance(definition, ExternalAdapter):
            label = f"{name}\\n«adapter»"
            color = ADAPTER_COLOR
        else:
            rows = format_class(definition)[1:]
            label = name + "\\n" + "".join(f"{row.strip()}\\l" for row in rows)
            color = CLASS_COLOR
        graph.add_node(
            pydot.Node(
                node_ids[name],
                label=label,
                shape="box",
                style="filled",
                fillcolor=color,
                color="#34495e",
                fontname="Helvetica",
            )
        )

    for name in registry:
        for priority, parent in enumerate(registry.get(name).parents):
            graph.add_edge(
                pydot.Edge(
                    node_ids[name],
                    node_ids[parent],
                    arrowhead="empty",
                    label=str(priority + 1),
                    color="#7f8c8d",
                )
            )

    output_path = Path(output_path)
    if output_path.parent and not output_path.parent.exists():
        output_path.parent.mkdir(parents=True, exist_ok=True)

    graph.write_svg(str(output_path))
    print(f"  ✓ Graphviz class diagram exported → {output_path}")


def visualize_hierarchy(registry, title="Lass classes"):  # pragma: no cover
    """Draw the inheritance DAG with matplotlib."""

    import matplotlib.pyplot as plt

    graph = hierarchy_graph(registry)
    positions = nx.spring_layout(graph, seed=42)
    colors = [
        ADAPTER_COLOR if graph.nodes[node]["adapter"] else CLASS_COLOR
        for node in graph.nodes
    ]
    plt.figure()
    nx.draw(
        graph,
        positions,
        with_labels=True,
        node_color=colors,
        edgecolors="black",
        font_size=8,
        arrows=True,
    )
    plt.title(title)
    plt.tight_layout()
    plt.show()


__all__ = [
    "describe_class",
    "describe_field",
    "describe_registry",
    "export_graphviz",
    "format_class",
    "hierarchy_graph",
    "linearize",
    "print_hierarchy",
    "schema_digest",
    "visualize_hierarchy",
    "write_registry_document",
]
