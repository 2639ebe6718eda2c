"""Command-line interface for inspecting the classes a script defines."""
from __future__ import annotations

import argparse
import json
import runpy
import sys

from .analysis import (
    describe_class,
    export_graphviz,
    print_hierarchy,
    schema_digest,
    visualize_hierarchy,
    write_registry_document,
)
from ..log import configure_logging
from .errors import LassError
from .registry import Registry


def load_registry(script, registry_name=None):
    """Run *script* and return the :class:`Registry` it builds."""

    namespace = runpy.run_path(str(script), run_name="__lass_script__")
    if registry_name:
        registry = namespace.get(registry_name)
        if not isinstance(registry, Registry):
            raise ValueError(f"'{registry_name}' in {script} is not a Registry")
        return registry

    found = []
    for value in namespace.values():
        if isinstance(value, Registry) and all(value is not r for r in found):
            found.append(value)
    if not found:
        raise ValueError(f"No Registry instance found in {script}")
    if len(found) > 1:
        raise ValueError(
            f"Several registries found in {script}; choose one with --registry"
        )
    return found[0]


def parse_args(args):
    argp = argparse.ArgumentParser(description="Lass class registry inspector")

    argp.add_argument("script", help="Python script that defines Lass classes")
    argp.add_argument(
        "--registry",
        metavar="NAME",
        help="Global name of the Registry to inspect (default: the only one)",
    )
    argp.add_argument(
        "--list", action="store_true", help="Print every class and its own fields"
    )
    argp.add_argument(
        "--describe",
        metavar="CLASS",
        action="append",
        default=[],
        help="Print the merged schema of a class as JSON",
    )
    argp.add_argument(
        "--hash",
        metavar="CLASS",
        action="append",
        default=[],
        help="Print the SHA-256 digest of a class schema",
    )
    argp.add_argument("--json", metavar="OUTPUT", help="Write all schemas to a JSON file")
    argp.add_argument(
        "--viz", metavar="OUTPUT", help="Export a Graphviz class diagram to an SVG file"
    )
    argp.add_argument(
        "--visualize", action="store_true", help="Draw the inheritance graph"
    )
    argp.add_argument(
        "--log-level",
        metavar="LEVEL",
        help="Emit structured runtime logs to stderr at this level (e.g. DEBUG)",
    )

    return argp.parse_args(args)


def main(args):
    params = parse_args(args)
    if params.log_level:
        configure_logging(params.log_level)

    try:
        registry = load_registry(params.script, params.registry)
    except (OSError, ValueError, LassError) as exc:
        print(f"✗ {exc}")
        return 1

    reports = params.describe or params.hash or params.json or params.viz or params.visualize
    if params.list or not reports:
        print_hierarchy(registry)

    try:
        for name in params.describe:
            print(json.dumps(describe_class(registry.get(name)), indent=2))
        for name in params.hash:
            print(f"SHA256({name}) = {schema_digest(registry.get(name))}")
    except LassError as exc:
        print(f"✗ {exc}")
        return 1

    if params.json:
        write_registry_document(registry, params.json)
    if params.viz:
        export_graphviz(registry, params.viz)
    if params.visualize:
        visualize_hierarchy(registry)
    return 0


__all__ = ["load_registry", "main", "parse_args"]


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
