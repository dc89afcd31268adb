"""Command-line interface for modgraph.

Prints the module graph reachable from one or more entry files, with each
import colored by where it resolves: red when unresolved, magenta inside
node_modules, green inside the project root, yellow elsewhere.
"""

import glob
import logging
import os
import sys
from typing import List, Optional, Sequence

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from modgraph import __version__
from modgraph.config import get_log_level
from modgraph.errors import ControlledError
from modgraph.tracing.graph_builder import create_module_graph
from modgraph.tracing.module_graph import ModuleGraph


console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def setup_logging(verbose: bool = False):
    """Route log records to stderr through rich."""
    level = logging.DEBUG if verbose else get_log_level()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def expand_entries(patterns: Sequence[str]) -> List[str]:
    """Turn entry arguments into absolute file paths.

    Existing files are used as-is; anything else is expanded as a glob.
    """
    entries: List[str] = []
    for pattern in patterns:
        if os.path.isfile(pattern):
            entries.append(os.path.abspath(pattern))
            continue
        matches = sorted(glob.glob(pattern, recursive=True))
        entries.extend(os.path.abspath(m) for m in matches if os.path.isfile(m))
    return list(dict.fromkeys(entries))


def format_imported_path(graph: ModuleGraph, resolved_file_name: Optional[str], module_id: str) -> Text:
    """Format the `from <target>` part of an import line."""
    if not resolved_file_name:
        imported_path, style = module_id, "red"
    elif "node_modules" in resolved_file_name:
        imported_path, style = module_id, "magenta"
    elif graph.is_inside_root(resolved_file_name):
        imported_path, style = graph.relative_name(resolved_file_name), "green"
    else:
        imported_path, style = resolved_file_name, "yellow"
    return Text.assemble(("from", "italic bright_black"), " ", (imported_path, style))


def print_graph(graph: ModuleGraph):
    """Print every visited file and its imports."""
    console.print(graph.root_dir)

    for source_file, node in graph.nodes:
        if graph.is_inside_root(source_file.file_name):
            console.print(Text(graph.relative_name(source_file.file_name), style="cyan"))
        else:
            console.print(Text(source_file.file_name, style="yellow"))

        for edge in node.imports:
            if not edge.resolved_imports:
                resolved_file_name = edge.resolved_module.resolved_file_name if edge.resolved_module else None
                console.print(Text("  ") + format_imported_path(graph, resolved_file_name, edge.id))
                continue
            for resolved in edge.resolved_imports:
                console.print(Text.assemble(
                    "  ",
                    resolved.display_name,
                    " ",
                    format_imported_path(graph, resolved.declaration_file, edge.id),
                ))
        console.print()


@click.command()
@click.option("--verbose", is_flag=True, help="Log resolution details to stderr")
@click.option("--summary", is_flag=True, help="Print a summary after the graph")
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.argument("entries", nargs=-1)
def cli(verbose, summary, version, entries):
    """modgraph - show the module graph of a TypeScript/JavaScript project.

    ENTRIES are source files or glob patterns. The project root is the
    nearest directory above the entries holding tsconfig.json or .git.

    Examples:

        modgraph src/main.ts

        modgraph 'src/**/*.ts' --summary
    """
    if version:
        console.print(f"modgraph {__version__}")
        return

    setup_logging(verbose)

    try:
        graph = create_module_graph(expand_entries(entries))
    except ControlledError as e:
        err_console.print(Text.assemble(("ERR", "red"), " ", str(e)))
        sys.exit(1)

    print_graph(graph)

    if summary:
        console.print(graph.get_summary())


if __name__ == "__main__":
    cli()
