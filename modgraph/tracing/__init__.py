"""modgraph tracing - module resolution, symbol resolution and graph building.

This package provides tools for:
- Inferring the project root of a set of entry files
- Resolving module specifiers and re-exported symbols to files
- Building the module graph reachable from the entries
"""

from modgraph.tracing.root_resolver import find_common_directory, resolve_root_directory
from modgraph.tracing.specifiers import get_import_specifiers, can_tree_shake
from modgraph.tracing.import_resolver import ImportResolver
from modgraph.tracing.symbol_resolver import ExportResolver
from modgraph.tracing.source_files import SourceFileCache
from modgraph.tracing.project import Project
from modgraph.tracing.module_graph import ModuleGraph
from modgraph.tracing.graph_builder import ModuleGraphBuilder, create_module_graph

__all__ = [
    "find_common_directory",
    "resolve_root_directory",
    "get_import_specifiers",
    "can_tree_shake",
    "ImportResolver",
    "ExportResolver",
    "SourceFileCache",
    "Project",
    "ModuleGraph",
    "ModuleGraphBuilder",
    "create_module_graph",
]
