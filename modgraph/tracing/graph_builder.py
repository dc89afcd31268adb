"""Module graph construction.

Walks the import declarations of the entry files and everything they reach,
recording per file which modules it imports and which files it depends on.
A dependency is fine-grained when the imported bindings can be traced to
their declarations, and whole-module otherwise (namespace imports,
side-effect imports, re-exports, dynamic imports).
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set

from modgraph.core.models import (
    ImportDeclaration,
    ImportEdge,
    ImportKind,
    ImportSpecifier,
    ModuleGraphNode,
    ResolvedImport,
    SourceFile,
)
from modgraph.tracing.hosts import (
    ModuleResolutionHost,
    SourceFileProvider,
    SymbolResolutionHost,
)
from modgraph.tracing.module_graph import ModuleGraph
from modgraph.tracing.project import Project
from modgraph.tracing.root_resolver import resolve_root_directory
from modgraph.tracing.specifiers import can_tree_shake, get_import_specifiers

logger = logging.getLogger(__name__)


@dataclass
class _NodeState:
    """A node under construction."""
    imports: List[ImportEdge] = field(default_factory=list)
    dependencies: Dict[SourceFile, None] = field(default_factory=dict)

    def add_dependency(self, owner: SourceFile, dependency: SourceFile):
        if dependency != owner:
            self.dependencies.setdefault(dependency, None)

    def freeze(self) -> ModuleGraphNode:
        return ModuleGraphNode(
            imports=tuple(self.imports),
            dependencies=tuple(self.dependencies),
        )


class ModuleGraphBuilder:
    """Builds a ModuleGraph from entry files with a worklist traversal.

    Each file is registered before its imports are processed, so a file
    reached again through a cycle is seen as already visited.
    """

    def __init__(
        self,
        root_dir: str,
        source_files: SourceFileProvider,
        modules: ModuleResolutionHost,
        symbols: SymbolResolutionHost,
    ):
        self.root_dir = root_dir
        self._source_files = source_files
        self._modules = modules
        self._symbols = symbols

    def build(self, entries: Iterable[str]) -> ModuleGraph:
        """Build the graph of every file reachable from the entries.

        Args:
            entries: Absolute entry file paths

        Returns:
            The completed ModuleGraph
        """
        states: Dict[SourceFile, _NodeState] = {}
        queue: deque = deque()
        queued: Set[SourceFile] = set()

        def enqueue(source_file: SourceFile):
            if source_file not in queued:
                queued.add(source_file)
                queue.append(source_file)

        for entry in entries:
            enqueue(self._source_files.get_source_file(entry))

        while queue:
            state = self._visit(queue.popleft(), states)
            for dependency in state.dependencies:
                enqueue(dependency)

        logger.info(f"Built module graph with {len(states)} files from {self.root_dir}")
        return ModuleGraph(
            self.root_dir,
            {source_file: state.freeze() for source_file, state in states.items()},
        )

    def _visit(self, source_file: SourceFile, states: Dict[SourceFile, _NodeState]) -> _NodeState:
        """Process one file's imports, unless it was already visited."""
        state = states.get(source_file)
        if state is not None:
            return state

        state = _NodeState()
        states[source_file] = state
        logger.debug(f"Visiting {source_file.file_name}")

        for declaration in source_file.imports:
            state.imports.append(self._process_import(source_file, declaration, state))

        return state

    def _process_import(
        self,
        source_file: SourceFile,
        declaration: ImportDeclaration,
        state: _NodeState,
    ) -> ImportEdge:
        importer = source_file.file_name
        resolved_module = self._modules.resolve_module(declaration.module_specifier, importer)
        specifiers = get_import_specifiers(declaration.clause)
        resolved_imports = [
            self._resolve_import(importer, declaration.module_specifier, specifier)
            for specifier in specifiers
        ]

        if resolved_module is not None:
            if not can_tree_shake(specifiers):
                state.add_dependency(
                    source_file,
                    self._source_files.get_source_file(resolved_module.resolved_file_name),
                )

            for resolved in resolved_imports:
                for declaration_file in resolved.declarations or ():
                    state.add_dependency(
                        source_file,
                        self._source_files.get_source_file(declaration_file),
                    )

        return ImportEdge(
            id=declaration.module_specifier,
            import_specifiers=tuple(specifiers),
            resolved_imports=tuple(resolved_imports),
            resolved_module=resolved_module,
            line_number=declaration.line_number,
        )

    def _resolve_import(
        self,
        importer: str,
        module_specifier: str,
        specifier: ImportSpecifier,
    ) -> ResolvedImport:
        symbol = self._symbols.resolve_specifier_symbol(importer, module_specifier, specifier)
        return ResolvedImport(
            kind=specifier.kind,
            name=specifier.local_name,
            export_name=specifier.name if specifier.kind is ImportKind.NAME else None,
            is_alias=symbol.is_alias,
            declarations=tuple(symbol.declaration_files) if symbol.is_alias else None,
        )


def create_module_graph(
    entries: Sequence[str],
    test: Optional[Callable[[str], bool]] = None,
    project: Optional[Project] = None,
) -> ModuleGraph:
    """Build the module graph for a set of entry files.

    Args:
        entries: Absolute entry file paths
        test: Root predicate, defaults to the configured root markers
        project: Resolution context; created for the inferred root when omitted

    Returns:
        The completed ModuleGraph

    Raises:
        InvalidEntryError: Entries are empty, relative, or share no root
    """
    root_dir = resolve_root_directory(entries, test)
    if project is None:
        project = Project(root_dir)
    logger.debug(f"Using project root {root_dir}")
    builder = ModuleGraphBuilder(
        root_dir,
        project.source_files,
        project.module_resolver,
        project.symbol_resolver,
    )
    return builder.build(entries)
