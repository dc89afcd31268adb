"""Symbol resolution through export tables.

Follows import bindings through re-exports (`export { x } from`,
`export * from`, `import { x } ...; export { x }`) to the files that
actually declare them.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple

from modgraph.core.models import (
    ExportKind,
    ImportKind,
    ImportSpecifier,
    Language,
    SourceFile,
    SymbolResolution,
)
from modgraph.tracing.hosts import (
    ModuleResolutionHost,
    SourceFileProvider,
    SymbolResolutionHost,
)
from modgraph.tracing.specifiers import get_import_specifiers

logger = logging.getLogger(__name__)


def get_import_bindings(source_file: SourceFile) -> Dict[str, Tuple[str, ImportSpecifier]]:
    """Map each local name bound by an import to (module specifier, specifier)."""
    bindings: Dict[str, Tuple[str, ImportSpecifier]] = {}
    for declaration in source_file.imports:
        for specifier in get_import_specifiers(declaration.clause):
            bindings[specifier.local_name] = (declaration.module_specifier, specifier)
    return bindings


class ExportResolver(SymbolResolutionHost):
    """Resolves import specifiers to their declaring files."""

    def __init__(self, source_files: SourceFileProvider, modules: ModuleResolutionHost):
        self._source_files = source_files
        self._modules = modules
        self._bindings: Dict[str, Dict[str, Tuple[str, ImportSpecifier]]] = {}

    def resolve_specifier_symbol(
        self,
        importer: str,
        module_specifier: str,
        specifier: ImportSpecifier,
    ) -> SymbolResolution:
        """Resolve one import specifier to its declaration files.

        Import bindings are always aliases. An unresolved module yields no
        declarations.
        """
        declarations = self._resolve_binding(importer, module_specifier, specifier, set())
        return SymbolResolution(is_alias=True, declaration_files=tuple(declarations))

    def _resolve_binding(
        self,
        importer: str,
        module_specifier: str,
        specifier: ImportSpecifier,
        seen: Set[Tuple[str, str]],
    ) -> List[str]:
        resolved = self._modules.resolve_module(module_specifier, importer)
        if resolved is None:
            return []
        target = resolved.resolved_file_name

        if specifier.kind is ImportKind.NAMESPACE:
            return [target]
        elif specifier.kind is ImportKind.DEFAULT:
            return self._resolve_export(target, "default", seen)
        elif specifier.kind is ImportKind.NAME:
            return self._resolve_export(target, specifier.name, seen)
        raise ValueError(f"Unknown import kind: {specifier.kind}")

    def _resolve_export(self, path: str, name: str, seen: Set[Tuple[str, str]]) -> List[str]:
        """Find the declaration files of export `name` of the module at `path`."""
        key = (path, name)
        if key in seen:
            logger.debug(f"Re-export cycle at '{name}' in {path}")
            return []
        seen.add(key)

        source_file = self._source_files.get_source_file(path)
        if not source_file.parsed or source_file.has_export_assignment:
            return [path]
        if source_file.language is Language.JAVASCRIPT and not source_file.exports:
            # CommonJS: exports are assigned at runtime
            return [path]

        export = source_file.find_export(name)
        if export is not None:
            if export.kind is ExportKind.LOCAL:
                return self._resolve_local(source_file, export.local_name, seen)

            module = self._modules.resolve_module(export.module_specifier, path)
            if module is None:
                return []
            if export.kind is ExportKind.NAMESPACE:
                return [module.resolved_file_name]
            return self._resolve_export(module.resolved_file_name, export.import_name, seen)

        if name != "default":
            for star_specifier in source_file.star_exports:
                module = self._modules.resolve_module(star_specifier, path)
                if module is None:
                    continue
                found = self._resolve_export(module.resolved_file_name, name, seen)
                if found:
                    return found

        return []

    def _resolve_local(
        self,
        source_file: SourceFile,
        local_name: Optional[str],
        seen: Set[Tuple[str, str]],
    ) -> List[str]:
        """Resolve a locally exported name, following it if it was imported."""
        binding = self._get_bindings(source_file).get(local_name) if local_name else None
        if binding is None:
            return [source_file.file_name]
        module_specifier, specifier = binding
        return self._resolve_binding(source_file.file_name, module_specifier, specifier, seen)

    def _get_bindings(self, source_file: SourceFile) -> Dict[str, Tuple[str, ImportSpecifier]]:
        bindings = self._bindings.get(source_file.file_name)
        if bindings is None:
            bindings = get_import_bindings(source_file)
            self._bindings[source_file.file_name] = bindings
        return bindings
