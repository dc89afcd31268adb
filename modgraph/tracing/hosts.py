"""Capabilities the module graph builder consumes.

Each capability is a narrow interface so the builder can run against the
tree-sitter backed implementations or against synthetic ones in tests.
"""

from abc import ABC, abstractmethod
from typing import Optional

from modgraph.core.models import (
    ImportSpecifier,
    ResolvedModule,
    SourceFile,
    SymbolResolution,
)


class ModuleResolutionHost(ABC):
    """Resolves module specifiers to files."""

    @abstractmethod
    def resolve_module(self, specifier: str, importer: str) -> Optional[ResolvedModule]:
        """Resolve a module specifier relative to the importing file.

        Args:
            specifier: Module specifier text, e.g. './b' or 'lodash'
            importer: Absolute path of the importing file

        Returns:
            ResolvedModule, or None when unresolved or a builtin
        """
        ...


class SymbolResolutionHost(ABC):
    """Resolves import bindings to the files declaring them."""

    @abstractmethod
    def resolve_specifier_symbol(
        self,
        importer: str,
        module_specifier: str,
        specifier: ImportSpecifier,
    ) -> SymbolResolution:
        """Resolve one import specifier, unwrapping re-export aliases.

        Args:
            importer: Absolute path of the importing file
            module_specifier: Module specifier of the import declaration
            specifier: The binding to resolve

        Returns:
            SymbolResolution with zero or more declaration files
        """
        ...


class SourceFileProvider(ABC):
    """Provides parsed source files by absolute path."""

    @abstractmethod
    def get_source_file(self, path: str) -> SourceFile:
        """Get the SourceFile for an absolute path."""
        ...
