"""The resolution context shared by one module graph build."""

import os
from typing import Optional

from modgraph.parsers.registry import ParserRegistry
from modgraph.tracing.import_resolver import ImportResolver
from modgraph.tracing.source_files import SourceFileCache
from modgraph.tracing.symbol_resolver import ExportResolver
from modgraph.tracing.tsconfig import CompilerOptions, load_compiler_options


class Project:
    """Bundles the source files, module resolver and symbol resolver of a root.

    Each Project owns its caches, so independent builds never interfere.
    """

    def __init__(
        self,
        root_dir: str,
        compiler_options: Optional[CompilerOptions] = None,
        registry: Optional[ParserRegistry] = None,
    ):
        """Initialize the project.

        Args:
            root_dir: Project root directory
            compiler_options: Resolution settings, read from
                `<root_dir>/tsconfig.json` when omitted
            registry: Parser registry, the global one when omitted
        """
        self.root_dir = os.path.normpath(root_dir)
        if compiler_options is None:
            compiler_options = load_compiler_options(self.root_dir)
        self.compiler_options = compiler_options
        self.source_files = SourceFileCache(registry)
        self.module_resolver = ImportResolver(self.root_dir, compiler_options)
        self.symbol_resolver = ExportResolver(self.source_files, self.module_resolver)
