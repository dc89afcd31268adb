"""Core data models for modgraph.

This module provides the syntax records produced by the parsers and the
graph structures produced by the module graph builder.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Tuple, Union


class Language(Enum):
    """Languages the import front end understands."""
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    TSX = "tsx"
    JSON = "json"
    UNKNOWN = "unknown"

    @classmethod
    def from_extension(cls, ext: str) -> "Language":
        """Get language from file extension.

        Args:
            ext: File extension (with or without leading dot)

        Returns:
            Language enum value
        """
        ext = ext.lower().lstrip(".")
        mapping = {
            "js": cls.JAVASCRIPT,
            "mjs": cls.JAVASCRIPT,
            "cjs": cls.JAVASCRIPT,
            "jsx": cls.JAVASCRIPT,
            "ts": cls.TYPESCRIPT,
            "mts": cls.TYPESCRIPT,
            "cts": cls.TYPESCRIPT,
            "tsx": cls.TSX,
            "json": cls.JSON,
        }
        return mapping.get(ext, cls.UNKNOWN)


class ImportKind(Enum):
    """How a single binding is brought in by an import clause."""
    DEFAULT = "default"
    NAME = "name"
    NAMESPACE = "namespace"


class ExportKind(Enum):
    """Shapes an export declaration can take."""
    LOCAL = "local"            # export const x / export { x } / export default x
    REEXPORT = "reexport"      # export { x as y } from './m'
    NAMESPACE = "namespace"    # export * as ns from './m'
    STAR = "star"              # export * from './m'
    ASSIGNMENT = "assignment"  # export = x


@dataclass(frozen=True)
class ImportElement:
    """One entry of a `{ ... }` named import list."""
    name: str  # local binding
    property_name: Optional[str] = None  # exported name, when renamed with `as`


@dataclass(frozen=True)
class NamedImports:
    elements: Tuple[ImportElement, ...] = ()


@dataclass(frozen=True)
class NamespaceImport:
    name: str


@dataclass(frozen=True)
class ImportClause:
    """The binding part of an import declaration.

    `named_bindings` holds either a NamedImports or a NamespaceImport, so the
    two forms can never appear together.
    """
    name: Optional[str] = None
    named_bindings: Optional[Union[NamedImports, NamespaceImport]] = None


@dataclass(frozen=True)
class ImportDeclaration:
    """A module reference found in a source file.

    Side-effect imports, re-exports, dynamic imports and require calls carry
    no clause.
    """
    module_specifier: str
    clause: Optional[ImportClause] = None
    line_number: int = 0
    is_type_only: bool = False


@dataclass(frozen=True)
class ExportDeclaration:
    """A single exported name (or star/assignment export) of a source file."""
    kind: ExportKind
    export_name: Optional[str] = None
    local_name: Optional[str] = None
    module_specifier: Optional[str] = None
    import_name: Optional[str] = None
    line_number: int = 0


@dataclass(frozen=True)
class SourceFile:
    """A parsed source file, identified by its absolute path."""
    file_name: str
    language: Language = field(default=Language.UNKNOWN, compare=False)
    imports: Tuple[ImportDeclaration, ...] = field(default=(), compare=False)
    exports: Tuple[ExportDeclaration, ...] = field(default=(), compare=False)
    parsed: bool = field(default=False, compare=False)

    def find_export(self, name: str) -> Optional[ExportDeclaration]:
        """Find the explicit export declaring `name`, if any."""
        for export in self.exports:
            if export.export_name == name and export.kind in (
                ExportKind.LOCAL, ExportKind.REEXPORT, ExportKind.NAMESPACE,
            ):
                return export
        return None

    @property
    def star_exports(self) -> List[str]:
        """Module specifiers re-exported with `export * from`."""
        return [e.module_specifier for e in self.exports if e.kind is ExportKind.STAR]

    @property
    def has_export_assignment(self) -> bool:
        return any(e.kind is ExportKind.ASSIGNMENT for e in self.exports)


@dataclass(frozen=True)
class ImportSpecifier:
    """A normalized binding extracted from an import clause.

    For NAME specifiers `name` is the exported name and `alias` the local
    binding when renamed. For DEFAULT and NAMESPACE, `name` is the local
    binding.
    """
    kind: ImportKind
    name: str
    alias: Optional[str] = None

    @property
    def local_name(self) -> str:
        return self.alias or self.name


@dataclass(frozen=True)
class ResolvedModule:
    """Result of resolving a module specifier to a file."""
    resolved_file_name: str
    is_external_library: bool = False
    extension: str = ""


@dataclass(frozen=True)
class SymbolResolution:
    """Declarations an import binding ultimately refers to."""
    is_alias: bool
    declaration_files: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ResolvedImport:
    """An import specifier together with its symbol resolution."""
    kind: ImportKind
    name: str  # local binding
    export_name: Optional[str] = None
    is_alias: bool = False
    declarations: Optional[Tuple[str, ...]] = None

    @property
    def display_name(self) -> str:
        """Name shown for this binding: the export name, `default` or `*`."""
        if self.kind is ImportKind.NAME:
            return self.export_name or self.name
        elif self.kind is ImportKind.DEFAULT:
            return "default"
        elif self.kind is ImportKind.NAMESPACE:
            return "*"
        raise ValueError(f"Unknown import kind: {self.kind}")

    @property
    def declaration_file(self) -> Optional[str]:
        """File of the first declaration, if any."""
        if self.declarations:
            return self.declarations[0]
        return None


@dataclass(frozen=True)
class ImportEdge:
    """One import declaration of a file, with everything resolved about it."""
    id: str
    import_specifiers: Tuple[ImportSpecifier, ...] = ()
    resolved_imports: Tuple[ResolvedImport, ...] = ()
    resolved_module: Optional[ResolvedModule] = None
    line_number: int = 0


@dataclass(frozen=True)
class ModuleGraphNode:
    """A visited file: its import edges and the files it depends on."""
    imports: Tuple[ImportEdge, ...] = ()
    dependencies: Tuple[SourceFile, ...] = ()
