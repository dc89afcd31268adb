"""Tree-sitter based parser for JavaScript and TypeScript modules.

Extracts the module references (imports, re-exports, dynamic imports and
require calls) and the export table of a source file using the
tree-sitter-javascript and tree-sitter-typescript grammars.
"""

import logging
from typing import Optional, List, Dict, Any, Callable, Iterator

import tree_sitter
import tree_sitter_javascript
import tree_sitter_typescript

from modgraph.core.models import (
    Language,
    ImportDeclaration,
    ImportClause,
    ImportElement,
    NamedImports,
    NamespaceImport,
    ExportDeclaration,
    ExportKind,
)
from modgraph.parsers.base import BaseParser

logger = logging.getLogger(__name__)

# Grammar entry points for each language
_GRAMMARS: Dict[Language, Callable[[], Any]] = {
    Language.JAVASCRIPT: tree_sitter_javascript.language,
    Language.TYPESCRIPT: tree_sitter_typescript.language_typescript,
    Language.TSX: tree_sitter_typescript.language_tsx,
}

# Declarations that bind names through variable declarators
_VARIABLE_DECLARATIONS = ("lexical_declaration", "variable_declaration")

# Binding patterns with a default value; only the left side binds a name
_ASSIGNMENT_PATTERNS = ("assignment_pattern", "object_assignment_pattern")


def _get_tree_sitter_language(lang: Language) -> Optional[tree_sitter.Language]:
    """Get the tree-sitter language object for a language.

    Args:
        lang: The Language enum value

    Returns:
        tree-sitter Language object or None if the language has no grammar
    """
    grammar = _GRAMMARS.get(lang)
    if grammar is None:
        return None
    return tree_sitter.Language(grammar())


class TreeSitterParser(BaseParser):
    """Module-structure parser using tree-sitter.

    Supports JavaScript (including JSX), TypeScript and TSX.
    """

    def __init__(self, language: Language = Language.TYPESCRIPT):
        """Initialize the tree-sitter parser.

        Args:
            language: The language to parse
        """
        self._lang = language
        self._tree: Optional[tree_sitter.Tree] = None
        self._parser: Optional[tree_sitter.Parser] = None
        self._imports: List[ImportDeclaration] = []
        self._exports: List[ExportDeclaration] = []

    @property
    def language(self) -> Language:
        """Return the language this parser handles."""
        return self._lang

    @classmethod
    def supported_languages(cls) -> List[Language]:
        """Get list of languages with tree-sitter grammars."""
        return list(_GRAMMARS)

    def _init_parser(self):
        """Initialize the tree-sitter parser for the current language."""
        ts_language = _get_tree_sitter_language(self._lang)
        if ts_language is not None:
            self._parser = tree_sitter.Parser(ts_language)

    def parse(self, source: str, filepath: str = "") -> bool:
        """Parse source code using tree-sitter.

        Args:
            source: The source code to parse
            filepath: Optional file path for context

        Returns:
            True if parsing succeeded
        """
        self.reset()

        if self._parser is None:
            self._init_parser()

        if self._parser is None:
            return False

        try:
            self._tree = self._parser.parse(source.encode("utf-8"))
        except Exception as e:
            logger.warning(f"Failed to parse {filepath or '<source>'}: {e}")
            return False

        self._extract_imports_internal()
        self._extract_exports_internal()
        return True

    def reset(self):
        """Reset parser state."""
        self._tree = None
        self._imports = []
        self._exports = []

    def _get_node_text(self, node) -> str:
        """Get the text content of a tree-sitter node."""
        return node.text.decode("utf-8", errors="replace")

    def _get_string_value(self, node) -> str:
        """Get the contents of a string literal node, without quotes."""
        text = self._get_node_text(node)
        if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
            return text[1:-1]
        return text

    def _get_name_value(self, node) -> str:
        """Get an identifier or string-literal module export name."""
        if node.type == "string":
            return self._get_string_value(node)
        return self._get_node_text(node)

    def _find_source(self, node):
        """Find the module specifier string of an import/export node."""
        source = node.child_by_field_name("source")
        if source is not None:
            return source
        for child in node.named_children:
            if child.type == "string":
                return child
        return None

    def _walk(self, node) -> Iterator[Any]:
        """Pre-order walk over named nodes."""
        stack = [node]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.named_children))

    def _extract_imports_internal(self):
        """Extract module references from the parse tree."""
        if self._tree is None:
            return

        root = self._tree.root_node
        for node in root.named_children:
            if node.type == "import_statement":
                imp = self._parse_import_statement(node)
            elif node.type == "export_statement":
                imp = self._parse_export_source(node)
            else:
                continue
            if imp:
                self._imports.append(imp)

        # Dynamic imports and require calls follow the static declarations
        for node in self._walk(root):
            if node.type == "call_expression":
                imp = self._parse_call_expression(node)
                if imp:
                    self._imports.append(imp)

    def _parse_import_statement(self, node) -> Optional[ImportDeclaration]:
        """Parse `import ... from '...'`, `import '...'` and `import x = require('...')`."""
        clause_node = None
        source = node.child_by_field_name("source")
        is_type_only = False

        for child in node.children:
            if child.type == "import_clause":
                clause_node = child
            elif child.type == "import_require_clause":
                source = self._find_source(child)
            elif child.type in ("type", "typeof"):
                is_type_only = True

        if source is None:
            return None

        clause = self._parse_import_clause(clause_node) if clause_node is not None else None
        return ImportDeclaration(
            module_specifier=self._get_string_value(source),
            clause=clause,
            line_number=node.start_point[0] + 1,
            is_type_only=is_type_only,
        )

    def _parse_import_clause(self, node) -> ImportClause:
        """Parse the bindings of an import declaration."""
        default_name = None
        named_bindings = None

        for child in node.named_children:
            if child.type == "identifier":
                default_name = self._get_node_text(child)
            elif child.type == "named_imports":
                elements = []
                for spec in child.named_children:
                    if spec.type != "import_specifier":
                        continue
                    name_node = spec.child_by_field_name("name")
                    alias_node = spec.child_by_field_name("alias")
                    if name_node is None:
                        continue
                    name = self._get_name_value(name_node)
                    if alias_node is not None:
                        elements.append(ImportElement(
                            name=self._get_node_text(alias_node),
                            property_name=name,
                        ))
                    else:
                        elements.append(ImportElement(name=name))
                named_bindings = NamedImports(tuple(elements))
            elif child.type == "namespace_import":
                for name_node in child.named_children:
                    if name_node.type == "identifier":
                        named_bindings = NamespaceImport(self._get_node_text(name_node))
                        break

        return ImportClause(name=default_name, named_bindings=named_bindings)

    def _parse_export_source(self, node) -> Optional[ImportDeclaration]:
        """Parse the module reference of `export ... from '...'`."""
        source = node.child_by_field_name("source")
        if source is None:
            return None
        is_type_only = any(child.type == "type" for child in node.children)
        return ImportDeclaration(
            module_specifier=self._get_string_value(source),
            line_number=node.start_point[0] + 1,
            is_type_only=is_type_only,
        )

    def _parse_call_expression(self, node) -> Optional[ImportDeclaration]:
        """Parse `import('...')`, and `require('...')` in JavaScript files."""
        function = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        if function is None or arguments is None:
            return None

        is_require = (
            self._lang == Language.JAVASCRIPT
            and function.type == "identifier"
            and self._get_node_text(function) == "require"
        )
        if function.type != "import" and not is_require:
            return None

        args = arguments.named_children
        if not args or args[0].type != "string":
            return None

        return ImportDeclaration(
            module_specifier=self._get_string_value(args[0]),
            line_number=node.start_point[0] + 1,
        )

    def _extract_exports_internal(self):
        """Extract top-level export declarations from the parse tree."""
        if self._tree is None:
            return

        for node in self._tree.root_node.named_children:
            if node.type == "export_statement":
                self._exports.extend(self._parse_export_statement(node))

    def _parse_export_statement(self, node) -> List[ExportDeclaration]:
        """Parse one export statement into its exported names."""
        line = node.start_point[0] + 1
        tokens = {child.type for child in node.children if not child.is_named}
        source = node.child_by_field_name("source")
        module = self._get_string_value(source) if source is not None else None
        declaration = node.child_by_field_name("declaration")

        if "default" in tokens:
            local_name = None
            value = node.child_by_field_name("value")
            if declaration is not None:
                names = self._get_declared_names(declaration)
                local_name = names[0] if names else None
            elif value is not None and value.type == "identifier":
                local_name = self._get_node_text(value)
            return [ExportDeclaration(ExportKind.LOCAL, "default", local_name=local_name, line_number=line)]

        if "=" in tokens and "import" not in tokens:
            return [ExportDeclaration(ExportKind.ASSIGNMENT, line_number=line)]

        exports: List[ExportDeclaration] = []
        for child in node.named_children:
            if child.type == "export_clause":
                for spec in child.named_children:
                    if spec.type != "export_specifier":
                        continue
                    name_node = spec.child_by_field_name("name")
                    if name_node is None:
                        continue
                    name = self._get_name_value(name_node)
                    alias_node = spec.child_by_field_name("alias")
                    exported = self._get_name_value(alias_node) if alias_node is not None else name
                    if module is not None:
                        exports.append(ExportDeclaration(
                            ExportKind.REEXPORT, exported,
                            module_specifier=module, import_name=name, line_number=line,
                        ))
                    else:
                        exports.append(ExportDeclaration(
                            ExportKind.LOCAL, exported, local_name=name, line_number=line,
                        ))
            elif child.type == "namespace_export" and module is not None:
                for name_node in child.named_children:
                    exports.append(ExportDeclaration(
                        ExportKind.NAMESPACE, self._get_name_value(name_node),
                        module_specifier=module, line_number=line,
                    ))
                    break

        if "*" in tokens and module is not None:
            exports.append(ExportDeclaration(ExportKind.STAR, module_specifier=module, line_number=line))

        if declaration is not None:
            for name in self._get_declared_names(declaration):
                exports.append(ExportDeclaration(ExportKind.LOCAL, name, local_name=name, line_number=line))

        return exports

    def _get_declared_names(self, node) -> List[str]:
        """Names bound by a declaration node."""
        if node.type in _VARIABLE_DECLARATIONS:
            names = []
            for declarator in node.named_children:
                if declarator.type == "variable_declarator":
                    pattern = declarator.child_by_field_name("name")
                    if pattern is not None:
                        names.extend(self._get_pattern_names(pattern))
            return names

        if node.type == "ambient_declaration":
            names = []
            for child in node.named_children:
                names.extend(self._get_declared_names(child))
            return names

        name_node = node.child_by_field_name("name")
        if name_node is None:
            return []
        if name_node.type == "nested_identifier":
            # namespace A.B.C exports A
            return [self._get_node_text(name_node).split(".")[0]]
        return [self._get_name_value(name_node)]

    def _get_pattern_names(self, node) -> List[str]:
        """Identifiers bound by a (possibly destructuring) binding pattern."""
        if node.type in ("identifier", "shorthand_property_identifier_pattern"):
            return [self._get_node_text(node)]
        if node.type in _ASSIGNMENT_PATTERNS:
            left = node.child_by_field_name("left")
            return self._get_pattern_names(left) if left is not None else []
        if node.type == "pair_pattern":
            value = node.child_by_field_name("value")
            return self._get_pattern_names(value) if value is not None else []
        names = []
        for child in node.named_children:
            names.extend(self._get_pattern_names(child))
        return names

    def extract_imports(self) -> List[ImportDeclaration]:
        """Return all extracted module references."""
        return self._imports.copy()

    def extract_exports(self) -> List[ExportDeclaration]:
        """Return all extracted export declarations."""
        return self._exports.copy()
