"""Tests for the JavaScript/TypeScript parser system."""

import pytest
from modgraph.core.models import (
    ExportKind,
    ImportClause,
    ImportElement,
    Language,
    NamedImports,
    NamespaceImport,
)
from modgraph.parsers.base import BaseParser
from modgraph.parsers.registry import ParserRegistry, detect_language, get_registry
from modgraph.parsers.treesitter_parser import TreeSitterParser


class TestLanguageDetection:
    """Tests for language detection from file extensions."""

    def test_javascript_extensions(self):
        assert detect_language("app.js") == Language.JAVASCRIPT
        assert detect_language("module.mjs") == Language.JAVASCRIPT
        assert detect_language("common.cjs") == Language.JAVASCRIPT
        assert detect_language("component.jsx") == Language.JAVASCRIPT

    def test_typescript_extensions(self):
        assert detect_language("app.ts") == Language.TYPESCRIPT
        assert detect_language("module.mts") == Language.TYPESCRIPT
        assert detect_language("types.d.ts") == Language.TYPESCRIPT

    def test_tsx_extension(self):
        assert detect_language("component.tsx") == Language.TSX

    def test_json_extension(self):
        assert detect_language("package.json") == Language.JSON

    def test_unknown_extension(self):
        assert detect_language("file.css") == Language.UNKNOWN
        assert detect_language("noextension") == Language.UNKNOWN


class TestParserRegistry:
    """Tests for the parser registry."""

    def test_builtin_parsers(self):
        registry = get_registry()
        for language in (Language.JAVASCRIPT, Language.TYPESCRIPT, Language.TSX):
            parser = registry.get_parser(language)
            assert isinstance(parser, TreeSitterParser)
            assert parser.language == language

    def test_parser_shared_per_language(self):
        registry = get_registry()
        assert registry.get_parser(Language.TYPESCRIPT) is registry.get_parser(Language.TYPESCRIPT)
        assert registry.get_parser(Language.TYPESCRIPT) is not registry.get_parser(Language.TSX)

    def test_no_parser_for_json_or_unknown(self):
        registry = get_registry()
        assert registry.get_parser(Language.JSON) is None
        assert registry.get_parser(Language.UNKNOWN) is None

    def test_register_replaces_parser(self):
        registry = ParserRegistry()
        assert registry.get_parser(Language.TYPESCRIPT) is None

        registry.register(Language.TYPESCRIPT, TreeSitterParser)
        first = registry.get_parser(Language.TYPESCRIPT)
        assert isinstance(first, BaseParser)

        registry.register(Language.TYPESCRIPT, lambda: TreeSitterParser(Language.TSX))
        second = registry.get_parser(Language.TYPESCRIPT)
        assert second is not first
        assert second.language == Language.TSX


class TestTreeSitterImports:
    """Tests for module reference extraction."""

    @pytest.fixture
    def imports(self):
        source = '''
import Def from './a';
import { x, y as z } from './b';
import * as ns from './c';
import './side-effect';
import type { T } from './types';
import d, { e } from './d';
export { f } from './f';
export * from './g';
const lazy = import('./lazy');
'''
        parser = TreeSitterParser(Language.TYPESCRIPT)
        assert parser.parse(source, "test.ts") is True
        return parser.extract_imports()

    def test_module_specifiers_in_order(self, imports):
        assert [i.module_specifier for i in imports] == [
            "./a", "./b", "./c", "./side-effect", "./types",
            "./d", "./f", "./g", "./lazy",
        ]

    def test_default_import(self, imports):
        assert imports[0].clause == ImportClause(name="Def")

    def test_named_imports_with_alias(self, imports):
        assert imports[1].clause == ImportClause(
            named_bindings=NamedImports((
                ImportElement(name="x"),
                ImportElement(name="z", property_name="y"),
            )),
        )

    def test_namespace_import(self, imports):
        assert imports[2].clause == ImportClause(named_bindings=NamespaceImport("ns"))

    def test_default_and_named(self, imports):
        clause = imports[5].clause
        assert clause.name == "d"
        assert clause.named_bindings == NamedImports((ImportElement(name="e"),))

    def test_clauseless_references(self, imports):
        """Side-effect imports, re-exports and dynamic imports bind nothing."""
        for index in (3, 6, 7, 8):
            assert imports[index].clause is None

    def test_type_only_import(self, imports):
        assert imports[4].is_type_only
        assert not imports[1].is_type_only

    def test_line_numbers(self, imports):
        assert imports[0].line_number == 2
        assert imports[8].line_number == 10

    def test_import_equals_require(self):
        parser = TreeSitterParser(Language.TYPESCRIPT)
        parser.parse("import legacy = require('./legacy');\n", "test.ts")
        imports = parser.extract_imports()
        assert [i.module_specifier for i in imports] == ["./legacy"]
        assert imports[0].clause is None

    def test_require_in_javascript(self):
        parser = TreeSitterParser(Language.JAVASCRIPT)
        parser.parse("const fs = require('./fs-wrapper');\n", "test.js")
        assert [i.module_specifier for i in parser.extract_imports()] == ["./fs-wrapper"]

    def test_require_ignored_in_typescript(self):
        parser = TreeSitterParser(Language.TYPESCRIPT)
        parser.parse("const fs = require('./fs-wrapper');\n", "test.ts")
        assert parser.extract_imports() == []

    def test_dynamic_import_with_template_argument_ignored(self):
        parser = TreeSitterParser(Language.JAVASCRIPT)
        parser.parse("const m = import(`./pages/${name}`);\n", "test.js")
        assert parser.extract_imports() == []

    def test_nested_dynamic_import(self):
        source = '''
async function load() {
    const { render } = await import('./view');
    return render;
}
'''
        parser = TreeSitterParser(Language.JAVASCRIPT)
        parser.parse(source, "test.js")
        imports = parser.extract_imports()
        assert [i.module_specifier for i in imports] == ["./view"]
        assert imports[0].line_number == 3

    def test_tsx_imports(self):
        source = '''
import { Button } from './button';
export const App = () => <Button label="hi" />;
'''
        parser = TreeSitterParser(Language.TSX)
        assert parser.parse(source, "app.tsx") is True
        assert [i.module_specifier for i in parser.extract_imports()] == ["./button"]

    def test_reparse_resets_state(self):
        parser = TreeSitterParser(Language.TYPESCRIPT)
        parser.parse("import './one';\n", "one.ts")
        parser.parse("import './two';\n", "two.ts")
        assert [i.module_specifier for i in parser.extract_imports()] == ["./two"]


class TestTreeSitterExports:
    """Tests for export table extraction."""

    @pytest.fixture
    def exports(self):
        source = '''
export const a = 1, { b, c: d } = obj;
export function f() {}
export class C {}
export interface I {}
export type T = string;
export enum E { A }
export default Foo;
export { g as h, k };
export { m as n } from './m';
export * from './star';
export * as ns from './ns';
'''
        parser = TreeSitterParser(Language.TYPESCRIPT)
        assert parser.parse(source, "test.ts") is True
        return parser.extract_exports()

    def test_local_declarations(self, exports):
        local = {e.export_name: e.local_name for e in exports if e.kind is ExportKind.LOCAL}
        for name in ("a", "b", "d", "f", "C", "I", "T", "E"):
            assert local[name] == name

    def test_default_export(self, exports):
        local = {e.export_name: e.local_name for e in exports if e.kind is ExportKind.LOCAL}
        assert local["default"] == "Foo"

    def test_export_clause_renames(self, exports):
        local = {e.export_name: e.local_name for e in exports if e.kind is ExportKind.LOCAL}
        assert local["h"] == "g"
        assert local["k"] == "k"
        assert "g" not in local

    def test_reexport(self, exports):
        reexports = [e for e in exports if e.kind is ExportKind.REEXPORT]
        assert len(reexports) == 1
        assert reexports[0].export_name == "n"
        assert reexports[0].import_name == "m"
        assert reexports[0].module_specifier == "./m"

    def test_star_and_namespace_exports(self, exports):
        stars = [e.module_specifier for e in exports if e.kind is ExportKind.STAR]
        namespaces = [e for e in exports if e.kind is ExportKind.NAMESPACE]
        assert stars == ["./star"]
        assert len(namespaces) == 1
        assert namespaces[0].export_name == "ns"
        assert namespaces[0].module_specifier == "./ns"

    def test_export_default_function(self):
        parser = TreeSitterParser(Language.TYPESCRIPT)
        parser.parse("export default function render() {}\n", "test.ts")
        exports = parser.extract_exports()
        assert len(exports) == 1
        assert exports[0].export_name == "default"
        assert exports[0].local_name == "render"

    def test_export_assignment(self):
        parser = TreeSitterParser(Language.TYPESCRIPT)
        parser.parse("const api = {};\nexport = api;\n", "test.ts")
        assert [e.kind for e in parser.extract_exports()] == [ExportKind.ASSIGNMENT]

    def test_javascript_exports(self):
        parser = TreeSitterParser(Language.JAVASCRIPT)
        parser.parse("export const one = 1;\nexport { one as uno };\n", "test.js")
        names = [e.export_name for e in parser.extract_exports()]
        assert names == ["one", "uno"]

    def test_non_exported_declarations_ignored(self):
        parser = TreeSitterParser(Language.TYPESCRIPT)
        parser.parse("const hidden = 1;\nfunction helper() {}\n", "test.ts")
        assert parser.extract_exports() == []
