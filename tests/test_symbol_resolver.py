"""Tests for symbol resolution through export tables."""

import os

from modgraph.core.models import ImportKind, ImportSpecifier
from modgraph.tracing.project import Project
from modgraph.tracing.symbol_resolver import get_import_bindings


def _resolve(root, specifier, kind=ImportKind.NAME, name="x", alias=None, importer="main.ts"):
    project = Project(root)
    return project.symbol_resolver.resolve_specifier_symbol(
        os.path.join(root, importer), specifier, ImportSpecifier(kind, name, alias),
    )


class TestExportResolver:
    """Tests for ExportResolver on real source files."""

    def test_local_export(self, make_project):
        root = make_project({"main.ts": "", "b.ts": "export const x = 1;\n"})
        result = _resolve(root, "./b")
        assert result.is_alias
        assert result.declaration_files == (os.path.join(root, "b.ts"),)

    def test_reexport_chain(self, make_project):
        root = make_project({
            "main.ts": "",
            "index.ts": "export { x } from './middle';\n",
            "middle.ts": "export { impl as x } from './impl';\n",
            "impl.ts": "export function impl() {}\n",
        })
        result = _resolve(root, "./index")
        assert result.declaration_files == (os.path.join(root, "impl.ts"),)

    def test_import_then_export(self, make_project):
        root = make_project({
            "main.ts": "",
            "index.ts": "import { x } from './impl';\nexport { x };\n",
            "impl.ts": "export const x = 1;\n",
        })
        result = _resolve(root, "./index")
        assert result.declaration_files == (os.path.join(root, "impl.ts"),)

    def test_star_export_first_hit(self, make_project):
        root = make_project({
            "main.ts": "",
            "index.ts": "export * from './one';\nexport * from './two';\n",
            "one.ts": "export const y = 1;\n",
            "two.ts": "export const x = 2;\n",
        })
        result = _resolve(root, "./index")
        assert result.declaration_files == (os.path.join(root, "two.ts"),)

    def test_star_export_skips_default(self, make_project):
        root = make_project({
            "main.ts": "",
            "index.ts": "export * from './impl';\n",
            "impl.ts": "export default 1;\n",
        })
        result = _resolve(root, "./index", kind=ImportKind.DEFAULT, name="d")
        assert result.declaration_files == ()

    def test_namespace_reexport(self, make_project):
        root = make_project({
            "main.ts": "",
            "index.ts": "export * as x from './impl';\n",
            "impl.ts": "export const a = 1;\n",
        })
        result = _resolve(root, "./index")
        assert result.declaration_files == (os.path.join(root, "impl.ts"),)

    def test_namespace_import_resolves_to_module(self, make_project):
        root = make_project({"main.ts": "", "b.ts": "export const a = 1;\n"})
        result = _resolve(root, "./b", kind=ImportKind.NAMESPACE, name="ns")
        assert result.declaration_files == (os.path.join(root, "b.ts"),)

    def test_default_import(self, make_project):
        root = make_project({"main.ts": "", "b.ts": "export default class Widget {}\n"})
        result = _resolve(root, "./b", kind=ImportKind.DEFAULT, name="W")
        assert result.declaration_files == (os.path.join(root, "b.ts"),)

    def test_default_reexported_from_named(self, make_project):
        root = make_project({
            "main.ts": "",
            "index.ts": "export { Widget as default } from './widget';\n",
            "widget.ts": "export class Widget {}\n",
        })
        result = _resolve(root, "./index", kind=ImportKind.DEFAULT, name="W")
        assert result.declaration_files == (os.path.join(root, "widget.ts"),)

    def test_export_assignment_resolves_to_file(self, make_project):
        root = make_project({"main.ts": "", "b.ts": "const api = {};\nexport = api;\n"})
        result = _resolve(root, "./b", name="anything")
        assert result.declaration_files == (os.path.join(root, "b.ts"),)

    def test_opaque_module_resolves_to_file(self, make_project):
        root = make_project({"main.ts": "", "data.json": '{"x": 1}'})
        result = _resolve(root, "./data.json")
        assert result.declaration_files == (os.path.join(root, "data.json"),)

    def test_commonjs_module_resolves_to_file(self, make_project):
        root = make_project({"main.ts": "", "util.js": "exports.x = 1;\n"})
        result = _resolve(root, "./util.js")
        assert result.declaration_files == (os.path.join(root, "util.js"),)

    def test_javascript_module_missing_export(self, make_project):
        root = make_project({"main.ts": "", "util.js": "export const y = 1;\n"})
        assert _resolve(root, "./util.js").declaration_files == ()

    def test_missing_export(self, make_project):
        root = make_project({"main.ts": "", "b.ts": "export const y = 1;\n"})
        result = _resolve(root, "./b")
        assert result.is_alias
        assert result.declaration_files == ()

    def test_unresolved_module(self, make_project):
        root = make_project({"main.ts": ""})
        result = _resolve(root, "./missing")
        assert result.is_alias
        assert result.declaration_files == ()

    def test_reexport_cycle_terminates(self, make_project):
        root = make_project({
            "main.ts": "",
            "a.ts": "export { x } from './b';\n",
            "b.ts": "export { x } from './a';\n",
        })
        assert _resolve(root, "./a").declaration_files == ()

    def test_star_cycle_terminates(self, make_project):
        root = make_project({
            "main.ts": "",
            "a.ts": "export * from './b';\n",
            "b.ts": "export * from './a';\nexport const x = 1;\n",
        })
        assert _resolve(root, "./a").declaration_files == (os.path.join(root, "b.ts"),)


class TestGetImportBindings:
    """Tests for get_import_bindings."""

    def test_bindings_by_local_name(self, make_project):
        root = make_project({
            "a.ts": "import d, { x as y } from './m';\nimport * as ns from './n';\n",
        })
        source_file = Project(root).source_files.get_source_file(os.path.join(root, "a.ts"))
        bindings = get_import_bindings(source_file)

        assert set(bindings) == {"d", "y", "ns"}
        assert bindings["y"] == ("./m", ImportSpecifier(ImportKind.NAME, "x", alias="y"))
        assert bindings["ns"][1].kind is ImportKind.NAMESPACE
