"""Module resolution for TypeScript and JavaScript imports.

Resolves module specifiers to actual file paths on disk, following the
TypeScript resolution rules for relative paths, tsconfig `paths`/`baseUrl`
and node_modules packages.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Dict, Tuple

from modgraph.core.models import ResolvedModule
from modgraph.tracing.hosts import ModuleResolutionHost
from modgraph.tracing.tsconfig import CompilerOptions

logger = logging.getLogger(__name__)

# Extensions tried, in order, for an extensionless specifier
_FILE_EXTENSIONS = (".ts", ".tsx", ".d.ts", ".js", ".jsx")

# JavaScript extensions written in specifiers and their TypeScript sources
_EXTENSION_MAP = {
    ".js": (".ts", ".tsx", ".d.ts"),
    ".jsx": (".tsx", ".d.ts"),
    ".mjs": (".mts", ".d.mts"),
    ".cjs": (".cts", ".d.cts"),
}

# Extensions resolved as written
_RESOLVABLE_EXTENSIONS = (
    ".ts", ".tsx", ".d.ts", ".mts", ".cts", ".d.mts", ".d.cts", ".json",
)

_DECLARATION_EXTENSIONS = (".d.ts", ".d.mts", ".d.cts")

_INDEX_FILES = ("index.ts", "index.tsx", "index.d.ts", "index.js", "index.jsx")

_PACKAGE_ENTRY_FIELDS = ("types", "typings", "main")


def get_extension(path: str) -> str:
    """Get a file extension, treating `.d.ts` style suffixes as one extension."""
    for ext in _DECLARATION_EXTENSIONS:
        if path.endswith(ext):
            return ext
    return os.path.splitext(path)[1]


def is_relative_specifier(specifier: str) -> bool:
    """Check for `./`, `../`, `.` and `..` specifiers."""
    return specifier in (".", "..") or specifier.startswith(("./", "../"))


def _in_node_modules(path: str) -> bool:
    return "node_modules" in Path(path).parts


def _split_package_name(specifier: str) -> Tuple[str, str]:
    """Split 'pkg/sub/path' or '@scope/pkg/sub' into package name and subpath."""
    parts = specifier.split("/")
    if specifier.startswith("@") and len(parts) >= 2:
        return "/".join(parts[:2]), "/".join(parts[2:])
    return parts[0], "/".join(parts[1:])


class ImportResolver(ModuleResolutionHost):
    """Resolves module specifiers to file paths.

    Results are cached per (importing directory, specifier).
    """

    def __init__(
        self,
        project_root: Optional[str] = None,
        compiler_options: Optional[CompilerOptions] = None,
    ):
        """Initialize the resolver.

        Args:
            project_root: Root directory of the project
            compiler_options: tsconfig settings for non-relative specifiers
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.compiler_options = compiler_options or CompilerOptions()
        self._cache: Dict[Tuple[str, str], Optional[ResolvedModule]] = {}

    def resolve_module(self, specifier: str, importer: str) -> Optional[ResolvedModule]:
        """Resolve a module specifier relative to the importing file.

        Args:
            specifier: Module specifier text
            importer: Absolute path of the importing file

        Returns:
            ResolvedModule, or None if the module could not be found
        """
        importer_dir = os.path.dirname(importer)
        cache_key = (importer_dir, specifier)
        if cache_key in self._cache:
            return self._cache[cache_key]

        path, is_package = self._resolve(specifier, importer_dir)
        resolved = None
        if path:
            path = os.path.normpath(path)
            resolved = ResolvedModule(
                resolved_file_name=path,
                is_external_library=is_package or _in_node_modules(path),
                extension=get_extension(path),
            )
            logger.debug(f"Resolved '{specifier}' from {importer} to {path}")
        else:
            logger.debug(f"Unresolved '{specifier}' from {importer}")

        self._cache[cache_key] = resolved
        return resolved

    def _resolve(self, specifier: str, importer_dir: str) -> Tuple[Optional[str], bool]:
        """Resolve a specifier, reporting whether it came from a package."""
        if not specifier or specifier.startswith("node:"):
            return None, False

        if is_relative_specifier(specifier):
            return self._load_as_file_or_directory(os.path.join(importer_dir, specifier)), False

        if os.path.isabs(specifier):
            return self._load_as_file_or_directory(specifier), False

        path = self._resolve_with_paths(specifier)
        if path:
            return path, False

        path = self._resolve_from_base_url(specifier)
        if path:
            return path, False

        path = self._resolve_node_module(specifier, importer_dir)
        return path, path is not None

    def _load_as_file_or_directory(self, target: str) -> Optional[str]:
        target = os.path.normpath(target)
        return self._load_as_file(target) or self._load_as_directory(target)

    def _load_as_file(self, target: str) -> Optional[str]:
        """Try a path as a module file, mapping JS extensions to TS sources."""
        ext = get_extension(target)

        if ext in _EXTENSION_MAP:
            base = target[: -len(ext)]
            for ts_ext in _EXTENSION_MAP[ext]:
                if os.path.isfile(base + ts_ext):
                    return base + ts_ext
            return target if os.path.isfile(target) else None

        if ext in _RESOLVABLE_EXTENSIONS and os.path.isfile(target):
            return target

        for candidate_ext in _FILE_EXTENSIONS:
            candidate = target + candidate_ext
            if os.path.isfile(candidate):
                return candidate

        return None

    def _load_as_directory(self, directory: str) -> Optional[str]:
        """Try a directory via its package.json entry fields, then index files."""
        if not os.path.isdir(directory):
            return None

        package_json = os.path.join(directory, "package.json")
        if os.path.isfile(package_json):
            try:
                with open(package_json, "r", encoding="utf-8") as f:
                    manifest = json.load(f)
            except (OSError, ValueError) as e:
                logger.warning(f"Ignoring unreadable {package_json}: {e}")
                manifest = {}

            for field_name in _PACKAGE_ENTRY_FIELDS:
                entry = manifest.get(field_name) if isinstance(manifest, dict) else None
                if not isinstance(entry, str) or not entry:
                    continue
                candidate = os.path.normpath(os.path.join(directory, entry))
                path = self._load_as_file(candidate) or self._load_index(candidate)
                if path:
                    return path

        return self._load_index(directory)

    def _load_index(self, directory: str) -> Optional[str]:
        if not os.path.isdir(directory):
            return None
        for index_name in _INDEX_FILES:
            candidate = os.path.join(directory, index_name)
            if os.path.isfile(candidate):
                return candidate
        return None

    def _resolve_with_paths(self, specifier: str) -> Optional[str]:
        """Resolve through tsconfig `paths`, preferring the longest prefix match."""
        options = self.compiler_options
        if not options.paths:
            return None

        best_targets = None
        best_match = ""
        best_length = -1
        for pattern, targets in options.paths.items():
            if "*" not in pattern:
                if pattern == specifier:
                    best_targets, best_match, best_length = targets, "", len(pattern) + 1
                    break
                continue
            prefix, _, suffix = pattern.partition("*")
            if (
                len(specifier) >= len(prefix) + len(suffix)
                and specifier.startswith(prefix)
                and specifier.endswith(suffix)
                and len(prefix) > best_length
            ):
                best_targets = targets
                best_match = specifier[len(prefix): len(specifier) - len(suffix)]
                best_length = len(prefix)

        if best_targets is None:
            return None

        base = options.paths_base or str(self.project_root)
        for target in best_targets:
            candidate = os.path.join(base, target.replace("*", best_match, 1))
            path = self._load_as_file_or_directory(candidate)
            if path:
                return path
        return None

    def _resolve_from_base_url(self, specifier: str) -> Optional[str]:
        base_url = self.compiler_options.base_url
        if not base_url:
            return None
        return self._load_as_file_or_directory(os.path.join(base_url, specifier))

    def _resolve_node_module(self, specifier: str, importer_dir: str) -> Optional[str]:
        """Look the package up in node_modules directories above the importer.

        Each level tries the package itself, then its @types package.
        """
        package_name, subpath = _split_package_name(specifier)
        if package_name.startswith("@"):
            types_name = package_name[1:].replace("/", "__")
        else:
            types_name = package_name

        directory = importer_dir
        while True:
            node_modules = os.path.join(directory, "node_modules")
            if os.path.isdir(node_modules):
                for package_dir in (
                    os.path.join(node_modules, package_name),
                    os.path.join(node_modules, "@types", types_name),
                ):
                    target = os.path.join(package_dir, subpath) if subpath else package_dir
                    path = self._load_as_file_or_directory(target)
                    if path:
                        return path
            parent = os.path.dirname(directory)
            if parent == directory:
                break
            directory = parent

        return None
