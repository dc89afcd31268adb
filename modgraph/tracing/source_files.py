"""Parsed source files, read and parsed once per path."""

import logging
import os
from typing import Dict, Optional

from modgraph.core.models import SourceFile
from modgraph.parsers.registry import ParserRegistry, detect_language, get_registry
from modgraph.tracing.hosts import SourceFileProvider

logger = logging.getLogger(__name__)


class SourceFileCache(SourceFileProvider):
    """Provides SourceFile objects, parsing each file on first request.

    Files without a registered parser (JSON, assets) and files that fail to
    parse are returned unparsed, with no imports or exports.
    """

    def __init__(self, registry: Optional[ParserRegistry] = None):
        self._registry = registry or get_registry()
        self._files: Dict[str, SourceFile] = {}

    def get_source_file(self, path: str) -> SourceFile:
        """Get the SourceFile for an absolute path.

        Raises:
            OSError: The file cannot be read
        """
        path = os.path.normpath(path)
        source_file = self._files.get(path)
        if source_file is None:
            source_file = self._load(path)
            self._files[path] = source_file
        return source_file

    def _load(self, path: str) -> SourceFile:
        language = detect_language(path)
        parser = self._registry.get_parser(language)
        if parser is None:
            logger.debug(f"No parser for {path}, treating it as opaque")
            return SourceFile(file_name=path, language=language)

        with open(path, "r", encoding="utf-8", errors="replace") as f:
            source = f.read()

        if not parser.parse(source, path):
            logger.warning(f"Could not parse {path}, treating it as opaque")
            return SourceFile(file_name=path, language=language)

        return SourceFile(
            file_name=path,
            language=language,
            imports=tuple(parser.extract_imports()),
            exports=tuple(parser.extract_exports()),
            parsed=True,
        )

    def __contains__(self, path: str) -> bool:
        return os.path.normpath(path) in self._files

    def __len__(self) -> int:
        return len(self._files)
