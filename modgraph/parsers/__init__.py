"""modgraph parsers - module-structure parsing for JavaScript and TypeScript.

This package extracts import declarations and export tables from source
files, dispatching to a parser by file extension.
"""

from modgraph.parsers.base import BaseParser
from modgraph.parsers.registry import ParserRegistry, detect_language, get_registry

__all__ = [
    "BaseParser",
    "ParserRegistry",
    "detect_language",
    "get_registry",
]
