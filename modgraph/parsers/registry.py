"""Parser lookup by language.

A source file is dispatched to a parser through its extension. Parsers are
built lazily from their factories, one per language, and shared by every
file of that language.
"""

import os
from typing import Callable, Dict, Optional

from modgraph.core.models import Language
from modgraph.parsers.base import BaseParser

ParserFactory = Callable[[], BaseParser]


def detect_language(filepath: str) -> Language:
    """Detect the language of a source file from its extension.

    Declaration files (`.d.ts`, `.d.mts`, `.d.cts`) are TypeScript.
    """
    _, ext = os.path.splitext(filepath)
    return Language.from_extension(ext)


class ParserRegistry:
    """Maps languages to parser factories."""

    def __init__(self):
        self._factories: Dict[Language, ParserFactory] = {}
        self._parsers: Dict[Language, BaseParser] = {}

    def register(self, language: Language, factory: ParserFactory):
        """Register the factory building parsers for a language.

        A later registration replaces the earlier one and its parser.
        """
        self._factories[language] = factory
        self._parsers.pop(language, None)

    def get_parser(self, language: Language) -> Optional[BaseParser]:
        """Get the shared parser for a language.

        Returns:
            Parser instance, or None when no factory is registered
        """
        parser = self._parsers.get(language)
        if parser is None:
            factory = self._factories.get(language)
            if factory is None:
                return None
            parser = factory()
            self._parsers[language] = parser
        return parser


def _create_default_registry() -> ParserRegistry:
    """Registry with the tree-sitter parsers for JavaScript and TypeScript."""
    from modgraph.parsers.treesitter_parser import TreeSitterParser

    registry = ParserRegistry()
    for language in TreeSitterParser.supported_languages():
        registry.register(language, lambda lang=language: TreeSitterParser(lang))
    return registry


_registry = _create_default_registry()


def get_registry() -> ParserRegistry:
    """Get the default parser registry."""
    return _registry
