"""Interface of the module-structure parsers."""

from abc import ABC, abstractmethod
from typing import List

from modgraph.core.models import Language, ImportDeclaration, ExportDeclaration


class BaseParser(ABC):
    """Reads the module references and export table of one source file.

    A parser is reused across files: `parse` replaces any earlier result,
    and the extract methods report on the last parsed source.
    """

    @property
    @abstractmethod
    def language(self) -> Language:
        """Return the language this parser handles."""
        ...

    @abstractmethod
    def parse(self, source: str, filepath: str = "") -> bool:
        """Parse source code.

        Args:
            source: The source code to parse
            filepath: File path, used in log messages

        Returns:
            True if parsing succeeded, False otherwise
        """
        ...

    @abstractmethod
    def extract_imports(self) -> List[ImportDeclaration]:
        """Extract all module references from the parsed source.

        Static import and export-from declarations come first, in source
        order, followed by dynamic imports and require calls.
        """
        ...

    @abstractmethod
    def extract_exports(self) -> List[ExportDeclaration]:
        """Extract the top-level export declarations."""
        ...
