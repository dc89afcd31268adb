"""Normalization of import clauses into binding specifiers."""

from typing import List, Optional

from modgraph.core.models import (
    ImportClause,
    ImportKind,
    ImportSpecifier,
    NamedImports,
    NamespaceImport,
)


def get_import_specifiers(clause: Optional[ImportClause]) -> List[ImportSpecifier]:
    """Extract the bindings of an import clause.

    The default binding comes first, followed by one entry per named binding
    or a single namespace entry. Declarations without a clause (side-effect
    imports, re-exports, dynamic imports) have no specifiers.

    Args:
        clause: The import clause, or None

    Returns:
        Ordered list of ImportSpecifier
    """
    if clause is None:
        return []

    specifiers: List[ImportSpecifier] = []
    if clause.name:
        specifiers.append(ImportSpecifier(ImportKind.DEFAULT, clause.name))

    bindings = clause.named_bindings
    if isinstance(bindings, NamedImports):
        for element in bindings.elements:
            if element.property_name:
                specifiers.append(ImportSpecifier(
                    ImportKind.NAME, element.property_name, alias=element.name,
                ))
            else:
                specifiers.append(ImportSpecifier(ImportKind.NAME, element.name))
    elif isinstance(bindings, NamespaceImport):
        specifiers.append(ImportSpecifier(ImportKind.NAMESPACE, bindings.name))

    return specifiers


def can_tree_shake(specifiers: List[ImportSpecifier]) -> bool:
    """Whether an import can be tracked per binding instead of per module.

    Namespace imports and imports without bindings always need the whole
    module.
    """
    return bool(specifiers) and all(
        s.kind is not ImportKind.NAMESPACE for s in specifiers
    )
