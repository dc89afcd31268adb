"""Project root inference from entry paths."""

import os
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from modgraph.config import get_root_markers
from modgraph.errors import InvalidEntryError


def _ancestor_chain(file: str) -> List[str]:
    """Ancestor directories of a file, from the filesystem root down."""
    parent = Path(file).parent
    return [str(d) for d in reversed([parent, *parent.parents])]


def find_common_directory(
    files: Sequence[str],
    test: Callable[[str], bool],
) -> Optional[str]:
    """Find the deepest directory of the shallowest entry that passes `test`.

    Anchoring on the entry with the fewest ancestors keeps the result an
    ancestor of every entry sharing that root. When several entries are
    equally shallow, the last one wins.

    Args:
        files: Absolute file paths
        test: Predicate deciding whether a directory is a root

    Returns:
        The matching directory, or None
    """
    if not files:
        return None

    chains = [_ancestor_chain(f) for f in files]
    shortest = min(reversed(chains), key=len)

    for directory in reversed(shortest):
        if test(directory):
            return directory

    return None


def has_root_marker(directory: str, markers: Optional[Iterable[str]] = None) -> bool:
    """Check whether a directory directly contains a root marker."""
    markers = tuple(markers) if markers is not None else get_root_markers()
    try:
        children = os.listdir(directory)
    except OSError:
        return False
    return any(child in markers for child in children)


def resolve_root_directory(
    entries: Sequence[str],
    test: Optional[Callable[[str], bool]] = None,
) -> str:
    """Validate entries and infer their project root.

    Args:
        entries: Absolute entry paths
        test: Root predicate, defaults to `has_root_marker`

    Returns:
        The root directory

    Raises:
        InvalidEntryError: No entries, a relative entry, or no root found
    """
    if not entries:
        raise InvalidEntryError("No entries provided")
    for entry in entries:
        if not os.path.isabs(entry):
            raise InvalidEntryError(f"Entry must be an absolute path: {entry}")

    root_dir = find_common_directory(entries, test or has_root_marker)
    if root_dir is None:
        if test is not None:
            raise InvalidEntryError("Entries must share a common directory accepted by the root test")
        markers = " or ".join(get_root_markers())
        raise InvalidEntryError(
            f"Entries must share a common directory containing {markers}"
        )
    return root_dir
