"""The module graph produced by the graph builder.

A read-only, insertion-ordered mapping from SourceFile to ModuleGraphNode,
with queries for exploring module structure.
"""

import os
from collections import deque
from collections.abc import Mapping
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from modgraph.core.models import ModuleGraphNode, SourceFile


class ModuleGraph(Mapping):
    """Graph of module dependencies reachable from a set of entries.

    Iteration yields SourceFiles in visitation order. Use `nodes` for
    (SourceFile, ModuleGraphNode) pairs.
    """

    def __init__(self, root_dir: str, nodes: Dict[SourceFile, ModuleGraphNode]):
        self.root_dir = root_dir
        self._nodes = dict(nodes)
        self._by_path = {sf.file_name: sf for sf in self._nodes}

    def __getitem__(self, source_file: SourceFile) -> ModuleGraphNode:
        return self._nodes[source_file]

    def __iter__(self) -> Iterator[SourceFile]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def nodes(self) -> List[Tuple[SourceFile, ModuleGraphNode]]:
        """(SourceFile, ModuleGraphNode) pairs in visitation order."""
        return list(self._nodes.items())

    def get_source_file(self, filepath: str) -> Optional[SourceFile]:
        """Get the visited SourceFile for a path."""
        return self._by_path.get(os.path.normpath(filepath))

    def get_node(self, filepath: str) -> Optional[ModuleGraphNode]:
        """Get the node for a file.

        Args:
            filepath: Absolute path to the file

        Returns:
            ModuleGraphNode or None if the file was not reached
        """
        source_file = self.get_source_file(filepath)
        return self._nodes[source_file] if source_file is not None else None

    def get_dependencies(self, filepath: str) -> List[str]:
        """Get all files that the given file depends on.

        Args:
            filepath: Absolute path to the file

        Returns:
            List of file paths, in discovery order
        """
        node = self.get_node(filepath)
        if node is None:
            return []
        return [dep.file_name for dep in node.dependencies]

    def get_dependents(self, filepath: str) -> List[str]:
        """Get all files that depend on the given file.

        Args:
            filepath: Absolute path to the file

        Returns:
            List of file paths, in visitation order
        """
        target = self.get_source_file(filepath)
        if target is None:
            return []
        return [
            source_file.file_name
            for source_file, node in self._nodes.items()
            if target in node.dependencies
        ]

    def find_path(self, source: str, target: str) -> Optional[List[str]]:
        """Find the shortest dependency path between two files.

        Args:
            source: Starting file
            target: Target file

        Returns:
            List of files forming the path, or None if no path exists
        """
        start = self.get_source_file(source)
        goal = self.get_source_file(target)
        if start is None or goal is None:
            return None

        if start == goal:
            return [start.file_name]

        # BFS to find shortest path
        visited = {start}
        queue = deque([(start, [start.file_name])])

        while queue:
            current, path = queue.popleft()

            for neighbor in self._nodes[current].dependencies:
                if neighbor == goal:
                    return path + [neighbor.file_name]

                if neighbor not in visited and neighbor in self._nodes:
                    visited.add(neighbor)
                    queue.append((neighbor, path + [neighbor.file_name]))

        return None

    def relative_name(self, filepath: str) -> str:
        """Path relative to the root: './x' inside it, '../x' outside."""
        result = os.path.relpath(filepath, self.root_dir)
        if result.startswith(".."):
            return result
        return "./" + result

    def is_inside_root(self, filepath: str) -> bool:
        return not os.path.relpath(filepath, self.root_dir).startswith("..")

    def get_summary(self) -> str:
        """Get a text summary of the module graph.

        Returns:
            Human-readable summary string
        """
        edge_count = sum(len(node.dependencies) for node in self._nodes.values())
        unresolved = sum(
            1
            for node in self._nodes.values()
            for edge in node.imports
            if edge.resolved_module is None
        )
        lines = [
            "Module Graph Summary:",
            f"  Root: {self.root_dir}",
            f"  Files: {len(self._nodes)}",
            f"  Dependencies: {edge_count}",
            f"  Unresolved imports: {unresolved}",
        ]

        # Most depended-on files
        counts: Dict[SourceFile, int] = {}
        for node in self._nodes.values():
            for dep in node.dependencies:
                counts[dep] = counts.get(dep, 0) + 1
        ranked = sorted(counts.items(), key=lambda x: x[1], reverse=True)

        if ranked:
            lines.append("\n  Most Imported Files:")
            for source_file, count in ranked[:5]:
                name = Path(source_file.file_name).name
                lines.append(f"    {name}: imported by {count} files")

        return "\n".join(lines)
