"""Shared fixtures for modgraph tests."""

import os
import tempfile
import textwrap
from pathlib import Path

import pytest


def write_files(root: str, files: dict):
    """Write {relative path: content} under root."""
    for rel_path, content in files.items():
        path = Path(root) / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip("\n"))


@pytest.fixture
def make_project():
    """Factory creating a temporary project rooted at a tsconfig.json."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = os.path.realpath(tmpdir)

        def make(files: dict, tsconfig: str = "{}") -> str:
            if tsconfig is not None and "tsconfig.json" not in files:
                write_files(root, {"tsconfig.json": tsconfig})
            write_files(root, files)
            return root

        yield make
