"""Compiler options relevant to module resolution, read from tsconfig.json."""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

# Strings are kept; comments and trailing commas are dropped
_JSONC_TOKEN = re.compile(
    r'"(?:\\.|[^"\\])*"'
    r"|//[^\n]*"
    r"|/\*.*?\*/"
    r"|,(?=(?:\s|//[^\n]*|/\*.*?\*/)*[}\]])",
    re.DOTALL,
)


@dataclass
class CompilerOptions:
    """Module resolution settings of a TypeScript project."""
    base_url: Optional[str] = None
    paths: Dict[str, List[str]] = field(default_factory=dict)
    paths_base: Optional[str] = None  # directory `paths` entries are relative to


def strip_json_comments(text: str) -> str:
    """Remove comments and trailing commas from JSONC text."""
    return _JSONC_TOKEN.sub(
        lambda m: m.group(0) if m.group(0).startswith('"') else "",
        text,
    )


def load_compiler_options(root_dir: str, filename: str = "tsconfig.json") -> CompilerOptions:
    """Load `baseUrl` and `paths` from the tsconfig of a project root.

    Args:
        root_dir: Project root directory
        filename: Config file name inside root_dir

    Returns:
        CompilerOptions (empty when the file is missing or unreadable)
    """
    config_path = os.path.join(root_dir, filename)
    if not os.path.isfile(config_path):
        return CompilerOptions()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.loads(strip_json_comments(f.read()))
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable {config_path}: {e}")
        return CompilerOptions()

    if not isinstance(config, dict):
        logger.warning(f"Ignoring unreadable {config_path}: not a JSON object")
        return CompilerOptions()

    options = config.get("compilerOptions")
    if not isinstance(options, dict):
        options = {}
    base_url = options.get("baseUrl")
    if not isinstance(base_url, str):
        base_url = None
    if base_url is not None:
        base_url = os.path.normpath(os.path.join(root_dir, base_url))

    paths_option = options.get("paths")
    if not isinstance(paths_option, dict):
        paths_option = {}
    paths = {
        pattern: [t for t in targets if isinstance(t, str)]
        for pattern, targets in paths_option.items()
        if isinstance(targets, list)
    }

    return CompilerOptions(
        base_url=base_url,
        paths=paths,
        paths_base=base_url or root_dir,
    )
