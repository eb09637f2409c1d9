"""
Path resolution and JSON reading shared by the portfolio and density loaders.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def resolve_path(path: str | Path, repo_root: Path | None) -> Path:
    """Resolve path; if relative, against repo_root (or cwd if repo_root is None)."""
    p = Path(path)
    if not p.is_absolute() and repo_root is not None:
        p = repo_root / p
    return p.resolve()


def read_json(path: str | Path, repo_root: Path | None = None, kind: str = "Data") -> Any:
    """Parsed JSON at path. Raises FileNotFoundError if missing."""
    resolved = resolve_path(path, repo_root)
    if not resolved.exists():
        raise FileNotFoundError(f"{kind} file not found: {resolved}")
    return json.loads(resolved.read_text(encoding="utf-8"))
