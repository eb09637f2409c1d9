"""
Shared loaders: repo-relative path resolution and JSON reading.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from bandlabel.core.io import read_json, resolve_path


def test_resolve_path_against_repo_root(tmp_path: Path) -> None:
    assert resolve_path("data/x.json", tmp_path) == (tmp_path / "data" / "x.json").resolve()
    absolute = tmp_path / "y.json"
    assert resolve_path(absolute, Path("/elsewhere")) == absolute.resolve()


def test_read_json(tmp_path: Path) -> None:
    (tmp_path / "a.json").write_text('{"k": [1, 2]}', encoding="utf-8")
    assert read_json("a.json", tmp_path) == {"k": [1, 2]}


def test_read_json_missing_file_names_kind(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Census file not found"):
        read_json("missing.json", tmp_path, kind="Census")
