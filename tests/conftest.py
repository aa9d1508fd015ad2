from __future__ import annotations

import pathlib
from typing import Dict

import pytest

from vgx.config import ExportSettings
from vgx.vault_index import VaultIndex


def write_vault(root: pathlib.Path, files: Dict[str, str]) -> pathlib.Path:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


def note(tags=None, body: str = "") -> str:
    if tags is None:
        return body
    if isinstance(tags, str):
        return f"---\ntags: {tags}\n---\n{body}"
    items = "\n".join(f"  - {t}" for t in tags)
    return f"---\ntags:\n{items}\n---\n{body}"


@pytest.fixture
def make_vault(tmp_path):
    def _make(files: Dict[str, str], name: str = "vault") -> VaultIndex:
        root = tmp_path / name
        root.mkdir(exist_ok=True)
        write_vault(root, files)
        return VaultIndex.open(root)

    return _make


@pytest.fixture
def settings():
    return ExportSettings()
