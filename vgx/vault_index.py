"""Read-only snapshot of a vault directory: files, folders and per-note cache."""

from __future__ import annotations

import dataclasses
import logging
import pathlib
import re
from typing import Dict, List, Optional, Union
from urllib.parse import unquote

import yaml

from .utils.io import create_text_file, normalize_path, read_text_safely

logger = logging.getLogger("vgx.vault_index")

IGNORE_DIRS = {".git", ".obsidian", ".trash", ".vgx"}

_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.S)
_WIKILINK_RE = re.compile(r"(!?)\[\[([^\[\]]+?)\]\]")
_MDLINK_RE = re.compile(r"(!?)\[[^\[\]]*\]\(([^()\s]+)\)")
_URL_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
# an unclosed fence runs to the end of the note
_FENCE_RE = re.compile(r"^[ \t]{0,3}((`|~)\2{2,})[^\n]*\n.*?(?:^[ \t]{0,3}\1\2*[ \t]*$|\Z)", re.S | re.M)
_INLINE_CODE_RE = re.compile(r"(`+)(?!`).*?(?<!`)\1(?!`)", re.S)


@dataclasses.dataclass(slots=True)
class VaultFile:
    path: str

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def basename(self) -> str:
        name = self.name
        return name.rsplit(".", 1)[0] if "." in name else name

    @property
    def extension(self) -> str:
        name = self.name
        return name.rsplit(".", 1)[1].lower() if "." in name else ""


@dataclasses.dataclass(slots=True)
class VaultFolder:
    path: str
    children: List[Union[VaultFile, "VaultFolder"]] = dataclasses.field(default_factory=list)

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclasses.dataclass(slots=True)
class LinkRef:
    """One outgoing reference; ``link`` is the target with alias and sub-path removed."""

    link: str
    original: str


@dataclasses.dataclass(slots=True)
class FileCache:
    frontmatter: Dict = dataclasses.field(default_factory=dict)
    links: List[LinkRef] = dataclasses.field(default_factory=list)
    embeds: List[LinkRef] = dataclasses.field(default_factory=list)


def parse_frontmatter(text: str) -> Dict:
    m = _FRONTMATTER_RE.match(text)
    if not m:
        return {}
    try:
        data = yaml.safe_load(m.group(1))
    except yaml.YAMLError:
        return {}
    return data if isinstance(data, dict) else {}


def _clean_target(raw: str, markdown: bool) -> str:
    target = raw.split("|", 1)[0]
    target = target.split("#", 1)[0].split("^", 1)[0].strip()
    if markdown:
        target = unquote(target)
    if target.lower().endswith(".md"):
        target = target[:-3]
    return normalize_path(target) if target else ""


def _blank(m) -> str:
    return re.sub(r"[^\n]", " ", m.group(0))


def note_body(text: str) -> str:
    """``text`` with frontmatter and code spans blanked out, offsets preserved."""
    fm = _FRONTMATTER_RE.match(text)
    if fm:
        text = _blank(fm) + text[fm.end():]
    text = _FENCE_RE.sub(_blank, text)
    return _INLINE_CODE_RE.sub(_blank, text)


def parse_references(text: str):
    """Return ``(links, embeds)`` found in a note body, in document order.

    References inside frontmatter and code are not links.
    """
    text = note_body(text)
    found = []
    for m in _WIKILINK_RE.finditer(text):
        found.append((m.start(), m.group(1) == "!", _clean_target(m.group(2), False), m.group(0)))
    for m in _MDLINK_RE.finditer(text):
        raw = m.group(2)
        if _URL_RE.match(raw):
            continue
        found.append((m.start(), m.group(1) == "!", _clean_target(raw, True), m.group(0)))
    found.sort(key=lambda item: item[0])
    links, embeds = [], []
    for _, is_embed, target, original in found:
        if not target or target == "/":
            continue
        (embeds if is_embed else links).append(LinkRef(link=target, original=original))
    return links, embeds


class VaultIndex:
    """In-memory index of one vault, built once by :meth:`open`."""

    def __init__(self, root: pathlib.Path, files: List[VaultFile], folders: List[VaultFolder],
                 caches: Dict[str, FileCache]):
        self.root = root
        self._files = files
        self._folders = folders
        self._caches = caches
        self._by_path = {f.path: f for f in files}

    @classmethod
    def open(cls, root) -> "VaultIndex":
        root = pathlib.Path(root).resolve()
        if not root.is_dir():
            raise NotADirectoryError(f"vault root is not a directory: {root}")
        files: List[VaultFile] = []
        folders: Dict[str, VaultFolder] = {}
        caches: Dict[str, FileCache] = {}
        for p in sorted(root.rglob("*"), key=lambda x: x.relative_to(root).as_posix()):
            rel = p.relative_to(root)
            if any(part in IGNORE_DIRS for part in rel.parts):
                continue
            rel_path = normalize_path(rel.as_posix())
            if p.is_dir():
                folders[rel_path] = VaultFolder(path=rel_path)
                continue
            f = VaultFile(path=rel_path)
            files.append(f)
            if f.extension == "md":
                text = read_text_safely(p) or ""
                links, embeds = parse_references(text)
                caches[f.path] = FileCache(frontmatter=parse_frontmatter(text), links=links, embeds=embeds)
        for f in files:
            parent = f.path.rsplit("/", 1)[0] if "/" in f.path else None
            if parent in folders:
                folders[parent].children.append(f)
        for path, folder in folders.items():
            parent = path.rsplit("/", 1)[0] if "/" in path else None
            if parent in folders:
                folders[parent].children.append(folder)
        index = cls(root, files, list(folders.values()), caches)
        logger.debug("Indexed vault %s: %d files, %d folders", root, len(files), len(folders))
        return index

    def get_name(self) -> str:
        return self.root.name

    def files(self) -> List[VaultFile]:
        return list(self._files)

    def markdown_files(self) -> List[VaultFile]:
        return [f for f in self._files if f.extension == "md"]

    def folders(self) -> List[VaultFolder]:
        return list(self._folders)

    def get_file_by_path(self, path: str) -> Optional[VaultFile]:
        return self._by_path.get(normalize_path(path))

    def file_cache(self, file: VaultFile) -> Optional[FileCache]:
        return self._caches.get(file.path)

    def resolved_links(self) -> Dict[str, Dict[str, int]]:
        out: Dict[str, Dict[str, int]] = {}
        for f in self.markdown_files():
            dests: Dict[str, int] = {}
            for ref in self.file_cache(f).links:
                target = self.get_file_by_path(ref.link + ".md")
                if target is not None:
                    dests[target.path] = dests.get(target.path, 0) + 1
            out[f.path] = dests
        return out

    def create(self, path: str, text: str) -> str:
        path = normalize_path(path)
        create_text_file(self.root / path, text)
        return path
