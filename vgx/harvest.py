"""Harvesters: scan the vault index into the shared node map and edge list.

Each harvester only appends. A node inserted under an existing key replaces
the previous value but keeps its position.
"""

from __future__ import annotations

import logging
from typing import List

from .models import GraphNode, NodeRelationship, NodeType, VaultEnv
from .utils.io import normalize_path
from .vault_index import VaultFile

logger = logging.getLogger("vgx.harvest")


def frontmatter_tags(value) -> List[str]:
    """Normalize a frontmatter ``tags`` value to a list of tag literals."""
    if value is None:
        return []
    items = value if isinstance(value, (list, tuple)) else [value]
    tags = []
    for item in items:
        if item is None or isinstance(item, (dict, list, tuple)):
            continue
        tag = str(item).strip()
        if tag.startswith("#"):
            tag = tag[1:]
        if tag:
            tags.append(tag)
    return tags


def reap_notes(env: VaultEnv) -> None:
    for file in env.index.markdown_files():
        env.nodes[file.path] = GraphNode(id=normalize_path(file.path), name=file.basename, type=NodeType.NOTE)


def reap_tags(env: VaultEnv) -> None:
    for file in env.index.markdown_files():
        cache = env.index.file_cache(file)
        if cache is None:
            continue
        for tag in frontmatter_tags(cache.frontmatter.get("tags")):
            if tag not in env.nodes:
                env.nodes[tag] = GraphNode(id=tag, name=tag, type=NodeType.TAG)
            env.relationships.append(NodeRelationship(source=file.path, target=tag, weight=1))


def reap_links(env: VaultEnv) -> None:
    for file in env.index.markdown_files():
        cache = env.index.file_cache(file)
        if cache is None:
            continue
        for ref in cache.links:
            target = env.index.get_file_by_path(ref.link + ".md")
            # unresolved links contribute nothing
            if target is None:
                continue
            env.relationships.append(NodeRelationship(source=file.path, target=target.path, weight=1))


def reap_folders(env: VaultEnv) -> None:
    # keyed by folder name: same-named folders share one node
    for folder in env.index.folders():
        env.nodes[folder.name] = GraphNode(id=folder.name, name=folder.name, type=NodeType.FOLDER)
        for child in folder.children:
            if isinstance(child, VaultFile) and child.extension == "md":
                env.relationships.append(NodeRelationship(source=child.path, target=folder.name, weight=1))


def cluster_attachments(env: VaultEnv) -> None:
    notes = [(f, env.index.file_cache(f)) for f in env.index.markdown_files()]
    for file in env.index.files():
        if file.extension == "md":
            continue
        env.nodes[file.path] = GraphNode(id=normalize_path(file.path), name=file.basename, type=NodeType.ATTACHMENT)
        wanted = {file.path, file.name, file.basename}
        for note, cache in notes:
            if cache is None:
                continue
            for embed in cache.embeds:
                if embed.link in wanted:
                    env.relationships.append(NodeRelationship(source=note.path, target=file.path, weight=1))


def harvest_vault(env: VaultEnv) -> VaultEnv:
    """Run every harvester over ``env.index`` and return the populated env."""
    reap_notes(env)
    reap_tags(env)
    reap_links(env)
    reap_folders(env)
    if env.settings.with_attachments():
        cluster_attachments(env)
    logger.debug("Harvested %d nodes, %d relationships", len(env.nodes), len(env.relationships))
    return env
