import pytest

from conftest import note
from helpers_graph import tagged_graph
from vgx.errors import RootNotFoundError
from vgx.harvest import harvest_vault
from vgx.models import NodeType, VaultEnv
from vgx.strategies import STRATEGIES, load_strategy, prune_orphans
from vgx.trace import GraphTrace

FILES = {
    "A.md": note(["project"], "[[B]]"),
    "B.md": note(["project"], "[[C]]"),
    "C.md": note(["project", "x"]),
    "D.md": "no tags, no links",
    "docs/E.md": note(["x"], "[[A]] ![[img.png]]"),
    "img.png": b"img",
}


def _project(index, settings, trace=None):
    env = harvest_vault(VaultEnv(index=index, settings=settings))
    return load_strategy(settings.strategy(), trace=trace).project(env)


def _edges(env):
    return [(r.source, r.target) for r in env.relationships]


def test_registry_covers_every_strategy():
    assert set(STRATEGIES) == {"tags", "internalLinks", "folders", "singleTag", "singleNote"}
    with pytest.raises(ValueError):
        load_strategy("bogus")


def test_tags_strategy(make_vault, settings):
    env = _project(make_vault(FILES), settings)
    assert list(env.nodes) == ["A.md", "B.md", "C.md", "docs/E.md", "project", "x"]
    assert _edges(env) == [
        ("A.md", "project"), ("B.md", "project"), ("C.md", "project"), ("C.md", "x"), ("docs/E.md", "x"),
    ]


def test_tags_strategy_keeps_orphans_when_asked(make_vault, settings):
    env = _project(make_vault(FILES), settings.replace(include_orphans=True))
    assert "D.md" in env.nodes
    assert {n.type for n in env.nodes.values()} == {NodeType.NOTE, NodeType.TAG}


def test_internal_links_strategy(make_vault, settings):
    env = _project(make_vault(FILES), settings.replace(relationship_strategy="internalLinks"))
    assert list(env.nodes) == ["A.md", "B.md", "C.md", "docs/E.md"]
    assert _edges(env) == [("A.md", "B.md"), ("B.md", "C.md"), ("docs/E.md", "A.md")]


def test_folders_strategy(make_vault, settings):
    env = _project(make_vault(FILES), settings.replace(relationship_strategy="folders"))
    assert list(env.nodes) == ["docs/E.md", "docs"]
    assert _edges(env) == [("docs/E.md", "docs")]


def test_single_tag_strategy(make_vault, settings):
    s = settings.replace(relationship_strategy="singleTag", root_tag="x")
    env = _project(make_vault(FILES), s)
    assert list(env.nodes) == ["x", "C.md", "docs/E.md"]
    assert _edges(env) == [("C.md", "x"), ("docs/E.md", "x")]


def test_single_tag_missing_root(make_vault, settings):
    s = settings.replace(relationship_strategy="singleTag", root_tag="nope")
    with pytest.raises(RootNotFoundError) as err:
        _project(make_vault(FILES), s)
    assert str(err.value) == 'Tag "nope" not found in your vault'


def test_single_tag_root_must_be_a_tag(make_vault, settings):
    s = settings.replace(relationship_strategy="singleTag", root_tag="docs")
    with pytest.raises(RootNotFoundError):
        _project(make_vault(FILES), s)


def test_single_note_strategy(make_vault, settings):
    s = settings.replace(relationship_strategy="singleNote", root_note="A", include_attachments=True)
    env = _project(make_vault(FILES), s)
    assert list(env.nodes) == ["A.md", "project", "B.md", "docs/E.md"]
    assert _edges(env) == [("A.md", "project"), ("A.md", "B.md"), ("docs/E.md", "A.md")]


def test_single_note_by_path(make_vault, settings):
    s = settings.replace(relationship_strategy="singleNote", root_note="docs/E")
    env = _project(make_vault(FILES), s)
    assert list(env.nodes) == ["docs/E.md", "x", "A.md", "docs"]


def test_single_note_keeps_isolated_root(make_vault, settings):
    s = settings.replace(relationship_strategy="singleNote", root_note="D")
    env = _project(make_vault(FILES), s)
    assert list(env.nodes) == ["D.md"]
    assert env.relationships == []


def test_single_note_missing_root(make_vault, settings):
    s = settings.replace(relationship_strategy="singleNote", root_note="Missing")
    with pytest.raises(RootNotFoundError) as err:
        _project(make_vault(FILES), s)
    assert str(err.value) == 'Note "Missing" not found in your vault'


def test_prune_orphans_is_a_fixed_point():
    nodes, rels = tagged_graph(10, 3)
    extra, _ = tagged_graph(15, 0)
    for key, node in extra.items():
        nodes.setdefault(key, node)
    rels = [r for r in rels if r.source != "n000.md"]
    prune_orphans(nodes, rels)
    once = list(nodes)
    prune_orphans(nodes, rels)
    assert list(nodes) == once
    assert "n000.md" not in nodes
    assert "n012.md" not in nodes


def _big_tag_vault(count=120, tags=12):
    return {f"n{i:03d}.md": note([f"t{i % tags}", f"t{(i + 5) % tags}"]) for i in range(count)}


def test_tags_backoff_engages_for_mermaid(make_vault, settings):
    trace = GraphTrace()
    env = _project(make_vault(_big_tag_vault()), settings, trace=trace)
    assert trace.stages() == ["strategy", "backoff", "prune"]
    assert trace.stage("backoff").nodes_in == 132
    assert len(env.nodes) <= 40
    assert len(env.relationships) <= 60
    assert trace.stage("backoff").detail["caps"] == (40, 60, 10)


def test_tags_backoff_uses_manual_caps(make_vault, settings):
    s = settings.replace(manual_backoff=True, max_nodes=20, max_relationships=25, max_tags=4)
    env = _project(make_vault(_big_tag_vault()), s)
    assert len(env.nodes) <= 20
    assert len(env.relationships) <= 25
    assert sum(1 for n in env.nodes.values() if n.type is NodeType.TAG) <= 4


def test_tags_backoff_skipped_for_dot_and_when_disabled(make_vault, settings):
    index = make_vault(_big_tag_vault())
    for s in (settings.replace(export_format="dot"), settings.replace(enable_auto_bridge=False)):
        trace = GraphTrace()
        env = _project(index, s, trace=trace)
        assert "backoff" not in trace.stages()
        assert len(env.nodes) == 132


def test_text_booleans_are_honored(make_vault, settings):
    s = settings.replace(include_orphans="false", enable_auto_bridge="false")
    env = _project(make_vault(_big_tag_vault() | {"loose.md": "untagged"}), s)
    assert "loose.md" not in env.nodes
    assert len(env.nodes) == 132
