from __future__ import annotations

import pytest

from docs_checker.core.graph import build_graph, normalize_link_path
from docs_checker.core.loader import load_corpus
from docs_checker.core.parser import LinkKind


def _outgoing(graph, source):
    return [e for e in graph.edges if e.source == source]


@pytest.mark.parametrize(
    ("source_dir", "link_path", "expected"),
    [
        ("", "./b.md", "b.md"),
        ("docs", "../README.md", "README.md"),
        ("docs/patterns", "../../index.md", "index.md"),
        ("docs", "guide/", "docs/guide"),
        ("a/b", "/c.md", "c.md"),
        ("", "../outside.md", None),
        ("docs", "./", "docs"),
    ],
)
def test_normalize_link_path(source_dir: str, link_path: str, expected: str | None) -> None:
    assert normalize_link_path(source_dir, link_path) == expected


def test_edges_reference_documents_by_index(make_corpus) -> None:
    root = make_corpus({
        "README.md": "# Hub\n\n[cqrs](patterns/cqrs.md) [ext](https://example.com) [self](#hub)\n",
        "patterns/cqrs.md": "# CQRS\n\n[back](../README.md) [missing](nope.md)\n",
    })
    graph = build_graph(load_corpus(root), root)

    hub = graph.find("README.md")
    cqrs = graph.find("patterns/cqrs.md")
    assert (hub, cqrs) == (0, 1)

    hub_edges = _outgoing(graph, hub)
    assert [(e.kind, e.target) for e in hub_edges] == [
        (LinkKind.RELATIVE_FILE, cqrs),
        (LinkKind.EXTERNAL, None),
        (LinkKind.ANCHOR, hub),
    ]

    cqrs_edges = _outgoing(graph, cqrs)
    assert [(e.resolved_path, e.target) for e in cqrs_edges] == [
        ("README.md", hub),
        ("patterns/nope.md", None),
    ]


def test_directory_link_resolves_to_index_document(make_corpus) -> None:
    root = make_corpus({
        "README.md": "[guides](guides/)\n",
        "guides/README.md": "# Guides\n",
    })
    graph = build_graph(load_corpus(root), root)
    edge = _outgoing(graph, graph.find("README.md"))[0]
    assert edge.target == graph.find("guides/README.md")


def test_non_markdown_target_checked_on_disk(make_corpus) -> None:
    root = make_corpus({
        "README.md": "[license](LICENSE) [logo](assets/logo.svg)\n",
        "LICENSE": "MIT",
    })
    graph = build_graph(load_corpus(root), root)
    license_edge, logo_edge = _outgoing(graph, 0)
    assert license_edge.exists_on_disk is True
    assert logo_edge.exists_on_disk is False


def test_reachability_is_transitive(make_corpus) -> None:
    root = make_corpus({
        "README.md": "[a](a.md)\n",
        "a.md": "[b](b.md)\n",
        "b.md": "# B\n",
        "c.md": "[a](a.md)\n",
    })
    graph = build_graph(load_corpus(root), root)
    reachable = {graph.documents[i].path for i in graph.reachable_from(graph.find("README.md"))}
    assert reachable == {"README.md", "a.md", "b.md"}
