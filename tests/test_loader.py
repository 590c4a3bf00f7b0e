from __future__ import annotations

from pathlib import Path

import pytest

from docs_checker.core.loader import discover_markdown_files, load_corpus, load_document
from docs_checker.errors import DocumentReadError, NotFoundError
from docs_checker.filters import PathspecFilter


def test_discovery_is_lexically_ordered(make_corpus) -> None:
    root = make_corpus({
        "zeta.md": "# Z\n",
        "README.md": "# Hub\n",
        "patterns/cqrs.md": "# CQRS\n",
        "patterns/a/repository.markdown": "# Repo\n",
        "notes.txt": "not markdown",
    })
    assert discover_markdown_files(root) == [
        "README.md",
        "patterns/a/repository.markdown",
        "patterns/cqrs.md",
        "zeta.md",
    ]


def test_discovery_applies_default_and_gitignore_patterns(make_corpus) -> None:
    root = make_corpus({
        "README.md": "# Hub\n",
        "node_modules/pkg/README.md": "# vendored\n",
        ".git/description.md": "# git\n",
        "build/generated.md": "# generated\n",
        "drafts/wip.md": "# wip\n",
        ".gitignore": "build/\n",
    })
    path_filter = PathspecFilter(root, extra_patterns=["drafts/"])
    assert discover_markdown_files(root, path_filter) == ["README.md"]


def test_discovery_without_gitignore(make_corpus) -> None:
    root = make_corpus({
        "README.md": "# Hub\n",
        "build/generated.md": "# generated\n",
        ".gitignore": "build/\n",
    })
    path_filter = PathspecFilter(root, use_gitignore=False)
    assert discover_markdown_files(root, path_filter) == ["README.md", "build/generated.md"]


def test_undecodable_gitignore_is_fatal(make_corpus) -> None:
    root = make_corpus({"README.md": "# Hub\n"})
    (root / ".gitignore").write_bytes(b"\xff\xfe build/\n")
    with pytest.raises(DocumentReadError) as exc_info:
        PathspecFilter(root)
    assert exc_info.value.path == root / ".gitignore"


def test_missing_root_raises_not_found(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError):
        load_corpus(tmp_path / "missing")


def test_file_root_raises_not_found(tmp_path: Path) -> None:
    file_root = tmp_path / "file.md"
    file_root.write_text("# x\n", encoding="utf-8")
    with pytest.raises(NotFoundError):
        load_corpus(file_root)


def test_undecodable_file_is_fatal(make_corpus) -> None:
    root = make_corpus({"README.md": "# Hub\n"})
    (root / "broken.md").write_bytes(b"\xff\xfe\xfa not utf-8")
    with pytest.raises(DocumentReadError) as exc_info:
        load_corpus(root)
    assert exc_info.value.path == root.resolve() / "broken.md"


def test_empty_root_yields_no_documents(tmp_path: Path) -> None:
    assert load_corpus(tmp_path) == []


def test_load_document_keeps_structure(make_corpus) -> None:
    root = make_corpus({"guides/solid.md": "# SOLID\n\nSee [DI](../di.md#usage).\n"})
    document = load_document(root, "guides/solid.md")
    assert document.path == "guides/solid.md"
    assert document.directory == "guides"
    assert document.slugs == frozenset({"solid"})
    assert [l.target for l in document.links] == ["../di.md#usage"]


def test_parallel_loading_matches_serial(make_corpus) -> None:
    files = {f"section-{i:02d}/page.md": f"# Page {i}\n\n[next](../section-{i + 1:02d}/page.md)\n" for i in range(20)}
    files["README.md"] = "# Hub\n"
    root = make_corpus(files)

    serial = load_corpus(root, jobs=1)
    parallel = load_corpus(root, jobs=8)

    assert [d.path for d in parallel] == [d.path for d in serial]
    assert parallel == serial


def test_on_document_callback_sees_every_document(make_corpus) -> None:
    root = make_corpus({"a.md": "# A\n", "b.md": "# B\n"})
    seen: list[str] = []
    load_corpus(root, on_document=lambda d: seen.append(d.path))
    assert sorted(seen) == ["a.md", "b.md"]
