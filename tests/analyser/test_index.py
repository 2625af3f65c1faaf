"""Tests for the bounded repository index and the content cache."""

from __future__ import annotations

from typing import List

import pytest

from stackscan.analyser.index import ContentCache, build_index, file_extension
from stackscan.models import TreeEntry
from stackscan.providers import MemoryProvider


def test_file_extension_ignores_leading_dot() -> None:
    assert file_extension("app.tsx") == ".tsx"
    assert file_extension("archive.tar.gz") == ".gz"
    assert file_extension(".eslintrc") is None
    assert file_extension("Makefile") is None


def test_index_covers_three_levels() -> None:
    provider = MemoryProvider(
        {
            "main.go": "",
            "deploy/k8s/service.yaml": "",
            "deploy/k8s/overlays/prod/kustomization.yaml": "",
        }
    )

    index = build_index(provider)

    assert "main.go" in index.paths
    assert "deploy/k8s" in index.paths
    assert "deploy/k8s/service.yaml" in index.paths
    assert "deploy/k8s/overlays" in index.paths
    assert "deploy/k8s/overlays/prod" not in index.paths


def test_names_and_extensions_are_root_only() -> None:
    provider = MemoryProvider({"index.ts": "", "src/app.vue": "", "src/nested/util.py": ""})

    index = build_index(provider)

    assert index.root_names == frozenset({"index.ts", "src"})
    assert index.extensions == frozenset({".ts"})
    assert index.has_path("src/app.vue")


def test_empty_tree_yields_empty_index() -> None:
    index = build_index(MemoryProvider())

    assert not index.paths and not index.root_names and not index.extensions


class _FlakyProvider(MemoryProvider):
    def list_files(self, directory: str = ".") -> List[TreeEntry]:
        if directory == "locked":
            raise PermissionError("denied")
        return super().list_files(directory)


def test_listing_failure_below_root_is_swallowed() -> None:
    provider = _FlakyProvider({"locked/secret.txt": "", "open/readme.md": ""})

    index = build_index(provider)

    assert "locked" in index.paths
    assert "locked/secret.txt" not in index.paths
    assert "open/readme.md" in index.paths


def test_root_listing_failure_propagates() -> None:
    class _Broken(MemoryProvider):
        def list_files(self, directory: str = ".") -> List[TreeEntry]:
            raise PermissionError("denied")

    with pytest.raises(PermissionError):
        build_index(_Broken())


class _CountingProvider(MemoryProvider):
    def __init__(self, files) -> None:  # type: ignore[no-untyped-def]
        super().__init__(files)
        self.reads: List[str] = []

    def read_file(self, path: str) -> str:
        self.reads.append(path)
        return super().read_file(path)


def test_content_cache_reads_each_path_once() -> None:
    provider = _CountingProvider({"package.json": "{}"})
    cache = ContentCache(provider)

    assert cache.read("package.json") == "{}"
    assert cache.read("package.json") == "{}"
    assert provider.reads == ["package.json"]


def test_content_cache_memoises_failures() -> None:
    provider = _CountingProvider({})
    cache = ContentCache(provider)

    assert cache.read("go.mod") is None
    assert cache.read("go.mod") is None
    assert provider.reads == ["go.mod"]
    assert "go.mod" in cache
    assert len(cache) == 1

