"""Tests for the in-memory tree source."""

from __future__ import annotations

import pytest

from stackscan.providers import MemoryProvider, NotFoundError


def test_directories_are_implied_by_file_paths() -> None:
    provider = MemoryProvider(
        {
            "package.json": "{}",
            "src/components/Button.tsx": "",
            "src/index.ts": "",
        }
    )

    root = provider.list_files(".")
    assert [(entry.name, entry.is_directory) for entry in root] == [
        ("package.json", False),
        ("src", True),
    ]
    assert [entry.path for entry in provider.list_files("src")] == [
        "src/components",
        "src/index.ts",
    ]


def test_hidden_entries_are_listed_out_but_still_readable() -> None:
    provider = MemoryProvider({".env": "STRIPE_KEY=1", ".github/workflows/ci.yml": ""})

    assert provider.list_files() == []
    assert provider.read_file(".env") == "STRIPE_KEY=1"
    assert provider.exists(".github/workflows")
    assert provider.exists(".github/workflows/ci.yml")


def test_trailing_slash_declares_empty_directory() -> None:
    provider = MemoryProvider({"migrations/": ""})

    entries = provider.list_files()
    assert len(entries) == 1
    assert entries[0].is_directory
    assert provider.list_files("migrations") == []


def test_unknown_directory_lists_nothing() -> None:
    assert MemoryProvider({"a.txt": ""}).list_files("b") == []


def test_read_missing_file_raises() -> None:
    with pytest.raises(NotFoundError):
        MemoryProvider().read_file("go.mod")
