"""Conventional manifest locations and the per-scan dependency table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from ..logging import get_logger
from ..rules.types import ECOSYSTEMS
from .extractors import (
    extract_cargo_dependencies,
    extract_compose_images,
    extract_composer_dependencies,
    extract_dockerfile_images,
    extract_env_var_names,
    extract_gemfile_dependencies,
    extract_go_modules,
    extract_npm_dependencies,
    extract_pyproject_dependencies,
    extract_python_requirements,
)
from .index import ContentCache

_logger = get_logger("analyser.manifests")

Extractor = Callable[[str], List[str]]

DependencyTable = Dict[str, List[str]]


@dataclass(frozen=True)
class ManifestSource:
    """A root-level file whose declared names feed one ecosystem."""

    ecosystem: str
    filename: str
    extractor: Extractor


MANIFEST_SOURCES: Tuple[ManifestSource, ...] = (
    ManifestSource("npm", "package.json", extract_npm_dependencies),
    ManifestSource("python", "requirements.txt", extract_python_requirements),
    ManifestSource("python", "requirements-dev.txt", extract_python_requirements),
    ManifestSource("python", "requirements-base.txt", extract_python_requirements),
    ManifestSource("python", "pyproject.toml", extract_pyproject_dependencies),
    ManifestSource("ruby", "Gemfile", extract_gemfile_dependencies),
    ManifestSource("golang", "go.mod", extract_go_modules),
    ManifestSource("rust", "Cargo.toml", extract_cargo_dependencies),
    ManifestSource("php", "composer.json", extract_composer_dependencies),
    ManifestSource("docker", "docker-compose.yml", extract_compose_images),
    ManifestSource("docker", "docker-compose.yaml", extract_compose_images),
    ManifestSource("docker", "compose.yml", extract_compose_images),
    ManifestSource("docker", "compose.yaml", extract_compose_images),
    ManifestSource("docker", "Dockerfile", extract_dockerfile_images),
)

ENV_FILES: Tuple[str, ...] = (
    ".env",
    ".env.local",
    ".env.example",
    ".env.development",
    ".env.production",
    ".env.test",
)


def empty_dependency_table() -> DependencyTable:
    return {ecosystem: [] for ecosystem in ECOSYSTEMS}


def build_dependency_table(
    cache: ContentCache,
    sources: Sequence[ManifestSource] = MANIFEST_SOURCES,
) -> DependencyTable:
    """Run every extractor against its manifest, skipping absent files."""
    table = empty_dependency_table()
    for source in sources:
        content = cache.read(source.filename)
        if not content:
            continue
        try:
            names = source.extractor(content)
        except Exception as exc:
            _logger.warning("Extracting %s failed; ignoring it: %s", source.filename, exc)
            continue
        table.setdefault(source.ecosystem, []).extend(names)
    return table


def collect_env_var_names(
    cache: ContentCache, filenames: Sequence[str] = ENV_FILES
) -> List[str]:
    names: List[str] = []
    for filename in filenames:
        content = cache.read(filename)
        if content:
            names.extend(extract_env_var_names(content))
    return names


__all__ = [
    "DependencyTable",
    "ENV_FILES",
    "MANIFEST_SOURCES",
    "ManifestSource",
    "build_dependency_table",
    "collect_env_var_names",
    "empty_dependency_table",
]
