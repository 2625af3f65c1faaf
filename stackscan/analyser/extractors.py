"""Manifest extractors turning raw file text into declared package names.

Every extractor is a pure ``text -> list of names`` function. Malformed input
yields an empty (or partial) list rather than an exception.
"""

from __future__ import annotations

import json
import re
import tomllib
from typing import Iterable, List

# Node.js helpers

_NPM_GROUPS = ("dependencies", "devDependencies", "peerDependencies", "optionalDependencies")


def extract_npm_dependencies(content: str) -> List[str]:
    """Collect names from the four dependency groups of a package.json."""
    return _json_group_keys(content, _NPM_GROUPS)


# PHP helpers

_COMPOSER_GROUPS = ("require", "require-dev")


def extract_composer_dependencies(content: str) -> List[str]:
    """Collect names from the runtime and dev groups of a composer.json."""
    return _json_group_keys(content, _COMPOSER_GROUPS)


def _json_group_keys(content: str, groups: Iterable[str]) -> List[str]:
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, ValueError, RecursionError):
        return []
    if not isinstance(data, dict):
        return []

    names: List[str] = []
    for group in groups:
        deps = data.get(group)
        if isinstance(deps, dict):
            names.extend(deps.keys())
    return names


# Python helpers

_REQUIREMENT_SPLIT = re.compile(r"[><=!~;\[]")


def extract_python_requirements(content: str) -> List[str]:
    """Parse a requirements file, dropping comments, options and version markers."""
    packages: List[str] = []
    for raw_line in content.splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if not line or line.startswith("-"):
            continue
        name = _REQUIREMENT_SPLIT.split(line, 1)[0].strip()
        if name:
            packages.append(name)
    return packages


def extract_pyproject_dependencies(content: str) -> List[str]:
    """Return names listed in the ``[project]`` table's ``dependencies`` array."""
    try:
        data = tomllib.loads(content)
    except (tomllib.TOMLDecodeError, ValueError, RecursionError):
        return []

    project = data.get("project")
    if not isinstance(project, dict):
        return []
    dependencies = project.get("dependencies")
    if not isinstance(dependencies, list):
        return []

    specs = [item for item in dependencies if isinstance(item, str)]
    return extract_python_requirements("\n".join(specs))


# Ruby helpers

_GEM_PATTERN = re.compile(r"""^\s*gem\s+['"]([^'"]+)['"]""", re.MULTILINE)


def extract_gemfile_dependencies(content: str) -> List[str]:
    return _GEM_PATTERN.findall(content)


# Go helpers

_GO_REQUIRE_PATTERN = re.compile(r"^\s+([\w./-]+)\s+v", re.MULTILINE)


def extract_go_modules(content: str) -> List[str]:
    """Return module paths from indented ``path vX.Y.Z`` lines of a go.mod."""
    return _GO_REQUIRE_PATTERN.findall(content)


# Rust helpers

_CARGO_DEPS_HEADER = re.compile(r"^\[.*dependencies.*\]", re.IGNORECASE)
_CARGO_ENTRY = re.compile(r"^(\S+)\s*=")


def extract_cargo_dependencies(content: str) -> List[str]:
    """Return crate names declared under any ``[*dependencies*]`` section."""
    names: List[str] = []
    in_deps = False
    for line in content.splitlines():
        if _CARGO_DEPS_HEADER.match(line):
            in_deps = True
            continue
        if line.startswith("["):
            in_deps = False
            continue
        if in_deps:
            match = _CARGO_ENTRY.match(line)
            if match:
                names.append(match.group(1))
    return names


# Container helpers

_COMPOSE_IMAGE_PATTERN = re.compile(r"""image:\s*['"]?([^\s'"#]+)""")
_DOCKERFILE_FROM_PATTERN = re.compile(r"^FROM\s+(?:--\S+\s+)*(\S+)", re.MULTILINE)


def extract_compose_images(content: str) -> List[str]:
    """Return image names (without tag) referenced by a compose file."""
    return [strip_image_tag(image) for image in _COMPOSE_IMAGE_PATTERN.findall(content)]


def extract_dockerfile_images(content: str) -> List[str]:
    """Return base image names (without tag) of ``FROM`` instructions."""
    return [strip_image_tag(image) for image in _DOCKERFILE_FROM_PATTERN.findall(content)]


def strip_image_tag(image: str) -> str:
    """Drop a trailing ``:tag`` and any ``@digest`` while keeping registry ports."""
    image = image.split("@", 1)[0]
    head, sep, tail = image.rpartition(":")
    if sep and "/" not in tail:
        return head
    return image


# Environment helpers


def extract_env_var_names(content: str) -> List[str]:
    """Return variable names declared in a dotenv file."""
    names: List[str] = []
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :]
        name = line.split("=", 1)[0].strip()
        if name:
            names.append(name)
    return names


__all__ = [
    "extract_cargo_dependencies",
    "extract_compose_images",
    "extract_composer_dependencies",
    "extract_dockerfile_images",
    "extract_env_var_names",
    "extract_gemfile_dependencies",
    "extract_go_modules",
    "extract_npm_dependencies",
    "extract_pyproject_dependencies",
    "extract_python_requirements",
    "strip_image_tag",
]
