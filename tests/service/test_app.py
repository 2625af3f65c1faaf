"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest
from fastapi.testclient import TestClient

from stackscan.models import MatchResult
from stackscan.service import create_app


class _StubAnalyser:
    def __init__(self) -> None:
        self.calls: List[Path] = []

    def __call__(self, path: Path, rules=None) -> List[MatchResult]:  # type: ignore[no-untyped-def]
        self.calls.append(Path(path))
        return [
            MatchResult("Python", "language"),
            MatchResult("FastAPI", "framework"),
            MatchResult("Python", "language"),
        ]


@pytest.fixture
def analyser() -> _StubAnalyser:
    return _StubAnalyser()


@pytest.fixture
def client(analyser: _StubAnalyser) -> TestClient:
    return TestClient(create_app(analyse_path=analyser))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyse_endpoint(client: TestClient, analyser: _StubAnalyser, tmp_path: Path) -> None:
    repo_path = tmp_path / "service-repo"
    repo_path.mkdir()

    response = client.post("/analyse", json={"path": str(repo_path)})

    assert response.status_code == 200
    assert response.json() == {
        "repo": "service-repo",
        "status": "success",
        "results": {"languages": ["Python"], "frameworks": ["FastAPI"]},
    }
    assert analyser.calls == [repo_path.resolve()]


def test_analyse_missing_path_returns_404(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/analyse", json={"path": str(tmp_path / "absent")})

    assert response.status_code == 404
    assert "Directory not found" in response.json()["detail"]


def test_analyse_against_real_engine(tmp_path: Path) -> None:
    (tmp_path / "requirements.txt").write_text("fastapi\n", encoding="utf-8")
    client = TestClient(create_app())

    response = client.post("/analyse", json={"path": str(tmp_path)})

    assert response.status_code == 200
    results = response.json()["results"]
    assert "Python" in results["languages"]
    assert "FastAPI" in results["frameworks"]
