"""FastAPI application entrypoint for stackscan service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..analyser import analyse_path as _analyse_path
from ..models import MatchResult
from ..rules.types import Rule
from ..scan.reporter import categorise

AnalysePath = Callable[..., List[MatchResult]]


class AnalyseRequest(BaseModel):
    path: str


class AnalyseResponse(BaseModel):
    repo: str
    status: str
    results: Dict[str, List[str]]


class HealthResponse(BaseModel):
    status: str


def create_app(
    analyse_path: AnalysePath = _analyse_path,
    rules: Optional[Sequence[Rule]] = None,
) -> FastAPI:
    """Create the FastAPI application exposing repository analysis."""

    app = FastAPI(title="StackScan Service", version="1.0.0")

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyse", response_model=AnalyseResponse)
    async def analyse_repo(payload: AnalyseRequest) -> AnalyseResponse:
        target = Path(payload.path).expanduser().resolve()
        if not target.is_dir():
            raise FileNotFoundError(f"Directory not found: {target}")

        def _run_analysis() -> List[MatchResult]:
            return analyse_path(target, rules)

        loop = asyncio.get_running_loop()
        matches = await loop.run_in_executor(None, _run_analysis)
        return AnalyseResponse(repo=target.name, status="success", results=categorise(matches))

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]
