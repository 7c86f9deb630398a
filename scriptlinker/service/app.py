"""FastAPI application entrypoint for scriptlinker service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..orchestrator import LinkOutcome, Orchestrator


class LinkRequest(BaseModel):
    path: str
    entry_point: Optional[str] = None
    root_namespace: Optional[str] = None
    output: Optional[str] = None
    breakpoints: List[str] = []
    inject_breakpoints: Optional[bool] = None
    dry_run: bool = True


class LinkResponse(BaseModel):
    content: str
    linked_files: List[str]
    elapsed_ms: int
    output_path: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing link runs."""

    app = FastAPI(title="ScriptLinker Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # Each request gets its own orchestrator so runs never share state.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/link", response_model=LinkResponse)
    async def link_project(
        payload: LinkRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> LinkResponse:
        def _run_link() -> LinkOutcome:
            return orchestrator.run_link(
                payload.path,
                entry_point=payload.entry_point,
                root_namespace=payload.root_namespace,
                output=payload.output,
                breakpoints=payload.breakpoints,
                inject_breakpoints=payload.inject_breakpoints,
                dry_run=payload.dry_run,
            )

        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, _run_link)

        return LinkResponse(
            content=outcome.result.content,
            linked_files=[str(path) for path in outcome.result.linked_files],
            elapsed_ms=outcome.result.elapsed_ms,
            output_path=(
                str(outcome.output_path)
                if outcome.output_path is not None and not outcome.dry_run
                else None
            ),
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(
        _: Any, exc: RuntimeError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
