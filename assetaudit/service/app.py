"""FastAPI application entrypoint for assetaudit service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ConfigError, load_config
from ..models import CheckOutcome
from ..orchestrator import Auditor
from ..providers import resolve_provider


class CheckRequest(BaseModel):
    path: str
    log_path: Optional[str] = None
    build_report: Optional[str] = None
    assets: Optional[List[str]] = None
    scenes: Optional[List[str]] = None


class CheckResponse(BaseModel):
    status: str
    reason: Optional[str] = None
    ignored: List[str] = []
    unversioned: List[str] = []
    missing: List[str] = []


class ExtractRequest(BaseModel):
    path: str
    log_path: Optional[str] = None


class ExtractResponse(BaseModel):
    found: bool
    assets: List[str] = []


class HealthResponse(BaseModel):
    status: str


def _default_auditor() -> Auditor:
    return Auditor()


def _to_response(outcome: CheckOutcome) -> CheckResponse:
    result = outcome.result
    return CheckResponse(
        status=outcome.status.value,
        reason=outcome.reason,
        ignored=sorted(result.ignored_in_build) if result else [],
        unversioned=sorted(result.unversioned_in_build) if result else [],
        missing=[diagnostic.path for diagnostic in outcome.missing],
    )


def create_app(
    auditor_factory: Callable[[], Auditor] = _default_auditor,
) -> FastAPI:
    """Create the FastAPI application exposing assetaudit operations."""

    app = FastAPI(title="Asset Audit Service", version="0.1.0")

    async def get_auditor() -> Auditor:
        # A fresh auditor per request keeps every check's sets independent.
        return auditor_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/check", response_model=CheckResponse)
    async def check(
        payload: CheckRequest,
        auditor: Auditor = Depends(get_auditor),
    ) -> CheckResponse:
        outcome = await auditor.check(
            payload.path,
            log_path=Path(payload.log_path) if payload.log_path else None,
            build_report=Path(payload.build_report) if payload.build_report else None,
            assets=payload.assets,
            scenes=payload.scenes,
        )
        return _to_response(outcome)

    @app.post("/extract", response_model=ExtractResponse)
    async def extract(payload: ExtractRequest) -> ExtractResponse:
        def _run_extract() -> Optional[List[str]]:
            config = load_config(Path(payload.path))
            log_path = Path(payload.log_path) if payload.log_path else None
            return resolve_provider(config, log_path=log_path).provide()

        loop = asyncio.get_running_loop()
        assets = await loop.run_in_executor(None, _run_extract)
        if assets is None:
            return ExtractResponse(found=False)
        return ExtractResponse(found=True, assets=assets)

    @app.exception_handler(ConfigError)
    async def config_error_handler(
        _: Any, exc: ConfigError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
