"""
Document Validator — FastAPI Server
===================================

RESTful API for checking whether a document version is current.

Endpoints:
    GET /validate?id=CNLA78   Resolve a validation ID
    GET /types                List available validation types
    GET /health               Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

Docs:
    http://localhost:8000/docs             # Swagger UI (auto-generated)
    http://localhost:8000/redoc            # ReDoc (alternative)
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from doc_validator import __version__
from doc_validator.catalog import ValidationCatalog
from doc_validator.config import Settings
from doc_validator.exceptions import (
    DocumentValidationError,
    NoValidationTypesError,
)
from doc_validator.models import (
    DocumentRecord,
    Latest,
    Outdated,
    Tone,
    ValidationReport,
    ValidationType,
)
from doc_validator.pipeline import DocumentValidationPipeline
from doc_validator.presentation import describe_load_error, record_links

load_dotenv()

logger = logging.getLogger(__name__)


# ─── Application Lifespan ───────────────────────────────────────────

_pipeline: DocumentValidationPipeline | None = None
_catalog: ValidationCatalog | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the pipeline and catalog from the environment on startup."""
    global _pipeline, _catalog  # noqa: PLW0603
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level)
    _pipeline = DocumentValidationPipeline(
        settings.registry_source,
        strict_versions=settings.strict_versions,
        timeout=settings.http_timeout,
    )
    _catalog = ValidationCatalog(
        settings.types_manifest,
        settings.known_types,
        timeout=settings.http_timeout,
    )
    yield
    _pipeline = None
    _catalog = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="Document Validator API",
    description=(
        "Look up a document by its validation ID and check whether it is the "
        "latest version of its lineage."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Response Schemas ────────────────────────────────────────────────


class ValidateResponse(BaseModel):
    """Resolution of one validation ID, ready for display."""

    state: str = Field(description="no_id | not_found | latest | outdated")
    tone: Tone
    title: str
    message: str
    validation_id: Optional[str] = None
    record: Optional[DocumentRecord] = None
    latest: Optional[DocumentRecord] = None
    links: list[str] = Field(default_factory=list)
    registry_size: int

    model_config = {"json_schema_extra": {"example": {
        "state": "outdated",
        "tone": "INVALID",
        "title": "Document Not Latest",
        "message": (
            "This document is valid but not the latest version. "
            "Please use the latest version for reference."
        ),
        "validation_id": "CNLA78",
        "record": {
            "documentId": "QM-001",
            "validationId": "CNLA78",
            "version": "1.0.0",
            "date": "2024-01-01T09:00:00Z",
        },
        "latest": {
            "documentId": "QM-001",
            "validationId": "XK29PQ",
            "version": "1.1.0",
            "date": "2024-06-01T09:00:00Z",
        },
        "links": [],
        "registry_size": 4,
    }}}


class HealthResponse(BaseModel):
    status: str
    version: str
    registry_source: str


# ─── Helpers ─────────────────────────────────────────────────────────


def _get_pipeline() -> DocumentValidationPipeline:
    if _pipeline is None:
        raise HTTPException(status_code=503, detail="Pipeline not initialised")
    return _pipeline


def _get_catalog() -> ValidationCatalog:
    if _catalog is None:
        raise HTTPException(status_code=503, detail="Catalog not initialised")
    return _catalog


def _build_response(report: ValidationReport) -> ValidateResponse:
    """Convert the internal ValidationReport to the API response schema."""
    resolution = report.resolution
    record = getattr(resolution, "record", None)
    latest = resolution.latest if isinstance(resolution, Outdated) else None
    links = record_links(resolution.record) if isinstance(resolution, Latest) else []

    return ValidateResponse(
        state=resolution.state,
        tone=report.status.tone,
        title=report.status.title,
        message=report.status.message,
        validation_id=report.validation_id,
        record=record,
        latest=latest,
        links=links,
        registry_size=report.registry_size,
    )


# ─── Endpoints ───────────────────────────────────────────────────────


@app.get(
    "/validate",
    summary="Resolve a validation ID",
    tags=["Validation"],
    responses={
        502: {"description": "Document registry could not be loaded"},
        503: {"description": "Pipeline not yet initialised"},
    },
)
async def validate_document(
    id: Optional[str] = Query(default=None, description="Validation ID to look up"),
) -> ValidateResponse:
    """Look up a validation ID and report whether it is the latest version.

    - **latest**: the record is current
    - **outdated**: a newer version exists (returned as `latest`)
    - **not_found** / **no_id**: nothing to show
    """
    pipeline = _get_pipeline()
    try:
        report = await asyncio.to_thread(pipeline.run, id)
    except DocumentValidationError as e:
        logger.error("Registry load failed: %s", e)
        status = describe_load_error(e)
        raise HTTPException(
            status_code=502,
            detail={"code": e.code, "title": status.title, "message": status.message},
        ) from e
    return _build_response(report)


@app.get(
    "/types",
    summary="List validation types",
    tags=["Catalog"],
    responses={
        404: {"description": "No validation types available"},
        502: {"description": "Manifest could not be loaded"},
    },
)
async def list_validation_types() -> list[ValidationType]:
    """Validation categories from the manifest, or discovered when it is absent."""
    catalog = _get_catalog()
    try:
        return await asyncio.to_thread(catalog.load)
    except NoValidationTypesError as e:
        raise HTTPException(
            status_code=404,
            detail={"code": e.code, "message": str(e)},
        ) from e
    except DocumentValidationError as e:
        logger.error("Catalog load failed: %s", e)
        raise HTTPException(
            status_code=502,
            detail={"code": e.code, "message": str(e)},
        ) from e


@app.get(
    "/health",
    summary="Health check",
    tags=["System"],
    responses={503: {"description": "Pipeline not yet initialised"}},
)
def health_check() -> HealthResponse:
    """Returns service status and configuration info."""
    pipeline = _get_pipeline()
    return HealthResponse(
        status="healthy",
        version=__version__,
        registry_source=pipeline.registry_source,
    )
