"""API routes for RecordSmith."""

import base64
import binascii
import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Query, Response
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from .. import __version__
from ..config import settings
from ..export import (
    ExportFormat,
    ExportProfile,
    ExportValidationError,
    ProfileImportError,
    default_profile,
    download_file_name,
    duplicate_profile,
    load_profiles,
    render_export,
)
from ..ingest import (
    DetectionResult,
    FileEncoding,
    FormatError,
    HeaderPolicy,
    ParseWarning,
    Record,
    decode_bytes,
    parse_file,
)
from ..ordering import ReconcileDecision, display_order, reconcile

logger = logging.getLogger(__name__)

router = APIRouter()


class ParseRequest(BaseModel):
    """Request to parse an uploaded file."""

    file_name: str
    content: Optional[str] = None  # Already-decoded text
    content_base64: Optional[str] = None  # Raw bytes, decoded with `encoding`
    separator: str = Field(default_factory=lambda: settings.default_separator)
    encoding: FileEncoding = Field(
        default_factory=lambda: FileEncoding(settings.default_encoding)
    )
    header_policy: HeaderPolicy = Field(
        default_factory=lambda: HeaderPolicy(settings.default_header_policy)
    )
    stored_order: Optional[list[str]] = None


class ParseResponse(BaseModel):
    """Parsed file plus the field order decision for the host."""

    file_name: str
    headers: list[str]
    records: list[Record]
    detection: DetectionResult
    warnings: list[ParseWarning] = Field(default_factory=list)
    reconciliation: ReconcileDecision
    display_order: list[str]


class ReconcileRequest(BaseModel):
    """Request to reconcile a stored order with a new header set."""

    stored_order: Optional[list[str]] = None
    headers: list[str]


class ExportRequest(BaseModel):
    """Request to export records through a profile."""

    profile: ExportProfile
    records: list[Record] = Field(default_factory=list)
    source_file_name: Optional[str] = None


class DefaultProfileRequest(BaseModel):
    """Request for a profile that exports every column."""

    headers: list[str]
    name: Optional[str] = None


class ProfileImportRequest(BaseModel):
    """Request to validate a profile bundle (JSON array text)."""

    bundle: str


def _request_text(request: ParseRequest) -> str:
    """Return the text to parse, decoding base64 content when given."""
    if request.content is not None:
        return request.content
    if request.content_base64 is None:
        raise HTTPException(status_code=400, detail="Either content or content_base64 is required")
    try:
        raw = base64.b64decode(request.content_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid base64 content: {e}")
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File exceeds the maximum upload size")
    return decode_bytes(raw, request.encoding)


# Ingestion endpoints


@router.post("/parse", response_model=ParseResponse)
async def parse_upload(request: ParseRequest):
    """Parse a delimited or JSON file and reconcile it with a stored field order."""
    text = _request_text(request)
    if len(text) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File exceeds the maximum upload size")

    args = (text, request.file_name, request.separator, request.encoding, request.header_policy)
    try:
        if len(text) > settings.threadpool_threshold_bytes:
            result = await run_in_threadpool(parse_file, *args)
        else:
            result = parse_file(*args)
    except FormatError as e:
        logger.error(str(e))
        raise HTTPException(status_code=422, detail=str(e))

    return ParseResponse(
        file_name=result.file_name,
        headers=result.headers,
        records=result.records,
        detection=result.detection,
        warnings=result.warnings,
        reconciliation=reconcile(request.stored_order, result.headers),
        display_order=display_order(request.stored_order, result.headers),
    )


@router.post("/reconcile", response_model=ReconcileDecision)
async def reconcile_order(request: ReconcileRequest):
    """Compare a stored field order with a new header set."""
    return reconcile(request.stored_order, request.headers)


# Export endpoints


@router.post("/export")
async def export_records(
    request: ExportRequest,
    format: ExportFormat = Query(default=ExportFormat.CSV),
):
    """Render records through a profile and return the encoded file."""
    try:
        if len(request.records) > settings.threadpool_threshold_records:
            payload = await run_in_threadpool(render_export, request.profile, request.records, format)
        else:
            payload = render_export(request.profile, request.records, format)
    except ExportValidationError as e:
        logger.error(str(e))
        raise HTTPException(status_code=422, detail=str(e))

    file_name = download_file_name(request.source_file_name, request.profile.name, payload.extension)
    return Response(
        content=payload.content,
        media_type=payload.content_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(file_name)}"},
    )


# Profile endpoints


@router.post("/profiles/default", response_model=ExportProfile)
async def create_default_profile(request: DefaultProfileRequest):
    """Build a profile that exports every column 1:1."""
    if not any(h.strip() for h in request.headers):
        raise HTTPException(status_code=400, detail="At least one non-blank header is required")
    if request.name:
        return default_profile(request.headers, name=request.name)
    return default_profile(request.headers)


@router.post("/profiles/duplicate", response_model=ExportProfile)
async def copy_profile(profile: ExportProfile):
    """Duplicate a profile with fresh ids."""
    return duplicate_profile(profile)


@router.post("/profiles/import", response_model=list[ExportProfile])
async def import_profiles(request: ProfileImportRequest):
    """Validate a profile bundle and return the parsed profiles."""
    try:
        return load_profiles(request.bundle)
    except ProfileImportError as e:
        raise HTTPException(status_code=422, detail=str(e))


# Health endpoint


@router.get("/health")
async def health_check():
    """Health check endpoint with non-secret configuration."""
    return {
        "status": "ok",
        "service": "recordsmith",
        "version": __version__,
        "config": {
            "instance_name": settings.instance_name,
            "default_encoding": settings.default_encoding,
            "default_separator": settings.default_separator,
            "default_header_policy": settings.default_header_policy,
            "max_upload_bytes": settings.max_upload_bytes,
            "supported_encodings": [e.value for e in FileEncoding],
        },
    }
