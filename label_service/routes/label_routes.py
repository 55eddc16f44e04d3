"""
Label session routes.
Field entry, HU refresh, live preview and PDF export for the current label.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field, field_validator

from label_service.handlers.label_session_handler import LabelSession
from label_service.label_generation import QRGenerator
from label_service.models.common import ErrorResponse, ExportResult
from label_service.models.label_record import (
    LabelSize,
    LabelType,
    ReadOnlyFieldError,
    UnknownFieldError,
)
from label_service.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

_session: LabelSession | None = None


def get_label_session() -> LabelSession:
    """Current session, started on first use."""
    global _session
    if _session is None:
        _session = LabelSession.start()
    return _session


# Request Models
class StartSessionRequest(BaseModel):
    """Request to start a new label session."""
    size: LabelSize = Field(LabelSize.OUTER, description="Label size to show first")
    label_type: LabelType = Field(LabelType.SUBSTRATE, description="Label variant")


class SetFieldRequest(BaseModel):
    """Request to change one label field."""
    name: str = Field(..., min_length=1, max_length=50, description="Field name (camelCase)")
    value: str | int | float | None = Field(None, description="New value (numbers are stored as text)")

    @field_validator("value")
    @classmethod
    def _limit_length(cls, value):
        if isinstance(value, str) and len(value) > 500:
            raise ValueError("Value must be at most 500 characters")
        return value


class SelectSizeRequest(BaseModel):
    """Request to switch between outer and inner labels."""
    size: LabelSize


class HURefreshResponse(BaseModel):
    """New HU number."""
    hu_number: str
    date_code: str


@router.get("/labels/session", summary="Get current label session")
async def get_session(session: LabelSession = Depends(get_label_session)):
    """Current record, size, label type and export state."""
    return session.snapshot()


@router.post(
    "/labels/session",
    status_code=status.HTTP_201_CREATED,
    summary="Start a new label session"
)
async def start_session(request: StartSessionRequest):
    """
    Start a new session.

    The new record gets fresh defaults, date code and HU number and
    replaces the current one.
    """
    global _session
    _session = LabelSession.start(size=request.size, label_type=request.label_type)
    return _session.snapshot()


@router.patch(
    "/labels/session/fields",
    responses={
        400: {"model": ErrorResponse, "description": "Read-only field"},
        404: {"model": ErrorResponse, "description": "Unknown field"}
    },
    summary="Set a label field"
)
async def set_field(
    request: SetFieldRequest,
    session: LabelSession = Depends(get_label_session)
):
    """Set one field of the current record."""
    try:
        session.set_field(request.name, request.value)

    except UnknownFieldError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "unknown_field", "message": str(e)}
        )

    except ReadOnlyFieldError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "read_only_field", "message": str(e)}
        )

    return session.snapshot()


@router.post(
    "/labels/session/hu",
    response_model=HURefreshResponse,
    summary="Refresh HU number"
)
async def refresh_hu_number(session: LabelSession = Depends(get_label_session)):
    """Generate a new time-based HU number from the current date code."""
    hu_number = session.refresh_hu_number()
    return HURefreshResponse(hu_number=hu_number, date_code=session.record.date_code)


@router.put("/labels/session/size", summary="Select label size")
async def select_size(
    request: SelectSizeRequest,
    session: LabelSession = Depends(get_label_session)
):
    """Switch the live layout between the outer and inner label."""
    session.select_size(request.size)
    return session.snapshot()


@router.get("/labels/session/qr-payload", summary="Get QR payload")
async def get_qr_payload(session: LabelSession = Depends(get_label_session)):
    """Pipe-separated payload encoded in the label's QR code."""
    return {"payload": session.qr_payload()}


@router.get(
    "/labels/session/qr",
    response_class=Response,
    summary="Get QR code image"
)
async def get_qr_image(
    size: int = Query(200, ge=50, le=1000, description="Edge length in pixels"),
    session: LabelSession = Depends(get_label_session)
):
    """QR code of the current payload as PNG."""
    png = QRGenerator().generate_payload_qr(session.qr_payload(), size=size)
    return Response(content=png, media_type="image/png")


@router.get(
    "/labels/session/preview",
    response_class=Response,
    summary="Live label preview"
)
async def get_preview(
    scale: int = Query(1, ge=1, le=8, description="Pixels per layout pixel"),
    session: LabelSession = Depends(get_label_session)
):
    """Current layout rendered as PNG."""
    png = session.preview_png(scale)
    return Response(content=png, media_type="image/png")


@router.post(
    "/labels/session/export",
    response_model=ExportResult,
    responses={
        409: {"model": ErrorResponse, "description": "Export already running"},
        500: {"model": ErrorResponse, "description": "Export failed"},
        503: {"model": ErrorResponse, "description": "Label not rendered"}
    },
    summary="Save label as PDF",
    description="""
    Export the live label as a print-ready PDF.

    - Label is rasterized at 4x and placed at 0.5" from the top-left corner
    - Outer labels are 6" x 3.23", inner labels 3.1" x 1.6"
    - File name: Label_<HU number>.pdf (Label_Preview.pdf without HU)
    """
)
async def export_label(session: LabelSession = Depends(get_label_session)):
    """Run the export pipeline for the current session."""
    result = await session.export()

    if not result.succeeded:
        status_code = {
            "EXPORT_IN_PROGRESS": status.HTTP_409_CONFLICT,
            "RENDER_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
        }.get(result.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        raise HTTPException(
            status_code=status_code,
            detail={"error": result.error_code, "message": result.message}
        )

    return result


@router.get(
    "/labels/exports/{file_name}",
    response_class=FileResponse,
    responses={404: {"model": ErrorResponse, "description": "File not found"}},
    summary="Download exported label"
)
async def download_export(
    file_name: str,
    session: LabelSession = Depends(get_label_session)
):
    """Download a previously exported label PDF."""
    export_dir = session.pipeline.export_dir.resolve()
    path = (export_dir / file_name).resolve()

    if path.parent != export_dir or path.suffix != ".pdf" or not path.is_file():
        logger.warning("Export file not found", extra={"file_name": file_name})
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "file_not_found", "message": f"No exported label named {file_name}"}
        )

    return FileResponse(path, media_type="application/pdf", filename=file_name)
