from typing import Optional

from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from pathtraffic.core.config import settings
from pathtraffic.core.errors import OptionsError
from pathtraffic.core.logging import get_logger
from pathtraffic.models.schemas import AggregateResponse, ErrorResponse, HealthResponse
from pathtraffic.services.orchestrator import analyze_log_file, build_options

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


@router.post(
    "/aggregate",
    response_model=AggregateResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid file"},
        413: {"model": ErrorResponse, "description": "File too large"},
        422: {"model": ErrorResponse, "description": "Invalid options"},
        500: {"model": ErrorResponse, "description": "Processing error"}
    }
)
async def aggregate_logs(
    file: UploadFile = File(...),
    date_from: str = Query(..., alias="from", description="First UTC day, YYYY-MM-DD"),
    date_to: str = Query(..., alias="to", description="Last UTC day, YYYY-MM-DD"),
    tz: Optional[str] = Query(None, description="jst or ict"),
    top: Optional[str] = Query(None, description="Paths kept per day"),
):
    """
    Upload an access-log export and get the top paths per local day.

    Accepts a multipart file of `timestamp,userId,path,status,latencyMs` lines.
    Omitted tz / top fall back to the configured defaults.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    try:
        options = build_options(date_from, date_to, tz=tz, top=top)
    except OptionsError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        file_bytes = await file.read()

        if len(file_bytes) == 0:
            raise HTTPException(status_code=400, detail="Empty file")

        if len(file_bytes) > settings.max_upload_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File exceeds {settings.max_upload_bytes} bytes")

        logger.info(
            f"Received file: {file.filename}, size: {len(file_bytes)} bytes")

        return analyze_log_file(file_bytes, file.filename, options)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Aggregation failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Aggregation failed: {str(e)}")


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse()
