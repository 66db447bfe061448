"""Scan router -- run text through the decision pipeline."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from guardnet.moderation.errors import EmptyInputError
from guardnet.moderation.models import Sensitivity
from guardnet.moderation.pipeline import ensure_text
from guardnet.runtime import Runtime
from web.backend.app.dependencies import get_runtime
from web.backend.app.models.api import LogEntryResponse, ScanRequest

router = APIRouter(prefix="/api", tags=["scan"])


@router.post(
    "/scan",
    response_model=LogEntryResponse,
    summary="Analyze text and record the verdict",
)
def scan(body: ScanRequest, runtime: Runtime = Depends(get_runtime)):
    """Check the block list, then the AI classifier, and log the result."""
    try:
        ensure_text(body.text)
    except EmptyInputError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    sensitivity = Sensitivity(body.sensitivity) if body.sensitivity else None
    entry = runtime.pipeline.submit(body.text, sensitivity)
    return LogEntryResponse.from_entry(entry)
