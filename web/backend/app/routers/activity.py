"""Activity router -- logs, statistics and the uninstall lock."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from guardnet.runtime import Runtime
from web.backend.app.dependencies import get_runtime
from web.backend.app.models.api import LockStatusResponse, LogEntryResponse, StatsResponse

router = APIRouter(prefix="/api", tags=["activity"])


@router.get(
    "/logs",
    response_model=list[LogEntryResponse],
    summary="List recorded scans",
)
def list_logs(
    limit: int = Query(50, ge=1, le=1000),
    runtime: Runtime = Depends(get_runtime),
):
    """Return log entries, newest first."""
    return [LogEntryResponse.from_entry(e) for e in runtime.activity.list_logs(limit)]


@router.delete(
    "/logs",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear logs and reset statistics",
)
def clear_logs(runtime: Runtime = Depends(get_runtime)):
    runtime.activity.clear()


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Cumulative statistics",
)
def get_stats(runtime: Runtime = Depends(get_runtime)):
    return StatsResponse.from_stats(runtime.activity.get_stats())


@router.get(
    "/lock",
    response_model=LockStatusResponse,
    summary="Uninstall lock status",
)
def lock_status(runtime: Runtime = Depends(get_runtime)):
    """Report whether a running block schedule prevents a reset."""
    until = runtime.locked_until()
    return LockStatusResponse(locked=until is not None, locked_until=until)
