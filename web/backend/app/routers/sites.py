"""Sites router -- block-list management and schedules."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from guardnet.moderation.errors import InvalidScheduleError
from guardnet.moderation.models import BlockRule, utcnow
from guardnet.moderation.schedule import schedule_status
from guardnet.runtime import Runtime
from web.backend.app.dependencies import get_runtime
from web.backend.app.models.api import (
    AddSiteRequest,
    BlockRuleResponse,
    ImportSitesRequest,
    ImportSitesResponse,
    ScheduleRequest,
)

router = APIRouter(prefix="/api", tags=["sites"])


def _rule_response(rule: BlockRule) -> BlockRuleResponse:
    return BlockRuleResponse.from_rule(rule, schedule_status(rule, utcnow()).value)


@router.get(
    "/sites",
    response_model=list[BlockRuleResponse],
    summary="List blocked sites",
)
def list_sites(runtime: Runtime = Depends(get_runtime)):
    """Return every block rule in match order."""
    return [_rule_response(r) for r in runtime.sites.list_rules()]


@router.post(
    "/sites",
    response_model=BlockRuleResponse,
    summary="Block a site",
    status_code=status.HTTP_201_CREATED,
)
def add_site(body: AddSiteRequest, runtime: Runtime = Depends(get_runtime)):
    """Add a permanent block for a URL."""
    rule = runtime.sites.add_site(body.url)
    if rule is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"'{body.url}' is already blocked or empty",
        )
    return _rule_response(rule)


@router.post(
    "/sites/import",
    response_model=ImportSitesResponse,
    summary="Bulk-import sites",
)
def import_sites(body: ImportSitesRequest, runtime: Runtime = Depends(get_runtime)):
    """Add every site found in a newline/comma/semicolon separated blob."""
    added = runtime.sites.import_blocklist(body.content)
    return ImportSitesResponse(added=[_rule_response(r) for r in added], count=len(added))


@router.put(
    "/sites/{rule_id}/schedule",
    response_model=BlockRuleResponse,
    summary="Set or clear a block schedule",
)
def update_schedule(
    rule_id: str, body: ScheduleRequest, runtime: Runtime = Depends(get_runtime)
):
    """Set both window bounds, or send both as null to block permanently."""
    try:
        rule = runtime.sites.update_schedule(rule_id, body.start, body.end)
    except InvalidScheduleError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if rule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Site not found")
    return _rule_response(rule)
