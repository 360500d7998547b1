"""Deal pipeline endpoints — filtered list, stats, CSV export, partner lookup.

Admins see every deal and may search and filter by partner. Partners
only ever receive their own deals; partner filters are ignored for them.
"""
# ruff: noqa: B008

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.auth import Viewer, get_viewer, require_admin
from src.db.engine import get_session
from src.db.repository import load_deals, load_partners
from src.pipeline.export import export_deals_csv, export_filename
from src.pipeline.filters import filter_deals, has_active_filters, scope_deals
from src.pipeline.partners import PartnerDirectory, unique_partner_options
from src.pipeline.stats import compute_stats, pipeline_overview
from src.schemas.deals import ALL, DealFilters, DealRecord, DealStats, PartnerRecord, PipelineView

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/deals", tags=["deals"])


def deal_filters(
    q: str = Query("", description="Search customer, contact or partner name"),
    partner: str = Query(ALL, description='"all", "unassigned" or a partner id'),
    status: str = Query(ALL, description='"all" (hides lost deals) or a status'),
) -> DealFilters:
    return DealFilters(search_query=q, selected_partner=partner, selected_status=status)


async def _visible_deals(db: AsyncSession, viewer: Viewer) -> tuple[list[DealRecord], PartnerDirectory]:
    deals = await load_deals(db, partner_id=viewer.partner_id)
    partners = await load_partners(db) if viewer.is_privileged else []
    return deals, PartnerDirectory(partners)


@router.get("", response_model=PipelineView)
async def list_deals(
    filters: DealFilters = Depends(deal_filters),
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(get_viewer),
) -> PipelineView:
    deals, directory = await _visible_deals(db, viewer)

    filtered = filter_deals(deals, filters, directory, viewer.is_privileged)
    scoped = scope_deals(deals, filters, directory, viewer.is_privileged)
    pipeline_stats, filtered_stats = pipeline_overview(deals, scoped, viewer.is_privileged)

    return PipelineView(
        deals=filtered,
        filters=filters,
        has_active_filters=has_active_filters(filters),
        partner_options=unique_partner_options(deals) if viewer.is_privileged else [],
        pipeline_stats=pipeline_stats,
        filtered_stats=filtered_stats,
    )


@router.get("/stats", response_model=DealStats)
async def deal_stats(
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(get_viewer),
) -> DealStats:
    """Per-status stats over every deal visible to the viewer."""
    deals, _ = await _visible_deals(db, viewer)
    return compute_stats(deals)


@router.get("/export.csv")
async def export_csv(
    filters: DealFilters = Depends(deal_filters),
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(get_viewer),
) -> Response:
    deals, directory = await _visible_deals(db, viewer)
    filtered = filter_deals(deals, filters, directory, viewer.is_privileged)
    body = export_deals_csv(filtered, viewer.is_privileged, directory)
    logger.info("CSV export by %s (%d deals)", viewer.username, len(filtered))
    return Response(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.get("/partners/{partner_id}", response_model=PartnerRecord)
async def get_partner(
    partner_id: str,
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(require_admin),
) -> PartnerRecord:
    directory = PartnerDirectory(await load_partners(db))
    return directory.get(partner_id)
