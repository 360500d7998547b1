"""Import a JSON export of the previous document store.

Usage:
    python -m src.db.importer export.json

The export is `{"deals": [...], "users": [...]}` with camelCase documents
and millisecond epoch timestamps. Every document is upgraded to the
current schema first (see src.migrations.records), then inserted. Deals
already imported (same legacy id) and users with a known token
identifier are skipped, so the import can be re-run.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.migrations.records import upgrade_deal, upgrade_user
from src.models.deal import Deal
from src.models.enums import UserRole
from src.models.user import User

logger = logging.getLogger(__name__)


class ImportSummary(BaseModel):
    deals_imported: int = 0
    deals_skipped: int = 0
    users_imported: int = 0
    users_skipped: int = 0


# ── Field conversion ─────────────────────────────────────────────────


def _ts(value: Any) -> datetime | None:
    """Millisecond epoch → aware datetime; None/0/NaN → None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        millis = float(value)
    except (TypeError, ValueError):
        return None
    if millis != millis or millis <= 0:
        return None
    return datetime.fromtimestamp(millis / 1000, tz=UTC)


def _decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    amount = Decimal(str(value))
    return amount if amount.is_finite() else None


def deal_from_document(doc: dict[str, Any]) -> Deal:
    """Build a Deal row from an already-upgraded deal document."""
    created = _ts(doc.get("createdAt")) or _ts(doc.get("_creationTime")) or datetime.now(UTC)
    return Deal(
        legacy_id=doc.get("_id"),
        created_at=created,
        updated_at=_ts(doc.get("updatedAt")),
        partner_id=doc.get("partnerId") or None,
        user_id=doc.get("userId"),
        assigned_by=doc.get("assignedBy"),
        assignment_notes=doc.get("assignmentNotes"),
        status=doc["status"],
        opportunity_amount=_decimal(doc.get("opportunityAmount")),
        commission_rate=_decimal(doc.get("commissionRate")),
        expected_close_date=_ts(doc.get("expectedCloseDate")),
        last_followup=_ts(doc.get("lastFollowup")),
        customer_name=doc.get("customerName") or "",
        contact_name=doc.get("contactName"),
        customer_email=doc.get("customerEmail"),
        customer_phone=doc.get("customerPhone"),
        customer_address=doc.get("customerAddress"),
        customer_city=doc.get("customerCity"),
        customer_state=doc.get("customerState"),
        customer_zip=doc.get("customerZip"),
        customer_country=doc.get("customerCountry"),
        camera_count=doc.get("cameraCount"),
        interested_usecases=list(doc.get("interestedUsecases") or []),
        notes=doc.get("notes"),
    )


def user_from_document(doc: dict[str, Any]) -> User:
    """Build a User row from an already-upgraded user document."""
    return User(
        token_identifier=doc["tokenIdentifier"],
        created_at=_ts(doc.get("createdAt")) or datetime.now(UTC),
        email=doc.get("email") or "",
        name=doc.get("name"),
        role=doc.get("role") or UserRole.USER.value,
        company_name=doc.get("companyName"),
        phone=doc.get("phone"),
        country=doc.get("country"),
        industry_focus=doc.get("industryFocus"),
        website=doc.get("website"),
        partner_status=doc.get("partnerStatus"),
        join_date=_ts(doc.get("joinDate")),
        onboarding_complete=bool(doc.get("onboardingComplete", False)),
    )


# ── Import ───────────────────────────────────────────────────────────


async def import_export(db: AsyncSession, payload: dict[str, Any]) -> ImportSummary:
    """Upgrade and insert every document in `payload`. Caller commits."""
    summary = ImportSummary()

    known_tokens = set((await db.execute(select(User.token_identifier))).scalars().all())
    for raw in payload.get("users", []):
        doc = upgrade_user(raw)
        token = doc.get("tokenIdentifier")
        if not token or token in known_tokens:
            summary.users_skipped += 1
            continue
        db.add(user_from_document(doc))
        known_tokens.add(token)
        summary.users_imported += 1

    known_deals = set((await db.execute(select(Deal.legacy_id))).scalars().all())
    for raw in payload.get("deals", []):
        doc = upgrade_deal(raw)
        legacy_id = doc.get("_id")
        if legacy_id and legacy_id in known_deals:
            summary.deals_skipped += 1
            continue
        db.add(deal_from_document(doc))
        if legacy_id:
            known_deals.add(legacy_id)
        summary.deals_imported += 1

    await db.flush()
    logger.info(
        "Import finished: %d deals (%d skipped), %d users (%d skipped)",
        summary.deals_imported, summary.deals_skipped, summary.users_imported, summary.users_skipped,
    )
    return summary


def load_export(path: str | Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


async def _run(path: str) -> ImportSummary:
    from src.db.engine import async_session_factory, close_db, init_db

    await init_db()
    try:
        async with async_session_factory() as session:
            summary = await import_export(session, load_export(path))
            await session.commit()
        return summary
    finally:
        await close_db()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python -m src.db.importer <export.json>", file=sys.stderr)
        sys.exit(2)
    logging.basicConfig(level=logging.INFO)
    result = asyncio.run(_run(sys.argv[1]))
    print(result.model_dump_json(indent=2))
