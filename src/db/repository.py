"""Data access for the API layer.

Loads read-only snapshots (DealRecord, PartnerRecord) for the pipeline
engine and persists computed quotes. Engines never see ORM objects.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.errors import NotFoundError
from src.models.deal import Deal
from src.models.enums import QuoteProduct
from src.models.quote import SavedQuote
from src.models.user import User
from src.schemas.deals import DealRecord, PartnerRecord
from src.schemas.pricing import PalletQuoteDetails, QuoteDetails

logger = logging.getLogger(__name__)


# ── Snapshots ────────────────────────────────────────────────────────


def deal_to_record(deal: Deal) -> DealRecord:
    return DealRecord(
        id=str(deal.id),
        created_at=deal.created_at,
        updated_at=deal.updated_at,
        partner_id=deal.partner_id or None,
        user_id=deal.user_id,
        status=deal.status,
        opportunity_amount=deal.opportunity_amount,
        commission_rate=deal.commission_rate,
        expected_close_date=deal.expected_close_date,
        last_followup=deal.last_followup,
        customer_name=deal.customer_name,
        contact_name=deal.contact_name,
        customer_email=deal.customer_email,
        customer_phone=deal.customer_phone,
        customer_address=deal.customer_address,
        customer_city=deal.customer_city,
        customer_state=deal.customer_state,
        customer_zip=deal.customer_zip,
        customer_country=deal.customer_country,
        camera_count=deal.camera_count,
        interested_usecases=list(deal.interested_usecases or []),
        notes=deal.notes,
        assignment_notes=deal.assignment_notes,
    )


def user_to_partner(user: User) -> PartnerRecord:
    return PartnerRecord(
        token_identifier=user.token_identifier,
        name=user.name,
        company_name=user.company_name,
        email=user.email,
        role=user.role,
        partner_status=user.partner_status,
    )


async def load_deals(db: AsyncSession, partner_id: str | None = None) -> list[DealRecord]:
    """All deals, newest first; restricted to one partner when `partner_id` is given."""
    stmt = select(Deal).order_by(Deal.created_at.desc())
    if partner_id is not None:
        stmt = stmt.where(Deal.partner_id == partner_id)
    result = await db.execute(stmt)
    return [deal_to_record(d) for d in result.scalars().all()]


async def load_partners(db: AsyncSession) -> list[PartnerRecord]:
    """Every user account; the directory labels any token identifier it is asked about."""
    result = await db.execute(select(User).order_by(User.created_at))
    return [user_to_partner(u) for u in result.scalars().all()]


# ── Saved quotes ─────────────────────────────────────────────────────


async def save_quote(
    db: AsyncSession,
    created_by: str,
    details: QuoteDetails | PalletQuoteDetails,
) -> SavedQuote:
    """Persist a computed quote with its full payload as JSON."""
    if isinstance(details, PalletQuoteDetails):
        product = QuoteProduct.PALLET
        cameras = details.cameras
        total: Decimal = details.total
    else:
        product = QuoteProduct.SAFETY
        cameras = details.total_cameras
        total = details.total_contract_value

    quote = SavedQuote(
        created_by=created_by,
        product=product.value,
        customer_name=details.client_info.name or details.client_info.company,
        company_name=details.client_info.company or None,
        email=details.client_info.email or None,
        camera_count=cameras,
        subscription_type=details.subscription_type,
        total_amount=total.quantize(Decimal("0.01")),
        quote_data=details.model_dump(mode="json"),
    )
    db.add(quote)
    await db.flush()
    await db.refresh(quote)
    logger.info("Saved %s quote %s for %s", product.value, quote.id, created_by)
    return quote


async def get_saved_quote(db: AsyncSession, quote_id: uuid.UUID) -> SavedQuote:
    quote = await db.get(SavedQuote, quote_id)
    if quote is None:
        msg = f"Quote not found: {quote_id}"
        raise NotFoundError(msg)
    return quote


async def list_saved_quotes(db: AsyncSession, created_by: str | None = None) -> list[SavedQuote]:
    stmt = select(SavedQuote).order_by(SavedQuote.created_at.desc())
    if created_by is not None:
        stmt = stmt.where(SavedQuote.created_by == created_by)
    result = await db.execute(stmt)
    return list(result.scalars().all())
