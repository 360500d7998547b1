"""Quote endpoints — pricing, saved quotes, checkout requests, exchange rates."""
# ruff: noqa: B008

from __future__ import annotations

import logging
import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.auth import Viewer, get_viewer
from src.db.engine import get_session
from src.db.repository import get_saved_quote, list_saved_quotes, save_quote
from src.errors import NotFoundError, ValidationError
from src.integrations.exchange_rates.client import exchange_rate_client
from src.models.quote import SavedQuote
from src.pricing.checkout import build_checkout_request
from src.pricing.engine import compute_quote
from src.pricing.pallet import compute_pallet_quote
from src.pricing.tables import get_pallet_table, get_pricing_table
from src.schemas.pricing import (
    CheckoutOptions,
    CheckoutRequest,
    ExchangeRates,
    PalletQuoteDetails,
    PalletQuoteInput,
    PricingTable,
    QuoteDetails,
    QuoteInput,
    SavedQuoteSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quotes", tags=["quotes"])


# ── Pricing (stateless) ──────────────────────────────────────────────


@router.get("/pricing-table", response_model=PricingTable)
async def pricing_table(viewer: Viewer = Depends(get_viewer)) -> PricingTable:
    return get_pricing_table()


@router.get("/exchange-rates", response_model=ExchangeRates)
async def exchange_rates(
    base: str = Query("USD", min_length=3, max_length=3),
    viewer: Viewer = Depends(get_viewer),
) -> ExchangeRates:
    return await exchange_rate_client.fetch(base.upper())


@router.post("/safety", response_model=QuoteDetails)
async def price_safety_quote(
    quote_input: QuoteInput,
    viewer: Viewer = Depends(get_viewer),
) -> QuoteDetails:
    return compute_quote(quote_input, get_pricing_table())


@router.post("/pallet", response_model=PalletQuoteDetails)
async def price_pallet_quote(
    pallet_input: PalletQuoteInput,
    viewer: Viewer = Depends(get_viewer),
) -> PalletQuoteDetails:
    return compute_pallet_quote(pallet_input, get_pallet_table())


# ── Saved quotes ─────────────────────────────────────────────────────


@router.post("/safety/save", response_model=SavedQuoteSummary, status_code=201)
async def save_safety_quote(
    quote_input: QuoteInput,
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(get_viewer),
) -> SavedQuote:
    details = compute_quote(quote_input, get_pricing_table())
    return await save_quote(db, viewer.username, details)


@router.post("/pallet/save", response_model=SavedQuoteSummary, status_code=201)
async def save_pallet_quote(
    pallet_input: PalletQuoteInput,
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(get_viewer),
) -> SavedQuote:
    details = compute_pallet_quote(pallet_input, get_pallet_table())
    return await save_quote(db, viewer.username, details)


@router.get("", response_model=list[SavedQuoteSummary])
async def list_quotes(
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(get_viewer),
) -> list[SavedQuote]:
    created_by = None if viewer.is_privileged else viewer.username
    return await list_saved_quotes(db, created_by=created_by)


async def _owned_quote(db: AsyncSession, quote_id: uuid.UUID, viewer: Viewer) -> SavedQuote:
    quote = await get_saved_quote(db, quote_id)
    if not viewer.is_privileged and quote.created_by != viewer.username:
        # Other partners' quotes are indistinguishable from missing ones
        msg = f"Quote not found: {quote_id}"
        raise NotFoundError(msg)
    return quote


@router.get("/{quote_id}", response_model=SavedQuoteSummary)
async def get_quote(
    quote_id: uuid.UUID,
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(get_viewer),
) -> SavedQuote:
    return await _owned_quote(db, quote_id, viewer)


@router.post("/{quote_id}/checkout", response_model=CheckoutRequest)
async def checkout_quote(
    quote_id: uuid.UUID,
    options: CheckoutOptions,
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(get_viewer),
) -> CheckoutRequest:
    quote = await _owned_quote(db, quote_id, viewer)

    email = options.customer_email or quote.email
    if not email:
        msg = "A customer email is required for checkout"
        raise ValidationError(msg)

    discount = Decimal(str(quote.quote_data.get("discount_percentage", "0")))
    return build_checkout_request(
        quote_id=str(quote.id),
        customer_email=email,
        camera_count=quote.camera_count,
        subscription_type=quote.subscription_type,
        discount_percentage=discount,
        starter_kit_included=options.starter_kit_included,
        partner_id=quote.created_by,
    )
