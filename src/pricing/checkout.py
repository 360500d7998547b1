"""Translate a quote into a payment-gateway checkout request.

No gateway SDK here: the caller submits the returned `CheckoutRequest`.
A quote with cameras becomes a per-camera subscription (starter kit
flagged in metadata for a follow-up charge); a quote with only the
starter kit becomes a one-time payment.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from src.config import CheckoutSettings, settings
from src.errors import ConfigurationError, ValidationError
from src.schemas.pricing import CheckoutLineItem, CheckoutRequest

logger = logging.getLogger(__name__)


def subscription_price_id(subscription_type: str, checkout: CheckoutSettings) -> str:
    """Gateway price id for a subscription term; anything but yearly/threeYear bills monthly."""
    if subscription_type == "yearly":
        return checkout.yearly_price_id
    if subscription_type == "threeYear":
        return checkout.three_year_price_id
    return checkout.monthly_price_id


def build_checkout_request(
    quote_id: str,
    customer_email: str,
    camera_count: int,
    subscription_type: str,
    discount_percentage: Decimal = Decimal("0"),
    starter_kit_included: bool = False,
    partner_id: str = "",
    checkout: CheckoutSettings | None = None,
) -> CheckoutRequest:
    """Build the checkout request for a saved quote.

    Raises:
        ValidationError: nothing to purchase (no cameras, no starter kit).
        ConfigurationError: the needed gateway price id is not configured.
    """
    checkout = checkout or settings.checkout
    base_url = checkout.frontend_url.rstrip("/")

    metadata = {
        "quoteId": quote_id,
        "cameraCount": str(camera_count),
        "subscriptionType": subscription_type,
        "includesStarterKit": "true" if starter_kit_included else "false",
        "partnerId": partner_id,
    }

    if camera_count > 0:
        mode = "subscription"
        price_id = subscription_price_id(subscription_type, checkout)
        items = [CheckoutLineItem(price=price_id, quantity=camera_count)]
        if starter_kit_included:
            metadata["starterKitPending"] = "true"
            metadata["starterKitPriceId"] = checkout.starter_kit_price_id
    elif starter_kit_included:
        mode = "payment"
        price_id = checkout.starter_kit_price_id
        items = [CheckoutLineItem(price=price_id, quantity=1)]
    else:
        msg = "No products selected for checkout"
        raise ValidationError(msg)

    if not price_id:
        msg = f"No gateway price id configured for {mode} checkout ({subscription_type})"
        raise ConfigurationError(msg)

    coupon = discount_percentage if discount_percentage > 0 else None

    logger.info("Checkout request built: quote=%s mode=%s cameras=%d", quote_id, mode, camera_count)

    return CheckoutRequest(
        mode=mode,
        line_items=items,
        customer_email=customer_email,
        success_url=f"{base_url}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
        cancel_url=f"{base_url}/quotes/{quote_id}",
        metadata=metadata,
        coupon_percent_off=coupon,
        coupon_name=f"Quote {quote_id} Special Discount" if coupon is not None else None,
    )
