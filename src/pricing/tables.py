"""Built-in pricing tables and the loader that validates them.

Raw tables are plain dicts (the shape they have in the JSON override
file). `load_pricing_table` / `load_pallet_table` turn them into frozen
pydantic models once; anything malformed raises ConfigurationError.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from src.config import settings
from src.errors import ConfigurationError
from src.schemas.pricing import PalletPricingTable, PricingTable

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Safety product line
# ---------------------------------------------------------------------------

SAFETY_PRICING: dict[str, Any] = {
    "base_package": {
        "name": "Core Package",
        "price": "5000",
        "included_cameras": 5,
        "included_scenarios": 3,
    },
    "subscription_types": [
        {"id": "monthly", "name": "Monthly", "description": "Month-to-month", "months": 1},
        {"id": "threeMonth", "name": "Pilot", "description": "3 month pilot program", "months": 3},
        {"id": "yearly", "name": "Annual", "description": "1 year contract", "months": 12, "discount": "0.2"},
        {"id": "threeYear", "name": "Three Year", "description": "3 year contract", "months": 36, "discount": "0.3"},
        {
            "id": "perpetual",
            "name": "Perpetual License",
            "description": "One-time perpetual license",
            "months": 0,
            "discount": "0.2",
            "perpetual_multiplier": 3,
        },
    ],
    "camera_tiers": [
        {"threshold": 1, "price_per_camera": "50", "price_all_scenarios": "60", "label": "Up to 20 Cameras"},
        {"threshold": 21, "price_per_camera": "40", "price_all_scenarios": "50", "label": "21-100 Cameras"},
        {"threshold": 101, "price_per_camera": "30", "price_all_scenarios": "40", "label": "100+ Cameras"},
    ],
    "scenarios": [
        "PPE Compliance",
        "Area Controls",
        "Forklift Safety",
        "Emergency Events",
        "Hazard Warnings",
        "Behavioral Safety",
        "Mobile Phone Compliance",
        "Staircase Safety",
        "Housekeeping",
        "Headcounts",
        "Occupancy Metrics",
        "Spills & Leaks Detection",
    ],
    "infrastructure_cost_per_camera": "0",
    "max_discount": "30",
    "add_ons": {
        "edge_server": "3000",
        "implementation": "10000",
        "speaker": "950",
        "travel": "2000",
    },
}

# ---------------------------------------------------------------------------
# Pallet product line
# ---------------------------------------------------------------------------

PALLET_PRICING: dict[str, Any] = {
    "subscription_types": [
        {"id": "monthly", "name": "Monthly Subscription", "description": "Billed Monthly",
         "rate_card": "monthly", "months_billed": 1},
        {"id": "pilot", "name": "3-Month Pilot", "description": "3 months upfront",
         "rate_card": "monthly", "months_billed": 3},
        {"id": "yearly", "name": "Annual Agreement", "description": "20% off over monthly",
         "rate_card": "yearly", "months_billed": 12},
    ],
    "rates": {
        "monthly": {"first_band": "100", "second_band": "90", "remainder": "80"},
        "yearly": {"first_band": "80", "second_band": "72", "remainder": "64"},
    },
    "first_band_size": 8,
    "second_band_size": 8,
    "edge_server_cost": "3500",
    "cameras_per_edge_server": 16,
    "min_cameras": 8,
    "max_cameras": 200,
    "max_discount": "50",
    "scenarios": ["Build Count", "Repair Count", "Dismantle Count", "Board Count"],
}


def _describe(exc: PydanticValidationError) -> str:
    """Flatten pydantic errors into one line: `loc: message; ...`."""
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in exc.errors()
    )


def load_pricing_table(raw: dict[str, Any]) -> PricingTable:
    """Validate a raw safety pricing table.

    Raises:
        ConfigurationError: the table is missing fields, has gaps or overlaps
            between camera tiers, or duplicates ids.
    """
    try:
        return PricingTable.model_validate(raw)
    except PydanticValidationError as exc:
        msg = f"Invalid pricing table: {_describe(exc)}"
        raise ConfigurationError(msg) from exc


def load_pallet_table(raw: dict[str, Any]) -> PalletPricingTable:
    """Validate a raw pallet pricing table."""
    try:
        return PalletPricingTable.model_validate(raw)
    except PydanticValidationError as exc:
        msg = f"Invalid pallet pricing table: {_describe(exc)}"
        raise ConfigurationError(msg) from exc


@lru_cache(maxsize=1)
def get_pricing_table() -> PricingTable:
    """Active safety pricing table: the JSON override file if configured, else the built-in one."""
    path = settings.pricing.pricing_table_path
    if not path:
        return load_pricing_table(SAFETY_PRICING)

    override = Path(path)
    if not override.exists():
        msg = f"Pricing table file not found: {override}"
        raise ConfigurationError(msg)
    with open(override, encoding="utf-8") as f:
        raw = json.load(f)
    logger.info("Loaded pricing table override from %s", override)
    return load_pricing_table(raw)


@lru_cache(maxsize=1)
def get_pallet_table() -> PalletPricingTable:
    return load_pallet_table(PALLET_PRICING)
