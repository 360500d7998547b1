"""Quote pricing: tables, safety and pallet engines, currency, checkout."""

from src.pricing.engine import compute_quote
from src.pricing.pallet import compute_pallet_quote
from src.pricing.tables import get_pallet_table, get_pricing_table, load_pallet_table, load_pricing_table

__all__ = [
    "compute_pallet_quote",
    "compute_quote",
    "get_pallet_table",
    "get_pricing_table",
    "load_pallet_table",
    "load_pricing_table",
]
