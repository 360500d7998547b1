"""Deal pipeline — filtering, per-status stats, partner labels, CSV export."""

from src.pipeline.export import export_deals_csv
from src.pipeline.filters import clear_filters, filter_deals, has_active_filters, scope_deals
from src.pipeline.partners import PartnerDirectory, unique_partner_options
from src.pipeline.stats import compute_stats, pipeline_overview

__all__ = [
    "filter_deals",
    "scope_deals",
    "has_active_filters",
    "clear_filters",
    "compute_stats",
    "pipeline_overview",
    "PartnerDirectory",
    "unique_partner_options",
    "export_deals_csv",
]
