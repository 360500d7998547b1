"""CSV export of a deal list.

Output is BOM-prefixed so spreadsheet apps pick up UTF-8. Admin exports
get a leading "Partner" column.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Sequence
from datetime import date, datetime
from typing import Any

from src.pipeline.filters import PartnerResolver
from src.schemas.deals import DealRecord

logger = logging.getLogger(__name__)

BOM = "\ufeff"

HEADERS = [
    "Deal ID",
    "Customer Name",
    "Contact Name",
    "Customer Email",
    "Customer Phone",
    "Address",
    "City",
    "State",
    "Zip",
    "Country",
    "Opportunity Amount",
    "Commission Rate",
    "Status",
    "Expected Close Date",
    "Last Followup",
    "Camera Count",
    "Interested Usecases",
    "Notes",
    "Created At",
    "Updated At",
]


def _fmt_date(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.isoformat()


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def deal_row(deal: DealRecord) -> list[str]:
    return [
        deal.id,
        deal.customer_name,
        _cell(deal.contact_name),
        _cell(deal.customer_email),
        _cell(deal.customer_phone),
        _cell(deal.customer_address),
        _cell(deal.customer_city),
        _cell(deal.customer_state),
        _cell(deal.customer_zip),
        _cell(deal.customer_country),
        _cell(deal.opportunity_amount),
        _cell(deal.commission_rate),
        deal.status,
        _fmt_date(deal.expected_close_date),
        _fmt_date(deal.last_followup),
        _cell(deal.camera_count),
        ";".join(deal.interested_usecases),
        _cell(deal.notes),
        _fmt_date(deal.created_at),
        _fmt_date(deal.updated_at),
    ]


def export_deals_csv(
    deals: Sequence[DealRecord],
    is_privileged: bool,
    partner_resolver: PartnerResolver | None = None,
) -> str:
    """Render `deals` as CSV text (rows joined by "\\n").

    Cells containing a comma, quote or line break are quoted; quotes are doubled.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)

    writer.writerow(["Partner", *HEADERS] if is_privileged else HEADERS)
    for deal in deals:
        row = deal_row(deal)
        if is_privileged:
            partner = partner_resolver(deal.partner_id) if deal.partner_id and partner_resolver else "Unassigned"
            row.insert(0, partner)
        writer.writerow(row)

    logger.info("Exported %d deals to CSV", len(deals))
    return BOM + buf.getvalue().rstrip("\n")


def export_filename(today: date | None = None) -> str:
    return f"deals_{(today or date.today()).isoformat()}.csv"
