"""Partner label resolution and the partner filter options."""

from __future__ import annotations

from collections.abc import Iterable

from src.errors import NotFoundError
from src.schemas.deals import UNASSIGNED, DealRecord, PartnerOption, PartnerRecord

UNKNOWN_PARTNER = "Unknown Partner"


class PartnerDirectory:
    """Exact-match lookup of partners by token identifier.

    Instances are callable, so a directory can be passed wherever a
    `partner_resolver` (id → label) is expected.
    """

    def __init__(self, partners: Iterable[PartnerRecord]) -> None:
        self._by_id: dict[str, PartnerRecord] = {}
        for partner in partners:
            if partner.token_identifier:
                self._by_id[partner.token_identifier] = partner

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, partner_id: object) -> bool:
        return partner_id in self._by_id

    def __call__(self, partner_id: str) -> str:
        return self.label(partner_id)

    def get(self, partner_id: str) -> PartnerRecord:
        """Hard lookup.

        Raises:
            NotFoundError: no partner has this token identifier.
        """
        try:
            return self._by_id[partner_id]
        except KeyError:
            msg = f"Partner not found: {partner_id}"
            raise NotFoundError(msg) from None

    def label(self, partner_id: str) -> str:
        """`"<company> - <contact>"`, or the placeholder for an unknown id."""
        partner = self._by_id.get(partner_id)
        if partner is None:
            return UNKNOWN_PARTNER
        company = partner.company_name or "Unknown Company"
        contact = partner.name or "Unknown Contact"
        return f"{company} - {contact}"


def unique_partner_options(deals: Iterable[DealRecord]) -> list[PartnerOption]:
    """Partner ids present in `deals`, first-seen order.

    The synthetic `unassigned` option leads the list when any deal has no partner.
    """
    seen: dict[str, None] = {}
    has_unassigned = False
    for deal in deals:
        if deal.partner_id:
            seen.setdefault(deal.partner_id, None)
        else:
            has_unassigned = True

    options = [PartnerOption(id=partner_id) for partner_id in seen]
    if has_unassigned:
        options.insert(0, PartnerOption(id=UNASSIGNED))
    return options
