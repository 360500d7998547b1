"""Versioned upgrades for documents exported from the previous document store.

Each document carries `_schemaVersion` (absent = 0). Upgrading runs every
step above the document's version in order, so a document is upgraded
exactly once and already-current documents pass through untouched.
Upgrades return a new dict; the input is never mutated.

Deal steps:
    1. dual approval/progress status → single status
    2. contactName backfilled from customerName
    3. split address fields initialised
    4. legacy single statuses mapped onto the current pipeline stages
User steps:
    1. createdAt from joinDate (or now)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from src.models.enums import DealStatus

logger = logging.getLogger(__name__)

SCHEMA_VERSION_KEY = "_schemaVersion"

Document = dict[str, Any]
Step = Callable[[Document], Document]

_ADDRESS_PARTS = ("customerCity", "customerState", "customerZip", "customerCountry")

# Statuses produced by step 1 that the current pipeline no longer has
LEGACY_STATUS_MAP: dict[str, str] = {
    "registered": DealStatus.APPROVED.value,
    "in_progress": DealStatus.TWO_PLUS_CALLS.value,
    "pending": DealStatus.FIRST_CALL.value,
}


# ── Deal steps ───────────────────────────────────────────────────────


def _combine_status(doc: Document) -> Document:
    approval = doc.get("approvalStatus")
    progress = doc.get("progressStatus")
    if approval is None and progress is None:
        # Never had the dual fields; keep whatever single status it has
        doc.setdefault("status", DealStatus.NEW.value)
        return doc

    status = DealStatus.NEW.value
    if approval == "registered":
        if progress in ("in_progress", "won", "lost"):
            status = progress
        else:
            status = "registered"

    doc["status"] = status
    doc["_approvalStatus_deprecated"] = doc.pop("approvalStatus", None)
    doc["_progressStatus_deprecated"] = doc.pop("progressStatus", None)
    return doc


def _backfill_contact_name(doc: Document) -> Document:
    if not doc.get("contactName"):
        doc["contactName"] = doc.get("customerName")
    return doc


def _split_address(doc: Document) -> Document:
    if any(doc.get(part) for part in _ADDRESS_PARTS):
        return doc
    doc["customerAddress"] = doc.get("customerAddress") or ""
    for part in _ADDRESS_PARTS:
        doc[part] = ""
    return doc


def _map_legacy_status(doc: Document) -> Document:
    status = doc.get("status")
    if status in LEGACY_STATUS_MAP:
        doc["status"] = LEGACY_STATUS_MAP[status]
    return doc


DEAL_STEPS: list[Step] = [_combine_status, _backfill_contact_name, _split_address, _map_legacy_status]


# ── User steps ───────────────────────────────────────────────────────


def _user_created_at(doc: Document) -> Document:
    if doc.get("createdAt") is None:
        doc["createdAt"] = doc.get("joinDate") or int(time.time() * 1000)
    return doc


USER_STEPS: list[Step] = [_user_created_at]


# ── Runner ───────────────────────────────────────────────────────────


def _upgrade(doc: Document, steps: list[Step], kind: str) -> Document:
    upgraded = dict(doc)
    version = int(upgraded.get(SCHEMA_VERSION_KEY, 0))
    if version > len(steps):
        msg = f"{kind} document {doc.get('_id')!r} has schema version {version}, newer than {len(steps)}"
        raise ValueError(msg)

    for step in steps[version:]:
        upgraded = step(upgraded)
    upgraded[SCHEMA_VERSION_KEY] = len(steps)

    if version < len(steps):
        logger.debug("Upgraded %s %s from v%d to v%d", kind, doc.get("_id"), version, len(steps))
    return upgraded


def upgrade_deal(doc: Document) -> Document:
    """Bring a legacy deal document to the current schema."""
    return _upgrade(doc, DEAL_STEPS, "deal")


def upgrade_user(doc: Document) -> Document:
    """Bring a legacy user document to the current schema."""
    return _upgrade(doc, USER_STEPS, "user")
