"""
Vendor form completion heuristic (0-100) for progress bars.
The one implementation behind form save, submit preview and empty-form creation.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping

from vendor_grading.schemas.vendor_form import VendorFormData

COMPANY_REQUIRED_FIELDS = (
    "company_name",
    "managing_director_name",
    "cin_number",
    "year_of_establishment",
    "gst_number",
    "company_origin",
    "pan_number",
)
ADDRESS_FIELDS = ("line1", "pin_code", "district", "state")
TURNOVER_FIELDS = ("fy2022_23", "fy2023_24", "fy2024_25", "fy2025_26")
BANK_FIELDS = ("bank_name", "branch", "account_number", "ifsc_code")

REFERENCE_SLOTS = 3
CONTACT_SLOTS = 1
DOCUMENT_SLOTS = 5


def _filled(value: Any) -> bool:
    return bool(str(value or "").strip())


def _as_form(form: VendorFormData | Mapping[str, Any] | None) -> VendorFormData:
    if isinstance(form, VendorFormData):
        return form
    return VendorFormData.model_validate(dict(form or {}))


def completion_counts(form: VendorFormData | Mapping[str, Any] | None) -> tuple[int, int]:
    """(filled, total) field counters."""
    form = _as_form(form)
    filled = 0
    total = 0

    cd = form.company_details
    for field in COMPANY_REQUIRED_FIELDS:
        total += 1
        if _filled(getattr(cd, field)):
            filled += 1

    addr = cd.registered_address
    for field in ADDRESS_FIELDS:
        total += 1
        if _filled(getattr(addr, field)):
            filled += 1

    turnover = form.financial_details.annual_turnover
    for field in TURNOVER_FIELDS:
        total += 1
        if (getattr(turnover, field) or 0) > 0:
            filled += 1

    bd = form.bank_details
    for field in BANK_FIELDS:
        total += 1
        if _filled(getattr(bd, field)):
            filled += 1

    valid_refs = sum(1 for r in form.vendor_references if _filled(r.company_name) and _filled(r.po_date))
    total += REFERENCE_SLOTS
    filled += min(valid_refs, REFERENCE_SLOTS)

    valid_contacts = sum(1 for c in form.contact_persons if _filled(c.name) and _filled(c.mail_id))
    total += CONTACT_SLOTS
    filled += min(valid_contacts, CONTACT_SLOTS)

    # files length is the only attachment signal; the legacy `attached` flag is ignored
    attached_docs = sum(1 for d in form.documents if len(d.files) > 0)
    total += DOCUMENT_SLOTS
    filled += min(attached_docs, DOCUMENT_SLOTS)

    return filled, total


def completion_percentage(filled: int, total: int) -> int:
    if total <= 0:
        return 0
    pct = Decimal(filled * 100) / Decimal(total)
    return int(pct.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def compute_completion(form: VendorFormData | Mapping[str, Any] | None) -> int:
    filled, total = completion_counts(form)
    return completion_percentage(filled, total)
