"""
Vendor registration form snapshot.
Accepts the camelCase JSON the vendor form sends; null values fall back to empty defaults
and unknown keys are kept so the stored form round-trips untouched.
"""
from __future__ import annotations

import math
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_DOCUMENTS = [
    "Certificate of Incorporation",
    "GST Certificate",
    "PAN Card",
    "MSME Certificate",
    "Cancelled Cheque",
    "Last Three year Financial reports",
    "Memorandum of Association (MOA)",
    "Article of Association (AOA)",
    "Last year GSTR Filings",
    "PO attachments",
]

DEFAULT_REFERENCE_ROWS = 5
DEFAULT_CONTACT_ROWS = 5


def _dict_rows(value: Any) -> Any:
    """Row lists keep only object entries; a scalar in place of the list reads as empty."""
    if isinstance(value, list):
        return [row for row in value if isinstance(row, dict)]
    return []


def _amount(value: Any) -> float:
    """Turnover figures: digit grouping commas are ignored, anything unparseable is 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return amount if math.isfinite(amount) else 0.0


Rows = Annotated[list[dict[str, Any]], BeforeValidator(_dict_rows)]
Amount = Annotated[float, BeforeValidator(_amount)]


class FormModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Address(FormModel):
    line1: str = ""
    line2: str = ""
    pin_code: str = ""
    district: str = ""
    state: str = ""


class CompanyDetails(FormModel):
    company_name: str = ""
    managing_director_name: str = ""
    type_of_organisation: str = ""
    cin_number: str = ""
    year_of_establishment: str = ""
    gst_number: str = ""
    company_origin: str = ""
    pan_number: str = ""
    registered_address: Address = Field(default_factory=Address)
    is_msme: bool = Field(False, alias="isMSME")
    goods_and_services: Rows = Field(default_factory=list)
    company_website: str = ""


class AnnualTurnover(FormModel):
    fy2022_23: Amount = Field(0.0, alias="fy2022_23")
    fy2023_24: Amount = Field(0.0, alias="fy2023_24")
    fy2024_25: Amount = Field(0.0, alias="fy2024_25")
    fy2025_26: Amount = Field(0.0, alias="fy2025_26")
    attachments: Rows = Field(default_factory=list)


class FinancialDetails(FormModel):
    annual_turnover: AnnualTurnover = Field(default_factory=AnnualTurnover)
    employment_details: dict[str, Any] = Field(default_factory=dict)


class BankDetails(FormModel):
    bank_name: str = ""
    branch: str = ""
    account_number: str = ""
    ifsc_code: str = ""
    swift_code: str = ""


class VendorReference(FormModel):
    company_name: str = ""
    po_date: str = ""
    current_status: str = ""
    contact_person_name: str = ""
    contact_number: str = ""
    mail_id: str = ""
    completion_date: str = ""
    po_value: float | str = 0.0
    remarks: str = ""


class ContactPerson(FormModel):
    name: str = ""
    designation: str = ""
    base_location: str = ""
    contact_number: str = ""
    mail_id: str = ""
    is_primary: bool = False


class VendorDocument(FormModel):
    doc_name: str = ""
    # Legacy flag; completion only looks at files.
    attached: bool = False
    files: Rows = Field(default_factory=list)
    remarks: str = ""


class VendorFormData(FormModel):
    id: str | None = None
    email: str = ""
    company_details: CompanyDetails = Field(default_factory=CompanyDetails)
    financial_details: FinancialDetails = Field(default_factory=FinancialDetails)
    bank_details: BankDetails = Field(default_factory=BankDetails)
    vendor_references: Annotated[list[VendorReference], BeforeValidator(_dict_rows)] = Field(default_factory=list)
    contact_persons: Annotated[list[ContactPerson], BeforeValidator(_dict_rows)] = Field(default_factory=list)
    documents: Annotated[list[VendorDocument], BeforeValidator(_dict_rows)] = Field(default_factory=list)
    completion_percentage: int | float = 0

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def empty_vendor_form(email: str, vendor_id: str | None = None) -> VendorFormData:
    return VendorFormData(
        id=vendor_id,
        email=email,
        company_details=CompanyDetails(goods_and_services=[{"category": ""} for _ in range(3)]),
        vendor_references=[VendorReference() for _ in range(DEFAULT_REFERENCE_ROWS)],
        contact_persons=[ContactPerson() for _ in range(DEFAULT_CONTACT_ROWS)],
        documents=[VendorDocument(doc_name=name) for name in DEFAULT_DOCUMENTS],
    )
