# Form snapshot schemas; API request/response models live beside their routes
from vendor_grading.schemas.vendor_form import (
    VendorFormData,
    CompanyDetails,
    FinancialDetails,
    BankDetails,
    VendorReference,
    ContactPerson,
    VendorDocument,
    empty_vendor_form,
)

__all__ = [
    "VendorFormData",
    "CompanyDetails",
    "FinancialDetails",
    "BankDetails",
    "VendorReference",
    "ContactPerson",
    "VendorDocument",
    "empty_vendor_form",
]
