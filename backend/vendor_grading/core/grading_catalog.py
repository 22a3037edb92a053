"""
Grading parameter catalog.
Three reviewer sections, each with a fixed share of 100 split across its parameters.
Reviewers rate every parameter 1-5; a 5 earns the full parameter weight.
"""
from __future__ import annotations

from dataclasses import dataclass

SITE = "site"
PROCUREMENT = "procurement"
FINANCIAL = "financial"

GRADING_SECTIONS = (SITE, PROCUREMENT, FINANCIAL)

# Section shares of the 100-point total (must sum to 100).
SECTION_WEIGHTS = {
    SITE: 45,
    PROCUREMENT: 30,
    FINANCIAL: 25,
}

SECTION_LABELS = {
    SITE: "Site",
    PROCUREMENT: "Procurement",
    FINANCIAL: "Financial",
}

MIN_RATING = 1
MAX_RATING = 5

RATING_LABELS = {
    1: "Poor",
    2: "Below Average",
    3: "Average",
    4: "Good",
    5: "Excellent",
}


@dataclass(frozen=True)
class GradingParameter:
    key: str
    section: str
    weight: int
    name: str
    description: str
    ordinal: int


def _section(section: str, rows: list[tuple[str, int, str, str]]) -> tuple[GradingParameter, ...]:
    return tuple(
        GradingParameter(key=key, section=section, weight=weight, name=name, description=desc, ordinal=i + 1)
        for i, (key, weight, name, desc) in enumerate(rows)
    )


SITE_PARAMETERS = _section(SITE, [
    ("material_timely_delivery", 10, "Material Timely Delivery",
     "Material delivered to site on or before the committed dates."),
    ("support_at_site", 7, "Support at Site",
     "Availability of vendor supervisors and technicians at site when required."),
    ("execution_time", 7, "Execution Time",
     "Work executed within the agreed schedule."),
    ("safety_compliance", 7, "Safety Compliance",
     "Adherence to site safety rules, PPE usage and permit-to-work practices."),
    ("workmanship_quality", 7, "Workmanship Quality",
     "Quality of installation and finishing; rework required."),
    ("planning_coordination", 3, "Planning & Coordination",
     "Advance planning and coordination with the site team and other contractors."),
    ("responsiveness_rectification", 4, "Responsiveness & Rectification",
     "Speed of response to punch points and defect rectification."),
])

PROCUREMENT_PARAMETERS = _section(PROCUREMENT, [
    ("timely_response_rfq", 5, "Timely Response to RFQ",
     "Quotations and clarifications returned within the requested time."),
    ("negotiation_approach", 5, "Negotiation Approach",
     "Openness and fairness during commercial negotiation."),
    ("data_sharing", 5, "Data Sharing",
     "Completeness and timeliness of technical and commercial documents shared."),
    ("flexibility_payment_terms", 5, "Flexibility in Payment Terms",
     "Willingness to accept the company's standard payment terms."),
    ("timely_lc_bg_submission", 5, "Timely LC/BG Submission",
     "Letters of credit and bank guarantees submitted on time."),
    ("no_delivery_hold_payment", 3, "No Delivery Hold for Payment",
     "Deliveries not withheld over payment disputes."),
    ("contractual_compliance", 2, "Contractual Compliance",
     "Adherence to purchase order and contract terms."),
])

FINANCIAL_PARAMETERS = _section(FINANCIAL, [
    ("revenue_trend", 6, "Revenue Trend",
     "Direction and stability of revenue over the last three years."),
    ("profitability_trend", 6, "Profitability Trend",
     "Direction and stability of operating and net margins."),
    ("liquidity_position", 5, "Liquidity Position",
     "Current ratio and working-capital headroom."),
    ("debt_solvency", 4, "Debt & Solvency",
     "Leverage and ability to service debt."),
    ("cash_flow_health", 4, "Cash Flow Health",
     "Operating cash generation relative to obligations."),
])

_PARAMETERS_BY_SECTION = {
    SITE: SITE_PARAMETERS,
    PROCUREMENT: PROCUREMENT_PARAMETERS,
    FINANCIAL: FINANCIAL_PARAMETERS,
}


def is_valid_section(section: str) -> bool:
    return section in _PARAMETERS_BY_SECTION


def get_parameters_for_section(section: str) -> tuple[GradingParameter, ...]:
    """Parameters of a section in display order; empty tuple for an unknown section."""
    return _PARAMETERS_BY_SECTION.get(section, ())


def parameter_keys(section: str) -> frozenset[str]:
    return frozenset(p.key for p in get_parameters_for_section(section))


def all_parameters() -> tuple[GradingParameter, ...]:
    return SITE_PARAMETERS + PROCUREMENT_PARAMETERS + FINANCIAL_PARAMETERS


def _check_catalog() -> None:
    if sum(SECTION_WEIGHTS.values()) != 100:
        raise ValueError("Section weights must sum to 100")
    for section, share in SECTION_WEIGHTS.items():
        params = _PARAMETERS_BY_SECTION[section]
        if sum(p.weight for p in params) != share:
            raise ValueError(f"Parameter weights for {section} must sum to {share}")
        if len({p.key for p in params}) != len(params):
            raise ValueError(f"Duplicate parameter key in {section}")
    keys = [p.key for p in all_parameters()]
    if len(set(keys)) != len(keys):
        raise ValueError("Parameter keys must be unique across sections")


_check_catalog()
