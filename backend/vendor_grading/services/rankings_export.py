"""
Excel export of the vendor ranking table.
Blue header row with bold white text; the header stays frozen while scrolling.
"""
from __future__ import annotations

import io
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from vendor_grading.core.grade_bands import GRADE_BANDS

RANKING_COLUMNS = [
    ("rank", "Rank"),
    ("company_name", "Company"),
    ("email", "Email"),
    ("site_score", "Site (45)"),
    ("procurement_score", "Procurement (30)"),
    ("financial_score", "Financial (25)"),
    ("total_score", "Total (100)"),
    ("computed_grade", "Computed Grade"),
    ("admin_override_grade", "Override"),
    ("final_grade", "Final Grade"),
    ("category", "Category"),
    ("completion_percentage", "Form Completion %"),
    ("submitted", "Submitted"),
]

GRADE_FILLS = {
    "A": "C6EFCE",
    "B": "DDEBF7",
    "C": "FFEB9C",
    "D": "FFC7CE",
}


def _format_header(worksheet, ncols: int) -> None:
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")
    bottom_border = Border(bottom=Side(style="thin", color="000000"))
    for col in range(1, ncols + 1):
        cell = worksheet.cell(row=1, column=col)
        cell.fill = header_fill
        cell.font = header_font
        cell.border = bottom_border
        cell.alignment = Alignment(horizontal="center")


def build_rankings_workbook(rankings: list[dict[str, Any]]) -> io.BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = "Rankings"
    ws.append([label for _, label in RANKING_COLUMNS])
    final_col = [k for k, _ in RANKING_COLUMNS].index("final_grade") + 1
    for r in rankings:
        row = []
        for key, _ in RANKING_COLUMNS:
            value = r.get(key)
            if key == "submitted":
                value = "Yes" if value else "No"
            row.append(value)
        ws.append(row)
        grade = r.get("final_grade")
        if grade in GRADE_FILLS:
            color = GRADE_FILLS[grade]
            ws.cell(row=ws.max_row, column=final_col).fill = PatternFill(
                start_color=color, end_color=color, fill_type="solid"
            )
    _format_header(ws, len(RANKING_COLUMNS))

    for idx, (key, label) in enumerate(RANKING_COLUMNS):
        max_len = max([len(label)] + [len(str(r.get(key) or "")) for r in rankings]) + 2
        ws.column_dimensions[get_column_letter(idx + 1)].width = min(max_len, 50)
    ws.freeze_panes = "A2"

    legend = wb.create_sheet("Grade Bands")
    legend.append(["Grade", "Min Score", "Category", "Gate Note"])
    for band in GRADE_BANDS:
        legend.append([band.grade, band.min_score, band.category, band.gate_note])
    _format_header(legend, 4)
    legend.column_dimensions["C"].width = 22
    legend.column_dimensions["D"].width = 28

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf
