"""
Seed a demo vendor with a filled form, one reviewer per section and a full set of ratings.
Run from backend: python -m scripts.seed
"""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from vendor_grading.config import get_settings
from vendor_grading.db.session import async_session_maker
from vendor_grading.core.grading_catalog import GRADING_SECTIONS, get_parameters_for_section
from vendor_grading.core.security import create_access_token
from vendor_grading.services import classification_service, rating_service, vendor_service
from vendor_grading.services.grade_service import grade_snapshot

VENDOR_EMAIL = "vendor@example.com"
REVIEWERS = {
    "site": "site.reviewer@example.com",
    "procurement": "procurement.reviewer@example.com",
    "financial": "finance.reviewer@example.com",
}
DEMO_RATINGS = {"site": 4, "procurement": 5, "financial": 3}


async def seed():
    settings = get_settings()
    admin = settings.admin_email_list[0] if settings.admin_email_list else "admin@example.com"
    async with async_session_maker() as db:
        vendor, created = await vendor_service.create_vendor_form(db, VENDOR_EMAIL)
        if not created:
            print("Demo vendor already exists. Skip seed.")
            return
        form = vendor_service.vendor_form(vendor)
        form.company_details.company_name = "Sample Engineering Pvt Ltd"
        form.company_details.managing_director_name = "R. Sharma"
        form.company_details.gst_number = "27AAACS1234A1Z5"
        form.company_details.pan_number = "AAACS1234A"
        await vendor_service.save_vendor_form(db, vendor.id, form, admin, is_admin=True)
        for section in GRADING_SECTIONS:
            await rating_service.assign_reviewer(db, vendor.id, section, REVIEWERS[section], assigned_by=admin)
        grade = None
        for section in GRADING_SECTIONS:
            ratings = {p.key: DEMO_RATINGS[section] for p in get_parameters_for_section(section)}
            grade = await rating_service.submit_ratings(db, vendor.id, section, REVIEWERS[section], ratings)
        await classification_service.save_classification(
            db,
            vendor.id,
            {"vendor_type": "capex", "capex_sub_type": "plant_machinery", "capex_band": "1Cr_to_5Cr"},
            acting_admin=admin,
        )
        await db.commit()
        snap = grade_snapshot(grade)
        print("Seed done.")
        print("  Vendor:", vendor.company_name, str(vendor.id))
        print("  Grade:", snap["total_score"], snap["final_grade"], snap["category"])
        print("  Tokens:")
        for email in [admin, VENDOR_EMAIL, *REVIEWERS.values(), *settings.due_diligence_email_list]:
            print(f"    {email}: {create_access_token(email)}")


if __name__ == "__main__":
    asyncio.run(seed())
