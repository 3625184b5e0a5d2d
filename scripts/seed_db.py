from __future__ import annotations

import importlib
import sys
from datetime import date
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from church_attendance.container import build_container
from church_attendance.core.enums import CopyMode
from church_attendance.dates.mapping import sundays_in_month
from church_attendance.dates.model import MonthId
from church_attendance.members.model import NewMember

DEMO_MEMBERS = (
    NewMember(full_name="Grace Mensah", gender="Female", phone="0241000001", level="Adult", ministries=("Choir",)),
    NewMember(full_name="Daniel Owusu", gender="Male", phone="0241000002", level="Youth", ministries=("Ushers",)),
    NewMember(full_name="Esther Boateng", gender="Female", age="12", level="Children", parent_name="Ama Boateng", parent_phone="0241000003"),
    NewMember(full_name="Samuel Asare", gender="Male", level="Adult", is_visitor=True),
)


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        store_backend=getattr(settings, "STORE_BACKEND", "mysql"),
        ready_retries=int(getattr(settings, "READY_RETRIES", 5)),
        ready_backoff_seconds=float(getattr(settings, "READY_BACKOFF_SECONDS", 1.0)),
    )

    today = date.today()
    month = MonthId.for_date(today)
    result = container.month_manager.create_month(month.name, month.year, CopyMode.EMPTY)
    if not result.created:
        print(f"SKIP: {month.table_name} already exists")
        return

    members = [container.member_service.add_member(month, m) for m in DEMO_MEMBERS]
    past = [d for d in sundays_in_month(month.name, month.year) if d <= today]
    for idx, day in enumerate(past):
        present = [m.member_id for i, m in enumerate(members) if (i + idx) % 3 != 2]
        container.attendance_service.bulk_mark_attendance(month, present, day, "present")

    print(f"OK: Seeded {month.table_name} with {len(members)} members and {len(past)} recorded Sundays")


if __name__ == "__main__":
    main()
