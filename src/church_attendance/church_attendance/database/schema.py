"""Column layout shared by the MySQL schema file and the in-memory store."""

from __future__ import annotations

from ..core.constants import ACTIVITY_TABLE, MEMBER_TEMPLATE_TABLE, MONTHS_TABLE

MEMBER_COLUMNS = (
    "id",
    "full_name",
    "gender",
    "phone",
    "age",
    "level",
    "parent_name",
    "parent_phone",
    "ministries",
    "is_visitor",
    "join_date",
    "badge",
    "badge_override",
    "inserted_at",
)

MONTH_REGISTRY_COLUMNS = ("id", "name", "year", "table_name", "created_at")

ACTIVITY_COLUMNS = ("id", "action", "details", "month", "created_at")

BASE_TABLES = {
    MEMBER_TEMPLATE_TABLE: MEMBER_COLUMNS,
    MONTHS_TABLE: MONTH_REGISTRY_COLUMNS,
    ACTIVITY_TABLE: ACTIVITY_COLUMNS,
}
