from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from .activity.service import ActivityService
from .activity.store_activity_repository import StoreActivityRepository
from .analytics.service import AnalyticsService
from .attendance.service import AttendanceService
from .attendance.store_adapter import AttendanceStoreAdapter
from .badges.service import BadgeService
from .common.cache import TTLCache
from .core.constants import DEFAULT_CACHE_TTL_SECONDS, DEFAULT_READY_BACKOFF_SECONDS, DEFAULT_READY_RETRIES
from .core.exceptions import ValidationError
from .database.connection import DBConfig, DatabaseConnection
from .database.memory_store import InMemoryRecordStore
from .database.mysql_store import MySQLRecordStore
from .database.store import RecordStore
from .members.service import MemberService
from .members.store_member_repository import StoreMemberRepository
from .months.service import MonthLifecycleManager
from .months.store_month_registry import StoreMonthRegistry


@dataclass(frozen=True)
class Container:
    store: RecordStore
    cache: TTLCache

    members_repo: StoreMemberRepository
    months_registry: StoreMonthRegistry
    activity_repo: StoreActivityRepository
    attendance_adapter: AttendanceStoreAdapter

    activity_service: ActivityService
    member_service: MemberService
    badge_service: BadgeService
    attendance_service: AttendanceService
    month_manager: MonthLifecycleManager
    analytics_service: AnalyticsService


def build_store(*, store_backend: str, db_config: Optional[dict] = None) -> RecordStore:
    backend = (store_backend or "mysql").lower()
    if backend == "memory":
        return InMemoryRecordStore()
    if backend == "mysql":
        if not db_config:
            raise ValidationError("DB_CONFIG is required for the mysql store backend")
        return MySQLRecordStore(DatabaseConnection.get_instance(DBConfig.from_dict(db_config)))
    raise ValidationError(f"Unknown STORE_BACKEND: {store_backend!r}")


def build_container(
    *,
    db_config: Optional[dict] = None,
    store_backend: str = "mysql",
    store: Optional[RecordStore] = None,
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
    ready_retries: int = DEFAULT_READY_RETRIES,
    ready_backoff_seconds: float = DEFAULT_READY_BACKOFF_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> Container:
    store = store or build_store(store_backend=store_backend, db_config=db_config)
    cache = TTLCache(cache_ttl_seconds)

    members_repo = StoreMemberRepository(store)
    months_registry = StoreMonthRegistry(store)
    activity_repo = StoreActivityRepository(store)
    attendance_adapter = AttendanceStoreAdapter(store, cache)

    activity_service = ActivityService(activity_repo)
    member_service = MemberService(members_repo, activity_service, cache)
    badge_service = BadgeService(members_repo, activity_service, cache)
    attendance_service = AttendanceService(attendance_adapter, badge_service, activity_service)
    month_manager = MonthLifecycleManager(
        store,
        months_registry,
        members_repo,
        activity_service,
        cache,
        ready_retries=ready_retries,
        ready_backoff_seconds=ready_backoff_seconds,
        sleep=sleep,
    )
    analytics_service = AnalyticsService(member_service)

    return Container(
        store=store,
        cache=cache,
        members_repo=members_repo,
        months_registry=months_registry,
        activity_repo=activity_repo,
        attendance_adapter=attendance_adapter,
        activity_service=activity_service,
        member_service=member_service,
        badge_service=badge_service,
        attendance_service=attendance_service,
        month_manager=month_manager,
        analytics_service=analytics_service,
    )
