from collections.abc import Generator
from dataclasses import dataclass

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from routinedesk.core.config import Settings, get_settings
from routinedesk.db.session import SessionLocal
from routinedesk.services.dashboard import DashboardScope
from routinedesk.services.time_slots import SlotTab


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_dashboard_scope(
    semester_id: str | None = Query(default=None, max_length=100),
    pid: str | None = Query(default=None, max_length=50, description="Single selected program"),
    pids: list[str] | None = Query(default=None, description="Programs the caller may see"),
    tab: SlotTab = Query(default="All"),
) -> DashboardScope:
    accessible = frozenset(item.strip() for item in pids if item.strip()) if pids else None
    return DashboardScope(semester_id=semester_id, selected_pid=pid or None, accessible_pids=accessible, tab=tab)


@dataclass(frozen=True)
class PageParams:
    page: int
    page_size: int


def page_params(default_size_field: str = "default_page_size"):
    def dependency(
        page: int = Query(default=1, ge=1),
        page_size: int | None = Query(default=None, ge=1),
        settings: Settings = Depends(get_settings),
    ) -> PageParams:
        size = page_size or getattr(settings, default_size_field)
        return PageParams(page=page, page_size=min(size, settings.max_page_size))

    return dependency
