"""
Persistence for tracked job applications. Every read and write is scoped to
the owning user's id.
"""
from __future__ import annotations

import calendar
import logging
from collections import Counter
from datetime import date, datetime, time, timezone
from typing import Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from backend.app.models.db_models import Application
from backend.app.models.schemas import ApplicationStatus, ApplicationStatsResponse, DailyCount

logger = logging.getLogger(__name__)

_UNSET = object()


class ApplicationNotFoundError(LookupError):
    pass


class ApplicationService:
    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, job_title: str, company_name: str) -> Application:
        app_row = Application(
            user_id=user_id,
            job_title=job_title,
            company_name=company_name,
            status=ApplicationStatus.APPLIED.value,
            applied_at=datetime.now(timezone.utc),
        )
        self.db.add(app_row)
        self.db.commit()
        self.db.refresh(app_row)
        logger.info(f"Created application {app_row.id} for user {user_id}")
        return app_row

    def _scoped_update(self, user_id: str, application_id: str, values: Dict[str, object]) -> Application:
        result = self.db.execute(
            update(Application)
            .where(Application.id == application_id, Application.user_id == user_id)
            .values(**values)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise ApplicationNotFoundError(application_id)
        self.db.commit()
        return self.db.get(Application, application_id, populate_existing=True)

    def update_status(self, user_id: str, application_id: str, status: ApplicationStatus) -> Application:
        return self._scoped_update(user_id, application_id, {"status": ApplicationStatus(status).value})

    def update_fields(
        self,
        user_id: str,
        application_id: str,
        company_name: object = _UNSET,
        job_title: object = _UNSET,
    ) -> Application:
        """Blank strings clear a field; omitted fields stay as they are."""
        values: Dict[str, object] = {}
        if company_name is not _UNSET:
            values["company_name"] = (company_name or "").strip() or None
        if job_title is not _UNSET:
            values["job_title"] = (job_title or "").strip() or None
        if not values:
            raise ValueError("No fields to update")
        return self._scoped_update(user_id, application_id, values)

    def list_for_user(self, user_id: str) -> List[Application]:
        stmt = (
            select(Application)
            .where(Application.user_id == user_id)
            .order_by(Application.applied_at.desc())
        )
        return list(self.db.scalars(stmt))

    def monthly_stats(self, user_id: str, year: Optional[int] = None, month: Optional[int] = None) -> ApplicationStatsResponse:
        now = datetime.now(timezone.utc)
        year = year or now.year
        month = month or now.month
        days_in_month = calendar.monthrange(year, month)[1]

        start = datetime(year, month, 1, tzinfo=timezone.utc)
        # last instant of the month, inclusive
        end = datetime.combine(date(year, month, days_in_month), time.max, tzinfo=timezone.utc)

        rows = self.db.execute(
            select(Application.applied_at, Application.status).where(
                Application.user_id == user_id,
                Application.applied_at >= start,
                Application.applied_at <= end,
            )
        ).all()

        per_day = Counter(applied_at.day for applied_at, _ in rows)
        per_status = Counter(status for _, status in rows)

        return ApplicationStatsResponse(
            year=year,
            month=month,
            total_applications=len(rows),
            daily_counts=[DailyCount(day=d, count=per_day.get(d, 0)) for d in range(1, days_in_month + 1)],
            status_counts={s: per_status.get(s, 0) for s in ApplicationStatus.values()},
        )
