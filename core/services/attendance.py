"""
Attendance aggregation and marking.

Percentages are rounded half-up so that they match what the mobile
client computes with ``Math.round``; Python's ``round`` would send
12.5 to 12.
"""
from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from itertools import groupby
from typing import Iterable, Optional

from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone

from core.exceptions import StoreError, ValidationError
from core.models import Attendance, StudentProfile
from core.realtime.notify import notify_change
from core.session import Session

logger = logging.getLogger(__name__)

STATUSES = (Attendance.STATUS_PRESENT, Attendance.STATUS_ABSENT)


@dataclass(frozen=True)
class AttendanceRecord:
    date: datetime.date
    status: str


@dataclass(frozen=True)
class MonthSummary:
    year: int
    month: int
    label: str
    present: int
    total: int
    percentage: int


def percentage(present: int, total: int) -> int:
    if total <= 0:
        return 0
    # integer half-up rounding of 100 * present / total
    return (200 * present + total) // (2 * total)


def aggregate_percentage(records: Iterable[AttendanceRecord]) -> int:
    records = list(records)
    present = sum(1 for r in records if r.status == Attendance.STATUS_PRESENT)
    return percentage(present, len(records))


def needs_improvement(pct: int) -> bool:
    return pct < settings.HOSTEL_ATTENDANCE_THRESHOLD


def monthly_summary(records: Iterable[AttendanceRecord]) -> list[MonthSummary]:
    """Bucket records by calendar month, newest month first."""
    def month_key(r: AttendanceRecord):
        return (r.date.year, r.date.month)

    summaries = []
    for (year, month), group in groupby(sorted(records, key=month_key, reverse=True), key=month_key):
        group = list(group)
        present = sum(1 for r in group if r.status == Attendance.STATUS_PRESENT)
        summaries.append(MonthSummary(
            year=year,
            month=month,
            label=datetime.date(year, month, 1).strftime('%B %Y'),
            present=present,
            total=len(group),
            percentage=percentage(present, len(group)),
        ))
    return summaries


def format_summary(records: list[AttendanceRecord]) -> dict:
    pct = aggregate_percentage(records)
    return {
        'percentage': pct,
        'needsImprovement': needs_improvement(pct),
        'records': [{'date': r.date.isoformat(), 'status': r.status} for r in records],
        'months': [{
            'year': m.year,
            'month': m.month,
            'label': m.label,
            'present': m.present,
            'total': m.total,
            'percentage': m.percentage,
            'needsImprovement': needs_improvement(m.percentage),
        } for m in monthly_summary(records)],
    }


def records_for(student_id: int) -> list[AttendanceRecord]:
    qs = Attendance.objects.filter(student_id=student_id).order_by('-date').values_list('date', 'status')
    try:
        return [AttendanceRecord(date=d, status=s) for d, s in qs]
    except DatabaseError as e:
        raise StoreError() from e


def mark_attendance(session: Session, marks: Iterable[dict], on_date: Optional[datetime.date] = None) -> int:
    """Upsert one day's marks for students of the admin's hostel.

    ``marks`` holds ``{'studentId': ..., 'status': 'present'|'absent'}``
    items; a student marked twice on the same day keeps the last status.
    Returns the number of rows written.
    """
    session.require_admin()
    on_date = on_date or timezone.localdate()
    wanted: dict[int, str] = {}
    for m in marks:
        status = m.get('status')
        if status not in STATUSES:
            raise ValidationError(f'invalid status: {status}')
        try:
            wanted[int(m.get('studentId'))] = status
        except (TypeError, ValueError):
            raise ValidationError('invalid studentId')
    if not wanted:
        raise ValidationError('no attendance marks given')

    try:
        known = set(StudentProfile.objects.filter(
            user_id__in=wanted.keys(), user__hostel_name=session.hostel_name
        ).values_list('user_id', flat=True))
        unknown = set(wanted) - known
        if unknown:
            raise ValidationError(f'students not in this hostel: {sorted(unknown)}')
        for student_id, status in wanted.items():
            row, _ = Attendance.objects.update_or_create(
                student_id=student_id, date=on_date,
                defaults={'status': status, 'marked_by_id': session.user_id},
            )
            notify_change('attendance', 'UPDATE', row.pk)
    except DatabaseError as e:
        raise StoreError() from e
    logger.info("attendance for %s marked by %s: %d students", on_date, session.user_id, len(wanted))
    return len(wanted)
