"""
Dashboard aggregation for admins and students.

A dashboard is a handful of independent reads.  When one of them fails
the failure is logged and that figure falls back to zero (or an empty
list) so the rest of the dashboard still loads.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, TypeVar

from django.db import DatabaseError
from django.db.models import Count

from core.exceptions import StoreError
from core.models import Attendance, Complaint, StudentProfile, Transaction
from core.services.accounts import format_student
from core.services.attendance import AttendanceRecord, aggregate_percentage, needs_improvement, percentage, records_for
from core.services.transactions import format_transaction
from core.session import Session

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _degrade(label: str, fetch: Callable[[], T], default: T) -> T:
    try:
        return fetch()
    except (DatabaseError, StoreError):
        logger.warning("dashboard read %r failed; showing default", label, exc_info=True)
        return default


def _counts_by_student(qs) -> dict[int, int]:
    return {row['student_id']: row['n'] for row in qs.values('student_id').annotate(n=Count('id'))}


def admin_stats(session: Session) -> dict:
    hostel = session.hostel_name
    return {
        'totalStudents': _degrade(
            'students', StudentProfile.objects.filter(user__hostel_name=hostel).count, 0),
        'totalComplaints': _degrade(
            'complaints', Complaint.objects.filter(
                student__hostel_name=hostel, status=Complaint.STATUS_PENDING).count, 0),
        'pendingPayments': _degrade(
            'payments', Transaction.objects.filter(
                student__hostel_name=hostel, status=Transaction.STATUS_PENDING).count, 0),
    }


def admin_roster(session: Session) -> list[dict]:
    """Students of the admin's hostel with their attendance and open items."""
    hostel = session.hostel_name
    try:
        profiles = list(StudentProfile.objects.select_related('user')
                        .filter(user__hostel_name=hostel).order_by('full_name', 'id'))
    except DatabaseError as e:
        raise StoreError() from e

    def attendance_by_student():
        present, total = defaultdict(int), defaultdict(int)
        rows = Attendance.objects.filter(student__hostel_name=hostel).values_list('student_id', 'status')
        for student_id, status in rows:
            total[student_id] += 1
            if status == Attendance.STATUS_PRESENT:
                present[student_id] += 1
        return {sid: percentage(present[sid], n) for sid, n in total.items()}

    attendance = _degrade('attendance', attendance_by_student, {})
    complaints = _degrade('complaints', lambda: _counts_by_student(
        Complaint.objects.filter(student__hostel_name=hostel, status=Complaint.STATUS_PENDING)), {})
    payments = _degrade('payments', lambda: _counts_by_student(
        Transaction.objects.filter(student__hostel_name=hostel, status=Transaction.STATUS_PENDING)), {})

    roster = []
    for p in profiles:
        pct = attendance.get(p.user_id, 0)
        roster.append({
            **format_student(p),
            'attendancePercentage': pct,
            'needsImprovement': needs_improvement(pct),
            'pendingComplaints': complaints.get(p.user_id, 0),
            'pendingPayments': payments.get(p.user_id, 0),
        })
    return roster


def student_dashboard(session: Session) -> dict:
    sid = session.user_id
    profile = _degrade('profile', lambda: StudentProfile.objects.select_related('user').filter(user_id=sid).first(), None)
    records: list[AttendanceRecord] = _degrade('attendance', lambda: records_for(sid), [])
    pct = aggregate_percentage(records)
    reminders = _degrade('reminders', lambda: list(Transaction.objects.filter(
        student_id=sid, is_reminder=True, status=Transaction.STATUS_PENDING).order_by('due_date', 'id')), [])
    return {
        'profile': format_student(profile) if profile else None,
        'stats': {
            'totalAttendance': pct,
            'needsImprovement': needs_improvement(pct),
            'activeComplaints': _degrade('active complaints', Complaint.objects.filter(
                student_id=sid, status=Complaint.STATUS_PENDING).count, 0),
            'resolvedComplaints': _degrade('resolved complaints', Complaint.objects.filter(
                student_id=sid, status=Complaint.STATUS_RESOLVED).count, 0),
        },
        'pendingReminders': [format_transaction(t) for t in reminders],
    }
