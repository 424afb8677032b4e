from typing import Optional
import bleach
from django.db import DatabaseError
from django.utils import timezone

from core.exceptions import NotFoundError, StoreError, ValidationError
from core.models import Complaint
from core.realtime.notify import notify_change
from core.session import Session

STATUSES = (Complaint.STATUS_PENDING, Complaint.STATUS_RESOLVED)


def format_complaint(c: Complaint) -> dict:
    return {
        'id': c.id,
        'studentId': c.student_id,
        'studentName': getattr(getattr(c.student, 'student_profile', None), 'full_name', None) or c.student.username,
        'description': c.description,
        'status': c.status,
        'createdAt': c.created_at.isoformat(),
        'resolvedAt': c.resolved_at.isoformat() if c.resolved_at else None,
    }


def submit_complaint(session: Session, description: str) -> Complaint:
    session.require_student()
    description = bleach.clean((description or '').strip(), strip=True)
    if not description:
        raise ValidationError('description is required')
    try:
        complaint = Complaint.objects.create(student_id=session.user_id, description=description)
    except DatabaseError as e:
        raise StoreError() from e
    notify_change('complaints', 'INSERT', complaint.pk)
    return complaint


def apply_status(complaint: Complaint, status: str, *, now=None) -> bool:
    """Move ``complaint`` to ``status`` in memory; False when it is already there.

    Resolving stamps ``resolved_at``; reopening clears it.
    """
    if status not in STATUSES:
        raise ValidationError(f'invalid status: {status}')
    if complaint.status == status:
        return False
    complaint.status = status
    complaint.resolved_at = (now or timezone.now()) if status == Complaint.STATUS_RESOLVED else None
    return True


def set_complaint_status(session: Session, complaint_id: int, status: str) -> Complaint:
    session.require_admin()
    try:
        complaint = (Complaint.objects.select_related('student', 'student__student_profile')
                     .filter(id=complaint_id, student__hostel_name=session.hostel_name).first())
    except DatabaseError as e:
        raise StoreError() from e
    if complaint is None:
        raise NotFoundError('complaint not found')
    if apply_status(complaint, status):
        try:
            complaint.save(update_fields=['status', 'resolved_at'])
        except DatabaseError as e:
            raise StoreError() from e
        notify_change('complaints', 'UPDATE', complaint.pk)
    return complaint


def list_complaints(session: Session, status: Optional[str] = None):
    qs = Complaint.objects.select_related('student', 'student__student_profile')
    if session.is_admin:
        qs = qs.filter(student__hostel_name=session.hostel_name)
    else:
        qs = qs.filter(student_id=session.user_id)
    if status:
        if status not in STATUSES:
            raise ValidationError(f'invalid status: {status}')
        qs = qs.filter(status=status)
    try:
        return list(qs.order_by('-created_at', '-id'))
    except DatabaseError as e:
        raise StoreError() from e
