"""
Fee reminders and payments.

Admins issue reminders (pending, ``is_reminder=True``); a student settles
one by confirming payment, which approves it and may amend the amount
and description.  Students can also record a payment of their own that
an admin then approves or rejects.  Nothing leaves approved/rejected.
"""
from __future__ import annotations

import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

import bleach
from django.db import DatabaseError
from django.utils import timezone

from core.exceptions import NotFoundError, StoreError, ValidationError
from core.models import StudentProfile, Transaction
from core.realtime.notify import notify_change
from core.session import Session


MAX_AMOUNT = Decimal('100000000')


def format_transaction(t: Transaction) -> dict:
    return {
        'id': t.id,
        'studentId': t.student_id,
        'adminId': t.admin_id,
        'amount': str(t.amount),
        'description': t.description,
        'date': t.date.isoformat(),
        'dueDate': t.due_date.isoformat() if t.due_date else None,
        'status': t.status,
        'isReminder': t.is_reminder,
        'paymentDate': t.payment_date.isoformat() if t.payment_date else None,
    }


def parse_amount(value) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError('Please enter a valid amount')
    # Transaction.amount holds 8 integer digits
    if not amount.is_finite() or not 0 < amount < MAX_AMOUNT:
        raise ValidationError('Please enter a valid amount')
    amount = amount.quantize(Decimal('0.01'))
    if not 0 < amount < MAX_AMOUNT:
        raise ValidationError('Please enter a valid amount')
    return amount


def parse_due_date(value) -> datetime.date:
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.datetime.strptime(str(value or ''), '%Y-%m-%d').date()
    except ValueError:
        raise ValidationError('Due date must be in YYYY-MM-DD format')


def _clean(text: Optional[str]) -> str:
    return bleach.clean((text or '').strip(), strip=True)


def _save(t: Transaction, event: str, update_fields=None) -> Transaction:
    try:
        t.save(update_fields=update_fields)
    except DatabaseError as e:
        raise StoreError() from e
    notify_change('transactions', event, t.pk)
    return t


def send_reminder(session: Session, *, student_id, amount, description: str, due_date) -> Transaction:
    session.require_admin()
    description = _clean(description)
    if not student_id or amount in (None, '') or not description or not due_date:
        raise ValidationError('Please fill all fields')
    amount = parse_amount(amount)
    due = parse_due_date(due_date)
    try:
        known = StudentProfile.objects.filter(
            user_id=student_id, user__hostel_name=session.hostel_name
        ).exists()
    except DatabaseError as e:
        raise StoreError() from e
    if not known:
        raise NotFoundError('student not found')
    t = Transaction(
        student_id=student_id, admin_id=session.user_id, amount=amount,
        description=description, date=timezone.localdate(), due_date=due,
        status=Transaction.STATUS_PENDING, is_reminder=True,
    )
    return _save(t, 'INSERT')


def record_payment(session: Session, *, amount, description: str = '') -> Transaction:
    """A payment the student made on their own; pending until reviewed."""
    session.require_student()
    t = Transaction(
        student_id=session.user_id, amount=parse_amount(amount),
        description=_clean(description), date=timezone.localdate(),
        status=Transaction.STATUS_PENDING, is_reminder=False,
    )
    return _save(t, 'INSERT')


def confirm_payment(session: Session, transaction_id, *, amount, description: Optional[str] = None) -> Transaction:
    """Student settles one of their pending reminders."""
    session.require_student()
    amount = parse_amount(amount)
    try:
        t = Transaction.objects.filter(id=transaction_id, student_id=session.user_id, is_reminder=True).first()
    except DatabaseError as e:
        raise StoreError() from e
    if t is None:
        raise NotFoundError('No reminder selected for payment')
    if t.status != Transaction.STATUS_PENDING:
        raise ValidationError(f'transaction is already {t.status}')
    t.status = Transaction.STATUS_APPROVED
    t.payment_date = timezone.now()
    t.amount = amount
    description = _clean(description)
    if description:
        t.description = description
    return _save(t, 'UPDATE', ['status', 'payment_date', 'amount', 'description'])


def review_transaction(session: Session, transaction_id, status: str) -> Transaction:
    """Admin approves or rejects a pending transaction of their hostel."""
    session.require_admin()
    if status not in (Transaction.STATUS_APPROVED, Transaction.STATUS_REJECTED):
        raise ValidationError(f'invalid status: {status}')
    try:
        t = Transaction.objects.filter(id=transaction_id, student__hostel_name=session.hostel_name).first()
    except DatabaseError as e:
        raise StoreError() from e
    if t is None:
        raise NotFoundError('transaction not found')
    if t.status == status:
        return t
    if t.status != Transaction.STATUS_PENDING:
        raise ValidationError(f'transaction is already {t.status}')
    t.status = status
    fields = ['status']
    if status == Transaction.STATUS_APPROVED:
        t.payment_date = timezone.now()
        fields.append('payment_date')
    return _save(t, 'UPDATE', fields)


def list_transactions(session: Session, *, status: Optional[str] = None, reminders_only: bool = False):
    qs = Transaction.objects.all()
    if session.is_admin:
        qs = qs.filter(student__hostel_name=session.hostel_name)
    else:
        qs = qs.filter(student_id=session.user_id)
    if status:
        qs = qs.filter(status=status)
    if reminders_only:
        qs = qs.filter(is_reminder=True)
    try:
        return list(qs.order_by('-date', '-id'))
    except DatabaseError as e:
        raise StoreError() from e
