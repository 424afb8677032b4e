import datetime
from decimal import Decimal

import pytest
from rest_framework.exceptions import PermissionDenied

from core.exceptions import NotFoundError, ValidationError
from core.models import Transaction
from core.services.transactions import (
    confirm_payment,
    list_transactions,
    parse_amount,
    parse_due_date,
    record_payment,
    review_transaction,
    send_reminder,
)
from core.session import session_for


@pytest.mark.parametrize('raw', ['', 'abc', '-5', '0', '0.001', 'NaN', None, '1e12', '100000000', '99999999.999'])
def test_parse_amount_rejects(raw):
    with pytest.raises(ValidationError) as exc:
        parse_amount(raw)
    assert str(exc.value.detail) == 'Please enter a valid amount'


def test_parse_amount_quantizes():
    assert parse_amount('12.5') == Decimal('12.50')
    assert parse_amount(100) == Decimal('100.00')


def test_parse_due_date():
    assert parse_due_date('2026-11-30') == datetime.date(2026, 11, 30)
    with pytest.raises(ValidationError):
        parse_due_date('30/11/2026')


@pytest.mark.django_db
def test_reminder_confirm_flow(admin_user, make_student):
    s1 = make_student('s1')
    t = send_reminder(session_for(admin_user), student_id=s1.id, amount='1200',
                      description='Electricity', due_date='2026-11-15')
    assert t.is_reminder and t.status == 'pending' and t.admin_id == admin_user.id

    paid = confirm_payment(session_for(s1), t.id, amount='1150', description='Paid via UPI')
    assert paid.status == 'approved'
    assert paid.amount == Decimal('1150.00')
    assert paid.description == 'Paid via UPI'
    assert paid.payment_date is not None

    with pytest.raises(ValidationError):
        confirm_payment(session_for(s1), t.id, amount='1150')


@pytest.mark.django_db
def test_reminder_validation(admin_user, make_student):
    s1 = make_student('s1')
    outsider = make_student('o1', hostel_name='South Block')
    session = session_for(admin_user)
    with pytest.raises(ValidationError):
        send_reminder(session, student_id=s1.id, amount='100', description='', due_date='2026-11-15')
    with pytest.raises(ValidationError):
        send_reminder(session, student_id=s1.id, amount='100', description='Fee', due_date='15-11-2026')
    with pytest.raises(NotFoundError):
        send_reminder(session, student_id=outsider.id, amount='100', description='Fee', due_date='2026-11-15')
    with pytest.raises(PermissionDenied):
        send_reminder(session_for(s1), student_id=s1.id, amount='100', description='Fee', due_date='2026-11-15')
    assert not Transaction.objects.exists()


@pytest.mark.django_db
def test_confirm_someone_elses_reminder(admin_user, make_student):
    s1 = make_student('s1')
    s2 = make_student('s2')
    t = send_reminder(session_for(admin_user), student_id=s1.id, amount='50',
                      description='Laundry', due_date='2026-11-15')
    with pytest.raises(NotFoundError):
        confirm_payment(session_for(s2), t.id, amount='50')


@pytest.mark.django_db
def test_recorded_payment_review(admin_user, make_student):
    s1 = make_student('s1')
    t = record_payment(session_for(s1), amount='300', description='Gym')
    assert not t.is_reminder and t.status == 'pending'

    rejected = review_transaction(session_for(admin_user), t.id, 'rejected')
    assert rejected.status == 'rejected' and rejected.payment_date is None
    # same status again is a no-op; no path back out of a final state
    assert review_transaction(session_for(admin_user), t.id, 'rejected').status == 'rejected'
    with pytest.raises(ValidationError):
        review_transaction(session_for(admin_user), t.id, 'approved')
    with pytest.raises(ValidationError):
        review_transaction(session_for(admin_user), t.id, 'pending')


@pytest.mark.django_db
def test_list_transactions_scoping(admin_user, make_student):
    s1 = make_student('s1')
    s2 = make_student('s2')
    send_reminder(session_for(admin_user), student_id=s1.id, amount='10', description='A', due_date='2026-11-01')
    record_payment(session_for(s2), amount='20')
    assert len(list_transactions(session_for(admin_user))) == 2
    assert len(list_transactions(session_for(admin_user), reminders_only=True)) == 1
    assert [t.student_id for t in list_transactions(session_for(s2))] == [s2.id]


def test_parse_amount_upper_bound():
    assert parse_amount('99999999.99') == Decimal('99999999.99')


@pytest.mark.django_db
def test_student_cannot_confirm_own_recorded_payment(make_student):
    s1 = make_student('s1')
    t = record_payment(session_for(s1), amount='300')
    with pytest.raises(NotFoundError):
        confirm_payment(session_for(s1), t.id, amount='5')
    t.refresh_from_db()
    assert t.status == 'pending'
    assert t.amount == Decimal('300.00')
