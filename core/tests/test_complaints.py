import datetime

import pytest
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied

from core.exceptions import NotFoundError, ValidationError
from core.models import Complaint, User
from core.services.complaints import apply_status, list_complaints, set_complaint_status, submit_complaint
from core.session import session_for


def test_apply_status_resolve_is_idempotent():
    c = Complaint(status='pending')
    stamp = timezone.now()
    assert apply_status(c, 'resolved', now=stamp) is True
    assert apply_status(c, 'resolved', now=stamp + datetime.timedelta(hours=1)) is False
    assert c.status == 'resolved'
    assert c.resolved_at == stamp


def test_apply_status_reopen_clears_timestamp():
    c = Complaint(status='resolved', resolved_at=timezone.now())
    assert apply_status(c, 'pending') is True
    assert c.resolved_at is None


def test_apply_status_rejects_unknown():
    with pytest.raises(ValidationError):
        apply_status(Complaint(status='pending'), 'closed')


@pytest.mark.django_db
def test_submit_and_resolve(admin_user, make_student):
    s1 = make_student('s1')
    c = submit_complaint(session_for(s1), '  <span>Leaking</span> tap ')
    assert c.description == 'Leaking tap'
    assert c.status == 'pending'

    done = set_complaint_status(session_for(admin_user), c.id, 'resolved')
    first_stamp = done.resolved_at
    assert first_stamp is not None
    again = set_complaint_status(session_for(admin_user), c.id, 'resolved')
    assert again.resolved_at == first_stamp

    reopened = set_complaint_status(session_for(admin_user), c.id, 'pending')
    assert reopened.resolved_at is None
    assert Complaint.objects.get(pk=c.id).status == 'pending'


@pytest.mark.django_db
def test_roles_and_scoping(admin_user, make_student):
    s1 = make_student('s1')
    s2 = make_student('s2')
    c1 = submit_complaint(session_for(s1), 'Noise at night')
    submit_complaint(session_for(s2), 'No hot water')

    with pytest.raises(PermissionDenied):
        submit_complaint(session_for(admin_user), 'admins do not file complaints')
    with pytest.raises(ValidationError):
        submit_complaint(session_for(s1), '   ')

    assert [c.id for c in list_complaints(session_for(s1))] == [c1.id]
    assert len(list_complaints(session_for(admin_user))) == 2

    outsider_admin = User.objects.create_user(
        username='warden_s', password='P@ssw0rd1', role='admin', hostel_name='South Block')
    with pytest.raises(NotFoundError):
        set_complaint_status(session_for(outsider_admin), c1.id, 'resolved')
