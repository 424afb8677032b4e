from typing import Optional
import bleach
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from rest_framework.exceptions import ValidationError as DRFValidation

from core.exceptions import NotFoundError, ValidationError
from core.models import StudentProfile
from core.realtime.notify import notify_change

User = get_user_model()


def _check_new_account(username: str, password: str, hostel_name: str) -> None:
    if not hostel_name:
        raise ValidationError('Hostel name is required')
    if User.objects.filter(username=username).exists():
        raise ValidationError('username already taken')
    try:
        validate_password(password, user=User(username=username))
    except DjangoValidationError as e:
        raise DRFValidation({'password': e.messages})


def create_student(*, username: str, password: str, full_name: str, hostel_name: str,
                   email: str = '', phone_number: str = '', room_number: Optional[str] = None):
    """Create a student account and its profile once signup is complete."""
    full_name = bleach.clean((full_name or '').strip(), strip=True)
    hostel_name = (hostel_name or '').strip()
    if not full_name:
        raise ValidationError('Full name is required')
    _check_new_account(username, password, hostel_name)

    with transaction.atomic():
        user = User.objects.create_user(
            username=username, password=password, email=email or '',
            role=User.ROLE_STUDENT, hostel_name=hostel_name, first_name=full_name,
        )
        profile = StudentProfile.objects.create(
            user=user, full_name=full_name, phone_number=phone_number or '',
            room_number=(room_number or '').strip() or None,
        )
    notify_change('student_profiles', 'INSERT', profile.pk)
    return user, profile


def create_admin(*, username: str, password: str, full_name: str, hostel_name: str, email: str = ''):
    full_name = bleach.clean((full_name or '').strip(), strip=True)
    hostel_name = (hostel_name or '').strip()
    _check_new_account(username, password, hostel_name)
    return User.objects.create_user(
        username=username, password=password, email=email or '',
        role=User.ROLE_ADMIN, hostel_name=hostel_name, first_name=full_name,
    )


def update_student_profile(user, *, full_name: Optional[str] = None, phone_number: Optional[str] = None) -> StudentProfile:
    profile = StudentProfile.objects.filter(user=user).first()
    if profile is None:
        raise NotFoundError('student profile not found')
    fields = []
    if full_name is not None:
        full_name = bleach.clean(full_name.strip(), strip=True)
        if not full_name:
            raise ValidationError('Full name is required')
        profile.full_name = full_name
        fields.append('full_name')
    if phone_number is not None:
        profile.phone_number = bleach.clean(phone_number.strip(), strip=True)
        fields.append('phone_number')
    if fields:
        profile.save(update_fields=fields)
        notify_change('student_profiles', 'UPDATE', profile.pk)
    return profile


def format_student(profile: StudentProfile) -> dict:
    return {
        'id': profile.user_id,
        'profileId': profile.id,
        'fullName': profile.full_name,
        'roomNumber': profile.room_number,
        'email': profile.user.email,
        'phoneNumber': profile.phone_number,
        'hostelName': profile.user.hostel_name,
    }
