"""
Student listing for admins and the student's own profile.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.exceptions import NotFoundError
from core.models import Complaint, StudentProfile
from core.permissions import IsAdminRole, IsStudentRole
from core.serializers.students import StudentProfileUpdateSerializer
from core.services.accounts import format_student, update_student_profile
from core.services.attendance import aggregate_percentage, format_summary, needs_improvement, records_for
from core.services.dashboard import admin_roster
from core.session import session_for


def _student_in_hostel(user, student_id) -> StudentProfile:
    profile = (StudentProfile.objects.select_related('user')
               .filter(user_id=student_id, user__hostel_name=user.hostel_name).first())
    if not profile:
        raise NotFoundError('student not found')
    return profile


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def list_students(request):
    return Response({'ok': True, 'data': admin_roster(session_for(request.user))})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def student_detail(request, pk: int):
    profile = _student_in_hostel(request.user, pk)
    pct = aggregate_percentage(records_for(profile.user_id))
    pending = Complaint.objects.filter(student_id=profile.user_id, status=Complaint.STATUS_PENDING).count()
    return Response({'ok': True, 'data': {
        **format_student(profile),
        'attendancePercentage': pct,
        'needsImprovement': needs_improvement(pct),
        'pendingComplaints': pending,
    }})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def student_attendance(request, pk: int):
    profile = _student_in_hostel(request.user, pk)
    return Response({'ok': True, 'data': format_summary(records_for(profile.user_id))})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStudentRole])
def my_profile(request):
    if request.method == 'GET':
        profile = StudentProfile.objects.select_related('user').filter(user=request.user).first()
        if not profile:
            raise NotFoundError('student profile not found')
        return Response({'ok': True, 'data': format_student(profile)})
    s = StudentProfileUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    profile = update_student_profile(
        request.user,
        full_name=s.validated_data.get('fullName'),
        phone_number=s.validated_data.get('phoneNumber'),
    )
    return Response({'ok': True, 'data': format_student(profile)})
