"""
Dashboard endpoints.

Each figure on a dashboard is fetched independently; a failing figure
is reported as zero rather than failing the whole response.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsAdminRole, IsStudentRole
from ..services.dashboard import admin_roster, admin_stats, student_dashboard
from ..session import session_for


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_dashboard(request):
    """Return hostel statistics and the student roster for the warden."""
    session = session_for(request.user)
    return Response({
        'ok': True,
        'hostelName': session.hostel_name,
        'stats': admin_stats(session),
        'students': admin_roster(session),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStudentRole])
def student_dashboard_view(request):
    return Response({'ok': True, **student_dashboard(session_for(request.user))})
