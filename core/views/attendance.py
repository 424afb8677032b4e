from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.permissions import IsAdminRole, IsStudentRole
from core.serializers.attendance import AttendanceMarkSerializer
from core.services.attendance import format_summary, mark_attendance, records_for
from core.session import session_for


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def attendance_mark(request):
    """Save today's (or the given day's) attendance; re-saving replaces earlier marks."""
    s = AttendanceMarkSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    saved = mark_attendance(
        session_for(request.user),
        s.validated_data['marks'],
        on_date=s.validated_data.get('date'),
    )
    return Response({'ok': True, 'saved': saved})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStudentRole])
def my_attendance(request):
    return Response({'ok': True, 'data': format_summary(records_for(request.user.id))})
