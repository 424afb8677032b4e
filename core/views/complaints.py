from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from core.permissions import IsAdminRole, IsStudentRole
from core.serializers.complaints import ComplaintCreateSerializer, ComplaintListQuerySerializer, ComplaintStatusSerializer
from core.services.complaints import format_complaint, list_complaints, set_complaint_status, submit_complaint
from core.session import session_for


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def complaints_list(request):
    """Admins see their hostel's complaints, students their own."""
    q = ComplaintListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    items = list_complaints(session_for(request.user), status=q.validated_data.get('status'))
    return Response({'ok': True, 'data': [format_complaint(c) for c in items]})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStudentRole])
def complaint_create(request):
    s = ComplaintCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    c = submit_complaint(session_for(request.user), s.validated_data['description'])
    return Response({'ok': True, 'id': c.id, 'status': c.status}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def complaint_set_status(request):
    """Resolve or reopen a complaint; repeating the current status changes nothing."""
    s = ComplaintStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    c = set_complaint_status(session_for(request.user), s.validated_data['id'], s.validated_data['status'])
    return Response({'ok': True, 'data': format_complaint(c)})
