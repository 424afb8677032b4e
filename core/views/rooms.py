"""
Room endpoints for hostel administrators.

Listing always recomputes occupancy from student assignments; the
stored counters are returned alongside as ``storedOccupancy``.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from core.permissions import IsAdminRole
from core.serializers.rooms import RoomAllocateSerializer, RoomCreateSerializer, RoomListQuerySerializer
from core.services.rooms import allocate_room, create_room, format_room, resolve_rooms
from core.session import session_for


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def list_rooms(request):
    q = RoomListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    session = session_for(request.user)
    rooms = resolve_rooms(session.hostel_name, include_empty=q.validated_data['includeEmpty'])
    return Response({'ok': True, 'data': [format_room(r) for r in rooms]})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def room_create(request):
    s = RoomCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    room = create_room(
        session_for(request.user),
        room_number=s.validated_data['roomNumber'],
        capacity=s.validated_data.get('capacity'),
    )
    return Response({'ok': True, 'data': format_room(room)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def room_allocate(request):
    """Allot or change a student's room.

    409 means the room filled up since the list was loaded; the client
    should reload ``/api/rooms`` before trying again.
    """
    s = RoomAllocateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    result = allocate_room(
        session_for(request.user),
        student_id=s.validated_data.get('studentId'),
        room_number=s.validated_data.get('roomNumber'),
    )
    return Response({
        'ok': True,
        'studentId': result.student_id,
        'roomNumber': result.room_number,
        'previousRoomNumber': result.previous_room_number,
        'changed': result.changed,
        'countersSynced': result.counters_synced,
    })
