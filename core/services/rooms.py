"""
Room catalog resolution and room allocation.

The room a student lives in is whatever ``StudentProfile.room_number``
says.  ``Room.current_occupancy`` is only a cached counter: it is bumped
optimistically on allocation and may drift under concurrent allocations,
so every read path recomputes occupancy from membership instead of
trusting it.  Rooms referenced by students but missing from the ``Room``
table are inferred with the default capacity.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F

from core.exceptions import CapacityExceeded, NotFoundError, StoreError, ValidationError
from core.models import Notification, Room, StudentProfile
from core.realtime.notify import notify_change
from core.services.audit import log_action
from core.session import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Assignment:
    student_id: int
    room_number: Optional[str]


@dataclass(frozen=True)
class RoomView:
    room_number: str
    hostel_name: str
    capacity: int
    # live membership count, not the stored counter
    current_occupancy: int
    room_id: Optional[int] = None
    stored_occupancy: Optional[int] = None

    @property
    def materialized(self) -> bool:
        return self.room_id is not None

    @property
    def is_full(self) -> bool:
        return self.current_occupancy >= self.capacity


@dataclass(frozen=True)
class AllocationResult:
    student_id: int
    room_number: str
    previous_room_number: Optional[str]
    changed: bool
    counters_synced: bool


def default_capacity() -> int:
    return settings.HOSTEL_DEFAULT_ROOM_CAPACITY


def format_room(view: RoomView) -> dict:
    return {
        'id': view.room_id,
        'roomNumber': view.room_number,
        'hostelName': view.hostel_name,
        'capacity': view.capacity,
        'currentOccupancy': view.current_occupancy,
        'storedOccupancy': view.stored_occupancy,
        'materialized': view.materialized,
        'isFull': view.is_full,
    }


def _room_view(hostel_name: str, number: str, members: int, row: Optional[Room]) -> RoomView:
    if row is None:
        return RoomView(
            room_number=number, hostel_name=hostel_name,
            capacity=default_capacity(), current_occupancy=members,
        )
    return RoomView(
        room_number=number, hostel_name=hostel_name,
        capacity=row.capacity, current_occupancy=members,
        room_id=row.pk, stored_occupancy=row.current_occupancy,
    )


def merge_catalog(hostel_name: str, assignments: Iterable[Assignment], rows: Iterable[Room],
                  *, include_empty: bool = False) -> list[RoomView]:
    """Merge materialized rows with the rooms implied by ``assignments``.

    Only rooms somebody is assigned to are returned unless
    ``include_empty`` is set, in which case unoccupied materialized
    rooms are listed as well.
    """
    counts = Counter(a.room_number for a in assignments if a.room_number)
    by_number = {r.room_number: r for r in rows}
    numbers = set(counts)
    if include_empty:
        numbers |= set(by_number)
    return [_room_view(hostel_name, n, counts.get(n, 0), by_number.get(n)) for n in sorted(numbers)]


def hostel_assignments(hostel_name: str) -> list[Assignment]:
    qs = (StudentProfile.objects
          .filter(user__hostel_name=hostel_name, room_number__isnull=False)
          .exclude(room_number='')
          .values_list('user_id', 'room_number'))
    try:
        return [Assignment(student_id=uid, room_number=number) for uid, number in qs]
    except DatabaseError as e:
        raise StoreError() from e


def resolve_rooms(hostel_name: str, assignments: Optional[Iterable[Assignment]] = None,
                  *, include_empty: bool = False) -> list[RoomView]:
    if assignments is None:
        assignments = hostel_assignments(hostel_name)
    assignments = list(assignments)
    numbers = {a.room_number for a in assignments if a.room_number}
    if not numbers and not include_empty:
        return []
    qs = Room.objects.filter(hostel_name=hostel_name)
    if not include_empty:
        qs = qs.filter(room_number__in=numbers)
    try:
        rows = list(qs)
    except DatabaseError as e:
        raise StoreError() from e
    return merge_catalog(hostel_name, assignments, rows, include_empty=include_empty)


def resolve_room(hostel_name: str, room_number: str) -> RoomView:
    """Resolve a single room the same way :func:`resolve_rooms` does."""
    try:
        members = StudentProfile.objects.filter(
            user__hostel_name=hostel_name, room_number=room_number
        ).count()
        row = Room.objects.filter(hostel_name=hostel_name, room_number=room_number).first()
    except DatabaseError as e:
        raise StoreError() from e
    if row is None and members == 0:
        raise NotFoundError(f'room {room_number} not found')
    return _room_view(hostel_name, room_number, members, row)


def _sync_counters(target: RoomView, previous: Optional[Room]) -> bool:
    """Move the cached counters after an assignment; True when both moved cleanly."""
    synced = True
    try:
        if target.materialized:
            # compare-and-set on the value observed when the room was resolved
            won = Room.objects.filter(
                pk=target.room_id, current_occupancy=target.stored_occupancy
            ).update(current_occupancy=F('current_occupancy') + 1)
            if not won:
                logger.info("room %s counter changed concurrently; increment skipped", target.room_number)
                synced = False
        if previous is not None and previous.room_number != target.room_number and previous.current_occupancy > 0:
            Room.objects.filter(pk=previous.pk, current_occupancy__gt=0).update(
                current_occupancy=F('current_occupancy') - 1
            )
    except DatabaseError:
        logger.warning("occupancy counters stale after moving into room %s", target.room_number, exc_info=True)
        synced = False
    return synced


def _notify_student(student_id: int, room_number: str) -> None:
    try:
        note = Notification.objects.create(
            user_id=student_id, message=f'Your room has been changed to {room_number}'
        )
    except DatabaseError:
        logger.warning("room change notification not stored for student %s", student_id, exc_info=True)
        return
    notify_change('notifications', 'INSERT', note.pk)


def allocate_room(session: Session, *, student_id: Optional[int], room_number: Optional[str]) -> AllocationResult:
    """Assign or reassign a student of the admin's hostel to a room.

    The student's own record is the only write that must succeed; the
    occupancy counters are adjusted best-effort afterwards and any drift
    is corrected by the next resolve.
    """
    session.require_admin()
    room_number = str(room_number).strip() if room_number is not None else ''
    if not student_id or not room_number:
        raise ValidationError('missing selection')

    try:
        profile = StudentProfile.objects.filter(
            user_id=student_id, user__hostel_name=session.hostel_name
        ).first()
    except DatabaseError as e:
        raise StoreError() from e
    if profile is None:
        raise NotFoundError('student not found')

    previous_number = profile.room_number or None
    target = resolve_room(session.hostel_name, room_number)

    if previous_number == target.room_number:
        return AllocationResult(
            student_id=profile.user_id, room_number=target.room_number,
            previous_room_number=previous_number, changed=False, counters_synced=True,
        )
    if target.is_full:
        raise CapacityExceeded(f'Room {target.room_number} is full')

    previous = None
    if previous_number:
        try:
            previous = Room.objects.filter(
                hostel_name=session.hostel_name, room_number=previous_number
            ).first()
        except DatabaseError as e:
            raise StoreError() from e

    try:
        StudentProfile.objects.filter(pk=profile.pk).update(room_number=target.room_number)
    except DatabaseError as e:
        raise StoreError() from e

    synced = _sync_counters(target, previous)
    logger.info("student %s moved %s -> %s (counters synced: %s)",
                profile.user_id, previous_number or '-', target.room_number, synced)

    notify_change('student_profiles', 'UPDATE', profile.pk)
    if target.materialized:
        notify_change('rooms', 'UPDATE', target.room_id)
    if previous is not None:
        notify_change('rooms', 'UPDATE', previous.pk)
    _notify_student(profile.user_id, target.room_number)
    log_action(user_id=session.user_id, action='room_allocate', object_type='student', object_id=profile.user_id,
               detail={'from': previous_number, 'to': target.room_number, 'countersSynced': synced})

    return AllocationResult(
        student_id=profile.user_id, room_number=target.room_number,
        previous_room_number=previous_number, changed=True, counters_synced=synced,
    )


def create_room(session: Session, *, room_number: str, capacity: Optional[int] = None) -> RoomView:
    """Materialize a room; its counter starts at the current membership count."""
    session.require_admin()
    room_number = (room_number or '').strip()
    if not room_number:
        raise ValidationError('room number is required')
    capacity = default_capacity() if capacity is None else capacity
    if capacity < 1:
        raise ValidationError('capacity must be positive')
    try:
        members = StudentProfile.objects.filter(
            user__hostel_name=session.hostel_name, room_number=room_number
        ).count()
        with transaction.atomic():
            room = Room.objects.create(
                room_number=room_number, hostel_name=session.hostel_name,
                capacity=capacity, current_occupancy=members,
            )
    except IntegrityError:
        raise ValidationError(f'room {room_number} already exists')
    except DatabaseError as e:
        raise StoreError() from e
    notify_change('rooms', 'INSERT', room.pk)
    return _room_view(session.hostel_name, room_number, members, room)


def reconcile_occupancy(hostel_name: Optional[str] = None) -> list[tuple[Room, int, int]]:
    """Rewrite stored counters from membership; returns (room, old, new) per corrected room."""
    rooms = Room.objects.all()
    if hostel_name:
        rooms = rooms.filter(hostel_name=hostel_name)
    changes = []
    for room in rooms.order_by('hostel_name', 'room_number'):
        members = StudentProfile.objects.filter(
            user__hostel_name=room.hostel_name, room_number=room.room_number
        ).count()
        if members != room.current_occupancy:
            old = room.current_occupancy
            Room.objects.filter(pk=room.pk).update(current_occupancy=members)
            changes.append((room, old, members))
    return changes
