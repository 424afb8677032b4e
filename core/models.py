"""
Database models for the hostel backend.

These models capture the records the mobile client works with:
users (admins and students), student profiles with their room
assignment, rooms, daily attendance, complaints, fee transactions and
notifications.  Field names follow the tables the client was written
against so that JSON responses map over without renaming.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Custom user model with a role and the hostel the user belongs to.

    Roles mirror the client roles: 'admin' (warden) and 'student'.  The
    hostel name is the isolation boundary: admins only see students,
    rooms and records of their own hostel.
    """
    ROLE_ADMIN = 'admin'
    ROLE_STUDENT = 'student'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_STUDENT, 'Student'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_STUDENT)
    hostel_name = models.CharField(max_length=255, blank=True, db_index=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class StudentProfile(models.Model):
    """Student specific information, including the current room assignment.

    ``room_number`` is the authoritative fact about where a student
    lives; room occupancy counters are derived from it.
    """
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='student_profile')
    full_name = models.CharField(max_length=255)
    # 当前房间号；为空表示尚未分配
    room_number = models.CharField(max_length=20, null=True, blank=True, db_index=True)
    phone_number = models.CharField(max_length=20, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.full_name} (room {self.room_number or '-'})"


class Room(models.Model):
    """A materialized room row.

    ``current_occupancy`` is an advisory counter; the number of
    students whose ``room_number`` matches is the source of truth.
    """
    room_number = models.CharField(max_length=20)
    hostel_name = models.CharField(max_length=255, db_index=True)
    capacity = models.PositiveIntegerField(default=2)
    current_occupancy = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['hostel_name', 'room_number'], name='uniq_room_per_hostel'),
        ]

    def __str__(self) -> str:
        return f"Room {self.room_number} ({self.current_occupancy}/{self.capacity}) - {self.hostel_name}"


class Attendance(models.Model):
    STATUS_PRESENT = 'present'
    STATUS_ABSENT = 'absent'
    STATUS_CHOICES = ((STATUS_PRESENT, 'present'), (STATUS_ABSENT, 'absent'))

    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name='attendance_records')
    date = models.DateField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES)
    marked_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='attendance_marked'
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['student', 'date'], name='uniq_attendance_per_day'),
        ]
        indexes = [models.Index(fields=['student', 'date'])]

    def __str__(self) -> str:
        return f"{self.student_id} {self.date:%F} {self.status}"


class Complaint(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_RESOLVED = 'resolved'
    STATUS_CHOICES = ((STATUS_PENDING, 'pending'), (STATUS_RESOLVED, 'resolved'))

    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name='complaints')
    description = models.TextField()
    # 投诉状态常用于过滤，添加索引
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    resolved_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"Complaint #{self.pk} ({self.status})"


class Transaction(models.Model):
    """A fee reminder issued by an admin or a payment made by a student.

    Reminders carry ``is_reminder=True`` and an ``admin``; a student
    confirming a reminder moves it to approved.
    """
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'pending'),
        (STATUS_APPROVED, 'approved'),
        (STATUS_REJECTED, 'rejected'),
    )

    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name='transactions')
    admin = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='issued_transactions'
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    description = models.CharField(max_length=255, blank=True)
    date = models.DateField()
    due_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    is_reminder = models.BooleanField(default=False)
    payment_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=['student', 'status'])]

    def __str__(self) -> str:
        kind = 'reminder' if self.is_reminder else 'payment'
        return f"{kind} #{self.pk} {self.amount} ({self.status})"


class Notification(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='notifications')
    message = models.CharField(max_length=255)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=['user', 'created_at'])]

    def __str__(self) -> str:
        return f"notify u={self.user_id}: {self.message[:30]}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at']),
            models.Index(fields=['object_type', 'object_id', 'created_at']),
        ]
