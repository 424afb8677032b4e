"""
Django admin registrations for the core models.

Mostly useful during development to inspect rooms and assignments and
to fix up data by hand; stored occupancy counters edited here are
corrected again by ``manage.py reconcile_rooms``.
"""

from django.contrib import admin

from .models import (
    User,
    StudentProfile,
    Room,
    Attendance,
    Complaint,
    Transaction,
    Notification,
    AuditEvent,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'hostel_name', 'is_staff', 'is_superuser')
    list_filter = ('role', 'hostel_name')
    search_fields = ('username', 'first_name', 'last_name', 'email')


@admin.register(StudentProfile)
class StudentProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'full_name', 'room_number', 'phone_number', 'created_at')
    list_filter = ('user__hostel_name',)
    search_fields = ('user__username', 'full_name', 'room_number', 'phone_number')


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ('id', 'hostel_name', 'room_number', 'capacity', 'current_occupancy')
    list_filter = ('hostel_name',)
    search_fields = ('room_number',)


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ('student', 'date', 'status', 'marked_by')
    list_filter = ('status', 'date')
    search_fields = ('student__username',)
    date_hierarchy = 'date'


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ('id', 'student', 'status', 'created_at', 'resolved_at')
    list_filter = ('status',)
    search_fields = ('id', 'description', 'student__username')


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ('id', 'student', 'amount', 'status', 'is_reminder', 'due_date', 'payment_date')
    list_filter = ('status', 'is_reminder')
    search_fields = ('id', 'description', 'student__username')


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'is_read', 'created_at')
    list_filter = ('is_read',)


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('id', 'user_id', 'action', 'object_type', 'object_id', 'created_at')
    list_filter = ('action',)
