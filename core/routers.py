"""
URL mappings for the hostel backend API.

Trailing slashes are deliberately omitted; the front-end calls the
paths exactly as written here.
"""
from django.urls import path, include

from .auth_views import admin_signup_view, jwt_logout_view, jwt_refresh_view, login_view, student_signup_view
from .views import health
from .views.attendance import attendance_mark, my_attendance
from .views.complaints import complaint_create, complaint_set_status, complaints_list
from .views.dashboard import admin_dashboard, student_dashboard_view
from .views.notifications import notifications_list, notifications_mark_read
from .views.rooms import list_rooms, room_allocate, room_create
from .views.students import list_students, my_profile, student_attendance, student_detail
from .views.transactions import (
    transaction_pay,
    transaction_record,
    transaction_reminder,
    transaction_review,
    transactions_list,
)


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout'),
    path('api/auth/signup/student', student_signup_view, name='student_signup'),
    path('api/auth/signup/admin', admin_signup_view, name='admin_signup'),
    # Dashboards
    path('api/admin/dashboard', admin_dashboard, name='admin_dashboard'),
    path('api/student/dashboard', student_dashboard_view, name='student_dashboard'),
    # Rooms
    path('api/rooms', list_rooms, name='rooms'),
    path('api/rooms/create', room_create, name='room_create'),
    path('api/rooms/allocate', room_allocate, name='room_allocate'),
    # Students
    path('api/students', list_students, name='students'),
    path('api/students/<int:pk>', student_detail, name='student_detail'),
    path('api/students/<int:pk>/attendance', student_attendance, name='student_attendance'),
    path('api/student/profile', my_profile, name='student_profile'),
    # Attendance
    path('api/attendance/mark', attendance_mark, name='attendance_mark'),
    path('api/attendance/my', my_attendance, name='my_attendance'),
    # Complaints
    path('api/complaints', complaints_list, name='complaints'),
    path('api/complaints/create', complaint_create, name='complaint_create'),
    path('api/complaints/status', complaint_set_status, name='complaint_status'),
    # Fees
    path('api/transactions', transactions_list, name='transactions'),
    path('api/transactions/reminder', transaction_reminder, name='transaction_reminder'),
    path('api/transactions/pay', transaction_pay, name='transaction_pay'),
    path('api/transactions/record', transaction_record, name='transaction_record'),
    path('api/transactions/review', transaction_review, name='transaction_review'),
    # Notifications
    path('api/notifications', notifications_list, name='notifications'),
    path('api/notifications/read', notifications_mark_read, name='notifications_read'),
]
