"""Core application for the hostel backend.

Models, services, serializers, views and route registrations for room
allocation, attendance, complaints and fee reminders.
"""
