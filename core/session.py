"""
Explicit session context for service calls.

A :class:`Session` is built from the authenticated user at the start of
each request and handed to the service functions, which never look at
ambient request or global state to find out who is acting.  Its
lifetime on the client side runs from login (token issued) to logout
(token revoked, see ``core.auth_views``).
"""
from __future__ import annotations

from dataclasses import dataclass

from rest_framework.exceptions import NotAuthenticated, PermissionDenied

from .models import User


@dataclass(frozen=True)
class Session:
    user_id: int
    role: str
    hostel_name: str

    @property
    def is_admin(self) -> bool:
        return self.role == User.ROLE_ADMIN

    @property
    def is_student(self) -> bool:
        return self.role == User.ROLE_STUDENT

    def require_admin(self) -> None:
        if not self.is_admin:
            raise PermissionDenied('admin role required')

    def require_student(self) -> None:
        if not self.is_student:
            raise PermissionDenied('student role required')


def session_for(user) -> Session:
    """Return the session of an authenticated user."""
    if not (user and getattr(user, 'is_authenticated', False)):
        raise NotAuthenticated()
    return Session(user_id=user.id, role=user.role, hostel_name=user.hostel_name or '')
