"""
Legacy token authentication for the hostel API.

Older clients send ``Authorization: Token <key>``; newer ones send a
JWT as ``Bearer <access>``, which simplejwt handles.  Both are listed
in ``REST_FRAMEWORK['DEFAULT_AUTHENTICATION_CLASSES']``.
"""
from __future__ import annotations

from rest_framework import authentication, exceptions


class TokenAuthentication(authentication.TokenAuthentication):
    keyword = 'Token'

    def authenticate_credentials(self, key):
        user, token = super().authenticate_credentials(key)
        # every account of this API belongs to exactly one hostel
        if not user.hostel_name and not user.is_superuser:
            raise exceptions.AuthenticationFailed('account is not attached to a hostel')
        return user, token
