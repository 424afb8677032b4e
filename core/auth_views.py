"""
Authentication views: signup, login, token refresh and logout.

Login opens a client session by issuing a legacy DRF token plus a JWT
pair; logout closes it by revoking the legacy token and blacklisting
the refresh tokens.  Everything else in the API identifies the caller
through :func:`core.session.session_for`.
"""
from __future__ import annotations

from django.contrib.auth import authenticate
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle

from core.serializers.auth import LoginSerializer, LogoutSerializer, AdminSignupSerializer, StudentSignupSerializer
from core.services.accounts import create_admin, create_student
from core.services.audit import log_action

from .models import User


def _session_payload(user: User) -> dict:
    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return {
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'role': user.role,
        'user': {
            'id': user.id,
            'username': user.username,
            'name': user.get_full_name() or user.username,
            'role': user.role,
            'hostelName': user.hostel_name,
        },
    }


# ---------------------------------------------------------------------
# Username/password login (role comes from the account, never the request)
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']
    password = s.validated_data['password']

    user = authenticate(request, username=username, password=password)
    if not user:
        log_action(user_id=None, action='login', object_type='user', object_id=None,
                   detail={'result': 'fail', 'username': username, 'ip': request.META.get('REMOTE_ADDR')})
        return Response({'ok': False, 'detail': 'Invalid username or password'}, status=400)

    log_action(user_id=user.id, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': request.META.get('REMOTE_ADDR')})
    return Response(_session_payload(user), status=200)

login_view.cls.throttle_scope = 'login'


# ---------------------------------------------------------------------
# Signup
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def student_signup_view(request):
    s = StudentSignupSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    user, _profile = create_student(
        username=v['username'], password=v['password'], full_name=v['fullName'],
        hostel_name=v['hostelName'], email=v.get('email', ''),
        phone_number=v.get('phoneNumber', ''), room_number=v.get('roomNumber'),
    )
    return Response(_session_payload(user), status=201)

student_signup_view.cls.throttle_scope = 'signup'


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def admin_signup_view(request):
    s = AdminSignupSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    user = create_admin(
        username=v['username'], password=v['password'], full_name=v['fullName'],
        hostel_name=v['hostelName'], email=v.get('email', ''),
    )
    return Response(_session_payload(user), status=201)

admin_signup_view.cls.throttle_scope = 'signup'


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from refresh token."""
    s = TokenRefreshSerializer(data=request.data)
    try:
        s.is_valid(raise_exception=True)
    except TokenError as e:
        raise InvalidToken(e.args[0])
    data = dict(s.validated_data)
    data['jwt_access'] = data.pop('access')
    if 'refresh' in data:
        data['jwt_refresh'] = data.pop('refresh')
    return Response(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """End the session: drop the legacy token and blacklist refresh tokens (all or a given one)."""
    s = LogoutSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    refresh = s.validated_data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
            count = 1
        except TokenError as e:
            raise InvalidToken(e.args[0])
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    Token.objects.filter(user=request.user).delete()
    return Response({'ok': True, 'blacklisted': count})
