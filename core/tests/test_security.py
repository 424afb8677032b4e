import pytest
from django.urls import reverse
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken
from core.models import AuditEvent, StudentProfile, User

pytestmark = pytest.mark.django_db

def login(client, username, password):
    r = client.post(reverse('login_view'), {'username': username, 'password': password}, format='json')
    assert r.status_code in (200, 400, 401)
    return r

def test_no_role_bypass_in_login():
    client = APIClient()
    u = User.objects.create_user(username='u1', password='P@ssw0rd1', role='student', hostel_name='North Block')
    # Try to bypass by sending role
    r = client.post(reverse('login_view'), {'username': 'u1', 'password': 'P@ssw0rd1', 'role': 'admin'}, format='json')
    assert r.status_code == 200
    assert r.data['role'] == 'student'
    u.refresh_from_db()
    assert u.role == 'student'

def test_bad_password_is_audited():
    User.objects.create_user(username='u2', password='P@ssw0rd1', role='student', hostel_name='North Block')
    r = login(APIClient(), 'u2', 'wrong-password')
    assert r.status_code == 400
    assert r.data['ok'] is False
    assert AuditEvent.objects.filter(action='login', detail__result='fail').exists()


def test_login_returns_jwt_and_legacy_token():
    client = APIClient()
    User.objects.create_user(username='u_jwt', password='P@ssw0rd1', role='admin', hostel_name='North Block')
    r = login(client, 'u_jwt', 'P@ssw0rd1')
    assert r.status_code == 200
    assert 'jwt_access' in r.data and r.data['jwt_access']
    assert 'jwt_refresh' in r.data and r.data['jwt_refresh']
    assert 'token' in r.data and r.data['token']
    assert r.data['user']['hostelName'] == 'North Block'


def test_both_token_kinds_authenticate():
    User.objects.create_user(username='a1', password='P@ssw0rd1', role='admin', hostel_name='North Block')
    r = login(APIClient(), 'a1', 'P@ssw0rd1')

    legacy = APIClient()
    legacy.credentials(HTTP_AUTHORIZATION=f"Token {r.data['token']}")
    assert legacy.get('/api/rooms').status_code == 200

    bearer = APIClient()
    bearer.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['jwt_access']}")
    assert bearer.get('/api/rooms').status_code == 200


def test_legacy_token_needs_a_hostel():
    u = User.objects.create_user(username='loose', password='P@ssw0rd1', role='admin')
    token = Token.objects.create(user=u)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Token {token.key}')
    assert client.get('/api/rooms').status_code == 401


def test_student_signup_creates_profile():
    client = APIClient()
    r = client.post(reverse('student_signup'), {
        'username': 'newbie', 'password': 'Str0ng!pass', 'fullName': 'New Student',
        'hostelName': 'North Block', 'phoneNumber': '9876543210', 'roomNumber': '101',
    }, format='json')
    assert r.status_code == 201
    assert r.data['role'] == 'student'
    profile = StudentProfile.objects.get(user__username='newbie')
    assert profile.room_number == '101'
    assert profile.user.hostel_name == 'North Block'


def test_signup_rejects_weak_password_and_duplicates():
    client = APIClient()
    weak = client.post(reverse('admin_signup'), {
        'username': 'boss', 'password': '123', 'fullName': 'Boss', 'hostelName': 'North Block',
    }, format='json')
    assert weak.status_code == 400
    assert not User.objects.filter(username='boss').exists()

    ok = client.post(reverse('admin_signup'), {
        'username': 'boss', 'password': 'Str0ng!pass', 'fullName': 'Boss', 'hostelName': 'North Block',
    }, format='json')
    assert ok.status_code == 201 and ok.data['role'] == 'admin'
    dup = client.post(reverse('student_signup'), {
        'username': 'boss', 'password': 'Str0ng!pass', 'fullName': 'Boss', 'hostelName': 'North Block',
    }, format='json')
    assert dup.status_code == 400


def test_refresh_rotates_and_logout_blacklists():
    User.objects.create_user(username='s1', password='P@ssw0rd1', role='student', hostel_name='North Block')
    client = APIClient()
    r = login(client, 's1', 'P@ssw0rd1')

    refreshed = client.post(reverse('jwt_refresh'), {'refresh': r.data['jwt_refresh']}, format='json')
    assert refreshed.status_code == 200
    assert refreshed.data['jwt_access']
    new_refresh = refreshed.data['jwt_refresh']

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refreshed.data['jwt_access']}")
    out = client.post(reverse('jwt_logout'), {'refresh': new_refresh}, format='json')
    assert out.status_code == 200 and out.data['blacklisted'] == 1
    assert BlacklistedToken.objects.exists()
    assert not Token.objects.filter(user__username='s1').exists()

    again = APIClient().post(reverse('jwt_refresh'), {'refresh': new_refresh}, format='json')
    assert again.status_code == 401


def test_login_is_throttled():
    User.objects.create_user(username='t1', password='P@ssw0rd1', role='student', hostel_name='North Block')
    client = APIClient()
    for _ in range(10):
        assert login(client, 't1', 'nope').status_code == 400
    r = client.post(reverse('login_view'), {'username': 't1', 'password': 'nope'}, format='json')
    assert r.status_code == 429
