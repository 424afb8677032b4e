import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from core.models import Room, StudentProfile, User

HOSTEL = 'North Block'


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    # throttling history lives in the default cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username='warden', password='P@ssw0rd1', role=User.ROLE_ADMIN, hostel_name=HOSTEL,
    )


@pytest.fixture
def make_student(db):
    def make(username, room_number=None, hostel_name=HOSTEL):
        user = User.objects.create_user(
            username=username, password='P@ssw0rd1', role=User.ROLE_STUDENT, hostel_name=hostel_name,
        )
        StudentProfile.objects.create(user=user, full_name=username.title(), room_number=room_number)
        return user
    return make


@pytest.fixture
def make_room(db):
    def make(room_number, capacity=2, occupancy=0, hostel_name=HOSTEL):
        return Room.objects.create(
            room_number=room_number, hostel_name=hostel_name, capacity=capacity, current_occupancy=occupancy,
        )
    return make


@pytest.fixture
def client_for():
    def make(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return make
