# core/management/commands/ensure_test_users.py
from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password
from core.models import StudentProfile, User

HOSTEL = "Test Hostel"

TEST_SET = [
    ("warden1", "admin", None),
    ("student1", "student", "101"),
    ("student2", "student", "101"),
    ("student3", "student", None),
]

class Command(BaseCommand):
    help = "Ensure test users exist and password=123456 (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument('--hostel', default=HOSTEL)

    def handle(self, *args, **opts):
        hostel = opts['hostel']
        for username, role, room in TEST_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"role": role, "hostel_name": hostel, "password": make_password("123456"), "is_active": True},
            )
            if not created:
                # 强制校正密码与激活状态、角色
                u.password = make_password("123456")
                u.role = role
                u.hostel_name = hostel
                u.is_active = True
                u.save(update_fields=["password", "role", "hostel_name", "is_active"])
            if role == User.ROLE_STUDENT:
                # room assignments are left alone once the profile exists
                StudentProfile.objects.get_or_create(
                    user=u, defaults={"full_name": username.title(), "room_number": room},
                )
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role}, {hostel})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
