from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError

from core.realtime.notify import notify_change
from core.services.rooms import reconcile_occupancy


class Command(BaseCommand):
    help = "Rewrite stored room occupancy counters from student room assignments."

    def add_arguments(self, parser):
        parser.add_argument('--hostel', default=None, help='Only reconcile rooms of this hostel.')

    def handle(self, *args, **options):
        hostel = options.get('hostel')
        try:
            changes = reconcile_occupancy(hostel)
        except DatabaseError as e:
            raise CommandError(f"reconcile failed: {e}")

        for room, old, new in changes:
            notify_change('rooms', 'UPDATE', room.pk)
            self.stdout.write(f"{room.hostel_name}/{room.room_number}: {old} -> {new}")

        self.stdout.write(self.style.SUCCESS(f"Reconciled {len(changes)} room(s)"))
