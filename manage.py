#!/usr/bin/env python
"""
Command-line entry point for the hostel backend.

Besides the stock Django commands this exposes the project commands
``reconcile_rooms`` (rewrite stored room occupancy from assignments) and
``ensure_test_users`` (seed a test hostel).
"""
import os
import sys


def main() -> None:
    """Run administrative tasks for the Django project."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hostel.settings')
    try:
        from django.core.management import execute_from_command_line  # type: ignore
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()