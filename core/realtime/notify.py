"""
Publishing side of the change feed.

Services call :func:`notify_change` after a successful write.  The
event names the table, the kind of change and the row id only; clients
re-fetch whatever they display instead of trusting a pushed payload.
"""
from __future__ import annotations

import logging
from typing import Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)

TABLES = frozenset({
    'student_profiles',
    'rooms',
    'attendance',
    'complaints',
    'transactions',
    'notifications',
})
EVENTS = frozenset({'INSERT', 'UPDATE', 'DELETE'})


def group_for(table: str) -> str:
    return f"changes.{table}"


def notify_change(table: str, event: str, row_id: Optional[int] = None) -> None:
    if table not in TABLES:
        raise ValueError(f'unknown table: {table}')
    if event not in EVENTS:
        raise ValueError(f'unknown event: {event}')
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    payload = {"type": "table.change", "table": table, "event": event, "id": row_id}
    try:
        async_to_sync(channel_layer.group_send)(group_for(table), payload)
    except Exception:
        # the write already happened; subscribers catch up on their next fetch
        logger.exception("change notification failed for %s %s", table, event)
