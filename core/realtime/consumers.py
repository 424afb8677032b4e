import json
from channels.generic.websocket import AsyncWebsocketConsumer
from django.contrib.auth.models import AnonymousUser

from core.realtime.notify import EVENTS, TABLES, group_for


class ChangesConsumer(AsyncWebsocketConsumer):
    """Row-level change notifications, one subscription per table.

    Client messages:
        {"type": "subscribe", "table": "attendance", "events": ["*"]}
        {"type": "unsubscribe", "table": "attendance"}
    Server messages:
        {"type": "change", "table": "attendance", "event": "UPDATE", "id": 12}
    """

    async def connect(self):
        user = self.scope.get("user") or AnonymousUser()
        if not getattr(user, "is_authenticated", False):
            await self.close(code=4003)
            return
        # table -> set of event kinds the client asked for
        self.masks: dict[str, set[str]] = {}
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        for table in list(getattr(self, "masks", {})):
            await self.channel_layer.group_discard(group_for(table), self.channel_name)

    async def receive(self, text_data=None, bytes_data=None):
        if not text_data:
            return
        try:
            data = json.loads(text_data)
        except ValueError:
            await self._error(4000, "invalid_json")
            return
        if not isinstance(data, dict):
            await self._error(4001, "invalid_payload")
            return

        table = data.get("table")
        if table not in TABLES:
            await self._error(4004, "unknown_table")
            return

        kind = data.get("type")
        if kind == "subscribe":
            events = data.get("events") or ["*"]
            if not isinstance(events, list):
                await self._error(4001, "invalid_payload")
                return
            mask = set(EVENTS) if "*" in events else {e for e in events if e in EVENTS}
            if not mask:
                await self._error(4005, "unknown_event")
                return
            if table not in self.masks:
                await self.channel_layer.group_add(group_for(table), self.channel_name)
            self.masks[table] = mask
            await self.send(json.dumps({"type": "subscribed", "table": table, "events": sorted(mask)}))
        elif kind == "unsubscribe":
            if self.masks.pop(table, None) is not None:
                await self.channel_layer.group_discard(group_for(table), self.channel_name)
            await self.send(json.dumps({"type": "unsubscribed", "table": table}))
        else:
            await self._error(4002, "unsupported_type")

    # group_send 事件处理器: {"type": "table.change", "table": ..., "event": ..., "id": ...}
    async def table_change(self, event):
        mask = self.masks.get(event.get("table"))
        if not mask or event.get("event") not in mask:
            return
        await self.send(json.dumps({
            "type": "change",
            "table": event["table"],
            "event": event["event"],
            "id": event.get("id"),
        }))

    async def _error(self, code: int, message: str):
        await self.send(json.dumps({"type": "error", "code": code, "message": message}))
