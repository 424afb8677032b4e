from types import SimpleNamespace

import pytest
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser

from core.realtime.consumers import ChangesConsumer
from core.realtime.notify import group_for, notify_change


def _communicator(user):
    communicator = WebsocketCommunicator(ChangesConsumer.as_asgi(), "/ws/changes/")
    communicator.scope["user"] = user
    return communicator


@pytest.mark.asyncio
async def test_anonymous_connection_is_closed():
    communicator = _communicator(AnonymousUser())
    connected, code = await communicator.connect()
    assert not connected
    assert code == 4003


@pytest.mark.asyncio
async def test_subscribe_and_receive_matching_events():
    communicator = _communicator(SimpleNamespace(is_authenticated=True))
    connected, _ = await communicator.connect()
    assert connected
    assert (await communicator.receive_json_from())["type"] == "welcome"

    await communicator.send_json_to({"type": "subscribe", "table": "rooms", "events": ["INSERT"]})
    reply = await communicator.receive_json_from()
    assert reply == {"type": "subscribed", "table": "rooms", "events": ["INSERT"]}

    layer = get_channel_layer()
    await layer.group_send(group_for("rooms"), {"type": "table.change", "table": "rooms", "event": "UPDATE", "id": 1})
    await layer.group_send(group_for("rooms"), {"type": "table.change", "table": "rooms", "event": "INSERT", "id": 2})
    change = await communicator.receive_json_from()
    assert change == {"type": "change", "table": "rooms", "event": "INSERT", "id": 2}

    await communicator.send_json_to({"type": "unsubscribe", "table": "rooms"})
    assert (await communicator.receive_json_from())["type"] == "unsubscribed"
    await layer.group_send(group_for("rooms"), {"type": "table.change", "table": "rooms", "event": "INSERT", "id": 3})
    assert await communicator.receive_nothing()
    await communicator.disconnect()


@pytest.mark.asyncio
@pytest.mark.parametrize("message, code", [
    ({"type": "subscribe", "table": "users"}, 4004),
    ({"type": "subscribe", "table": "rooms", "events": ["TRUNCATE"]}, 4005),
    ({"type": "ping", "table": "rooms"}, 4002),
])
async def test_bad_requests_get_error_codes(message, code):
    communicator = _communicator(SimpleNamespace(is_authenticated=True))
    await communicator.connect()
    await communicator.receive_json_from()
    await communicator.send_json_to(message)
    reply = await communicator.receive_json_from()
    assert reply["type"] == "error" and reply["code"] == code
    await communicator.disconnect()


@pytest.mark.asyncio
async def test_invalid_json():
    communicator = _communicator(SimpleNamespace(is_authenticated=True))
    await communicator.connect()
    await communicator.receive_json_from()
    await communicator.send_to(text_data="{not json")
    assert (await communicator.receive_json_from())["code"] == 4000
    await communicator.disconnect()


def test_notify_change_rejects_unknown_names():
    with pytest.raises(ValueError):
        notify_change("users", "INSERT")
    with pytest.raises(ValueError):
        notify_change("rooms", "UPSERT")
