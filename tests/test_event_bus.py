from questline.events.bus import EVENT_TICK, EventBus
from questline.events.messages import Tick


def test_event_bus_emit_subscribe():
    bus = EventBus()
    received = {}

    def handler(sender, **kwargs):
        received.update(kwargs)

    bus.subscribe("test", handler)
    bus.emit("test", value=42, msg="hello")

    assert received["value"] == 42
    assert received["msg"] == "hello"


def test_publish_delivers_typed_message_under_its_event_name():
    bus = EventBus()
    received = []

    bus.subscribe(EVENT_TICK, lambda sender, **kwargs: received.append(kwargs["message"]))
    bus.publish(Tick(dt=0.5))

    assert received == [Tick(dt=0.5)]


def test_unsubscribe_handle_stops_delivery():
    bus = EventBus()
    calls = []

    unsubscribe = bus.subscribe("test", lambda sender, **kwargs: calls.append(kwargs))
    bus.emit("test", n=1)
    unsubscribe()
    bus.emit("test", n=2)

    assert calls == [{"n": 1}]
