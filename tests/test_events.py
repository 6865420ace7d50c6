"""
Test Event Bus
==============
"""

from core.events import EventBus, EventType, create_event


def test_singleton(fresh_event_bus):
    assert EventBus() is fresh_event_bus


def test_priority_order(fresh_event_bus):
    order = []
    fresh_event_bus.subscribe(EventType.SHAPE_CAPTURED, lambda e: order.append("low"))
    fresh_event_bus.subscribe(EventType.SHAPE_CAPTURED, lambda e: order.append("high"), priority=10)

    fresh_event_bus.publish(create_event(EventType.SHAPE_CAPTURED, {}))

    assert order == ["high", "low"]


def test_failing_handler_does_not_stop_others(fresh_event_bus):
    received = []

    def broken(event):
        raise RuntimeError("boom")

    fresh_event_bus.subscribe(EventType.CUTTING_PLAN_CONFIRMED, broken, priority=1)
    fresh_event_bus.subscribe(EventType.CUTTING_PLAN_CONFIRMED, received.append)

    fresh_event_bus.publish(create_event(EventType.CUTTING_PLAN_CONFIRMED, {'waste_percentage': 12.5}))

    assert received[0].data == {'waste_percentage': 12.5}


def test_unsubscribe(fresh_event_bus):
    handler = lambda e: None
    fresh_event_bus.subscribe(EventType.SHAPE_CANCELLED, handler)

    assert fresh_event_bus.get_handler_count(EventType.SHAPE_CANCELLED) == 1
    assert fresh_event_bus.unsubscribe(EventType.SHAPE_CANCELLED, handler)
    assert not fresh_event_bus.unsubscribe(EventType.SHAPE_CANCELLED, handler)
    assert fresh_event_bus.get_handler_count() == 0


def test_event_to_dict():
    event = create_event(EventType.CUTTING_PLAN_COMPUTED, {'material_id': 'granite'}, source='test')
    data = event.to_dict()

    assert data['type'] == EventType.CUTTING_PLAN_COMPUTED.value
    assert data['data'] == {'material_id': 'granite'}
    assert data['source'] == 'test'
