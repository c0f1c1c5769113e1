"""
Unit tests for EventBus class.
"""

import logging

import pytest
from gearforge.core.event_bus import EventBus
from gearforge.core.models import Event


@pytest.fixture
def event_bus():
    """Create an event bus for testing."""
    return EventBus(max_history=5)


def make_event(event_type='item.upgraded', **data):
    return Event.create(event_type, data, item_id='sword', actor_id='player')


class TestEventBus:
    """Test EventBus pub/sub functionality."""

    def test_subscribe(self, event_bus):
        """Test subscribing to events."""
        event_bus.subscribe('item.upgraded', lambda event: None)
        assert event_bus.get_listener_count('item.upgraded') == 1

    def test_subscribe_duplicate_callback(self, event_bus):
        """Test that subscribing same callback twice doesn't duplicate."""
        def callback(event: Event):
            pass

        event_bus.subscribe('item.upgraded', callback)
        event_bus.subscribe('item.upgraded', callback)

        assert event_bus.get_listener_count('item.upgraded') == 1

    def test_unsubscribe(self, event_bus):
        """Test unsubscribing from events."""
        def callback(event: Event):
            pass

        event_bus.subscribe('item.upgraded', callback)
        event_bus.unsubscribe('item.upgraded', callback)
        assert event_bus.get_listener_count('item.upgraded') == 0

        # Unknown callbacks and types are ignored
        event_bus.unsubscribe('item.equipped', callback)

    def test_publish_calls_listeners(self, event_bus):
        """Test that publishing an event calls matching listeners only."""
        upgraded = []
        equipped = []
        event_bus.subscribe('item.upgraded', upgraded.append)
        event_bus.subscribe('item.equipped', equipped.append)

        event = make_event(cost=70)
        event_bus.publish(event)

        assert upgraded == [event]
        assert equipped == []

    def test_wildcard_listener(self, event_bus):
        """Test that '*' listeners receive every event."""
        seen = []
        event_bus.subscribe('*', lambda event: seen.append(event.event_type))

        event_bus.publish(make_event('item.upgraded'))
        event_bus.publish(make_event('item.equipped'))

        assert seen == ['item.upgraded', 'item.equipped']

    def test_listener_error_does_not_stop_others(self, event_bus, caplog):
        """Test that one failing listener doesn't break the rest."""
        called = []

        def broken(event: Event):
            raise RuntimeError('speaker unplugged')

        event_bus.subscribe('item.upgraded', broken)
        event_bus.subscribe('item.upgraded', called.append)

        with caplog.at_level(logging.ERROR):
            event_bus.publish(make_event())

        assert len(called) == 1
        assert 'speaker unplugged' in caplog.text

    def test_history_is_bounded(self, event_bus):
        """Test that history keeps only the newest events."""
        events = [make_event(step=i) for i in range(8)]
        for event in events:
            event_bus.publish(event)

        assert event_bus.history == events[-5:]

    def test_clear_listeners(self, event_bus):
        """Test clearing one type or everything."""
        event_bus.subscribe('item.upgraded', lambda event: None)
        event_bus.subscribe('item.equipped', lambda event: None)

        event_bus.clear_listeners('item.upgraded')
        assert event_bus.get_listener_count('item.upgraded') == 0
        assert event_bus.get_listener_count() == 1

        event_bus.clear_listeners()
        assert event_bus.get_listener_count() == 0


class TestEvent:
    """Test Event model."""

    def test_create(self):
        event = make_event(cost=70)

        assert event.event_id.startswith('evt_')
        assert event.timestamp.tzinfo is not None
        assert event.item_id == 'sword'
        assert event.actor_id == 'player'

    def test_to_dict(self):
        data = make_event(cost=70).to_dict()

        assert data['event_type'] == 'item.upgraded'
        assert data['data'] == {'cost': 70}
        assert isinstance(data['timestamp'], str)
