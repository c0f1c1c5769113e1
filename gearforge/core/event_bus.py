"""
Event bus for Gear Forge.

Provides a synchronous pub/sub channel for engine transitions. The engine
itself never depends on listeners; they exist so presentation layers (sound,
animation, toasts) can react to a returned transition without being woven
into it.
"""

import logging
from typing import Callable, Dict, List
from .models import Event

logger = logging.getLogger(__name__)


class EventBus:
    """
    Event bus for publishing and subscribing to engine events.

    Implements pub/sub pattern where callers can subscribe to specific event
    types and get notified when those events occur. Delivery is synchronous
    and in-process.

    Attributes:
        listeners: Dict mapping event types to lists of callback functions
        history: Every published event, oldest first (bounded by max_history)
    """

    def __init__(self, max_history: int = 100):
        """
        Initialize event bus.

        Args:
            max_history: How many published events to keep for inspection
        """
        self.listeners: Dict[str, List[Callable[[Event], None]]] = {}
        self.history: List[Event] = []
        self.max_history = max_history

    def subscribe(self, event_type: str, callback: Callable[[Event], None]) -> None:
        """
        Subscribe to events of a specific type.

        Args:
            event_type: Type of event to listen for (e.g., 'item.upgraded').
                        Use '*' to receive every event.
            callback: Function to call when event occurs.
                     Must accept Event as parameter.

        Examples:
            >>> def on_upgraded(event: Event):
            ...     print(f"Upgraded for {event.data['cost']} gold")
            >>>
            >>> bus.subscribe('item.upgraded', on_upgraded)
        """
        if event_type not in self.listeners:
            self.listeners[event_type] = []

        if callback not in self.listeners[event_type]:
            self.listeners[event_type].append(callback)

    def unsubscribe(self, event_type: str, callback: Callable[[Event], None]) -> None:
        """
        Unsubscribe from events of a specific type.

        Args:
            event_type: Type of event
            callback: Callback function to remove
        """
        if event_type in self.listeners:
            if callback in self.listeners[event_type]:
                self.listeners[event_type].remove(callback)

    def publish(self, event: Event) -> None:
        """
        Publish an event to all subscribers.

        Events are:
        1. Appended to the in-memory history
        2. Broadcast to listeners for that event type, then to '*' listeners

        Args:
            event: Event to publish
        """
        self.history.append(event)
        if len(self.history) > self.max_history:
            del self.history[:len(self.history) - self.max_history]

        callbacks = self.listeners.get(event.event_type, []) + self.listeners.get('*', [])
        for callback in callbacks:
            try:
                callback(event)
            except Exception as e:
                # Don't let one listener's error stop others
                logger.error(f"Error in event listener for {event.event_type}: {e}", exc_info=True)

    def clear_listeners(self, event_type: str = None) -> None:
        """
        Clear listeners for a specific event type or all listeners.

        Args:
            event_type: Event type to clear listeners for.
                       If None, clears all listeners.

        Note:
            Primarily used for testing.
        """
        if event_type:
            if event_type in self.listeners:
                self.listeners[event_type] = []
        else:
            self.listeners = {}

    def get_listener_count(self, event_type: str = None) -> int:
        """
        Get the number of listeners for an event type.

        Args:
            event_type: Event type to count listeners for.
                       If None, returns total listener count across all types.

        Returns:
            Number of registered listeners
        """
        if event_type:
            return len(self.listeners.get(event_type, []))
        else:
            return sum(len(listeners) for listeners in self.listeners.values())


__all__ = ['EventBus']
