# slot_engine/domain/events/event_dispatcher.py
import logging
from enum import Enum
from typing import Callable, Dict, List, Type

from .event_types import DomainEvent


Handler = Callable[[DomainEvent], None]


class EventDispatcher:
    """
    Dispatches domain events to registered handlers.
    A failing handler is logged and does not stop the remaining handlers.
    """
    def __init__(self):
        self.logger = logging.getLogger("domain.events.dispatcher")
        self.handlers: Dict[Enum, List[Handler]] = {}  # event type -> handlers
        self.type_handlers: Dict[str, List[Handler]] = {}  # event class name -> handlers

    def register(self, event_type: Enum, handler: Handler):
        """Register a handler for one event type."""
        self.handlers.setdefault(event_type, []).append(handler)
        self.logger.debug(f"Registered handler for event type: {event_type.name}")

    def register_for_class(self, event_class: Type[DomainEvent], handler: Handler):
        """Register a handler for every event of a given class."""
        class_name = event_class.__name__
        self.type_handlers.setdefault(class_name, []).append(handler)
        self.logger.debug(f"Registered handler for event class: {class_name}")

    def dispatch(self, event: DomainEvent):
        handlers = self.handlers.get(event.type, []) + \
            self.type_handlers.get(event.__class__.__name__, [])

        if not handlers:
            self.logger.debug(f"No handlers registered for event: {event}")
            return

        self.logger.debug(f"Dispatching event {event} to {len(handlers)} handlers")

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                self.logger.exception(f"Error in event handler for {event}")

    def unregister(self, event_type: Enum, handler: Handler) -> bool:
        """Remove a handler registered with register(). Returns False if not found."""
        if handler in self.handlers.get(event_type, []):
            self.handlers[event_type].remove(handler)
            self.logger.debug(f"Unregistered handler for event type: {event_type.name}")
            return True
        return False

    def unregister_for_class(self, event_class: Type[DomainEvent], handler: Handler) -> bool:
        class_name = event_class.__name__
        if handler in self.type_handlers.get(class_name, []):
            self.type_handlers[class_name].remove(handler)
            self.logger.debug(f"Unregistered handler for event class: {class_name}")
            return True
        return False
