"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List, Type

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus.

    Instances are created by the composition root and injected into the
    services that publish; there is no process-wide bus.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def publish(self, event: DomainEvent) -> None:
        for event_class, handlers in self._handlers.items():
            if isinstance(event, event_class):
                for handler in handlers:
                    handler.handle(event)


class RecordingEventBus(InMemoryEventBus):
    """Event bus that also keeps every published event (tests, debugging)."""

    def __init__(self) -> None:
        super().__init__()
        self.published: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self.published.append(event)
        super().publish(event)
