"""Event bus contracts shared by every module.

Services receive an ``IEventBus`` from the composition root
(``config.container``) and publish only after the state change they
describe has been persisted.  Handlers only observe: they log and never
change the aggregate that published the event.
"""

from __future__ import annotations

from typing import Generic, Protocol, Type, TypeVar

from shared.domain.events import DomainEvent

E = TypeVar("E", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol, Generic[E]):
    """Reacts to one event type (and its subclasses)."""

    def handle(self, event: E) -> None: ...


class IEventBus(Protocol):
    """Synchronous, in-process dispatch keyed by event class."""

    def publish(self, event: DomainEvent) -> None:
        """Deliver *event* to every handler subscribed to its class or a base class."""

    def subscribe(self, event_class: Type[E], handler: IEventHandler[E]) -> None:
        """Register *handler*; subscribing the same handler twice is a no-op."""
