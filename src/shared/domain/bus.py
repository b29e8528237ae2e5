"""Domain bus interfaces for in-process event handling."""

from __future__ import annotations

from typing import Generic, Protocol, Type, TypeVar

from shared.domain.events import DomainEvent

EventT = TypeVar("EventT", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol, Generic[EventT]):
    """Reacts to one kind of domain event."""

    def handle(self, event: EventT) -> None: ...


class IEventBus(Protocol):
    """Publishes committed domain events to their subscribers."""

    def publish(self, event: DomainEvent) -> None: ...

    def subscribe(
        self, event_class: Type[EventT], handler: IEventHandler[EventT]
    ) -> None: ...
