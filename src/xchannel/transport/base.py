"""Transport interface.

This is the (small) contract that transport adapters follow. It lives
outside :mod:`xchannel.protocol` so the protocol remains transport-agnostic.

A host handle (an in-process port, a ZeroMQ socket, or any object with a
compatible message API) is resolved once, at binding time, into a
:class:`Receiver` for inbound messages and an :class:`Outbound` for
outbound messages. The resolved shape is recorded as a :class:`Kind`.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import Any, Callable, NamedTuple, Optional

from ..errors import TransportError


# Event type, and fixed message-channel name for relay-style hosts.
MESSAGE = "message"


class Kind(enum.Enum):
    """The message API a host handle was resolved through."""

    EVENT_TARGET = "event-target"   # add/remove_event_listener('message', ...)
    POST_MESSAGE = "post-message"   # post_message(data, origin)
    HOST_RELAY = "host-relay"       # send_to_host('message', data)
    GENERIC_SEND = "generic-send"   # send('message', data)
    CUSTOM = "custom"               # a Receiver/Outbound implemented directly


class Event(NamedTuple):
    """One inbound message as delivered by an event-subscribable host.

    *source* identifies the sending counterpart, and is itself a host
    handle that a reply can be sent to.
    """

    data: Any
    source: Any = None
    origin: Optional[str] = None


Handler = Callable[[Any, Any], None]


class Receiver(ABC):
    """Minimal contract for the inbound half of a transport."""

    kind = Kind.CUSTOM

    @abstractmethod
    def connect(self, handler: Handler) -> None:
        """Invoke handler(payload, source) for every inbound message."""

    @abstractmethod
    def disconnect(self) -> None:
        """Stop delivering inbound messages to the connected handler."""


class Outbound(ABC):
    """Minimal contract for the outbound half of a transport."""

    kind = Kind.CUSTOM

    @abstractmethod
    def send(self, envelope: dict, origin: str) -> None:
        """Push one envelope outward, with a best-effort origin hint."""


__all__ = [
    "Event",
    "Handler",
    "Kind",
    "MESSAGE",
    "Outbound",
    "Receiver",
    "TransportError",
]
