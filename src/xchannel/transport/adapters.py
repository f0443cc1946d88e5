"""Adapters from host handles to :class:`Receiver` and :class:`Outbound`.

Resolution happens once per binding. Some handles offer more than one
outbound shape; the order in :func:`sender` decides which one is used.
"""

from __future__ import annotations

from typing import Any, Optional

from .. import weakref
from .base import Event, Handler, Kind, MESSAGE, Outbound, Receiver


class EventReceiver(Receiver):
    """Receive 'message' events from an event-subscribable host.

    The connected handler is held strongly until disconnect(). With
    *weak* set, a bound-method handler is held by weak reference instead,
    and the listener removes itself once the handler's object is gone.
    """

    kind = Kind.EVENT_TARGET

    def __init__(self, handle: Any, weak: bool = False):
        self.handle = handle
        self.weak = weak
        self._listener = None

    def connect(self, handler: Handler) -> None:
        self.disconnect()
        target = weakref.Listener(handler, weak=self.weak)

        def listener(event: Event) -> None:
            data = getattr(event, "data", None)
            if data is None:
                return
            if not target(data, getattr(event, "source", None)):
                # The connected channel is gone; stop listening on its behalf.
                self.handle.remove_event_listener(MESSAGE, listener)

        self._listener = listener
        self.handle.add_event_listener(MESSAGE, listener)

    def disconnect(self) -> None:
        if self._listener is not None:
            self.handle.remove_event_listener(MESSAGE, self._listener)
            self._listener = None


class PostMessageSender(Outbound):
    """Send via post_message(data, origin)."""

    kind = Kind.POST_MESSAGE

    def __init__(self, handle: Any):
        self.handle = handle

    def send(self, envelope: dict, origin: str) -> None:
        self.handle.post_message(envelope, origin)


class HostRelaySender(Outbound):
    """Send via send_to_host('message', data); the origin hint is unused."""

    kind = Kind.HOST_RELAY

    def __init__(self, handle: Any):
        self.handle = handle

    def send(self, envelope: dict, origin: str) -> None:
        self.handle.send_to_host(MESSAGE, envelope)


class GenericSender(Outbound):
    """Send via send('message', data); the origin hint is unused."""

    kind = Kind.GENERIC_SEND

    def __init__(self, handle: Any):
        self.handle = handle

    def send(self, envelope: dict, origin: str) -> None:
        self.handle.send(MESSAGE, envelope)


def receiver(handle: Any, weak: bool = False) -> Optional[Receiver]:
    """Resolve *handle* into a Receiver, or None if it offers no
    compatible subscription API. See EventReceiver for *weak*.
    """

    if handle is None:
        return None
    if isinstance(handle, Receiver):
        return handle
    if callable(getattr(handle, "add_event_listener", None)) and \
            callable(getattr(handle, "remove_event_listener", None)):
        return EventReceiver(handle, weak)
    return None


def sender(handle: Any) -> Optional[Outbound]:
    """Resolve *handle* into an Outbound, or None if it offers no
    compatible send API.
    """

    if handle is None:
        return None
    if isinstance(handle, Outbound):
        return handle
    if callable(getattr(handle, "post_message", None)):
        return PostMessageSender(handle)
    if callable(getattr(handle, "send_to_host", None)):
        return HostRelaySender(handle)
    if callable(getattr(handle, "send", None)):
        return GenericSender(handle)
    return None
