"""In-process host handles.

A :class:`Port` pair behaves like the two ends of a message channel: a
message posted on one port is delivered to the listeners of the other,
with that receiving port as the event source, since posting on it is how
the first port is reached. A :class:`Bus` behaves like a
shared window: a message posted on the bus is delivered to every listener
on the bus, including the one belonging to the poster.

Delivery is synchronous, on the posting thread. By default every posted
message is cloned through the JSON codec, so that only what would survive
a serializing transport reaches the other side.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, List, Optional, Tuple

from .. import json
from .base import Event, MESSAGE, TransportError


Listener = Callable[[Event], None]


class _EventTarget:

    def __init__(self, clone: bool = True):
        self.clone = clone
        self._listeners: List[Listener] = []
        self._listeners_lock = threading.Lock()

    def add_event_listener(self, type: str, listener: Listener) -> None:
        if type != MESSAGE:
            return
        with self._listeners_lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_event_listener(self, type: str, listener: Listener) -> None:
        if type != MESSAGE:
            return
        with self._listeners_lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

    @property
    def listeners(self) -> int:
        return len(self._listeners)

    def _prepare(self, data: Any) -> Any:
        if not self.clone:
            return data
        try:
            return json.clone(data)
        except (TypeError, json.Error) as e:
            raise TransportError("message could not be cloned: %s" % (e,)) from e

    def _deliver(self, event: Event) -> None:
        # Listeners may add or remove themselves while being invoked.
        with self._listeners_lock:
            listeners = tuple(self._listeners)

        for listener in listeners:
            listener(event)


class Port(_EventTarget):
    """One end of an in-process message channel; see :func:`pair`."""

    def __init__(self, clone: bool = True):
        _EventTarget.__init__(self, clone)
        self.peer: Optional[Port] = None

    def post_message(self, data: Any, origin: str = "*") -> None:
        peer = self.peer
        if peer is None:
            raise TransportError("port is not entangled with a peer")

        # A reply posted on the receiving port reaches this one.
        event = Event(self._prepare(data), peer, origin)
        peer._deliver(event)


class Bus(_EventTarget):
    """A shared in-process message target; every listener sees every post."""

    def post_message(self, data: Any, origin: str = "*") -> None:
        event = Event(self._prepare(data), self, origin)
        self._deliver(event)


def pair(clone: bool = True) -> Tuple[Port, Port]:
    """Return two entangled ports."""

    first = Port(clone)
    second = Port(clone)
    first.peer = second
    second.peer = first
    return first, second
