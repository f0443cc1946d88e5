"""ZeroMQ PAIR socket host handle.

A :class:`Socket` is a cross-process counterpart of the in-process ports
in :mod:`xchannel.transport.local`: it exposes add/remove_event_listener
and post_message, so a :class:`xchannel.Channel` can both listen on it and
create senders from it.
"""

from __future__ import annotations

import atexit
import logging
import queue
import threading
from typing import Any, Callable, List, Optional, Tuple

import zmq

from ..base import Event, MESSAGE, TransportError
from .framing import from_frames, to_frames


logger = logging.getLogger(__name__)
zmq_context = zmq.Context()


class Socket:
    """Exchange messages with exactly one peer over a ZeroMQ PAIR socket.

    One side binds the *address*, the other connects to it. Inbound
    messages are delivered to listeners on a single background thread,
    in arrival order, with this socket as the event source; a reply is
    therefore posted back through the same socket.

    ZeroMQ sockets are not thread-safe, so outbound messages are queued
    and sent by the background thread, which is woken through an internal
    inproc signal socket.
    """

    poll_interval = 100  # milliseconds

    def __init__(self, address: str, bind: bool = False, context: Optional[zmq.Context] = None):
        self.address = address
        self.context = context or zmq_context

        self.socket = self.context.socket(zmq.PAIR)
        self.socket.setsockopt(zmq.LINGER, 0)

        try:
            if bind:
                self.socket.bind(address)
            else:
                self.socket.connect(address)
        except zmq.ZMQError as exc:
            self.socket.close()
            raise TransportError(f"cannot use {address}: {exc}") from exc

        self._listeners: List[Callable[[Event], None]] = []
        self._listeners_lock = threading.Lock()

        self._outbox: "queue.SimpleQueue[Tuple[bytes, ...]]" = queue.SimpleQueue()

        internal = f"inproc://xchannel.Socket:signal:{id(self)}"
        self._signal_rx = self.context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = self.context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)
        self._signal_lock = threading.Lock()

        self.shutdown = False
        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()

        _open.add(self)

    # --- host handle API ---
    def add_event_listener(self, type: str, listener: Callable[[Event], None]) -> None:
        if type != MESSAGE:
            return
        with self._listeners_lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_event_listener(self, type: str, listener: Callable[[Event], None]) -> None:
        if type != MESSAGE:
            return
        with self._listeners_lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

    def post_message(self, data: Any, origin: str = "*") -> None:
        if self.shutdown:
            raise TransportError(f"socket for {self.address} is closed")

        try:
            frames = to_frames(data, origin)
        except TypeError as exc:
            raise TransportError(f"message could not be encoded: {exc}") from exc

        self._outbox.put(frames)
        self._signal()

    def close(self, timeout: Optional[float] = 1.0) -> None:
        """Stop the background thread; it closes the sockets on its way out."""

        if self.shutdown:
            return

        self.shutdown = True
        self._signal()

        if threading.current_thread() is not self.thread:
            self.thread.join(timeout)

        _open.discard(self)

    # --- internal ---
    def _signal(self) -> None:
        with self._signal_lock:
            if not self._signal_tx.closed:
                self._signal_tx.send(b"")

    def _outgoing(self) -> None:
        self._signal_rx.recv(flags=zmq.NOBLOCK)

        # One signal per queued message, but drain whatever is there; the
        # signal for a later message may arrive after its frames were sent.
        while True:
            try:
                frames = self._outbox.get(block=False)
            except queue.Empty:
                break
            self.socket.send_multipart(frames)

    def _incoming(self, parts: List[bytes]) -> None:
        decoded = from_frames(parts)
        if decoded is None:
            logger.debug("%s: dropped message with unrecognized framing", self.address)
            return

        data, origin = decoded
        event = Event(data, self, origin)

        with self._listeners_lock:
            listeners = tuple(self._listeners)

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                # One faulty listener must not take down delivery for the rest.
                logger.exception("%s: message listener failed", self.address)

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)
        poller.register(self._signal_rx, zmq.POLLIN)

        try:
            while not self.shutdown:
                for active, _flag in poller.poll(self.poll_interval):
                    if active == self._signal_rx:
                        self._outgoing()
                    elif active == self.socket:
                        self._incoming(self.socket.recv_multipart())
        except zmq.ZMQError:
            if not self.shutdown:
                logger.exception("%s: socket failed", self.address)
        finally:
            self.shutdown = True
            with self._signal_lock:
                self._signal_tx.close()
            self._signal_rx.close()
            self.socket.close()


_open = set()


def _cleanup() -> None:
    for socket in tuple(_open):
        socket.close()


atexit.register(_cleanup)
