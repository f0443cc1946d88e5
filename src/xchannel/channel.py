""" Classes and methods implemented here implement the receiving and the
    bookkeeping aspects of a channel endpoint: the action registry, the
    dispatch of inbound envelopes, and the matching of replies to the
    requests that asked for them.
"""

import itertools
import logging
import threading

from . import config
from . import deferred
from . import transport
from .errors import ActionNotFound, CorrelationError, ReservedActionError, TransportError
from .protocol import factory, fields
from .protocol.message import Envelope
from .sender import Sender


logger = logging.getLogger(__name__)


class Pending:
    """ A reply handler awaiting the reply for one correlation id. A
        persistent entry survives its first reply, and is invoked again for
        every later reply carrying the same id, until it is removed with
        :func:`Channel.forget`.
    """

    __slots__ = ('handler', 'persistent')

    def __init__(self, handler, persistent=False):
        self.handler = handler
        self.persistent = bool(persistent)


# end of class Pending



class Channel:
    """ One endpoint of a named channel. The *channel* name is the logical
        namespace shared by all endpoints that talk to each other; the
        *name* identifies this endpoint, and is how a channel recognizes
        (and discards) messages it sent itself. If no *name* is provided a
        unique one is generated.

        The *origin* hint is passed through to every outbound transport;
        see :func:`xchannel.config.origin` for the default. If a *receiver*
        host handle is provided, :func:`listen` is invoked with it.

        There is no timeout on a correlated request: a request that never
        gets a reply stays pending for the lifetime of the channel. Use
        :func:`forget` to discard such an entry, and :attr:`pending` to
        see how many are outstanding.
    """

    def __init__(self, channel=None, name=None, origin=None, receiver=None):

        if name is None:
            name = config.endpoint_name()

        if origin is None:
            origin = config.origin()

        self.channel = channel
        self.name = name
        self.origin = origin

        self._actions = dict()
        self._callbacks = dict()
        self._callbacks_lock = threading.Lock()
        self._cid = itertools.count(1)
        self._receiver = None

        if receiver is not None:
            self.listen(receiver)


    def __repr__(self):
        return 'Channel(channel=%r, name=%r)' % (self.channel, self.name)


    @property
    def pending(self):
        """ The number of correlated requests still awaiting a reply,
            including persistent ones.
        """

        return len(self._callbacks)


    @property
    def listening(self):
        """ True if the channel is bound to a receiver. """

        return self._receiver is not None


    def listen(self, handle):
        """ Begin receiving messages from the host *handle*, replacing any
            previous binding. A handle with no compatible subscription
            interface leaves the channel unbound; that is not an error.
        """

        self.unlisten()

        receiver = transport.receiver(handle)

        if receiver is None:
            return

        receiver.connect(self._recv)
        self._receiver = receiver


    def unlisten(self):
        """ Stop receiving messages. This is a no-op if the channel is not
            listening.
        """

        receiver = self._receiver

        if receiver is None:
            return

        self._receiver = None
        receiver.disconnect()


    def create_sender(self, handle):
        """ Return a new :class:`xchannel.Sender` delivering to the host
            *handle* on behalf of this channel.
        """

        return Sender(self, transport.sender(handle))


    def on(self, action, handler):
        """ Register *handler* for inbound messages naming *action*. The
            handler is called with the message data; whatever it returns,
            or raises, is sent back to the caller if the caller asked for a
            reply. The last registration for an action wins.
        """

        self._check_action(action)
        self._actions[action] = handler


    def off(self, action):
        """ Remove the handler for *action*, if there is one.
        """

        self._actions.pop(action, None)


    def once(self, action, handler):
        """ Register *handler* for *action* such that it fires at most once:
            the registration is removed before the handler is invoked.
        """

        self._check_action(action)

        def proxy(data):
            if self._actions.get(action) is proxy:
                del self._actions[action]
            return handler(data)

        self._actions[action] = proxy


    def forget(self, cid):
        """ Discard the pending reply handler for correlation id *cid*. This
            is the only way to release a persistent handler. Any reply that
            arrives for *cid* afterwards is ignored.
        """

        with self._callbacks_lock:
            self._callbacks.pop(cid, None)


    def _check_action(self, action):

        if action == fields.CALLBACK:
            raise ReservedActionError('action name is reserved: ' + repr(action))


    def _recv(self, recv, source=None):
        """ All inbound messages are filtered through this method. Anything
            that is not an envelope for this channel from another endpoint
            is dropped without comment. A reply is handed to the pending
            handler it was meant for; anything else is an action request,
            handled by :func:`_invoke`.
        """

        if not isinstance(recv, dict):
            return

        envelope = Envelope.from_dict(recv)

        if envelope.channel != self.channel:
            return

        if envelope.sender == self.name:
            return

        if envelope.is_callback:
            self._resolve(envelope)
        else:
            self._invoke(envelope, source)


    def _resolve(self, envelope):

        cid = envelope.cid

        with self._callbacks_lock:
            try:
                pending = self._callbacks[cid]
            except (KeyError, TypeError):
                pending = None
            else:
                if not pending.persistent:
                    del self._callbacks[cid]

        if pending is None:
            # The request is gone: a duplicate reply, or one that arrived
            # after forget(). Nobody is waiting for it.
            logger.debug('%r: dropped reply for unknown cid %r', self, cid)
            return

        error, data = envelope.reply()
        pending.handler(error, data)


    def _invoke(self, envelope, source):

        action = envelope.action

        # Look the handler up exactly once; once() removes its own entry
        # while it is being invoked.

        try:
            handler = self._actions.get(action)
        except TypeError:
            handler = None

        if handler is None:
            future = deferred.invoke(self._not_found, action)
        else:
            future = deferred.invoke(handler, envelope.data)

        cid = envelope.cid

        if not envelope.expects_reply:
            return

        def complete(done):
            error = done.exception()

            if error is None:
                data = done.result()
            else:
                data = None

            self._reply(source, cid, error, data)

        future.add_done_callback(complete)


    def _not_found(self, action):
        raise ActionNotFound(self.channel, self.name, action)


    def _reply(self, source, cid, error, data):

        outbound = transport.sender(source)

        if outbound is None:
            logger.warning('%r: cannot reply to cid %r, no route back to %r', self, cid, source)
            return

        envelope = factory.reply(self.channel, self.name, cid, error, data)

        try:
            outbound.send(envelope.to_dict(), self.origin)
        except TransportError as e:
            # Report the transmission failure in place of the result, or in
            # place of the error that could not be encoded.
            logger.warning('%r: reply to cid %r not sent: %s', self, cid, e)
            envelope = factory.reply(self.channel, self.name, cid, e)
            outbound.send(envelope.to_dict(), self.origin)


    def _send_to(self, outbound, action, data=None, callback=None, persistent=False, cid=None):
        """ Build an envelope for *action* and push it through *outbound*.

            If *callback* is callable, the envelope is correlated: a fresh
            correlation id is allocated (or the caller-supplied *cid* is
            used, which must not already be pending) and *callback* is
            invoked as callback(error, data) when the reply arrives. If
            *callback* is an integer it is used as the envelope's
            correlation id as-is, with nothing registered locally; this is
            how a reply is addressed to a request id.

            Returns the correlation id of the envelope, or None for a
            fire-and-forget message.
        """

        if outbound is None:
            raise TransportError('no outbound transport for action ' + repr(action))

        envelope = factory.request(self.channel, self.name, action, data)

        if callback is not None:
            if callable(callback):
                envelope.cid = self._register(callback, persistent, cid)
            elif isinstance(callback, int) and not isinstance(callback, bool):
                envelope.cid = callback
            else:
                raise TypeError('callback must be callable or an integer correlation id')

        try:
            outbound.send(envelope.to_dict(), self.origin)
        except Exception:
            if callable(callback):
                self.forget(envelope.cid)
            raise

        return envelope.cid


    def _register(self, handler, persistent, cid=None):

        pending = Pending(handler, persistent)

        with self._callbacks_lock:
            if cid is None:
                cid = next(self._cid)

                # Skip anything a caller claimed explicitly.
                while cid in self._callbacks:
                    cid = next(self._cid)

            elif cid in self._callbacks:
                raise CorrelationError('correlation id already pending: ' + repr(cid))

            self._callbacks[cid] = pending

        return cid


# end of class Channel


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
