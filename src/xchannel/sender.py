""" The caller-facing half of a channel endpoint: a :class:`Sender` is
    bound to one destination, and issues actions to it on behalf of the
    :class:`xchannel.Channel` that created it.
"""

import concurrent.futures

from .errors import ReplyError
from .protocol import factory, fields


class Sender:
    """ Issue actions to a single destination. Instances are created with
        :func:`xchannel.Channel.create_sender`; the *owner* is that channel,
        which does the envelope construction and the reply bookkeeping, and
        *outbound* is the resolved transport for the destination, or None
        if the destination offered no usable send interface (any attempt
        to send will then raise :class:`xchannel.errors.TransportError`).
    """

    def __init__(self, owner, outbound):

        self._owner = owner
        self._sender = outbound


    @property
    def kind(self):
        """ The :class:`xchannel.transport.Kind` the destination was
            resolved as, or None.
        """

        if self._sender is None:
            return None

        return self._sender.kind


    def send(self, action, data=None, callback=None, persistent=False, cid=None):
        """ Send *action* with *data*. If a *callback* is provided it is
            invoked as callback(error, data) when the reply arrives; if
            *persistent* is True it is invoked again for every further
            reply to the same request. Returns the correlation id of the
            request, or None if no reply was requested. See
            :func:`xchannel.Channel._send_to` for the meaning of an integer
            *callback* and of *cid*.
        """

        return self._owner._send_to(self._sender, action, data, callback, persistent, cid)


    def send_then(self, action, data=None, persistent=False):
        """ Send *action* with *data*, and return a
            :class:`concurrent.futures.Future` for the reply. The future
            resolves with the reply data, or fails with a
            :class:`xchannel.errors.ReplyError` carrying the reply error.

            A future settles only once; with *persistent* set, later
            replies to the same request are ignored by the future, and the
            pending entry remains until forgotten.
        """

        future = concurrent.futures.Future()

        def resolve(error, data):
            if future.done():
                return

            if error is not None:
                future.set_exception(ReplyError(error))
            else:
                future.set_result(data)

        self.send(action, data, resolve, persistent)
        return future


    def dispatch(self, method, payload=None):
        """ Flux-style convenience: send the fixed 'dispatch' action, with
            *method* and *payload* as its data, and return a future for
            the reply. The remote side routes it with whatever handler it
            registered for 'dispatch'.
        """

        return self.send_then(fields.DISPATCH, factory.dispatch(method, payload))


# end of class Sender


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
