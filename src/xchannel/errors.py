""" Exception classes raised by :mod:`xchannel`. Failures that occur while
    handling an inbound action are never raised across the transport; they
    are carried back to the caller inside a reply envelope, and surface on
    the calling side as a :class:`ReplyError`.
"""


class ChannelError(Exception):
    """ Base class for all xchannel errors. """


class ActionNotFound(ChannelError):
    """ An inbound request named an action with no registered handler.
    """

    def __init__(self, channel, name, action):
        self.channel = channel
        self.name = name
        self.action = action

        message = 'channel "%s.%s.%s" not found' % (channel, name, action)
        ChannelError.__init__(self, message)


class CorrelationError(ChannelError):
    """ A caller-supplied correlation id is already awaiting a reply. """


class ReservedActionError(ChannelError, ValueError):
    """ The reserved callback action cannot be registered as a handler. """


class ReplyError(ChannelError):
    """ The error value carried back in a reply envelope. The *error*
        attribute is exactly the value the remote side transmitted: for
        an exception raised by a remote handler that is a dictionary with
        a 'message' key; for a :class:`ReplyError` raised by a remote
        handler it is whatever value that error carried.

        Raising a :class:`ReplyError` from an action handler sends its
        *error* value back unchanged, which is how a handler rejects with
        a structured value, or forwards a reply error it received from
        elsewhere.
    """

    def __init__(self, error):
        self.error = error

        try:
            message = error['message']
        except (KeyError, TypeError):
            message = repr(error)

        ChannelError.__init__(self, message)


    @property
    def message(self):
        return self.args[0]


class TransportError(ChannelError):
    """ A host handle could not be used to deliver a message. """


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
