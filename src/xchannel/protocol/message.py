""" A class representation of an xchannel envelope: the unit exchanged
    between two channel endpoints across a transport.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from . import fields


class Envelope:
    """ The :class:`Envelope` provides a very thin encapsulation of what
        it means to be a message in an xchannel context.

        The fields are the action *data* (the payload; for a reply, a
        dictionary with 'error' and 'data' keys), the logical *channel*
        name shared by both endpoints, the endpoint name of the sender
        (*sender*, transmitted as 'from', a Python keyword), the *action*
        name, and the correlation id *cid*. The id is the last field since
        it is absent for fire-and-forget messages; a request expecting a
        reply carries one, and so does the reply itself.
    """

    __slots__ = ('data', 'channel', 'sender', 'action', 'cid')

    def __init__(self, data: Any, channel: Optional[str], sender: Optional[str],
                 action: Optional[str], cid: Optional[int] = None):

        self.data = data
        self.channel = channel
        self.sender = sender
        self.action = action
        self.cid = cid


    def __eq__(self, other):

        if not isinstance(other, Envelope):
            return NotImplemented

        return self.to_dict() == other.to_dict()


    def __repr__(self):
        return 'Envelope(%r)' % (self.to_dict(),)


    @property
    def is_callback(self) -> bool:
        return self.action == fields.CALLBACK


    @property
    def expects_reply(self) -> bool:
        return self.cid is not None


    def reply(self) -> tuple:
        """ Return the (error, data) pair carried by a reply envelope. A
            reply with no data at all is treated as a successful reply
            with no value.
        """

        data = self.data

        if data is None:
            return None, None

        try:
            error = data.get(fields.ERROR)
            value = data.get(fields.DATA)
        except AttributeError:
            return None, None

        return error, value


    def to_dict(self) -> dict:
        d = {
            fields.DATA: self.data,
            fields.CHANNEL: self.channel,
            fields.FROM: self.sender,
            fields.ACTION: self.action,
        }

        # Fire-and-forget envelopes carry no correlation id at all.

        if self.cid is not None:
            d[fields.CID] = self.cid

        return d


    @classmethod
    def from_dict(cls, d: Mapping) -> "Envelope":
        return cls(
            data=d.get(fields.DATA),
            channel=d.get(fields.CHANNEL),
            sender=d.get(fields.FROM),
            action=d.get(fields.ACTION),
            cid=d.get(fields.CID),
        )


# end of class Envelope


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
