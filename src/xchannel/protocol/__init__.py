from . import fields
from . import message
from . import factory

from .message import Envelope


"""
xchannel Protocol Layer
=======================

This package defines the transport-agnostic envelope used by xchannel.
It provides the envelope structure, construction utilities, and the
canonical field vocabulary that both endpoints of a channel agree on.

The protocol layer MUST NOT depend on any transport implementation
(e.g. ZeroMQ, in-process ports, etc).

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Sender (sender.py)
    Caller-facing handle bound to one destination
    - send()
    - send_then()
    - dispatch()

    │
    ▼
Channel (channel.py)
    Action registry, dispatch, correlation bookkeeping
    - on() / off() / once()
    - listen() / unlisten()
    Matches replies to pending callbacks

    │
    ▼
Envelope Factory (factory.py)
    Construction of request and reply envelopes
    - Error normalization for transmission
    - No transport awareness

    │
    ▼
Envelope Model (message.py)
    - Envelope
    Defines semantic meaning only

    │
    ▼
Field Vocabulary (fields.py)
    Canonical names for envelope keys and reserved actions
    Prevents string drift across system

---------------------------------------------------------------------

Below the Protocol Layer (for context)
--------------------------------------

Transport Layer (xchannel.transport)
    Turns a host handle into a Receiver and an Outbound sender
    - in-process ports and bus
    - ZeroMQ PAIR sockets
    - any object with a compatible message API

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
