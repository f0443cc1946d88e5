""" Python implementation of xchannel: named-channel request/response
    messaging layered over one-way "post a message" transports. Two or more
    endpoints exchange named actions with optional payloads, and a caller
    may ask for the reply to be correlated back to it.
"""

# Utility components.

from . import json
from . import weakref
from . import config
from . import errors

# Submodules used by multiple other components.

from . import protocol
from . import transport
from . import deferred

# Primary public-facing interfaces.

from .channel import Channel
from .sender import Sender
from .errors import ReplyError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
