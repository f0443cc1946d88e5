"""Transport layer: host handle resolution and bundled host handles."""

from .base import (
    Event,
    Kind,
    MESSAGE,
    Outbound,
    Receiver,
    TransportError,
)
from .adapters import receiver, sender
from . import local
