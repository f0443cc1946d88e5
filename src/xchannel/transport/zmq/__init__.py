"""ZeroMQ transport: cross-process host handles."""

from . import framing
from .pair import Socket

__all__ = ["Socket", "framing"]
