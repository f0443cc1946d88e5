"""Convenience constructors for protocol envelopes."""

from __future__ import annotations

from typing import Any, Optional

from ..errors import ReplyError
from . import fields
from .message import Envelope


def request(channel: Optional[str], sender: Optional[str], action: str, data: Any = None, cid: Optional[int] = None) -> Envelope:
    return Envelope(data=data, channel=channel, sender=sender, action=action, cid=cid)


def reply(channel: Optional[str], sender: Optional[str], cid: int, error: Any = None, data: Any = None) -> Envelope:
    """Create the reply to a correlated request, tagged with the reserved
    callback action. The error, if any, is normalized for transmission.
    """

    body = {
        fields.ERROR: normalize_error(error) if error is not None else None,
        fields.DATA: data,
    }
    return Envelope(data=body, channel=channel, sender=sender, action=fields.CALLBACK, cid=cid)


def dispatch(method: str, payload: Any = None) -> dict:
    """Data for the fixed 'dispatch' action wrapping *method* and *payload*."""
    return {fields.METHOD: method, fields.PAYLOAD: payload}


def normalize_error(error: Any) -> Any:
    """Reduce an error to a value that survives serialization.

    A ReplyError forwards the raw value it carries; any other exception
    becomes {'message': str(error)}; anything else is passed unchanged.
    """

    if isinstance(error, ReplyError):
        return error.error
    if isinstance(error, BaseException):
        return {"message": str(error)}
    return error
