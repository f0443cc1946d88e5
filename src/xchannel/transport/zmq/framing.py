"""ZMQ multipart framing for envelopes.

PAIR
    version, envelope_json, origin
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

from ... import json


# This is the version of the on-the-wire framing implemented here,
# identified by a single byte.

version = b"a"


def to_frames(data: Any, origin: Optional[str] = None) -> Tuple[bytes, ...]:
    """Encode one posted message as multipart frames."""

    origin_b = (origin or "").encode()
    return (version, json.dumps(data), origin_b)


def from_frames(parts: Sequence[bytes]) -> Optional[Tuple[Any, Optional[str]]]:
    """Decode multipart frames into (data, origin).

    Returns None for frames of a foreign framing version or of the wrong
    shape; there is nobody to report the problem to.
    """

    if len(parts) < 2:
        return None

    if parts[0] != version:
        return None

    try:
        data = json.loads(parts[1])
    except (json.Error, ValueError):
        return None

    origin = None
    if len(parts) > 2 and parts[2] not in (b"", None):
        origin = parts[2].decode()

    return data, origin
