"""Protocol constants.

Keep these in one place to avoid stringly-typed envelope handling.
"""

# Envelope keys, as they appear on the wire.
DATA = "data"
CHANNEL = "channel"
FROM = "from"
CID = "cid"
ACTION = "action"

# Keys of a reply envelope's data.
ERROR = "error"

# Reserved action marking a reply envelope. No handler may be registered
# under this name.
CALLBACK = "__CALLBACK__"

# Fixed outer action for Sender.dispatch(); the inner method name and
# payload travel as the data.
DISPATCH = "dispatch"
METHOD = "action"
PAYLOAD = "payload"
