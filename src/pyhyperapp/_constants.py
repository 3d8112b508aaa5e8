"""Internal constants shared across the library."""

BASE_URL = "http://localhost:8080"
API_PATH = "/api"
USER_AGENT = "pyhyperapp"

# Operations exposed by the app's HTTP binding.
OP_GET_COUNTERS = "get_counters"
OP_PING_HTTP = "ping_http"
OP_SEND_MESSAGE = "send_message"

# Variant name the ping endpoint does not expect; used to exercise the
# app's unexpected-input path.
PING_LOCAL_VARIANT = "PingLocal"
PING_MISMATCH_FALLBACK = "mismatch-trigger"

# JSON encoding of an empty string, sent to endpoints that take no input.
EMPTY_PAYLOAD = '""'

# ------------------------------------------------------------------
# User-facing messages
# ------------------------------------------------------------------

MSG_NOT_CONNECTED = "Not connected to a Hyperware node."
MSG_PING_REQUIRED = "Enter a message before sending a ping."
MSG_MESSAGE_REQUIRED = "Enter a message before sending."
MSG_REMOTE_NODE_REQUIRED = "Specify a remote node before sending."
MSG_MISMATCH_NODE_REQUIRED = "Enter the remote node to target."
MSG_MISMATCH_MESSAGE_REQUIRED = "Enter a message before triggering the mismatch."
MSG_UNEXPECTED_ERROR = "An unexpected error occurred"
