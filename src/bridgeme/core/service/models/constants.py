"""Event type constants."""

EVENT_TYPE_META = "meta"
EVENT_TYPE_TOKEN = "token"
EVENT_TYPE_DONE = "done"
EVENT_TYPE_ERROR = "error"

VALID_EVENT_TYPES = frozenset(
    {
        EVENT_TYPE_META,
        EVENT_TYPE_TOKEN,
        EVENT_TYPE_DONE,
        EVENT_TYPE_ERROR,
    }
)

STREAM_ERROR_MESSAGE = "Streaming failed."
