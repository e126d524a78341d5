"""Caption failure taxonomy. Each error chains its underlying cause."""


class CaptionError(Exception):
    """Base class for every failure raised by a captioner."""


class FileReadError(CaptionError):
    """The image file could not be read."""


class CompletionError(CaptionError):
    """The chat-completion call failed (transport, HTTP status, API error or deadline)."""


class NoChoicesError(CaptionError):
    """The API answered without any candidate completions."""
