"""exceptions raised by the loaders and warnings emitted by Knowledge"""


class KnowledgeError(Exception):
    """Base class for every error raised while loading knowledge."""


class KnowledgeIOError(KnowledgeError, OSError):
    """A knowledge file is missing or unreadable."""


class FormatError(KnowledgeError, ValueError):
    """
    Malformed content: a key=value line without '=', a short POS record,
    a bad decomposition pattern, ...
    """


class EncodingError(KnowledgeError, ValueError):
    pass


class MalformedEncodingError(EncodingError):
    """A multi-byte sequence is truncated or has a bad continuation byte."""


class UnsupportedEncodingError(EncodingError):
    pass


class POSLookupError(KnowledgeError, LookupError):
    """Unknown POS alpha code or index."""


class LineError(FormatError):
    """
    One malformed user dictionary line. Recovered locally: the line is
    skipped and compilation goes on.
    """


class StructuralError(KnowledgeError):
    """A required POS mapping is missing; aborts the whole compile."""


class StateError(KnowledgeError):
    pass


class KnowledgeWarning(UserWarning):
    pass


class LineWarning(KnowledgeWarning):
    pass
