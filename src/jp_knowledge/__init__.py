from .ctype import EncodingKind
from .knowledge import Knowledge
from .types import Morpheme

__all__ = ["Knowledge", "EncodingKind", "Morpheme"]
