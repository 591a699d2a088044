from .pos_table import POSTable, POSFormat
from .char_table import CharTable
from .separators import SentenceSeparatorSet
from .user_dict import UserDictCompiler, CompileResult
from .indexer import MecabDictIndex, DictIndexer

__all__ = [
    "POSTable",
    "POSFormat",
    "CharTable",
    "SentenceSeparatorSet",
    "UserDictCompiler",
    "CompileResult",
    "MecabDictIndex",
    "DictIndexer",
]
