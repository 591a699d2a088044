from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Morpheme:
    lexicon: str
    read_form: Optional[str] = None


@dataclass(frozen=True)
class POSEntry:
    index: int
    alpha: str
    # hierarchical path, e.g. ("名詞", "固有名詞", "人名", "姓")
    categories: Tuple[str, ...]

    @property
    def full(self) -> str:
        return ",".join(self.categories)


@dataclass(frozen=True)
class CombineRule:
    left: int
    right: int
