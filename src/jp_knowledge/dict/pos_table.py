from __future__ import annotations
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional
import numpy as np
from ..config import iter_lines, read_source
from ..ctype import EncodingKind, transcode
from ..errors import FormatError, POSLookupError
from ..types import CombineRule, POSEntry


class POSFormat(Enum):
    ABBREVIATED = "abbreviated"
    FULL_CATEGORY = "full"


def _is_comment(line: str) -> bool:
    return not line.strip() or line.lstrip()[0] in "#;"


def _parse_pos_id_def(text: str) -> List[POSEntry]:
    # one record per line: CATEGORY_PATH ALPHA_CODE [INDEX]
    # e.g. "名詞,固有名詞,人名,姓 NP-S 12"
    entries: List[POSEntry] = []
    seen: Dict[str, int] = {}
    for line_no, line in iter_lines(text):
        if _is_comment(line):
            continue
        parts = line.split()
        if len(parts) not in (2, 3):
            raise FormatError(f"pos-id.def line {line_no}: expected 'CATEGORY ALPHA [INDEX]', got {line!r}")
        index = len(entries)
        if len(parts) == 3:
            if not parts[2].isdigit() or int(parts[2]) != index:
                raise FormatError(f"pos-id.def line {line_no}: index {parts[2]!r} does not match record order {index}")
        categories = tuple(parts[0].split(","))
        alpha = parts[1]
        if alpha in seen:
            raise FormatError(f"pos-id.def line {line_no}: duplicate POS code {alpha!r} (first at index {seen[alpha]})")
        seen[alpha] = index
        entries.append(POSEntry(index=index, alpha=alpha, categories=categories))
    return entries


class POSTable:
    """
    part-of-speech tags: index <-> alpha code <-> category path, plus combine rules

    indices follow file order and stay stable until the next load_config()
    """
    def __init__(self) -> None:
        self.entries: List[POSEntry] = []
        self._alpha_to_index: Dict[str, int] = {}
        self.combine_rules: List[CombineRule] = []
        self._combine: np.ndarray | None = None

    def __len__(self) -> int:
        return len(self.entries)

    def load_config(
        self,
        path: Path,
        src: EncodingKind = EncodingKind.EUC_JP,
        dst: EncodingKind = EncodingKind.EUC_JP,
    ) -> None:
        text = transcode(read_source(path), src, dst)
        entries = _parse_pos_id_def(text)
        # swap in only after the whole file parsed
        self.entries = entries
        self._alpha_to_index = {e.alpha: e.index for e in entries}
        self.combine_rules = []
        self._combine = None

    def _resolve(self, token: str, line_no: int) -> int:
        if token.isdigit():
            index = int(token)
            if index >= len(self.entries):
                raise POSLookupError(f"compound.def line {line_no}: POS index {index} out of range (size {len(self.entries)})")
            return index
        index = self.get_index_from_alpha_pos(token)
        if index < 0:
            raise POSLookupError(f"compound.def line {line_no}: unknown POS code {token!r}")
        return index

    def load_combine_rule(self, path: Path, encoding: EncodingKind = EncodingKind.EUC_JP) -> None:
        """
        each line names two adjacent POS (alpha code or index) the tagger may merge
        """
        text = transcode(read_source(path), encoding, encoding)
        rules: List[CombineRule] = []
        for line_no, line in iter_lines(text):
            if _is_comment(line):
                continue
            parts = line.split()
            if len(parts) != 2:
                raise FormatError(f"compound.def line {line_no}: expected two POS, got {line!r}")
            rules.append(CombineRule(self._resolve(parts[0], line_no), self._resolve(parts[1], line_no)))

        n = len(self.entries)
        mat = np.zeros((n, n), dtype=bool)
        for r in rules:
            mat[r.left, r.right] = True
        self.combine_rules = rules
        self._combine = mat

    def is_combine(self, left: int, right: int) -> bool:
        if self._combine is None:
            return False
        n = self._combine.shape[0]
        if 0 <= left < n and 0 <= right < n:
            return bool(self._combine[left, right])
        return False

    def get_index_from_alpha_pos(self, code: str) -> int:
        return self._alpha_to_index.get(code, -1)

    def entry(self, index: int) -> Optional[POSEntry]:
        if 0 <= index < len(self.entries):
            return self.entries[index]
        return None

    def get_pos(self, index: int, fmt: POSFormat = POSFormat.ABBREVIATED) -> Optional[str]:
        e = self.entry(index)
        if e is None:
            return None
        if fmt is POSFormat.FULL_CATEGORY:
            return e.full
        return e.alpha
