from __future__ import annotations
from pathlib import Path
from typing import Dict, Optional, Tuple
from ..config import iter_lines, read_source
from ..ctype import EncodingKind, transcode
from ..errors import FormatError


def _parse_pair(line: str, line_no: int) -> Tuple[str, str]:
    parts = line.split()
    if len(parts) == 2 and len(parts[0]) == 1 and len(parts[1]) == 1:
        return parts[0], parts[1]
    if len(parts) == 1 and len(parts[0]) == 2:
        return parts[0][0], parts[0][1]
    raise FormatError(f"line {line_no}: expected a source and a target character, got {line!r}")


class CharTable:
    """
    one-way character map (hiragana -> katakana, half -> full width, lower -> upper, ...)
    """
    def __init__(self, name: str = "") -> None:
        self.name = name
        self.mapping: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self.mapping)

    def __contains__(self, ch: object) -> bool:
        return ch in self.mapping

    def load_config(
        self,
        path: Path,
        src: EncodingKind = EncodingKind.EUC_JP,
        dst: EncodingKind = EncodingKind.EUC_JP,
    ) -> None:
        text = transcode(read_source(path), src, dst)
        mapping: Dict[str, str] = {}
        for line_no, line in iter_lines(text):
            s = line.strip()
            if not s or s.startswith("#"):
                continue
            try:
                a, b = _parse_pair(s, line_no)
            except FormatError as e:
                raise FormatError(f"{path}: {e}") from e
            mapping[a] = b
        self.mapping = mapping

    def convert(self, ch: str) -> Optional[str]:
        return self.mapping.get(ch)

    def convert_text(self, text: str) -> str:
        # unmapped characters pass through
        return "".join(self.mapping.get(ch, ch) for ch in text)
