from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple
from ..config import read_source
from ..ctype import MAX_CHAR_BYTES, EncodingKind, byte_length, occupied_bytes, pack, transcode
from ..errors import MalformedEncodingError


class SentenceSeparatorSet:
    """
    sentence separators bucketed by byte width; each bucket holds the
    big-endian packed bytes of the character in the set's encoding
    """
    def __init__(self, encoding: EncodingKind = EncodingKind.EUC_JP) -> None:
        self.encoding = encoding
        self.buckets: Dict[int, Set[int]] = {w: set() for w in range(1, MAX_CHAR_BYTES + 1)}

    def __len__(self) -> int:
        return sum(len(b) for b in self.buckets.values())

    def insert(self, code: int, width: int) -> bool:
        """
        returns False when the value was already present
        """
        assert 1 <= width <= MAX_CHAR_BYTES, f"cannot handle character width {width}"
        bucket = self.buckets[width]
        if code in bucket:
            return False
        bucket.add(code)
        return True

    def add(self, code: int) -> bool:
        return self.insert(code, occupied_bytes(code))

    def contains(self, buf: bytes, pos: int = 0) -> bool:
        width = byte_length(buf, pos, self.encoding)
        if width == 0:
            return False
        assert width <= MAX_CHAR_BYTES, f"cannot handle character width {width}"
        return pack(buf, pos, width) in self.buckets[width]

    def contains_char(self, ch: str) -> bool:
        try:
            buf = ch.encode(self.encoding.codec)
        except UnicodeEncodeError:
            return False
        return self.contains(buf)

    def load_config(self, path: Path, src: Optional[EncodingKind] = None) -> None:
        """
        one separator character per line, '#' starts a comment line.
        adds to the separators already loaded; a malformed line aborts the
        call before anything from this file is added
        """
        raw = read_source(path)
        if src is not None and src is not self.encoding:
            raw = transcode(raw, src, self.encoding).encode(self.encoding.codec)

        staged: List[Tuple[int, int]] = []
        for line_no, line in enumerate(raw.split(b"\n"), start=1):
            line = line.split(b"\r", 1)[0]
            if not line or line.startswith(b"#"):
                continue
            try:
                width = byte_length(line, 0, self.encoding)
            except MalformedEncodingError as e:
                raise MalformedEncodingError(f"{path} line {line_no}: {e}") from e
            if width == 0:
                continue
            staged.append((pack(line, 0, width), width))

        for code, width in staged:
            self.insert(code, width)
