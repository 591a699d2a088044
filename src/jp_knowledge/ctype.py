from __future__ import annotations
from enum import Enum
from typing import Iterator
from .errors import EncodingError, MalformedEncodingError, UnsupportedEncodingError


class EncodingKind(Enum):
    EUC_JP = "EUC-JP"
    SHIFT_JIS = "SHIFT-JIS"
    UTF_8 = "UTF-8"

    @property
    def codec(self) -> str:
        return _CODECS[self]

    @classmethod
    def from_name(cls, name: str) -> "EncodingKind":
        # names are case-sensitive, same spelling as mecab's charset options
        for kind in cls:
            if kind.value == name:
                return kind
        raise UnsupportedEncodingError(f"unsupported encoding: {name!r}")


_CODECS = {
    EncodingKind.EUC_JP: "euc_jp",
    EncodingKind.SHIFT_JIS: "shift_jis",
    EncodingKind.UTF_8: "utf-8",
}

MAX_CHAR_BYTES = 4


def lead_width(lead: int) -> int:
    """
    count leading one bits of a lead byte: 0xxxxxxx -> 0, 110xxxxx -> 2, ...
    """
    width = 0
    while lead & 0x80:
        width += 1
        lead = (lead << 1) & 0xFF
    return width


def byte_length(buf: bytes, pos: int = 0, kind: EncodingKind = EncodingKind.EUC_JP) -> int:
    """
    byte count of the character starting at buf[pos], 0 at end of string
    """
    if pos >= len(buf) or buf[pos] == 0:
        return 0
    lead = buf[pos]
    if lead < 0x80:
        return 1

    if kind is EncodingKind.EUC_JP:
        # 0x8F introduces JIS X 0212 (3 bytes)
        width = 3 if lead == 0x8F else 2
    elif kind is EncodingKind.SHIFT_JIS:
        if 0xA1 <= lead <= 0xDF:
            return 1  # half-width katakana
        width = 2
    elif kind is EncodingKind.UTF_8:
        width = lead_width(lead)
        if width < 2 or width > MAX_CHAR_BYTES:
            raise MalformedEncodingError(f"invalid UTF-8 lead byte 0x{lead:02X} at offset {pos}")
    else:
        raise AssertionError(f"unhandled encoding kind: {kind}")

    for i in range(pos + 1, pos + width):
        if i >= len(buf) or buf[i] == 0:
            raise MalformedEncodingError(
                f"truncated {kind.value} character at offset {pos}: expected {width} bytes"
            )
        if kind is EncodingKind.UTF_8 and buf[i] & 0xC0 != 0x80:
            raise MalformedEncodingError(f"invalid UTF-8 continuation byte at offset {i}")
    return width


def iter_chars(buf: bytes, kind: EncodingKind = EncodingKind.EUC_JP) -> Iterator[bytes]:
    pos = 0
    while True:
        n = byte_length(buf, pos, kind)
        if n == 0:
            return
        yield buf[pos:pos + n]
        pos += n


def pack(buf: bytes, pos: int, width: int) -> int:
    return int.from_bytes(buf[pos:pos + width], "big")


def occupied_bytes(value: int) -> int:
    assert value >= 0, "code values are unsigned"
    width = 1
    while value & ~0xFF:
        value >>= 8
        width += 1
    assert 0 < width <= MAX_CHAR_BYTES, f"code value too wide: {width} bytes"
    return width


def transcode(raw: bytes, src: EncodingKind, dst: EncodingKind) -> str:
    """
    decode `raw` from `src`; every character must also be representable in `dst`
    """
    try:
        text = raw.decode(src.codec)
    except UnicodeDecodeError as e:
        raise EncodingError(f"cannot decode as {src.value}: {e}") from e
    if dst is not src:
        try:
            text.encode(dst.codec)
        except UnicodeEncodeError as e:
            raise EncodingError(f"cannot convert from {src.value} to {dst.value}: {e}") from e
    return text
