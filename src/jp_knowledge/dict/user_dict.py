from __future__ import annotations
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence
from ..config import read_source
from ..ctype import EncodingKind, iter_chars
from ..errors import (
    KnowledgeIOError,
    KnowledgeWarning,
    LineError,
    LineWarning,
    MalformedEncodingError,
    StateError,
    StructuralError,
)
from ..types import Morpheme
from .pos_table import POSFormat, POSTable

# the smaller the cost, the more likely a user noun is chosen by the tagger
USER_NOUN_COST = -500
WILDCARD = "*"

DecompMap = Dict[str, List[Morpheme]]


@dataclass
class CompileResult:
    rows: List[str]
    decomp_map: DecompMap
    entry_count: int
    encoding: EncodingKind

    def to_bytes(self) -> bytes:
        return "".join(self.rows).encode(self.encoding.codec)


@dataclass
class ParsedLine:
    word: str
    reading: Optional[str] = None
    decomposition: Optional[List[Morpheme]] = None


def split_components(pattern: str) -> List[str]:
    # "a,b," -> ["a", "b"]: a trailing empty component is dropped
    parts = pattern.split(",")
    if len(parts) > 1 and parts[-1] == "":
        parts.pop()
    return parts


def is_number(s: str) -> bool:
    return bool(s) and all("0" <= c <= "9" for c in s)


@dataclass
class UserDictCompiler:
    """
    convert user dictionary text into mecab csv rows

    each line is ``WORD [DECOMP_PATTERN] [READ_PATTERN]``:

      本田総一郎                        noun, no reading
      本田総一郎 ホンダソウイチロウ        whole-word reading
      本田総一郎 2,3 ホンダ,ソウイチロウ   split after 2 chars, reading per part

    a numeric pattern counts characters in the target encoding, so the word
    is segmented with the byte classifier rather than by code point
    """
    pos_table: POSTable
    encoding: EncodingKind = EncodingKind.EUC_JP
    read_form_offset: int = 7
    user_noun_pos: str = "N-USER"
    cost: int = USER_NOUN_COST
    decomp_map: DecompMap = field(default_factory=dict)

    def _row_prefix(self) -> str:
        index = self.pos_table.get_index_from_alpha_pos(self.user_noun_pos)
        if index == -1:
            raise StructuralError(f"fail to get POS index of user noun {self.user_noun_pos!r}")
        full_pos = self.pos_table.get_pos(index, POSFormat.FULL_CATEGORY)
        if not full_pos:
            raise StructuralError(f"fail to get POS string of user noun {self.user_noun_pos!r}")
        pos_size = len(split_components(full_pos))
        # pad with wildcards up to the reading column
        padding = f",{WILDCARD}" * max(0, self.read_form_offset - pos_size)
        return f",-1,-1,{self.cost},{full_pos}{padding}"

    def _decode(self, raw: bytes, what: str) -> str:
        try:
            return raw.decode(self.encoding.codec)
        except UnicodeDecodeError as e:
            raise LineError(f"{what} is not valid {self.encoding.value}: {e}") from e

    def _decompose(self, word: bytes, counts: List[str]) -> List[Morpheme]:
        for c in counts:
            if not is_number(c):
                raise LineError(f"only digits are allowed in decomposition pattern: {','.join(counts)}")
            if int(c) == 0:
                raise LineError(f"zero-length component in decomposition pattern: {','.join(counts)}")
        try:
            chars = list(iter_chars(word, self.encoding))
        except MalformedEncodingError as e:
            raise LineError(str(e)) from e

        out: List[Morpheme] = []
        i = 0
        for c in counts:
            n = int(c)
            if i + n > len(chars):
                raise LineError(f"decomposition pattern {','.join(counts)} exceeds {len(chars)} characters")
            out.append(Morpheme(self._decode(b"".join(chars[i:i + n]), "word")))
            i += n
        # the word end should be reached
        if i != len(chars):
            raise LineError(f"decomposition pattern {','.join(counts)} leaves {len(chars) - i} characters unmatched")
        return out

    def parse_line(self, line: bytes) -> ParsedLine:
        fields = line.split()
        if not fields:
            raise LineError("no word is defined")
        word_raw = fields[0]
        word = self._decode(word_raw, "word")
        parsed = ParsedLine(word=word)
        if len(fields) < 2:
            return parsed

        comps = split_components(self._decode(fields[1], "pattern"))
        if not is_number(comps[0]):
            # plain reading, no decomposition
            parsed.reading = "".join(comps)
            return parsed

        morphs = self._decompose(word_raw, comps)
        if len(fields) >= 3:
            reads = split_components(self._decode(fields[2], "reading pattern"))
            if len(reads) != len(morphs):
                raise LineError(
                    f"reading pattern has {len(reads)} components but decomposition has {len(morphs)}"
                )
            morphs = [Morpheme(m.lexicon, r) for m, r in zip(morphs, reads)]
            parsed.reading = "".join(reads)
        parsed.decomposition = morphs
        return parsed

    def _convert_file(self, path: Path, prefix: str, rows: List[str]) -> int:
        try:
            raw = read_source(path)
        except KnowledgeIOError as e:
            warnings.warn(f"fail to open user dictionary, ignoring this file: {e}", KnowledgeWarning, stacklevel=3)
            return 0

        count = 0
        for line_no, line in enumerate(raw.split(b"\n"), start=1):
            line = line.split(b"\r", 1)[0]
            if not line or line[:1] in (b";", b"#"):
                continue
            try:
                parsed = self.parse_line(line)
            except LineError as e:
                warnings.warn(f"{path} line {line_no}: {e}", LineWarning, stacklevel=3)
                continue
            reading = parsed.reading if parsed.reading is not None else WILDCARD
            rows.append(f"{parsed.word}{prefix},{reading}\n")
            if parsed.decomposition is not None:
                self.decomp_map[parsed.word] = parsed.decomposition
            count += 1
        return count

    def compile(self, files: Sequence[Path]) -> CompileResult:
        # a fresh map per compile pass
        self.decomp_map.clear()
        prefix = self._row_prefix()

        rows: List[str] = []
        count = 0
        for path in files:
            count += self._convert_file(Path(path), prefix, rows)
        if count == 0:
            raise StateError("fail to compile the empty user dictionary")
        return CompileResult(rows=rows, decomp_map=self.decomp_map, entry_count=count, encoding=self.encoding)
