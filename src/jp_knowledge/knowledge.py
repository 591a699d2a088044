from __future__ import annotations
import dataclasses
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Set, Union
from .config import DictConfig, DictSettings, iter_lines, load_config, read_source
from .ctype import MAX_CHAR_BYTES, EncodingKind, transcode
from .dict.char_table import CharTable
from .dict.indexer import DictIndexer
from .dict.pos_table import POSTable
from .dict.separators import SentenceSeparatorSet
from .dict.user_dict import CompileResult, DecompMap, UserDictCompiler
from .errors import KnowledgeError, KnowledgeWarning


MAX_SEPARATOR_CODE = (1 << (8 * MAX_CHAR_BYTES)) - 1


def _warn(msg: str) -> None:
    warnings.warn(msg, KnowledgeWarning, stacklevel=3)


@dataclass
class Knowledge:
    """
    everything the external tagger needs besides the binary system dictionary:
    POS table, character maps, sentence separators, stop words, keyword POS,
    and the compiled user dictionary with its decomposition map

    public methods report failure by return value and KnowledgeWarning;
    KnowledgeError does not escape this class
    """
    dict_cfg: DictConfig = DictConfig()
    encoding: EncodingKind = EncodingKind.EUC_JP
    indexer: Optional[DictIndexer] = None

    def __post_init__(self) -> None:
        self.user_dict_names: List[Path] = []
        self.settings = DictSettings()
        self.pos_table = POSTable()
        self.kana_table = CharTable("kana")
        self.width_table = CharTable("width")
        self.case_table = CharTable("case")
        self.separators = SentenceSeparatorSet(self.encoding)
        self.decomp_map: DecompMap = {}
        self.user_dict: Optional[CompileResult] = None
        self.stop_words: Set[str] = set()
        self.keyword_pos: Set[int] = set()

    # setup

    def set_system_dict(self, path: Union[str, Path]) -> None:
        self.dict_cfg = dataclasses.replace(self.dict_cfg, system_dir=Path(path))

    def add_user_dict(self, path: Union[str, Path]) -> None:
        self.user_dict_names.append(Path(path))

    def set_encoding(self, encoding: Union[EncodingKind, str]) -> bool:
        if not isinstance(encoding, EncodingKind):
            try:
                encoding = EncodingKind.from_name(encoding)
            except KnowledgeError as e:
                _warn(str(e))
                return False
        if encoding is not self.encoding:
            self.encoding = encoding
            self.separators = self._reencode_separators(self.separators, encoding)
        return True

    @staticmethod
    def _reencode_separators(old: SentenceSeparatorSet, encoding: EncodingKind) -> SentenceSeparatorSet:
        # bucket values are encoding specific, carry the characters over
        new = SentenceSeparatorSet(encoding)
        for width, bucket in old.buckets.items():
            for code in bucket:
                raw = code.to_bytes(width, "big")
                try:
                    converted = raw.decode(old.encoding.codec).encode(encoding.codec)
                except UnicodeError:
                    _warn(f"separator {raw!r} has no {encoding.value} form, dropped")
                    continue
                new.insert(int.from_bytes(converted, "big"), len(converted))
        return new

    # loading

    def _load_settings(self) -> DictSettings:
        try:
            values = load_config(self.dict_cfg.dicrc)
        except KnowledgeError as e:
            _warn(f"{e}; default configuration value is used")
            return DictSettings()
        return DictSettings.from_mapping(values)

    def _load_char_table(self, name: str, path: Path, what: str) -> CharTable:
        table = CharTable(name)
        try:
            table.load_config(path, self.settings.config_encoding, self.encoding)
        except KnowledgeError as e:
            _warn(f"{e}; no mapping is defined to convert between {what}")
            return CharTable(name)
        return table

    def load_dict(self) -> bool:
        """
        load dicrc, pos-id.def, compound.def and the map-*.def files from the
        system dictionary directory, then compile the user dictionaries if any
        """
        cfg = self.dict_cfg
        if not cfg.system_dir.is_dir():
            _warn(f"fail to open system dictionary: {cfg.system_dir}")
            return False

        settings = self._load_settings()
        src = settings.config_encoding

        pos_table = POSTable()
        try:
            pos_table.load_config(cfg.pos_id_def, src, self.encoding)
        except KnowledgeError as e:
            _warn(f"fail to load POS table: {e}")
            return False
        try:
            pos_table.load_combine_rule(cfg.compound_def, src)
        except KnowledgeError as e:
            _warn(f"{e}; no rules is defined to combine tokens with specific POS tags")
        self.settings = settings
        self.pos_table = pos_table

        self.kana_table = self._load_char_table("kana", cfg.map_kana_def, "Hiragana and Katakana characters")
        self.width_table = self._load_char_table("width", cfg.map_width_def, "half and full width characters")
        self.case_table = self._load_char_table("case", cfg.map_case_def, "lower and upper case characters")

        if self.user_dict_names and not self.compile_user_dict():
            _warn("fail to compile user dictionary")
            return False
        return True

    def compile_user_dict(self) -> bool:
        if not self.user_dict_names:
            return False
        compiler = UserDictCompiler(
            pos_table=self.pos_table,
            encoding=self.encoding,
            read_form_offset=self.settings.read_form_offset,
            user_noun_pos=self.settings.user_noun_pos,
            decomp_map=self.decomp_map,
        )
        try:
            result = compiler.compile(self.user_dict_names)
        except KnowledgeError as e:
            _warn(str(e))
            self.user_dict = None
            return False
        self.user_dict = result

        if self.indexer is not None and not self.indexer(
            result.to_bytes(), self.dict_cfg.system_dir, self.encoding, self.encoding
        ):
            # rows the indexer rejected are not kept
            self.user_dict = None
            self.decomp_map.clear()
            return False
        return True

    def load_stop_word_dict(self, path: Union[str, Path]) -> bool:
        try:
            text = transcode(read_source(Path(path)), self.encoding, self.encoding)
        except KnowledgeError as e:
            _warn(str(e))
            return False
        for _, line in iter_lines(text):
            if line:
                self.stop_words.add(line)
        return True

    def load_sentence_separator_config(self, path: Union[str, Path], src: Optional[EncodingKind] = None) -> bool:
        try:
            self.separators.load_config(Path(path), src)
        except KnowledgeError as e:
            _warn(str(e))
            return False
        return True

    def add_sentence_separator(self, code: int) -> bool:
        if not 0 <= code <= MAX_SEPARATOR_CODE:
            _warn(f"separator code {code:#x} does not fit in {MAX_CHAR_BYTES} bytes, ignored")
            return False
        return self.separators.add(code)

    def set_keyword_pos(self, codes: Iterable[str]) -> bool:
        ok = True
        keyword: Set[int] = set()
        for code in codes:
            index = self.pos_table.get_index_from_alpha_pos(code)
            if index == -1:
                _warn(f"unknown keyword POS {code!r}, ignored")
                ok = False
                continue
            keyword.add(index)
        self.keyword_pos = keyword
        return ok

    # lookups

    def is_stop_word(self, word: str) -> bool:
        return word in self.stop_words or (bool(word) and word.isspace())

    def is_sentence_separator(self, buf: bytes, pos: int = 0) -> bool:
        try:
            return self.separators.contains(buf, pos)
        except KnowledgeError as e:
            _warn(str(e))
            return False

    def is_keyword_pos(self, index: int) -> bool:
        # no keyword POS configured means every POS is a keyword
        if not self.keyword_pos:
            return True
        return index in self.keyword_pos

    def get_user_noun_pos_index(self) -> int:
        return self.pos_table.get_index_from_alpha_pos(self.settings.user_noun_pos)

    def get_base_form_offset(self) -> int:
        return self.settings.base_form_offset

    def get_read_form_offset(self) -> int:
        return self.settings.read_form_offset

    def get_norm_form_offset(self) -> int:
        return self.settings.norm_form_offset

    def user_dict_rows(self) -> bytes:
        return self.user_dict.to_bytes() if self.user_dict is not None else b""
