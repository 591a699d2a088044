from __future__ import annotations
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional, Tuple
from platformdirs import user_data_dir
from .ctype import EncodingKind, transcode
from .errors import (
    EncodingError,
    FormatError,
    KnowledgeIOError,
    KnowledgeWarning,
    UnsupportedEncodingError,
)

DEFAULT_CONFIG_ENCODING = EncodingKind.EUC_JP


@dataclass(frozen=True)
class DictConfig:
    system_dir: Path = Path(user_data_dir("jp_knowledge", "jpk")) / "dicts" / "ipadic"

    @property
    def dicrc(self) -> Path:
        return self.system_dir / "dicrc"

    @property
    def pos_id_def(self) -> Path:
        return self.system_dir / "pos-id.def"

    @property
    def compound_def(self) -> Path:
        return self.system_dir / "compound.def"

    @property
    def map_kana_def(self) -> Path:
        return self.system_dir / "map-kana.def"

    @property
    def map_width_def(self) -> Path:
        return self.system_dir / "map-width.def"

    @property
    def map_case_def(self) -> Path:
        return self.system_dir / "map-case.def"


@dataclass(frozen=True)
class DictSettings:
    """
    values of the dicrc entries owned by this package (mecab's own keys are ignored)

    feature offsets count from zero, e.g. for "動詞,自立,*,*,一段,未然形,見る,ミ,ミ"
    the base form "見る" is at 6 and the reading "ミ" at 7
    """
    base_form_offset: int = 6
    read_form_offset: int = 7
    norm_form_offset: int = 9
    user_noun_pos: str = "N-USER"
    config_encoding: EncodingKind = DEFAULT_CONFIG_ENCODING

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "DictSettings":
        default = cls()

        def _int(key: str, fallback: int) -> int:
            raw = values.get(key)
            if raw is None:
                return fallback
            try:
                return int(raw.strip())
            except ValueError:
                warnings.warn(f"invalid integer {raw!r} for {key}, use default value {fallback}", KnowledgeWarning, stacklevel=3)
                return fallback

        charset = values.get("config-charset")
        config_encoding = default.config_encoding
        if charset is not None:
            try:
                config_encoding = EncodingKind.from_name(charset)
            except UnsupportedEncodingError:
                warnings.warn(
                    f"unknown dictionary config charset {charset!r}, use default charset {default.config_encoding.value}",
                    KnowledgeWarning,
                    stacklevel=2,
                )
        # no charset entry at all keeps the default silently

        return cls(
            base_form_offset=_int("base-form-feature-offset", default.base_form_offset),
            read_form_offset=_int("read-form-feature-offset", default.read_form_offset),
            norm_form_offset=_int("norm-form-feature-offset", default.norm_form_offset),
            user_noun_pos=values.get("user-noun-pos", default.user_noun_pos),
            config_encoding=config_encoding,
        )


def read_source(path: Path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise KnowledgeIOError(f"cannot read {path}: {e.strerror or e}") from e


def iter_lines(text: str) -> Iterator[Tuple[int, str]]:
    """
    yield (line_no, line) with everything from the first carriage return dropped
    """
    for line_no, line in enumerate(text.split("\n"), start=1):
        yield line_no, line.split("\r", 1)[0]


def parse_config(text: str) -> Dict[str, str]:
    """
    parse key=value lines; ';' or '#' in the first column starts a comment.
    all or nothing: a line without '=' raises FormatError and nothing is returned
    """
    out: Dict[str, str] = {}
    for line_no, line in iter_lines(text):
        if not line or line[0] in ";#":
            continue
        key, sep, value = line.partition("=")
        if not sep:
            raise FormatError(f"format error at line {line_no}: {line!r}")
        out[key.rstrip()] = value.lstrip()
    return out


def detect_charset(raw: bytes) -> EncodingKind:
    """
    find config-charset without knowing the file's encoding yet; keys and the
    charset name are ASCII, so a byte-transparent decode is enough to read them
    """
    try:
        values = parse_config(raw.decode("latin-1"))
    except FormatError:
        return DEFAULT_CONFIG_ENCODING
    try:
        return EncodingKind.from_name(values.get("config-charset", "").strip())
    except UnsupportedEncodingError:
        return DEFAULT_CONFIG_ENCODING


def load_config(path: Path, encoding: Optional[EncodingKind] = None) -> Dict[str, str]:
    """
    without an explicit encoding the file is decoded with its own config-charset
    """
    raw = read_source(path)
    if encoding is None:
        encoding = detect_charset(raw)
    try:
        text = transcode(raw, encoding, encoding)
    except EncodingError as e:
        raise EncodingError(f"{path}: {e}") from e
    try:
        return parse_config(text)
    except FormatError as e:
        raise FormatError(f"{path}: {e}") from e
