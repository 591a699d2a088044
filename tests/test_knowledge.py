import pytest

from jp_knowledge import EncodingKind, Knowledge, Morpheme
from jp_knowledge.config import DictConfig
from jp_knowledge.dict.pos_table import POSFormat
from jp_knowledge.errors import KnowledgeWarning, LineWarning

from .conftest import POS_ID_DEF, write


def make(system_dir, **kw):
    return Knowledge(dict_cfg=DictConfig(system_dir=system_dir), **kw)


def test_load_full_dictionary(full_system_dir):
    kn = make(full_system_dir)
    assert kn.load_dict()
    assert kn.get_user_noun_pos_index() == 4
    assert kn.get_base_form_offset() == 6
    assert kn.get_read_form_offset() == 7
    assert kn.get_norm_form_offset() == 9
    assert kn.pos_table.get_pos(1, POSFormat.FULL_CATEGORY) == "名詞,固有名詞,人名,姓"
    assert kn.pos_table.is_combine(1, 2)
    assert kn.kana_table.convert("あ") == "ア"
    assert kn.width_table.convert("Ａ") == "A"
    assert kn.case_table.convert_text("abc") == "ABc"


def test_optional_files_degrade_with_warning(system_dir):
    kn = make(system_dir)
    with pytest.warns(KnowledgeWarning) as record:
        assert kn.load_dict()
    # compound.def and three char maps
    assert len(record) == 4
    assert kn.pos_table.combine_rules == []
    assert len(kn.kana_table) == 0
    assert kn.kana_table.convert_text("あ") == "あ"


def test_missing_dicrc_uses_defaults(system_dir):
    (system_dir / "dicrc").unlink()
    kn = make(system_dir)
    with pytest.warns(KnowledgeWarning):
        assert kn.load_dict()
    assert kn.settings.user_noun_pos == "N-USER"
    assert kn.get_read_form_offset() == 7


def test_malformed_dicrc_uses_defaults(system_dir):
    write(system_dir / "dicrc", "read-form-feature-offset = 3\nbroken\n")
    kn = make(system_dir)
    with pytest.warns(KnowledgeWarning):
        assert kn.load_dict()
    assert kn.get_read_form_offset() == 7


def test_missing_pos_table_fails(system_dir):
    (system_dir / "pos-id.def").unlink()
    kn = make(system_dir)
    with pytest.warns(KnowledgeWarning):
        assert not kn.load_dict()


def test_missing_system_dir_fails(tmp_path):
    kn = make(tmp_path / "nowhere")
    with pytest.warns(KnowledgeWarning):
        assert not kn.load_dict()


def test_user_dict_compiled_on_load(full_system_dir, tmp_path):
    calls = []

    def indexer(rows, system_dir, src, dst):
        calls.append((rows, system_dir, src, dst))
        return True

    kn = make(full_system_dir, indexer=indexer)
    kn.add_user_dict(write(tmp_path / "user.txt", "本田総一郎 2,3 ホンダ,ソウイチロウ\n"))
    assert kn.load_dict()
    assert kn.decomp_map["本田総一郎"][1] == Morpheme("総一郎", "ソウイチロウ")
    rows, sysdir, src, dst = calls[0]
    assert rows == kn.user_dict_rows()
    assert rows.decode("euc_jp").startswith("本田総一郎,-1,-1,-500,名詞,ユーザー")
    assert sysdir == full_system_dir
    assert src is dst is EncodingKind.EUC_JP


def test_empty_user_dict_fails_load(full_system_dir, tmp_path):
    kn = make(full_system_dir)
    kn.add_user_dict(write(tmp_path / "user.txt", "# nothing\n"))
    with pytest.warns(KnowledgeWarning):
        assert not kn.load_dict()
    assert kn.user_dict is None
    assert kn.user_dict_rows() == b""


def test_unknown_user_noun_pos_fails_load(full_system_dir, tmp_path):
    write(full_system_dir / "dicrc", "user-noun-pos = N-NONE\n")
    kn = make(full_system_dir)
    kn.add_user_dict(write(tmp_path / "user.txt", "ABC\n"))
    with pytest.warns(KnowledgeWarning):
        assert not kn.load_dict()


def test_indexer_failure_fails_compile(full_system_dir, tmp_path):
    kn = make(full_system_dir, indexer=lambda *args: False)
    kn.add_user_dict(write(tmp_path / "user.txt", "ABCDE 2,3\n"))
    with pytest.warns(KnowledgeWarning):
        assert not kn.load_dict()
    assert kn.user_dict is None
    assert kn.user_dict_rows() == b""
    assert kn.decomp_map == {}


def test_recompile_clears_decomposition_map(full_system_dir, tmp_path):
    user = tmp_path / "user.txt"
    kn = make(full_system_dir)
    kn.add_user_dict(write(user, "ABCDE 2,3\nXYZ 1,2\n"))
    assert kn.load_dict()
    decomp = kn.decomp_map
    write(user, "ABCDE 4,1\n")
    assert kn.compile_user_dict()
    assert kn.decomp_map is decomp
    assert kn.decomp_map == {"ABCDE": [Morpheme("ABCD"), Morpheme("E")]}


def test_bad_lines_do_not_stop_compile(full_system_dir, tmp_path):
    kn = make(full_system_dir)
    kn.add_user_dict(write(tmp_path / "user.txt", "ABCDE 2,2\nFGHIJ 2,3\n"))
    with pytest.warns(LineWarning):
        assert kn.load_dict()
    assert list(kn.decomp_map) == ["FGHIJ"]
    assert kn.user_dict.entry_count == 1


def test_set_encoding(full_system_dir):
    kn = make(full_system_dir)
    with pytest.warns(KnowledgeWarning):
        assert not kn.set_encoding("EUCJP")
    assert kn.encoding is EncodingKind.EUC_JP
    kn.add_sentence_separator(0xA1A3)  # 。 in EUC-JP
    assert kn.set_encoding("UTF-8")
    assert kn.is_sentence_separator("。".encode("utf-8"))
    # euc-jp bytes are not a valid utf-8 lead
    with pytest.warns(KnowledgeWarning):
        assert not kn.is_sentence_separator("。".encode("euc_jp"))


def test_sentence_separators(tmp_path):
    kn = Knowledge()
    assert kn.load_sentence_separator_config(write(tmp_path / "sep.def", "。\n"))
    assert kn.load_sentence_separator_config(write(tmp_path / "sep2.def", "！\n"))
    assert kn.is_sentence_separator("。".encode("euc_jp"))
    assert kn.is_sentence_separator("！".encode("euc_jp"))
    assert not kn.is_sentence_separator("、".encode("euc_jp"))
    with pytest.warns(KnowledgeWarning):
        assert not kn.load_sentence_separator_config(tmp_path / "missing.def")
    with pytest.warns(KnowledgeWarning):
        assert not kn.is_sentence_separator(b"\xa1")


def test_stop_words(tmp_path):
    kn = Knowledge()
    assert kn.load_stop_word_dict(write(tmp_path / "stop.txt", "です\r\nます\n\n"))
    assert kn.is_stop_word("です")
    assert kn.is_stop_word("ます")
    assert kn.is_stop_word("　")
    assert not kn.is_stop_word("")
    assert not kn.is_stop_word("本")
    with pytest.warns(KnowledgeWarning):
        assert not kn.load_stop_word_dict(tmp_path / "missing.txt")


def test_keyword_pos(full_system_dir):
    kn = make(full_system_dir)
    assert kn.load_dict()
    assert kn.is_keyword_pos(5)
    with pytest.warns(KnowledgeWarning):
        assert not kn.set_keyword_pos(["NP-S", "NOPE"])
    assert kn.is_keyword_pos(1)
    assert not kn.is_keyword_pos(5)


def test_utf8_system_dictionary(tmp_path):
    d = tmp_path / "sysdic"
    d.mkdir()
    write(d / "dicrc", "; ユーザー辞書の設定\nconfig-charset = UTF-8\nread-form-feature-offset = 8\n", "utf-8")
    write(d / "pos-id.def", POS_ID_DEF, "utf-8")
    kn = make(d, encoding=EncodingKind.UTF_8)
    with pytest.warns(KnowledgeWarning):
        # only the optional files are missing
        assert kn.load_dict()
    assert kn.settings.config_encoding is EncodingKind.UTF_8
    assert kn.get_read_form_offset() == 8
    assert kn.pos_table.get_pos(4, POSFormat.FULL_CATEGORY) == "名詞,ユーザー,*,*"


def test_failed_load_keeps_previous_settings(full_system_dir):
    kn = make(full_system_dir)
    assert kn.load_dict()
    write(full_system_dir / "dicrc", "read-form-feature-offset = 3\n")
    (full_system_dir / "pos-id.def").unlink()
    with pytest.warns(KnowledgeWarning):
        assert not kn.load_dict()
    assert kn.get_read_form_offset() == 7
    assert len(kn.pos_table) == 6


def test_separator_code_out_of_range():
    kn = Knowledge()
    with pytest.warns(KnowledgeWarning):
        assert not kn.add_sentence_separator(0x1_0000_0000)
    with pytest.warns(KnowledgeWarning):
        assert not kn.add_sentence_separator(-1)
    assert kn.add_sentence_separator(0xFFFFFFFF)
    assert len(kn.separators) == 1
