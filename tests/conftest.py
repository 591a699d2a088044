import pytest

POS_ID_DEF = """\
# category path, alpha code, index
名詞,一般,*,* NC-G 0
名詞,固有名詞,人名,姓 NP-S 1
名詞,固有名詞,人名,名 NP-G 2
名詞,固有名詞,一般,* NP-U
名詞,ユーザー,*,* N-USER
記号,句点,*,* S-P
"""

DICRC = """\
; iJMA entries
cost-factor = 800
base-form-feature-offset = 6
read-form-feature-offset = 7
norm-form-feature-offset = 9
user-noun-pos = N-USER
config-charset = EUC-JP
"""


def write(path, text, codec="euc_jp"):
    path.write_bytes(text.encode(codec))
    return path


@pytest.fixture
def system_dir(tmp_path):
    """system dictionary directory with dicrc and pos-id.def only"""
    d = tmp_path / "sysdic"
    d.mkdir()
    write(d / "dicrc", DICRC)
    write(d / "pos-id.def", POS_ID_DEF)
    return d


@pytest.fixture
def full_system_dir(system_dir):
    write(system_dir / "compound.def", "NP-S NP-G\nNC-G 0\n")
    write(system_dir / "map-kana.def", "あ ア\nい イ\n")
    write(system_dir / "map-width.def", "Ａ A\n")
    write(system_dir / "map-case.def", "aA\nbB\n")
    return system_dir
