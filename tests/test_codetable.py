import io

import pytest  # noqa

from huffcode.codetable import CodeTable
from huffcode.errors import CorruptTableError
from huffcode.frequency import count_bytes
from huffcode.tree import build_tree


def test_from_tree_empty():
    table = CodeTable.from_tree(None)
    assert len(table) == 0
    assert table.max_code_length() == 0
    out = io.StringIO()
    table.dump(out)
    assert out.getvalue() == ""


def test_from_tree_single_symbol_gets_one_bit():
    table = CodeTable.from_tree(build_tree(count_bytes(b"\x00" * 10)))
    assert table.codes == {0: "0"}
    assert table.lookup("0") == 0
    assert table.encoded_bit_length(count_bytes(b"\x00" * 10)) == 10


def test_dump_format_and_order():
    table = CodeTable.from_tree(build_tree(count_bytes(b"AAABBC")))
    out = io.StringIO()
    table.dump(out)
    assert out.getvalue() == "0\t65\n10\t67\n11\t66\n"


def test_load_dump_roundtrip():
    data = bytes(range(256)) + b"\x00" * 300 + b"e" * 90
    table = CodeTable.from_tree(build_tree(count_bytes(data)))
    out = io.StringIO()
    table.dump(out)
    loaded = CodeTable.load(io.StringIO(out.getvalue()))
    assert loaded == table
    assert list(loaded) == list(table)
    assert 0 in loaded and loaded[0] == table[0]


def test_reverse_mapping_and_prefixes():
    table = CodeTable([(65, "0"), (67, "10"), (66, "11")])
    assert table.symbols == {"0": 65, "10": 67, "11": 66}
    assert table.prefixes == {"", "1"}
    assert table.is_prefix("1")
    assert not table.is_prefix("0")
    assert table.lookup("1") is None


def test_codes_is_a_copy():
    table = CodeTable([(1, "0"), (2, "1")])
    table.codes[1] = "111"
    assert table[1] == "0"


def test_load_tolerates_crlf_and_blank_lines():
    table = CodeTable.load(io.StringIO("0\t0\r\n\n1\t255\n\n"))
    assert table.codes == {0: "0", 255: "1"}


@pytest.mark.parametrize(
    "text,match",
    [
        ("0 65\n", "line 1"),
        ("0\t65\t1\n", "line 1"),
        ("0\t65\n1\tx\n", "line 2: bad symbol"),
        ("0\t-1\n", "bad symbol"),
        ("\t65\n", "bad code"),
        ("012\t65\n", "bad code"),
        ("0\t256\n", "out of range"),
        ("0\t65\n1\t65\n", "duplicate symbol"),
        ("0\t65\n0\t66\n", "duplicate code"),
        ("0\t65\n01\t66\n", "prefix"),
        ("0\t65\n" + "1" * 256 + "\t66\n", "line 2: code is too long: 256 bits"),
    ],
)
def test_load_rejects(text: str, match: str):
    with pytest.raises(CorruptTableError, match=match):
        CodeTable.load(io.StringIO(text))


def test_constructor_rejects_prefix_clash():
    with pytest.raises(CorruptTableError, match="code 1 of symbol 2"):
        CodeTable([(1, "0"), (2, "1"), (3, "10")])


def test_longest_possible_code_is_accepted():
    # a chain tree over all 256 symbols puts the deepest leaves at depth 255
    entries = [(s, "1" * s + "0") for s in range(255)] + [(255, "1" * 255)]
    table = CodeTable(entries)
    assert table.max_code_length() == 255


def test_constructor_rejects_overlong_code():
    with pytest.raises(CorruptTableError, match="too long"):
        CodeTable([(65, "0"), (66, "1" * 300)])
