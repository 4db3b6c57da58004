import os
import sys
import pytest

# Add core path
sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'stitch_crafter_gui'))

from core.catalog_parser import SYMBOL_CAPACITY, CatalogParser, load_catalog
from core.errors import ParseError

ASSETS_CATALOG = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'stitch_crafter_gui', 'assets', 'thread_colors.txt')


def test_parse_single_line():
    threads = CatalogParser.parse_lines(["7\tLight Grey\t200\t200\t200"])
    assert len(threads) == 1
    t = threads[0]
    assert t.id == 7
    assert t.name == "Light Grey"
    assert t.color == (200, 200, 200)
    assert t.symbol == chr(0x2190)


def test_name_words_in_separate_fields_are_joined():
    threads = CatalogParser.parse_lines(["321\tChristmas\tRed\t199\t43\t59\n"])
    assert threads[0].name == "Christmas Red"
    assert threads[0].color == (199, 43, 59)


def test_blank_lines_are_skipped():
    lines = ["1\tRed\t255\t0\t0", "", "   ", "2\tGreen\t0\t255\t0"]
    threads = CatalogParser.parse_lines(lines)
    assert [t.id for t in threads] == [1, 2]


def test_non_integer_id_aborts_load():
    with pytest.raises(ParseError) as exc:
        CatalogParser.parse_lines(["1\tRed\t255\t0\t0", "Blanc\tWhite\t255\t255\t255"])
    assert exc.value.line_number == 2


def test_short_line_aborts_load():
    with pytest.raises(ParseError):
        CatalogParser.parse_lines(["1\t255\t0"])


def test_duplicate_id_aborts_load():
    with pytest.raises(ParseError):
        CatalogParser.parse_lines(["5\tRed\t255\t0\t0", "5\tAlso Red\t250\t0\t0"])


def test_malformed_channels_degrade_to_zero(capsys):
    threads = CatalogParser.parse_lines(["9\tBroken\tabc\t300\t-4", "10\tFine\t1\t2\t3"])
    assert threads[0].color == (0, 0, 0)
    assert threads[1].color == (1, 2, 3)
    assert "invalid channel value" in capsys.readouterr().out


def test_row_missing_a_channel_warns(capsys):
    threads = CatalogParser.parse_lines(["1\tRed\t255\t0"])
    assert threads[0].name == ""
    assert threads[0].color == (0, 255, 0)
    out = capsys.readouterr().out
    assert "has no name" in out
    assert "invalid channel value 'Red'" in out


def test_symbols_follow_unicode_ranges_in_order():
    lines = [f"{i}\tThread {i}\t{i % 256}\t0\t0" for i in range(1, 200)]
    threads = CatalogParser.parse_lines(lines)
    assert threads[0].symbol == chr(0x2190)
    assert threads[111].symbol == chr(0x21FF)
    # Arrows exhausted, Mathematical Operators next
    assert threads[112].symbol == chr(0x2200)


def test_symbols_run_out_past_capacity():
    count = SYMBOL_CAPACITY + 5
    lines = [f"{i}\tThread {i}\t0\t0\t0" for i in range(count)]
    threads = CatalogParser.parse_lines(lines)
    assert len(threads) == count
    assert threads[SYMBOL_CAPACITY - 1].symbol == chr(0x257F)
    assert all(t.symbol == "" for t in threads[SYMBOL_CAPACITY:])


def test_symbol_assignment_is_deterministic():
    lines = ["1\tRed\t255\t0\t0", "2\tGreen\t0\t255\t0", "3\tBlue\t0\t0\t255"]
    first = [t.symbol for t in CatalogParser.parse_lines(lines)]
    second = [t.symbol for t in CatalogParser.parse_lines(lines)]
    assert first == second
    assert len(set(first)) == 3


def test_parse_file_and_load_catalog(tmp_path):
    path = tmp_path / "threads.txt"
    path.write_text("\ufeff1\tRed\t255\t0\t0\r\n2\tGreen\t0\t255\t0\r\n", encoding="utf-8")

    from_file = CatalogParser.parse_file(str(path))
    assert [t.name for t in from_file] == ["Red", "Green"]
    assert load_catalog(path) == from_file
    assert load_catalog(["1\tRed\t255\t0\t0"])[0].id == 1


def test_missing_file_raises_oserror(tmp_path):
    with pytest.raises(OSError):
        load_catalog(str(tmp_path / "missing.txt"))


def test_bundled_catalog_loads():
    threads = load_catalog(ASSETS_CATALOG)
    assert len(threads) > 100
    assert len({t.id for t in threads}) == len(threads)
    black = [t for t in threads if t.id == 310]
    assert black and black[0].color == (0, 0, 0)


if __name__ == "__main__":
    sys.exit(pytest.main([__file__]))
