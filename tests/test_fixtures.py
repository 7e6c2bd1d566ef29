import tempfile
import unittest
from pathlib import Path

from winargv.fixtures import (
    FixtureError,
    FixtureRecord,
    Mismatch,
    check_fixtures,
    enumerate_command_lines,
    format_fixture,
    read_fixtures,
    within_limit,
    write_fixtures,
)

REFERENCE_CASES = Path(__file__).parent / "fixtures" / "reference_cases.txt"


class TestReferenceCases(unittest.TestCase):
    def test_parser_matches_every_recorded_case(self) -> None:
        records = list(read_fixtures(REFERENCE_CASES))
        self.assertGreater(len(records), 30)
        mismatches = check_fixtures(records)
        self.assertEqual(mismatches, [])

    def test_trailing_spaces_in_raw_lines_survive(self) -> None:
        records = list(read_fixtures(REFERENCE_CASES))
        raws = {r.raw for r in records}
        self.assertIn("test ", raws)
        self.assertIn("test  test2 ", raws)

    def test_empty_arguments_are_read(self) -> None:
        records = {r.raw: r for r in read_fixtures(REFERENCE_CASES)}
        self.assertEqual(records['EXE "" ""'].args, ("EXE", "", ""))


class TestReadFixtures(unittest.TestCase):
    def test_reads_records_from_lines(self) -> None:
        lines = ["a b\n", "2\n", "a\n", "b\n", '"x y"\r\n', "1\r\n", "x y\r\n"]
        records = list(read_fixtures(lines))
        self.assertEqual(
            records,
            [
                FixtureRecord(raw="a b", args=("a", "b")),
                FixtureRecord(raw='"x y"', args=("x y",)),
            ],
        )
        self.assertEqual(records[0].argc, 2)

    def test_bare_cr_is_part_of_the_line(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "cr.txt"
            path.write_bytes(b"EXE a\rb\n2\nEXE\na\rb\nEXE\r\n1\r\nEXE\r\n")
            records = list(read_fixtures(path))
        self.assertEqual(
            records,
            [
                FixtureRecord(raw="EXE a\rb", args=("EXE", "a\rb")),
                FixtureRecord(raw="EXE", args=("EXE",)),
            ],
        )
        self.assertEqual(check_fixtures(records), [])

    def test_last_line_without_newline(self) -> None:
        records = list(read_fixtures(["a\n", "1\n", "a"]))
        self.assertEqual(records, [FixtureRecord(raw="a", args=("a",))])

    def test_zero_argc(self) -> None:
        records = list(read_fixtures(["\n", "0\n"]))
        self.assertEqual(records, [FixtureRecord(raw="", args=())])

    def test_bad_argc(self) -> None:
        with self.assertRaises(FixtureError) as cm:
            list(read_fixtures(["a\n", "two\n", "a\n"]))
        self.assertEqual(cm.exception.line_no, 2)
        self.assertIn("line 2", str(cm.exception))

    def test_negative_argc(self) -> None:
        with self.assertRaises(FixtureError):
            list(read_fixtures(["a\n", "-1\n"]))

    def test_missing_argc(self) -> None:
        with self.assertRaises(FixtureError) as cm:
            list(read_fixtures(["a\n"]))
        self.assertEqual(cm.exception.line_no, 1)

    def test_truncated_record(self) -> None:
        with self.assertRaises(FixtureError) as cm:
            list(read_fixtures(["a b c\n", "3\n", "a\n"]))
        self.assertIn("expected 3 arguments", str(cm.exception))

    def test_records_yielded_before_error(self) -> None:
        it = read_fixtures(["a\n", "1\n", "a\n", "b\n", "oops\n"])
        self.assertEqual(next(it), FixtureRecord(raw="a", args=("a",)))
        with self.assertRaises(FixtureError):
            next(it)


class TestWriteFixtures(unittest.TestCase):
    def test_format_fixture(self) -> None:
        rec = FixtureRecord(raw='EXE ""', args=("EXE", ""))
        self.assertEqual(format_fixture(rec), 'EXE ""\n2\nEXE\n\n')

    def test_rejects_line_breaks(self) -> None:
        with self.assertRaises(ValueError):
            format_fixture(FixtureRecord(raw="a\nb", args=("a",)))
        with self.assertRaises(ValueError):
            format_fixture(FixtureRecord(raw="a", args=("a\r",)))

    def test_bare_cr_round_trips(self) -> None:
        records = [FixtureRecord(raw="EXE a\rb", args=("EXE", "a\rb"))]
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "cr.txt"
            write_fixtures(records, path)
            self.assertEqual(list(read_fixtures(path)), records)

    def test_written_file_reads_back(self) -> None:
        records = [
            FixtureRecord(raw="EXE a\tb ", args=("EXE", "a", "b")),
            FixtureRecord(raw="", args=()),
        ]
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "out.txt"
            self.assertEqual(write_fixtures(records, path), 2)
            self.assertEqual(list(read_fixtures(path)), records)


class TestCheckFixtures(unittest.TestCase):
    def test_reports_mismatch(self) -> None:
        good = FixtureRecord(raw="EXE a", args=("EXE", "a"))
        bad = FixtureRecord(raw='EXE "a b"', args=("EXE", "a", "b"))
        out = check_fixtures([good, bad])
        self.assertEqual(out, [Mismatch(record=bad, actual=("EXE", "a b"))])

    def test_max_line_length_skips_long_lines(self) -> None:
        bad = FixtureRecord(raw='EXE "a b"', args=("EXE", "a", "b"))
        self.assertEqual(check_fixtures([bad], max_line_length=5), [])
        self.assertFalse(within_limit(bad, 5))
        self.assertTrue(within_limit(bad, 9))
        self.assertTrue(within_limit(bad, None))

    def test_custom_parser(self) -> None:
        rec = FixtureRecord(raw="EXE a", args=("EXE", "a"))
        out = check_fixtures([rec], parser=lambda raw: raw.split(" ") + ["extra"])
        self.assertEqual(len(out), 1)


class TestEnumerateCommandLines(unittest.TestCase):
    def test_order_and_count(self) -> None:
        out = list(enumerate_command_lines("ab", 2))
        self.assertEqual(out, ["a", "b", "aa", "ba", "ab", "bb"])
        self.assertEqual(len(list(enumerate_command_lines('\\a" \t', 3))), 5 + 25 + 125)

    def test_zero_length(self) -> None:
        self.assertEqual(list(enumerate_command_lines("ab", 0)), [])

    def test_empty_alphabet(self) -> None:
        with self.assertRaises(ValueError):
            list(enumerate_command_lines("", 2))
