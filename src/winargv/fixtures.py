from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from winargv.parser import parse


class FixtureError(ValueError):
    def __init__(self, message: str, *, line_no: int) -> None:
        self.line_no = line_no
        super().__init__(f"line {line_no}: {message}")


@dataclass(frozen=True)
class FixtureRecord:
    raw: str
    args: tuple[str, ...]

    @property
    def argc(self) -> int:
        return len(self.args)


@dataclass(frozen=True)
class Mismatch:
    record: FixtureRecord
    actual: tuple[str, ...]


def _strip_eol(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def _iter_lines(source: Path | Iterable[str], encoding: str) -> Iterator[str]:
    if isinstance(source, Path):
        # Only LF ends a line; a bare CR is an ordinary character in a command line.
        # _strip_eol drops the CR of a CRLF ending.
        with source.open("r", encoding=encoding, newline="\n") as f:
            for line in f:
                yield line
        return
    yield from source


def read_fixtures(
    source: Path | Iterable[str],
    *,
    encoding: str = "utf-8",
) -> Iterator[FixtureRecord]:
    """
    Read oracle records: the raw command line, then argc, then argc lines with
    one argument each.
    """
    lines = _iter_lines(source, encoding)
    line_no = 0

    def next_line() -> Optional[str]:
        nonlocal line_no
        try:
            line = next(lines)
        except StopIteration:
            return None
        line_no += 1
        return _strip_eol(line)

    while True:
        raw = next_line()
        if raw is None:
            return
        argc_text = next_line()
        if argc_text is None:
            raise FixtureError(f"missing argc after command line {raw!r}", line_no=line_no)
        try:
            argc = int(argc_text.strip())
        except ValueError:
            raise FixtureError(f"argc is not an integer: {argc_text!r}", line_no=line_no)
        if argc < 0:
            raise FixtureError(f"argc must be >= 0, got {argc}", line_no=line_no)
        args: list[str] = []
        for _ in range(argc):
            arg = next_line()
            if arg is None:
                raise FixtureError(
                    f"expected {argc} arguments for {raw!r}, got {len(args)}",
                    line_no=line_no,
                )
            args.append(arg)
        yield FixtureRecord(raw=raw, args=tuple(args))


def format_fixture(record: FixtureRecord) -> str:
    for value in (record.raw, *record.args):
        if "\n" in value:
            raise ValueError(f"fixture values cannot contain line feeds: {value!r}")
        if value.endswith("\r"):
            raise ValueError(f"fixture values cannot end with CR: {value!r}")
    return "\n".join([record.raw, str(record.argc), *record.args]) + "\n"


def write_fixtures(
    records: Iterable[FixtureRecord],
    path: Path,
    *,
    encoding: str = "utf-8",
) -> int:
    count = 0
    with path.open("w", encoding=encoding, newline="") as f:
        for record in records:
            f.write(format_fixture(record))
            count += 1
    return count


def within_limit(record: FixtureRecord, max_line_length: Optional[int]) -> bool:
    return max_line_length is None or len(record.raw) <= max_line_length


def check_fixtures(
    records: Iterable[FixtureRecord],
    *,
    max_line_length: Optional[int] = None,
    parser: Callable[[str], list[str]] = parse,
) -> list[Mismatch]:
    mismatches: list[Mismatch] = []
    for record in records:
        if not within_limit(record, max_line_length):
            continue
        actual = tuple(parser(record.raw))
        if actual != record.args:
            mismatches.append(Mismatch(record=record, actual=actual))
    return mismatches


def enumerate_command_lines(alphabet: str, max_len: int) -> Iterator[str]:
    """
    Yield every string of length 1..max_len over `alphabet`, shortest first.

    Within one length the first character varies fastest, which is the order
    the reference fixtures were generated in.
    """
    if not alphabet:
        raise ValueError("alphabet must be non-empty")
    if max_len < 1:
        return
    base = len(alphabet)
    for length in range(1, max_len + 1):
        for n in range(base**length):
            chars: list[str] = []
            for _ in range(length):
                chars.append(alphabet[n % base])
                n //= base
            yield "".join(chars)
