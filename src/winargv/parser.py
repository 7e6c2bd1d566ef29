from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

SPACE = " "
TAB = "\t"
QUOTE = '"'
BACKSLASH = "\\"
NUL = "\0"

_WHITESPACE = (SPACE, TAB)


@dataclass(frozen=True)
class Argument:
    index: int
    value: str
    # Half-open span of the raw command line this argument was parsed from.
    start: int
    end: int

    @property
    def is_program(self) -> bool:
        return self.index == 0


def _terminate(raw: str) -> str:
    # The native command line is NUL-terminated; nothing after it is visible.
    end = raw.find(NUL)
    if end < 0:
        return raw
    return raw[:end]


def _skip_whitespace(line: str, pos: int) -> int:
    n = len(line)
    while pos < n and line[pos] in _WHITESPACE:
        pos += 1
    return pos


def _scan_program(line: str, pos: int) -> tuple[str, int]:
    """
    Scan argv[0]. Quotes toggle the quoted region and are dropped, backslashes
    are plain characters.
    """
    out: list[str] = []
    in_quotes = False
    n = len(line)
    while pos < n:
        ch = line[pos]
        if ch == QUOTE:
            in_quotes = not in_quotes
        elif ch in _WHITESPACE and not in_quotes:
            break
        else:
            out.append(ch)
        pos += 1
    return "".join(out), pos


def _scan_argument(line: str, pos: int) -> tuple[str, int]:
    """
    Scan one argument after argv[0] using the backslash/quote escaping rules.

    A run of n backslashes followed by a quote yields n // 2 backslashes; when n
    is odd the quote is literal, otherwise it is left for the quote handling
    below. A run not followed by a quote is copied as-is.
    """
    out: list[str] = []
    in_quotes = False
    n = len(line)
    while pos < n:
        ch = line[pos]
        if ch in _WHITESPACE and not in_quotes:
            break

        if ch == BACKSLASH:
            run_end = pos
            while run_end < n and line[run_end] == BACKSLASH:
                run_end += 1
            count = run_end - pos
            if run_end < n and line[run_end] == QUOTE:
                out.append(BACKSLASH * (count // 2))
                if count % 2:
                    out.append(QUOTE)
                    pos = run_end + 1
                else:
                    pos = run_end
            else:
                out.append(BACKSLASH * count)
                pos = run_end
            continue

        if ch == QUOTE:
            # Post-2008 runtime: "" inside a quoted region is a literal quote.
            if in_quotes and pos + 1 < n and line[pos + 1] == QUOTE:
                out.append(QUOTE)
                pos += 2
                continue
            in_quotes = not in_quotes
            pos += 1
            continue

        out.append(ch)
        pos += 1
    return "".join(out), pos


def iter_arguments(raw: str) -> Iterator[Argument]:
    """
    Lazily split a raw Windows command line the way the Microsoft C runtime
    builds argv.

    Never raises for str input: unterminated quotes close at the end of the
    line and trailing backslashes are literal. An empty or whitespace-only line
    yields nothing.
    """
    line = _terminate(raw)
    pos = _skip_whitespace(line, 0)
    if pos >= len(line):
        return

    start = pos
    value, pos = _scan_program(line, pos)
    yield Argument(index=0, value=value, start=start, end=pos)

    index = 1
    while True:
        pos = _skip_whitespace(line, pos)
        if pos >= len(line):
            return
        start = pos
        value, pos = _scan_argument(line, pos)
        yield Argument(index=index, value=value, start=start, end=pos)
        index += 1


def parse(raw: str) -> list[str]:
    return [arg.value for arg in iter_arguments(raw)]


def raw_tail(raw: str, index: int) -> str:
    """
    Return the unparsed command line starting at argument `index`.

    Quotes and escapes are left intact, so the result can be handed to another
    program verbatim. Returns "" when there are not that many arguments.
    """
    if index < 0:
        raise ValueError(f"index must be >= 0, got {index}")
    line = _terminate(raw)
    for arg in iter_arguments(line):
        if arg.index == index:
            return line[arg.start :]
    return ""


def null_separated(raw: str) -> str:
    return NUL.join(parse(raw))
