from __future__ import annotations

OUTPUT_FORMATS = ("lines", "json", "null")

DEFAULT_FIXTURE_ENCODING = "utf-8"

# Backslash, a letter, quote, space and tab cover every branch of the parser.
DEFAULT_ALPHABET = '\\a" \t'
DEFAULT_MAX_LEN = 6

LOG_PREFIX = "[winargv]"
