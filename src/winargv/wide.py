from __future__ import annotations

import struct
from typing import Iterable, Sequence

from winargv.parser import parse

# Windows command lines are UTF-16. Python str keeps lone surrogates when
# decoded with surrogatepass, so conversions here are lossless.
_CODEC = "utf-16-le"


def encode_units(text: str) -> list[int]:
    data = text.encode(_CODEC, "surrogatepass")
    return list(struct.unpack(f"<{len(data) // 2}H", data))


def decode_units(units: Iterable[int]) -> str:
    seq = list(units)
    data = struct.pack(f"<{len(seq)}H", *seq)
    return data.decode(_CODEC, "surrogatepass")


def parse_units(units: Sequence[int]) -> list[list[int]]:
    # A 0 unit terminates the line; parse() applies the same rule to "\0".
    return [encode_units(arg) for arg in parse(decode_units(units))]


def parse_wide(buffer: bytes) -> list[bytes]:
    """
    Split a UTF-16-LE command line buffer, as read from process memory.
    """
    if len(buffer) % 2:
        raise ValueError(f"UTF-16 buffer has odd length: {len(buffer)}")
    text = buffer.decode(_CODEC, "surrogatepass")
    return [arg.encode(_CODEC, "surrogatepass") for arg in parse(text)]


def null_separated_units(raw: str) -> list[int]:
    out: list[int] = []
    for i, arg in enumerate(parse(raw)):
        if i:
            out.append(0)
        out.extend(encode_units(arg))
    return out


def scalars(text: str) -> str:
    """
    Return `text` as valid Unicode: surrogate pairs are combined and isolated
    surrogates become U+FFFD.
    """
    return text.encode(_CODEC, "surrogatepass").decode(_CODEC, "replace")


def code_points(text: str) -> list[int]:
    # Like scalars() but isolated surrogates are kept as their own values.
    return [ord(ch) for ch in decode_units(encode_units(text))]
