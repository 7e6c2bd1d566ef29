from __future__ import annotations

import json
from typing import Sequence

from winargv.fixtures import Mismatch


def fmt_args(args: Sequence[str], *, fmt: str, show_count: bool = False) -> str:
    if fmt == "json":
        if show_count:
            return json.dumps({"argc": len(args), "args": list(args)}, ensure_ascii=False)
        return json.dumps(list(args), ensure_ascii=False)
    if fmt == "null":
        # argc leads as its own field, like the lines layout.
        if show_count:
            return "\0".join([str(len(args)), *args])
        return "\0".join(args)
    if fmt != "lines":
        raise ValueError(f"Unknown output format: {fmt!r}")
    # Same layout as a fixture record body: argc, then one argument per line.
    parts: list[str] = []
    if show_count:
        parts.append(str(len(args)))
    parts.extend(args)
    return "\n".join(parts)


def fmt_mismatch(m: Mismatch) -> str:
    parts: list[str] = []
    parts.append(f"Command line: {m.record.raw!r}")
    parts.append(f"Expected ({m.record.argc}): {list(m.record.args)!r}")
    parts.append(f"Actual ({len(m.actual)}): {list(m.actual)!r}")

    # Point at the first differing argument, if counts line up that far.
    for i, (want, got) in enumerate(zip(m.record.args, m.actual)):
        if want != got:
            parts.append(f"First difference at argv[{i}]: {want!r} != {got!r}")
            break
    else:
        if m.record.argc != len(m.actual):
            parts.append("Arguments agree up to the shorter list; counts differ")
    return "\n".join(parts)
