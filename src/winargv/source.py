from __future__ import annotations

import sys
from typing import Any

from winargv.parser import parse


class CommandLineUnavailable(RuntimeError):
    pass


def _kernel32() -> Any:  # pragma: no cover - Windows only
    import ctypes

    return ctypes.windll.kernel32  # type: ignore[attr-defined]


def command_line() -> str:
    """
    Return this process's raw command line as the loader passed it.

    Read fresh on every call. Raises CommandLineUnavailable when the host is
    not Windows or the API hands back nothing.
    """
    if sys.platform != "win32":
        raise CommandLineUnavailable(
            f"Raw command line is only available on Windows (platform={sys.platform})"
        )

    import ctypes

    fn = _kernel32().GetCommandLineW
    fn.argtypes = []
    fn.restype = ctypes.c_wchar_p
    value = fn()
    if value is None:
        raise CommandLineUnavailable("GetCommandLineW returned NULL")
    return value


def args_from_env() -> list[str]:
    return parse(command_line())
