from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Mapping, Optional

from winargv.constants import DEFAULT_FIXTURE_ENCODING, OUTPUT_FORMATS

OutputFormat = Literal["lines", "json", "null"]


class ConfigError(ValueError):
    pass


def _require_yaml() -> Any:
    try:
        import yaml  # type: ignore
    except Exception as exc:  # pragma: no cover
        raise ConfigError(
            "PyYAML is required to load config. Install project deps (see pyproject.toml)."
        ) from exc
    return yaml


def _as_dict(value: Any, *, where: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    raise ConfigError(f"Expected mapping at {where}, got {type(value).__name__}")


def _as_list(value: Any, *, where: str) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    raise ConfigError(f"Expected list at {where}, got {type(value).__name__}")


def _as_str(value: Any, *, where: str) -> str:
    if isinstance(value, str):
        return value
    raise ConfigError(f"Expected string at {where}, got {type(value).__name__}")


def _as_int(value: Any, *, where: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Expected int at {where}, got bool")
    if isinstance(value, int):
        return value
    raise ConfigError(f"Expected int at {where}, got {type(value).__name__}")


def _as_opt_int(value: Any, *, where: str) -> Optional[int]:
    if value is None:
        return None
    return _as_int(value, where=where)


def _as_bool(value: Any, *, where: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"Expected bool at {where}, got {type(value).__name__}")


@dataclass(frozen=True)
class OutputConfig:
    format: OutputFormat
    show_count: bool

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "OutputConfig":
        fmt = _as_str(d.get("format", "lines"), where="output.format")
        if fmt not in OUTPUT_FORMATS:
            raise ConfigError("output.format must be one of: lines|json|null")
        show_count = _as_bool(d.get("show_count", False), where="output.show_count")
        return OutputConfig(format=fmt, show_count=show_count)  # type: ignore[arg-type]


@dataclass(frozen=True)
class FixturesConfig:
    paths: tuple[str, ...]
    max_line_length: Optional[int]
    encoding: str

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "FixturesConfig":
        paths_raw = _as_list(d.get("paths"), where="fixtures.paths")
        paths = tuple(_as_str(x, where="fixtures.paths[]") for x in paths_raw)
        return FixturesConfig(
            paths=paths,
            max_line_length=_as_opt_int(
                d.get("max_line_length"), where="fixtures.max_line_length"
            ),
            encoding=_as_str(
                d.get("encoding", DEFAULT_FIXTURE_ENCODING), where="fixtures.encoding"
            ),
        )


@dataclass(frozen=True)
class Config:
    output: OutputConfig
    fixtures: FixturesConfig


def default_config() -> Config:
    return Config(
        output=OutputConfig.from_dict({}),
        fixtures=FixturesConfig.from_dict({}),
    )


def load_config(path: Path) -> Config:
    yaml = _require_yaml()
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw is None:
        raise ConfigError("Config file is empty")
    if not isinstance(raw, dict):
        raise ConfigError("Top-level config must be a mapping")

    output = OutputConfig.from_dict(_as_dict(raw.get("output"), where="output"))
    fixtures = FixturesConfig.from_dict(_as_dict(raw.get("fixtures"), where="fixtures"))
    return Config(output=output, fixtures=fixtures)


def fixture_paths(cfg: Config, base_dir: Optional[Path]) -> list[Path]:
    # Relative entries are relative to the config file, not the cwd.
    out: list[Path] = []
    for p in cfg.fixtures.paths:
        path = Path(p).expanduser()
        if not path.is_absolute() and base_dir is not None:
            path = base_dir / path
        out.append(path)
    return out


def validate_config(
    cfg: Config,
    *,
    base_dir: Optional[Path] = None,
    check_paths: bool = True,
) -> list[str]:
    errors: list[str] = []

    if cfg.fixtures.max_line_length is not None and cfg.fixtures.max_line_length < 1:
        errors.append("fixtures.max_line_length must be >= 1 (or null)")

    import codecs

    try:
        codecs.lookup(cfg.fixtures.encoding)
    except LookupError:
        errors.append(f"fixtures.encoding is not a known codec: {cfg.fixtures.encoding!r}")

    if check_paths:
        for path in fixture_paths(cfg, base_dir):
            if not path.is_file():
                errors.append(f"fixtures.paths entry not found: {str(path)!r}")

    return errors
