"""Loading of ``taskdown.yaml`` parser and serializer settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from taskdown.parser import ParserOptions
from taskdown.serializer import SerializerOptions

__all__ = ["DEFAULT_CONFIG_FILENAME", "TaskdownConfig", "load_config"]

DEFAULT_CONFIG_FILENAME = "taskdown.yaml"

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


def _coerce_bool(value: object, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return default


def _coerce_int(value: object, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"Configuration section '{name}' must be a mapping.")
    return value


@dataclass(frozen=True)
class TaskdownConfig:
    """Resolved settings used by the CLI."""

    parser: ParserOptions = field(default_factory=ParserOptions)
    serializer: SerializerOptions = field(default_factory=SerializerOptions)
    log_level: Optional[str] = None
    source: Optional[Path] = None

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], *, source: Optional[Path] = None
    ) -> "TaskdownConfig":
        parser_data = _section(data, "parser")
        serializer_data = _section(data, "serializer")
        logging_data = _section(data, "logging")

        defaults_parser = ParserOptions()
        defaults_serializer = SerializerOptions()
        parser = ParserOptions(
            strict_mode=_coerce_bool(
                parser_data.get("strict_mode"), defaults_parser.strict_mode
            ),
            allow_unknown_fields=_coerce_bool(
                parser_data.get("allow_unknown_fields"),
                defaults_parser.allow_unknown_fields,
            ),
        )
        serializer = SerializerOptions(
            include_empty_fields=_coerce_bool(
                serializer_data.get("include_empty_fields"),
                defaults_serializer.include_empty_fields,
            ),
            indent_size=_coerce_int(
                serializer_data.get("indent_size"), defaults_serializer.indent_size
            ),
            separate_cards_with_hr=_coerce_bool(
                serializer_data.get("separate_cards_with_hr"),
                defaults_serializer.separate_cards_with_hr,
            ),
        )
        level = logging_data.get("level")
        return cls(
            parser=parser,
            serializer=serializer,
            log_level=str(level) if level is not None else None,
            source=source,
        )


def load_config(path: Optional[Path] = None) -> TaskdownConfig:
    """Read settings from ``path`` or ``./taskdown.yaml`` when present.

    An explicit ``path`` must exist. Without one, a missing default file
    yields the built-in defaults.
    """

    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
    else:
        config_path = Path(DEFAULT_CONFIG_FILENAME)
        if not config_path.exists():
            return TaskdownConfig()

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(data, Mapping):
        raise ValueError(f"Configuration file {config_path} must contain a mapping.")

    return TaskdownConfig.from_mapping(data, source=config_path)
