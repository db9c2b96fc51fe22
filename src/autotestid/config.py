from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from .testid_suggester import DEFAULT_PATTERN

DEFAULT_ELEMENTS: tuple[str, ...] = ("button", "input", "select", "textarea", "a", "form", "div")
RULE_CONFIG_KEY = "require-testid"
OPTION_KEYS = ("elements", "customComponents", "exclude", "pattern")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class RuleOptions:
    elements: tuple[str, ...] = DEFAULT_ELEMENTS
    custom_components: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    pattern: str = DEFAULT_PATTERN
    exclude_patterns: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "exclude_patterns", tuple(compile_exclude_pattern(item) for item in self.exclude))

    def to_dict(self) -> dict[str, Any]:
        return {
            "elements": list(self.elements),
            "customComponents": list(self.custom_components),
            "exclude": list(self.exclude),
            "pattern": self.pattern,
        }


def compile_exclude_pattern(glob: str) -> re.Pattern[str]:
    # '*' means "any characters"; everything else is taken as regular expression text.
    try:
        return re.compile(glob.replace("*", ".*"))
    except re.error as exc:
        raise ConfigError(f"Invalid exclude pattern {glob!r}: {exc}") from exc


def options_from_mapping(raw: Mapping[str, Any] | None, base: RuleOptions | None = None) -> RuleOptions:
    defaults = base or RuleOptions()
    if raw is None:
        return defaults
    if not isinstance(raw, Mapping):
        raise ConfigError("Rule options must be an object")

    unknown = sorted(key for key in raw if key not in OPTION_KEYS)
    if unknown:
        raise ConfigError(f"Unknown rule option(s): {', '.join(unknown)}")

    pattern = raw.get("pattern", defaults.pattern)
    if not isinstance(pattern, str):
        raise ConfigError("'pattern' must be a string")

    return RuleOptions(
        elements=_string_tuple(raw, "elements", defaults.elements),
        custom_components=_string_tuple(raw, "customComponents", defaults.custom_components),
        exclude=_string_tuple(raw, "exclude", defaults.exclude),
        pattern=pattern,
    )


def load_options(path: str | Path) -> RuleOptions:
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file is not valid JSON: {config_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read config file: {config_path}: {exc}") from exc

    if isinstance(raw, dict) and RULE_CONFIG_KEY in raw:
        raw = raw[RULE_CONFIG_KEY]
    return options_from_mapping(raw)


def _string_tuple(raw: Mapping[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    if key not in raw:
        return default
    value = raw[key]
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list of strings")
    if not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{key}' must contain only strings")
    return tuple(value)
