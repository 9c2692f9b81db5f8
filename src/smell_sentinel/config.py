"""Configuration loading and management for smell-sentinel.

Configuration sources are merged in priority order (lowest to highest):
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.smell-sentinel.toml)
    3. Project config (./smell-sentinel.toml)
    4. Explicit config file
    5. Environment variables (SMELL_SENTINEL_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(min_severity="error", workers=2)
    >>> config.min_severity
    <Severity.ERROR: 'error'>
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Optional, get_args, get_origin, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .models import Severity
from .rules import DEFAULT_ENABLED_RULES, RULES_BY_ID

OutputFormat = Literal["text", "json", "rich", "github"]
OUTPUT_FORMATS: tuple[str, ...] = get_args(OutputFormat)

CONFIG_FILE_NAME = "smell-sentinel.toml"
ENV_PREFIX = "SMELL_SENTINEL_"

# Selectors whose calls are pure side effects (logging, printing). Branches
# that differ only in such calls are treated as identical.
DEFAULT_SIDE_EFFECT_SELECTORS = frozenset(
    {
        "trace",
        "debug",
        "info",
        "warn",
        "warning",
        "error",
        "fatal",
        "severe",
        "fine",
        "finer",
        "finest",
        "log",
        "print",
        "println",
        "printf",
    }
)

# Alternate spellings accepted in config files
_KEY_ALIASES = {
    "enabledrules": "enabled_rules",
    "rules": "enabled_rules",
    "minseverity": "min_severity",
    "workercount": "workers",
    "worker_count": "workers",
    "outputformat": "output_format",
    "format": "output_format",
}


def _default_workers() -> int:
    return min(os.cpu_count() or 1, 8)


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        Rule selection:
            enabled_rules: Rule ids to report (internal rules are always on)
            severities: Per-rule severity overrides
            min_severity: Lowest severity that makes the run exit non-zero

        Performance tuning:
            workers: Number of parallel file tasks

        Output control:
            output_format: text, json, rich or github

        Detector tuning:
            side_effect_selectors: Selectors ignored when comparing branches
            mutator_prefixes: Selector prefixes that mark a setter

        File filtering:
            extensions: Source file extensions to analyze
            exclude_patterns: Glob patterns to exclude from analysis
            max_file_size_mb: Maximum file size to analyze (MB)
            allow_hidden_files: Include hidden files (starting with .)
            follow_symlinks: Follow symbolic links during discovery
    """

    # Rule selection
    enabled_rules: frozenset[str] = DEFAULT_ENABLED_RULES
    severities: dict[str, Severity] = field(default_factory=dict)
    min_severity: Severity = Severity.WARNING

    # Performance tuning
    workers: int = field(default_factory=_default_workers)

    # Output control
    output_format: OutputFormat = "text"

    # Detector tuning
    side_effect_selectors: frozenset[str] = DEFAULT_SIDE_EFFECT_SELECTORS
    mutator_prefixes: tuple[str, ...] = ("set",)

    # File filtering
    extensions: tuple[str, ...] = (".java",)
    exclude_patterns: tuple[str, ...] = ("package-info.java", "module-info.java")
    max_file_size_mb: float = 10.0
    allow_hidden_files: bool = False
    follow_symlinks: bool = False

    def __post_init__(self) -> None:
        """Normalize collection fields and validate values."""
        try:
            object.__setattr__(self, "min_severity", Severity.parse(self.min_severity))
        except ValueError as e:
            raise InvalidConfigError("min_severity", self.min_severity, str(e))

        object.__setattr__(self, "enabled_rules", frozenset(_as_items(self.enabled_rules)))
        unknown = sorted(r for r in self.enabled_rules if r not in RULES_BY_ID)
        if unknown:
            raise InvalidConfigError(
                "enabled_rules", ", ".join(unknown), "unknown rule id(s)"
            )

        severities: dict[str, Severity] = {}
        for rule_id, value in dict(self.severities).items():
            if rule_id not in RULES_BY_ID:
                raise InvalidConfigError("severities", rule_id, "unknown rule id")
            try:
                severities[rule_id] = Severity.parse(value)
            except ValueError as e:
                raise InvalidConfigError(f"severities.{rule_id}", value, str(e))
        object.__setattr__(self, "severities", severities)

        if isinstance(self.workers, bool) or not isinstance(self.workers, int) or self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be a positive integer")

        if self.output_format not in OUTPUT_FORMATS:
            raise InvalidConfigError(
                "output_format",
                self.output_format,
                f"expected one of: {', '.join(OUTPUT_FORMATS)}",
            )

        object.__setattr__(
            self, "side_effect_selectors", frozenset(_as_items(self.side_effect_selectors))
        )
        object.__setattr__(self, "mutator_prefixes", tuple(_as_items(self.mutator_prefixes)))
        if not self.mutator_prefixes:
            raise InvalidConfigError("mutator_prefixes", "", "at least one prefix is required")

        object.__setattr__(self, "extensions", tuple(_as_items(self.extensions)))
        if not self.extensions:
            raise InvalidConfigError("extensions", "", "at least one extension is required")
        object.__setattr__(self, "exclude_patterns", tuple(_as_items(self.exclude_patterns)))

        if self.max_file_size_mb <= 0:
            raise InvalidConfigError(
                "max_file_size_mb", self.max_file_size_mb, "must be positive"
            )

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)

    def severity_for(self, rule_id: str) -> Severity:
        """Effective severity of a rule after overrides."""
        override = self.severities.get(rule_id)
        if override is not None:
            return override
        return RULES_BY_ID[rule_id].default_severity

    def is_enabled(self, rule_id: str) -> bool:
        """Internal rules cannot be disabled."""
        if rule_id.startswith("internal/"):
            return True
        return rule_id in self.enabled_rules


def _as_items(value: Any) -> list[str]:
    """Accept a comma-separated string or any iterable of strings."""
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(part) for part in value]


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower layers.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is missing or invalid, or a
            value fails validation
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / f".{CONFIG_FILE_NAME}"
    if global_config.is_file():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / CONFIG_FILE_NAME
    if project_config.is_file():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        config_file = Path(config_file)
        if not config_file.is_file():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Map TOML spellings (kebab-case, camelCase aliases) to field names."""
    fields = AnalysisConfig.__dataclass_fields__
    result: dict[str, Any] = {}
    for raw_key, value in data.items():
        key = raw_key.replace("-", "_")
        key = _KEY_ALIASES.get(key.lower(), key)
        if key not in fields:
            raise ConfigurationError(f"Unknown configuration key: {raw_key!r}")
        result[key] = value
    return result


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from SMELL_SENTINEL_* environment variables.

    Collection fields take comma-separated values, e.g.
    ``SMELL_SENTINEL_ENABLED_RULES=nullable-return,flag-parameter``.
    ``severities`` cannot be set from the environment.

    Returns:
        Dict of field_name -> parsed_value for any variables found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hints[field_name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Returns:
        Parsed value, or None for types that cannot come from the environment

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = get_origin(type_hint)

    if origin is dict:
        return None

    if origin in (frozenset, tuple, list):
        return _as_items(value)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if isinstance(type_hint, type) and issubclass(type_hint, Enum):
        return value

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML config file.

    Settings may sit at the top level or under a ``[smell-sentinel]``
    table. A ``[severities]`` table maps rule ids to severities.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")

    section = data.get("smell-sentinel", data.get("smell_sentinel"))
    if isinstance(section, dict):
        data = section
    return _normalize_keys(data)
