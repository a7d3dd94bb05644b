"""Configuration for sql-indent: defaults, TOML discovery and validation."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from pathlib import Path
import tomllib

from .constants import (
    DEFAULT_INDENT_OFFSET,
    DEFAULT_KEYWORDS,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_TAB_WIDTH,
)


@dataclass
class IndentConfig:
    """Settings shared by every indentation entry point.

    Attributes:
        indent_offset: Number of columns per nesting level.
        debug_logging: Whether to log a diagnostic line for every indented line.
        recognized_keywords: Words that mark statement and clause starters when
            they begin a line. Matched case-insensitively.
        tab_width: Column width of a tab when measuring existing indentation.
        indent_with_tabs: Whether rewritten indentation uses tabs for whole
            tab stops.
        indent_blank_lines: Whether a buffer pass indents whitespace-only lines
            like any other line. When off, they are emptied instead.
        backslash_escapes: Whether a backslash escapes the next character inside
            string literals.
        max_file_size: Largest file, in bytes, the CLI agrees to read.

    Examples:
        IndentConfig(indent_offset=2, debug_logging=True)
    """

    # Indentation
    indent_offset: int = DEFAULT_INDENT_OFFSET
    tab_width: int = DEFAULT_TAB_WIDTH
    indent_with_tabs: bool = False
    indent_blank_lines: bool = True

    # Classification
    recognized_keywords: frozenset[str] = field(default=DEFAULT_KEYWORDS)
    backslash_escapes: bool = True

    # Diagnostics
    debug_logging: bool = False

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Raised for configuration files or values sql-indent cannot use.

    Examples:
        raise ConfigError("`indent_offset` must be a positive integer")
    """


# File name and candidate table paths, in lookup order within a directory.
CONFIG_SOURCES: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("pyproject.toml", (("tool", "sql-indent"),)),
    (".sql-indent.toml", (("sql-indent",), ("tool", "sql-indent"))),
)

_POSITIVE_INT_FIELDS = ("indent_offset", "tab_width", "max_file_size")
_FLAG_FIELDS = ("debug_logging", "indent_with_tabs", "indent_blank_lines", "backslash_escapes")

_ABSENT = object()


def load_config(search_path: Path) -> IndentConfig:
    """Load settings from the closest directory that defines them.

    Starting at `search_path` and moving towards the filesystem root, each
    directory is checked for a ``[tool.sql-indent]`` table in
    `pyproject.toml`, then a ``[sql-indent]`` or ``[tool.sql-indent]`` table
    in `.sql-indent.toml`. The first table found wins. Unreadable or
    malformed TOML files are ignored.

    Args:
        search_path: Directory where the lookup begins.

    Returns:
        IndentConfig: Settings from the first table found, or the defaults.

    Raises:
        ConfigError: If the table found is not a mapping or has unknown keys.

    Examples:
        load_config(Path("queries"))
    """
    for directory in _directories_upward(search_path.resolve()):
        for filename, table_paths in CONFIG_SOURCES:
            config = _config_from_file(directory / filename, table_paths)
            if config is not None:
                return normalize_config(config)
    return IndentConfig()


def _directories_upward(start: Path) -> Iterator[Path]:
    yield start
    yield from start.parents


def _read_toml(path: Path) -> dict | None:
    if not path.is_file():
        return None
    try:
        with open(path, "rb") as stream:
            return tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None


def _config_from_file(
    path: Path, table_paths: tuple[tuple[str, ...], ...]
) -> IndentConfig | None:
    data = _read_toml(path)
    if data is None:
        return None

    for table_path in table_paths:
        table = _lookup(data, table_path)
        if table is not _ABSENT:
            return _config_from_table(table, f"[{'.'.join(table_path)}] in {path}")
    return None


def _lookup(data: object, keys: tuple[str, ...]) -> object:
    for key in keys:
        if not isinstance(data, dict) or key not in data:
            return _ABSENT
        data = data[key]
    return data


def _config_from_table(table: object, origin: str) -> IndentConfig:
    if not isinstance(table, dict):
        raise ConfigError(f"Invalid `{origin}`: expected a table of settings")
    try:
        return IndentConfig(**table)
    except TypeError as error:
        raise ConfigError(f"Invalid `{origin}`: {error}") from error


def normalize_config(config: IndentConfig) -> IndentConfig:
    """Return `config` with keywords lower-cased into a frozenset.

    Raises:
        ConfigError: If `recognized_keywords` is not a collection of strings.
    """
    keywords = config.recognized_keywords
    if isinstance(keywords, str) or not isinstance(keywords, Iterable):
        raise ConfigError("`recognized_keywords` must be a list of strings")
    keywords = list(keywords)
    if any(not isinstance(keyword, str) for keyword in keywords):
        raise ConfigError("`recognized_keywords` must be a list of strings")

    normalized = frozenset(keyword.strip().lower() for keyword in keywords)
    if normalized == config.recognized_keywords:
        return config
    return replace(config, recognized_keywords=normalized)


def validate_config(config: IndentConfig) -> None:
    """Check that every setting has a usable value.

    Args:
        config: Configuration to check.

    Raises:
        ConfigError: If a size or width is not a positive integer, a flag is
            not a boolean, or a keyword is empty or contains whitespace.

    Examples:
        validate_config(IndentConfig(indent_offset=2))
    """
    config = normalize_config(config)

    for name in _POSITIVE_INT_FIELDS:
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{name}` must be an integer")
        if value <= 0:
            raise ConfigError(f"`{name}` must be a positive integer")

    for name in _FLAG_FIELDS:
        if not isinstance(getattr(config, name), bool):
            raise ConfigError(f"`{name}` must be a boolean")

    for keyword in sorted(config.recognized_keywords):
        if not keyword or keyword.split() != [keyword]:
            raise ConfigError(
                f"`recognized_keywords` entries must be single words, got {keyword!r}"
            )


def apply_overrides(config: IndentConfig, **overrides: object) -> IndentConfig:
    """Layer explicit values, typically CLI options, over `config`.

    Overrides set to None are skipped, so unset command-line options keep the
    file or default value. `config` itself is returned untouched when nothing
    is left to apply.

    Raises:
        TypeError: If an override name is not an `IndentConfig` field.

    Examples:
        updated = apply_overrides(config, indent_offset=2, debug_logging=None)
    """
    changes = {name: value for name, value in overrides.items() if value is not None}
    return replace(config, **changes) if changes else config


def build_config(search_path: Path, **overrides: object) -> IndentConfig:
    """Resolve the effective configuration for files under `search_path`.

    Args:
        search_path: Directory where configuration lookup starts.
        overrides: Values that take precedence over configuration files;
            None values are ignored.

    Returns:
        IndentConfig: Normalized and validated configuration.

    Raises:
        ConfigError: If a configuration file or an override is invalid.

    Examples:
        config = build_config(Path.cwd(), indent_offset=2)
    """
    config = apply_overrides(load_config(search_path), **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config
