"""Guarded reading and atomic rewriting of SQL files for the CLI."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE, SQL_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "SQL_INDENT_MAX_FILE_SIZE"

Warn = Callable[[str], None]


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the file size limit, honoring ``SQL_INDENT_MAX_FILE_SIZE``.

    Args:
        default: Limit in bytes used when the environment variable is unset.

    Returns:
        int: Largest accepted file size in bytes.

    Raises:
        ValueError: If the environment variable does not hold a positive integer.

    Examples:
        os.environ["SQL_INDENT_MAX_FILE_SIZE"] = "65536"
        get_max_file_size()  # 65536
    """
    raw_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw_value is None:
        return default

    try:
        limit = int(raw_value)
    except ValueError as error:
        raise ValueError(
            f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {raw_value!r}."
        ) from error

    if limit < 1:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {limit}.")
    return limit


def contains_symlink(path: Path) -> bool:
    """Tell whether `path` or one of its ancestors is a symbolic link."""
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(raw_path: str, base_dir: Path) -> Path:
    """Turn a user-supplied path into the absolute path of a SQL file.

    The file must exist, be a regular file reached without symlinks, live
    under `base_dir`, and carry one of the SQL extensions.

    Args:
        raw_path: Path as typed by the user, relative or absolute.
        base_dir: Directory the file must be inside.

    Returns:
        Path: Resolved path to the SQL file.

    Raises:
        ValueError: If any of the conditions above does not hold.

    Examples:
        normalize_filepath("queries/report.sql", Path.cwd())
    """
    path = Path(raw_path).expanduser()
    if contains_symlink(path):
        raise ValueError(f"Symlinks are not supported for security reasons: {path}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Cannot resolve {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")
    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved} is outside of the working directory {base_dir}.")
    if resolved.suffix.lower() not in SQL_EXTENSIONS:
        raise ValueError(
            f"{resolved} is not a SQL file (expected one of: {', '.join(SQL_EXTENSIONS)})."
        )
    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Stat `filepath` without following a final symlink.

    Raises:
        IOError: If the path cannot be accessed or is not a regular file.
    """
    try:
        stat_result = os.lstat(filepath)
    except OSError as error:
        raise IOError(f"Cannot access {filepath}: {error}") from error

    if stat.S_ISLNK(stat_result.st_mode):
        raise IOError(f"Symlinks are not supported: {filepath}.")
    if not stat.S_ISREG(stat_result.st_mode):
        raise IOError(f"{filepath} is not a regular file.")
    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Raise IOError when the file is larger than `max_size` bytes."""
    if stat_result.st_size > max_size:
        raise IOError(
            f"{filepath} is {stat_result.st_size} bytes, over the maximum allowed size "
            f"of {max_size} bytes."
        )


def _fingerprint(stat_result: os.stat_result) -> tuple[object, ...]:
    return (
        getattr(stat_result, "st_ino", None),
        getattr(stat_result, "st_dev", None),
        stat_result.st_size,
        stat_result.st_mtime_ns,
    )


def ensure_file_unchanged(
    expected_stat: os.stat_result, current_stat: os.stat_result, filepath: Path
):
    """Raise IOError when two stats of `filepath` describe different files.

    Inode, device, size and modification time are compared.
    """
    if _fingerprint(expected_stat) != _fingerprint(current_stat):
        raise IOError(f"{filepath} changed during processing; refusing to overwrite.")


def safe_read(filepath: Path) -> TextIO:
    """Open `filepath` as UTF-8 text with line endings left untouched.

    Raises:
        IOError: If the file cannot be opened.

    Examples:
        with safe_read(Path("report.sql")) as handle:
            sql = handle.read()
    """
    try:
        return open(filepath, encoding="UTF-8", newline="")
    except OSError as error:
        raise IOError(f"Cannot open {filepath}: {error}") from error


def _copy_ownership(target: str, source_stat: os.stat_result, filepath: Path, warn: Warn | None):
    uid = getattr(source_stat, "st_uid", None)
    gid = getattr(source_stat, "st_gid", None)
    if uid is None or gid is None or not hasattr(os, "chown"):
        return
    try:
        os.chown(target, uid, gid)
    except PermissionError:
        if warn is not None:
            warn(f"Warning: Could not keep the owner of {filepath.name} (needs elevated privileges)")


def write_in_place(
    filepath: Path,
    content: str,
    expected_stat: os.stat_result,
    initial_stat: os.stat_result,
    warn: Warn | None = None,
):
    """Replace the content of `filepath` in one atomic rename.

    The new content goes to a temporary file next to the target, which takes
    over the original permissions, owner where allowed, and access time.

    Args:
        filepath: SQL file to rewrite.
        content: Text to write, line endings included.
        expected_stat: Stat taken after reading; the file must still match it.
        initial_stat: Stat taken before reading; supplies the access time.
        warn: Callback for non-fatal problems such as lost ownership.

    Raises:
        IOError: If the file changed since `expected_stat` or the rewrite fails.

    Examples:
        write_in_place(Path("report.sql"), indented, post_stat, pre_stat)
    """
    ensure_file_unchanged(expected_stat, collect_file_stat(filepath), filepath)

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="UTF-8", newline="", dir=filepath.parent, delete=False
        ) as handle:
            temp_path = Path(handle.name)
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
            os.chmod(handle.name, stat.S_IMODE(expected_stat.st_mode))
            _copy_ownership(handle.name, expected_stat, filepath, warn)

        os.replace(temp_path, filepath)
        temp_path = None
        # New mtime, original atime
        os.utime(filepath, ns=(initial_stat.st_atime_ns, filepath.stat().st_mtime_ns))
    except OSError as error:
        raise IOError(f"Cannot rewrite {filepath}: {error}") from error
    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
