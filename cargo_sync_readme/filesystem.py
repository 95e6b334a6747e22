"""Reading crate files and rewriting the README in place."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE

MAX_FILE_SIZE_ENV_VAR = "CARGO_SYNC_README_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the size limit for files read by the tool.

    ``CARGO_SYNC_README_MAX_FILE_SIZE`` overrides `default` when set.

    Raises:
        ValueError: If the environment value is not a positive integer.
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    if not env_value.strip().isdigit() or int(env_value) <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {env_value!r}."
        raise ValueError(error_message)
    return int(env_value)


def _fingerprint(stat_result: os.stat_result) -> tuple[int, int, int, int]:
    return (stat_result.st_ino, stat_result.st_dev, stat_result.st_size, stat_result.st_mtime_ns)


def read_text(
    filepath: Path, max_size: int = DEFAULT_MAX_FILE_SIZE
) -> tuple[str, os.stat_result]:
    """Read a UTF-8 file without translating its line endings.

    The file is stat'ed once. That snapshot is checked against `max_size` and
    returned with the content, so `write_readme` can later tell whether the
    file changed in between.

    Args:
        filepath: Path to the file.
        max_size: Maximum allowed size in bytes.

    Returns:
        tuple[str, os.stat_result]: File content, with ``\\r\\n`` sequences
            kept as they are, and the stat snapshot taken before reading.

    Raises:
        IOError: If the file is missing, not a regular file, too large, or
            not valid UTF-8.

    Examples:
        readme, readme_stat = read_text(Path("README.md"))
    """
    try:
        snapshot = os.stat(filepath)
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error

    if not stat.S_ISREG(snapshot.st_mode):
        raise IOError(f"{filepath} is not a regular file.")

    if snapshot.st_size > max_size:
        raise IOError(f"{filepath} exceeds the maximum allowed size of {max_size} bytes.")

    try:
        with open(filepath, "r", encoding="UTF-8", newline="") as file:
            content = file.read()
    except UnicodeDecodeError as error:
        raise IOError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error

    return content, snapshot


def write_readme(
    filepath: Path,
    content: str,
    expected_stat: os.stat_result,
    warn: Callable[[str], None] | None = None,
):
    """Atomically replace a README with new content.

    Args:
        filepath: Path to the README to update.
        content: New README content, written byte for byte.
        expected_stat: Snapshot returned by `read_text` for this README.
        warn: Optional callback for non-fatal warnings (e.g., ownership preservation).

    Raises:
        IOError: If the README is a symlink, changed since it was read, or
            cannot be replaced.

    Examples:
        readme, readme_stat = read_text(path)
        write_readme(path, result.content, readme_stat)
    """
    try:
        current_stat = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error

    # Replacing a symlink would turn it into a regular file.
    if stat.S_ISLNK(current_stat.st_mode):
        raise IOError(f"Symlinks are not supported: {filepath}.")

    if _fingerprint(current_stat) != _fingerprint(expected_stat):
        raise IOError(f"{filepath} changed during processing; refusing to overwrite.")

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", newline="", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
            os.chmod(tmp_file.name, stat.S_IMODE(expected_stat.st_mode))

            if hasattr(os, "chown"):
                try:
                    os.chown(tmp_file.name, expected_stat.st_uid, expected_stat.st_gid)
                except PermissionError:
                    if warn is not None:
                        warn(f"could not preserve file ownership for {filepath.name}")

        os.replace(temp_path, filepath)
    except OSError as error:
        raise IOError(f"Error writing {filepath}: {error}") from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
