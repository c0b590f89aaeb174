"""File handler module: path normalisation, encoding-aware read, atomic write.

Provides the file I/O used by both commands: reading the declaration
source for ``sync`` and replacing the destination file for ``download``.
"""

import logging
import os
import re
import stat
import tempfile
from pathlib import Path
from urllib.parse import unquote

from charset_normalizer import from_bytes

from .errors import SettingsInvalid

logger = logging.getLogger(__name__)

# Shell escapes left behind by terminal drag-and-drop ("My\ Folder")
_SHELL_ESCAPE = re.compile(r"\\(.)")

# =============================================================================
# Path handling
# =============================================================================


def normalize_path(path_str: str) -> Path:
    """Turn a user-supplied path string into an absolute Path.

    Percent-escapes are decoded, shell backslash escapes removed (POSIX
    only), surrounding whitespace trimmed and ``~`` expanded. Relative
    paths are resolved against the current directory.

    Args:
        path_str: Path as typed or pasted by the user.

    Returns:
        Absolute, resolved Path (which need not exist).
    """
    raw = unquote(path_str)
    if os.sep == "/":
        raw = _SHELL_ESCAPE.sub(r"\1", raw)
    raw = raw.strip()
    return Path(raw).expanduser().resolve()


def validate_source_path(path_str: str) -> Path:
    """Normalise and check the declaration source path.

    Raises:
        SettingsInvalid: If the path is empty, missing or not a file.
    """
    if not path_str or not path_str.strip():
        raise SettingsInvalid("Declaration source path cannot be empty")
    path = normalize_path(path_str)
    if not path.exists():
        raise SettingsInvalid(f"Declaration source not found: {path}")
    if not path.is_file():
        raise SettingsInvalid(f"Declaration source is not a file: {path}")
    return path


# =============================================================================
# File Read/Write
# =============================================================================


def read_file_with_encoding(path: Path) -> tuple[str, str]:
    """Read a file with automatic encoding detection.

    Reads raw bytes first, then uses charset-normalizer to detect encoding.
    Defaults to UTF-8 for empty files or when detection fails.

    Args:
        path: Path to the file to read.

    Returns:
        Tuple of (content_string, detected_encoding).
    """
    raw = path.read_bytes()
    if not raw:
        return ("", "utf-8")

    result = from_bytes(raw).best()
    if result is None:
        encoding = "utf-8"
        content = raw.decode(encoding, errors="replace")
    else:
        encoding = result.encoding
        # ascii is a strict subset of utf-8
        if encoding == "ascii":
            encoding = "utf-8"
        content = str(result)
    return (content, encoding)


def _target_mode(path: Path) -> int:
    """Mode for the replacement file: the existing file's, else 0o666 & ~umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_bytes_atomic(path: Path, data: bytes) -> int:
    """Replace *path* with *data* atomically, creating parent directories.

    Writes to a temporary file in the destination directory, then calls
    ``os.replace()`` so readers see either the old file or the complete
    new one, never a partial write.

    Args:
        path: Destination file path.
        data: Bytes to write.

    Returns:
        Number of bytes written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _target_mode(path)

    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise

    logger.debug("Wrote %d bytes to %s", len(data), path)
    return len(data)
