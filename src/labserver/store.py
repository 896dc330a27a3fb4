"""
=============================================================================
FILE STORE
=============================================================================

Append-only writes and whole-file reads under a single base directory.

=============================================================================
STORAGE MODEL
=============================================================================

    base_dir/
    └── file.txt          ← one line per writeFile call, oldest first
        Hello\n
        World\n

    append("file.txt", "Hello")   opens in "a" mode, writes "Hello\n"
    read("file.txt")              returns the whole file as text

There is no record of who wrote a line and no metadata beyond what the
filesystem keeps (mtime, size).

=============================================================================
CONCURRENCY
=============================================================================

The store takes no locks. Each request runs in its own worker thread, so a
slow disk only stalls the requests waiting on it. Two appends that overlap
rely on the OS append semantics of O_APPEND: each write lands at the end of
the file, but nothing orders them across requests. A read sees whatever was
on disk when it ran.

=============================================================================
PATH SAFETY
=============================================================================

Filenames come straight from the URL. They are resolved against the base
directory and anything that resolves outside it is rejected:

    read("file.txt")          → base_dir/file.txt          ✓
    read("../secrets.txt")    → base_dir/../secrets.txt    ✗ ValidationError

The check runs before any file is opened.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Union

from .errors import FileNotFoundInStore, StorageError, ValidationError


logger = logging.getLogger(__name__)


class FileStore:
    """
    Flat text files under a fixed base directory.

    Usage:
        store = FileStore("/var/lib/labserver")
        store.append("file.txt", "Hello")
        store.read("file.txt")   # "Hello\\n"
    """

    def __init__(self, base_dir: Union[str, Path], encoding: str = "utf-8"):
        """
        Args:
            base_dir: Directory all filenames are resolved under.
                      Created on first append if it does not exist.
            encoding: Text encoding for reads and writes.
        """
        self.base_dir = Path(base_dir).resolve()
        self.encoding = encoding

    def path_for(self, filename: str) -> Path:
        """
        Resolve a filename to a path inside the base directory.

        Raises:
            ValidationError: Empty name, or a name that escapes base_dir.
        """
        if not filename:
            raise ValidationError("No filename provided")
        if "\x00" in filename:
            raise ValidationError(f"Invalid filename: {filename!r}")

        full_path = (self.base_dir / filename).resolve()

        try:
            full_path.relative_to(self.base_dir)
        except ValueError:
            logger.warning(f"Path traversal attempt: {filename!r}")
            raise ValidationError(f"Invalid filename: {filename}")

        if full_path == self.base_dir:
            raise ValidationError(f"Invalid filename: {filename}")

        return full_path

    def append(self, filename: str, text: str) -> Path:
        """
        Append `text` plus a newline to the named file, creating it if absent.

        Returns once the data has been handed to the OS (flushed, not fsynced).

        Returns:
            Path of the file written.

        Raises:
            ValidationError: Bad filename.
            StorageError: Any OS failure while opening or writing.
        """
        path = self.path_for(filename)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding=self.encoding, newline="") as f:
                f.write(text + "\n")
                f.flush()
        except OSError as e:
            logger.error(f"Append to {path} failed: {e}")
            raise StorageError(f"Error writing to file: {e.strerror or e}") from e

        logger.debug(f"Appended {len(text) + 1} chars to {path}")
        return path

    def read(self, filename: str) -> str:
        """
        Read the full contents of the named file.

        Raises:
            ValidationError: Bad filename.
            FileNotFoundInStore: The file does not exist.
            StorageError: Any other OS failure (permissions, a directory, ...).
        """
        path = self.path_for(filename)

        try:
            with open(path, "r", encoding=self.encoding, newline="") as f:
                return f.read()
        except FileNotFoundError as e:
            raise FileNotFoundInStore(filename) from e
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Read of {path} failed: {e}")
            raise StorageError(f"Error reading file {filename}: {e}") from e
