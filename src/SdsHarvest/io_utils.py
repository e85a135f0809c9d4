# === NAVMAP v1 ===
# {
#   "module": "SdsHarvest.io_utils",
#   "purpose": "Atomic file writes and output directory preparation",
#   "sections": [
#     {
#       "id": "ensure-directory",
#       "name": "ensure_directory",
#       "anchor": "function-ensure-directory",
#       "kind": "function"
#     },
#     {
#       "id": "file-exists",
#       "name": "file_exists",
#       "anchor": "function-file-exists",
#       "kind": "function"
#     },
#     {
#       "id": "atomic-write-bytes",
#       "name": "atomic_write_bytes",
#       "anchor": "function-atomic-write-bytes",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Atomic file write utilities for downloaded documents.

**Responsibilities**
--------------------
- Create the output directory once, with explicit permissions, never
  recreating it when present
- Answer the "already downloaded?" question used as the cross-run dedup gate
- Persist a fully-buffered payload atomically using temporary file + fsync +
  rename, so an interrupted write never leaves a file under the final name

**Safety & Reliability**
------------------------
- Temporary files live in the destination directory (atomic rename)
- Temporary files are removed on any failure
- Payloads are written from memory; no streaming to disk
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

__all__ = ["atomic_write_bytes", "ensure_directory", "file_exists"]

logger = logging.getLogger(__name__)


def ensure_directory(path: Path, mode: int = 0o755) -> bool:
    """Create ``path`` with ``mode`` when it does not exist yet.

    Returns ``True`` when the directory is usable afterwards. Creation
    failures are logged rather than raised; each later write into the
    directory then reports its own failure.
    """

    if path.is_dir():
        return True
    try:
        path.mkdir(mode=mode, parents=True)
    except OSError as exc:
        logger.error("Failed to create output directory %s: %s", path, exc)
        return False
    logger.info("Created output directory %s", path)
    return True


def file_exists(path: Path) -> bool:
    """Return ``True`` when ``path`` exists and is not a directory."""

    try:
        return path.exists() and not path.is_dir()
    except OSError:
        return False


def atomic_write_bytes(dest_path: Path, data: bytes) -> int:
    """Write ``data`` to ``dest_path`` atomically and return the byte count.

    The parent directory must already exist. On any failure the temporary
    file is removed and the original exception propagates.

    Raises:
        OSError: If file I/O fails (permission denied, disk full, etc.).
    """

    dest_dir = dest_path.parent
    fd, tmp_name = tempfile.mkstemp(dir=dest_dir, prefix=".part-", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        # mkstemp creates 0600 files; give the final file standard permissions
        umask = os.umask(0)
        os.umask(umask)
        os.chmod(tmp_path, 0o666 & ~umask)
        os.replace(tmp_path, dest_path)
    except BaseException:
        try:
            tmp_path.unlink()
        except FileNotFoundError:
            pass
        raise

    logger.debug("Wrote %d bytes to %s", len(data), dest_path)
    return len(data)
