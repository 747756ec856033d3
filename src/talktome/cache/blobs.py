"""Filesystem storage for cached audio artifacts."""

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class BlobStore:
    """One audio file per cache key.

    Files live at ``<root>/<key>.<extension>`` unless the caller asks
    for a custom path.
    """

    def __init__(self, root: Path, extension: str = "mp3"):
        """Initialize blob storage rooted at the given directory.

        Args:
            root: Directory for default-location artifacts
            extension: File extension matching the audio container format
        """
        self.root = root
        self.extension = extension.lstrip(".")

    def path_for(self, key: str) -> Path:
        """Default artifact path for a cache key."""
        return self.root / f"{key}.{self.extension}"

    def write(
        self, key: str, data: bytes, custom_path: str | Path | None = None
    ) -> Path:
        """Write artifact bytes and return the final path.

        The bytes go to a temporary sibling first and are renamed into
        place, so the target path never holds a partial file.

        Args:
            key: Cache key of the artifact
            data: Audio bytes
            custom_path: Optional explicit destination

        Returns:
            Absolute path of the written file

        Raises:
            OSError: If the directory cannot be created or the write fails
        """
        target = Path(custom_path).expanduser() if custom_path else self.path_for(key)
        target = target.absolute()
        target.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, target)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

        logger.debug(f"Wrote {len(data)} bytes to {target}")
        return target

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read(self, path: Path) -> bytes:
        return path.read_bytes()

    def delete(self, path: Path) -> bool:
        """Remove an artifact file.

        Returns:
            True if the file is gone afterwards, False if removal failed
        """
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to delete cached audio {path}: {e}")
            return False
        return True

    def purge(self) -> int:
        """Delete every artifact file directly under the root.

        Returns:
            Number of files removed
        """
        if not self.root.is_dir():
            return 0

        removed = 0
        for path in self.root.glob(f"*.{self.extension}"):
            if path.is_file() and self.delete(path):
                removed += 1
        return removed
