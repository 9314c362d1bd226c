"""Loading of encoded audio files into Sources.

Files are read as raw bytes and cached per path, so every emitter playing
the same file shares one buffer. Decoding happens later, when the Source is
played.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .source import Source

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


class SourceLoader:
    """Handles loading and caching of audio files.

    The SourceLoader is responsible for:
    - Resolving file paths relative to an assets directory
    - Reading encoded audio (.ogg, .wav, .flac, etc.) into Sources
    - Caching loaded Sources to avoid redundant disk I/O
    """

    def __init__(self, assets_path: Path | None = None) -> None:
        """Initialize the source loader.

        Args:
            assets_path: Base path for audio assets. If None, paths must be absolute.
        """
        self.assets_path = assets_path
        self._cache: dict[Path, Source] = {}

    def load(self, file_path: Path | str) -> Source:
        """Load an audio file into memory.

        Args:
            file_path: Path to the audio file (relative to assets_path or absolute)

        Returns:
            A clone of the cached Source for the file

        Raises:
            OSError: If the file cannot be read
        """
        path = Path(file_path)

        if not path.is_absolute() and self.assets_path:
            path = self.assets_path / path

        if path in self._cache:
            logger.debug(f"Returning cached source: {path}")
            return self._cache[path].clone()

        try:
            source = Source.from_file(path)
        except OSError as e:
            raise OSError(f"Failed to load audio file {path}: {e}") from e
        logger.info(f"Loaded source: {path} ({len(source)} bytes)")

        self._cache[path] = source
        return source.clone()

    def clear_cache(self) -> None:
        """Clear the source cache to free memory."""
        logger.info(f"Clearing audio cache ({len(self._cache)} sources)")
        self._cache.clear()

    def preload(self, file_paths: list[Path | str]) -> None:
        """Preload multiple audio files into the cache.

        Failures are logged and skipped.

        Args:
            file_paths: List of paths to preload
        """
        logger.info(f"Preloading {len(file_paths)} audio files")
        for path in file_paths:
            try:
                self.load(path)
            except OSError as e:
                logger.error(f"Failed to preload {path}: {e}")

    def get_cache_info(self) -> dict[str, Any]:
        """Get information about the current cache state.

        Returns:
            Dictionary with cache statistics
        """
        total_bytes = sum(len(source) for source in self._cache.values())
        return {
            "cached_sources": len(self._cache),
            "total_bytes": total_bytes,
            "memory_usage_mb": total_bytes / (1024 * 1024),
        }
