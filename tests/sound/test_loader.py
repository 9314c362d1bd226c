"""Tests for SourceLoader."""

from pathlib import Path

import pytest

from sonority.sound.loader import SourceLoader
from tests.helpers import make_wav_bytes


class TestSourceLoaderLoad:
    """Tests for SourceLoader.load."""

    def test_loader_reads_file_bytes(self, tmp_path: Path) -> None:
        """Test loading reads the file into a Source."""
        wav_path = tmp_path / "blip.wav"
        wav_path.write_bytes(make_wav_bytes(num_frames=80))

        source = SourceLoader().load(wav_path)

        assert source.data == wav_path.read_bytes()

    def test_loader_resolves_relative_paths(self, tmp_path: Path) -> None:
        """Test relative paths resolve against the assets path."""
        (tmp_path / "sfx").mkdir()
        (tmp_path / "sfx" / "door.wav").write_bytes(b"door")

        loader = SourceLoader(assets_path=tmp_path)

        assert loader.load("sfx/door.wav").data == b"door"

    def test_loader_caches_buffer(self, tmp_path: Path) -> None:
        """Test repeated loads share one cached buffer."""
        wav_path = tmp_path / "cached.wav"
        wav_path.write_bytes(make_wav_bytes(num_frames=50))

        loader = SourceLoader()
        first = loader.load(wav_path)
        wav_path.write_bytes(b"changed on disk")
        second = loader.load(wav_path)

        assert first.data is second.data

    def test_loader_nonexistent_file_raises(self, tmp_path: Path) -> None:
        """Test a missing file raises OSError."""
        loader = SourceLoader()

        with pytest.raises(OSError, match="Failed to load"):
            loader.load(tmp_path / "nope.wav")


class TestSourceLoaderCache:
    """Tests for cache management."""

    def test_preload_skips_missing_files(self, tmp_path: Path) -> None:
        """Test preload logs and skips missing files."""
        (tmp_path / "a.wav").write_bytes(b"aaaa")
        loader = SourceLoader(assets_path=tmp_path)

        loader.preload(["a.wav", "missing.wav"])

        assert loader.get_cache_info()["cached_sources"] == 1

    def test_cache_info_and_clear(self, tmp_path: Path) -> None:
        """Test cache statistics and clearing the cache."""
        (tmp_path / "a.wav").write_bytes(b"a" * 100)
        (tmp_path / "b.wav").write_bytes(b"b" * 50)
        loader = SourceLoader(assets_path=tmp_path)
        loader.preload(["a.wav", "b.wav"])

        info = loader.get_cache_info()
        assert info["cached_sources"] == 2
        assert info["total_bytes"] == 150
        assert info["memory_usage_mb"] == pytest.approx(150 / (1024 * 1024))

        loader.clear_cache()
        assert loader.get_cache_info()["cached_sources"] == 0
