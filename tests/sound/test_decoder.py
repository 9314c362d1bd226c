"""Tests for decoding Sources into streams."""

import numpy as np
import pytest

from sonority.sound.decoder import DecoderError, decode
from sonority.sound.source import Source
from tests.helpers import make_corrupt_source, make_source, make_wav_bytes


class TestDecode:
    """Test decode() on valid and invalid data."""

    def test_decode_mono_wav(self) -> None:
        """Test decoding a mono WAV file."""
        stream = decode(make_source(num_frames=200, sample_rate=22050))

        assert stream.channels == 1
        assert stream.sample_rate == 22050
        assert stream.data.shape == (200, 1)
        assert stream.data.dtype == np.float32

    def test_decode_stereo_wav(self) -> None:
        """Test decoding a stereo WAV file."""
        stream = decode(make_source(num_frames=150, nchannels=2))

        assert stream.channels == 2
        assert stream.data.shape == (150, 2)

    def test_decode_keeps_reference_to_source(self) -> None:
        """Test the stream keeps the Source it came from."""
        source = make_source()

        stream = decode(source)

        assert stream.source is source

    def test_decode_corrupt_bytes_raises(self) -> None:
        """Test non-audio bytes raise DecoderError."""
        with pytest.raises(DecoderError):
            decode(make_corrupt_source())

    def test_decode_empty_bytes_raises(self) -> None:
        """Test empty bytes raise DecoderError."""
        with pytest.raises(DecoderError):
            decode(Source(b""))

    def test_decode_truncated_header_raises(self) -> None:
        """Test a truncated WAV header raises DecoderError."""
        with pytest.raises(DecoderError):
            decode(Source(make_wav_bytes()[:20]))


class TestDecoderError:
    """Test the error's fixed, cause-free description."""

    def test_message(self) -> None:
        """Test the fixed error message."""
        assert str(DecoderError()) == "An error occurred while decoding sound data."

    def test_raised_without_cause(self) -> None:
        """Test the decoder's own exception is not chained."""
        with pytest.raises(DecoderError) as exc_info:
            decode(make_corrupt_source())

        assert exc_info.value.__cause__ is None
        assert exc_info.value.__suppress_context__ is True


class TestDecodedStream:
    """Test stream helpers."""

    def test_duration_and_length(self) -> None:
        """Test frame count, length and duration agree."""
        stream = decode(make_source(num_frames=441, sample_rate=44100))

        assert len(stream) == 441
        assert stream.frame_count == 441
        assert stream.duration == pytest.approx(0.01)

    def test_blocks_cover_every_frame_in_order(self) -> None:
        """Test blocks concatenate back to the full stream."""
        stream = decode(make_source(num_frames=10))

        blocks = list(stream.blocks(4))

        assert [block.shape[0] for block in blocks] == [4, 4, 2]
        np.testing.assert_array_equal(np.concatenate(blocks), stream.data)

    def test_blocks_rejects_non_positive_size(self) -> None:
        """Test blocks rejects a zero block size."""
        stream = decode(make_source(num_frames=10))

        with pytest.raises(ValueError):
            list(stream.blocks(0))

    def test_streams_compare_by_identity(self) -> None:
        """Test streams can be compared, hashed and searched in a queue."""
        first = decode(make_source(num_frames=16))
        second = decode(make_source(num_frames=16))

        assert first == first
        assert first != second
        assert first in [second, first]
        assert len({first, second}) == 2
