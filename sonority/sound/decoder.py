"""Decoding of Source bytes into playable frames.

Decoding is delegated to the soundfile library (libsndfile), which handles
WAV, FLAC, OGG/Vorbis and the other formats it was built with. Whatever the
reason a buffer cannot be read, callers only ever see a ``DecoderError``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

import numpy as np
import soundfile as sf

from sonority import config

from .source import Source


class DecoderError(Exception):
    """An error occurred while decoding sound data."""

    def __init__(self) -> None:
        super().__init__("An error occurred while decoding sound data.")


@dataclass(frozen=True, eq=False)
class DecodedStream:
    """Decoded audio ready to be handed to a sink.

    Attributes:
        data: Float32 samples shaped (frames, channels)
        sample_rate: Sample rate in Hz
        channels: Number of audio channels (1=mono, 2=stereo)
        source: The Source the frames were decoded from
    """

    data: np.ndarray
    sample_rate: int
    channels: int
    source: Source = field(repr=False)

    @property
    def frame_count(self) -> int:
        return self.data.shape[0]

    @property
    def duration(self) -> float:
        """Length of the stream in seconds."""
        if self.sample_rate <= 0:
            return 0.0
        return self.frame_count / self.sample_rate

    def blocks(
        self, block_frames: int = config.AUDIO_BLOCK_FRAMES
    ) -> Iterator[np.ndarray]:
        """Yield consecutive frame blocks of at most ``block_frames`` frames."""
        if block_frames <= 0:
            raise ValueError(f"block_frames must be positive, got {block_frames}")
        for start in range(0, self.frame_count, block_frames):
            yield self.data[start : start + block_frames]

    def __iter__(self) -> Iterator[np.ndarray]:
        return self.blocks()

    def __len__(self) -> int:
        return self.frame_count


def decode(source: Source) -> DecodedStream:
    """Decode a Source into a stream of float32 frames.

    The returned stream keeps a reference to ``source``.

    Raises:
        DecoderError: If the bytes cannot be interpreted as audio.
    """
    try:
        data, sample_rate = sf.read(source.cursor(), dtype="float32", always_2d=True)
    except (RuntimeError, TypeError, ValueError):
        # LibsndfileError derives from RuntimeError
        raise DecoderError() from None

    return DecodedStream(
        data=data,
        sample_rate=int(sample_rate),
        channels=data.shape[1],
        source=source,
    )
