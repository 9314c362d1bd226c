from __future__ import annotations

import io
import math
import struct

from sonority.sound.source import Source


def make_wav_bytes(
    num_frames: int = 100,
    nchannels: int = 1,
    sample_rate: int = 44100,
    amplitude: int = 16000,
    frequency: float | None = 440.0,
) -> bytes:
    """Build a minimal PCM16 WAV file in memory.

    With ``frequency`` set the samples are a sine wave; with None every sample
    is the constant ``amplitude``.
    """
    total_samples = num_frames * nchannels
    data_size = total_samples * 2  # 16-bit = 2 bytes per sample

    buf = io.BytesIO()
    buf.write(b"RIFF")
    buf.write(struct.pack("<I", 36 + data_size))
    buf.write(b"WAVE")
    buf.write(b"fmt ")
    buf.write(struct.pack("<I", 16))  # chunk size
    buf.write(struct.pack("<H", 1))  # PCM format
    buf.write(struct.pack("<H", nchannels))
    buf.write(struct.pack("<I", sample_rate))
    buf.write(struct.pack("<I", sample_rate * nchannels * 2))  # byte rate
    buf.write(struct.pack("<H", nchannels * 2))  # block align
    buf.write(struct.pack("<H", 16))  # bits per sample
    buf.write(b"data")
    buf.write(struct.pack("<I", data_size))

    for i in range(num_frames):
        if frequency is None:
            value = amplitude
        else:
            value = int(amplitude * math.sin(2 * math.pi * frequency * i / sample_rate))
        for _ in range(nchannels):
            buf.write(struct.pack("<h", value))

    return buf.getvalue()


def make_source(num_frames: int = 100, **kwargs: object) -> Source:
    """Build a Source holding a valid WAV file."""
    return Source(make_wav_bytes(num_frames, **kwargs))  # type: ignore[arg-type]


def make_corrupt_source() -> Source:
    """Build a Source whose bytes are not audio in any format."""
    return Source(b"definitely not an audio file" * 4)
