"""Fire-and-forget playback outside of any emitter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .decoder import decode
from .voice import CancelFlag

if TYPE_CHECKING:
    from .audio_backend import AudioOutput, SpatialSink
    from .source import Source


def play_once(source: Source, output: AudioOutput, volume: float = 1.0) -> SpatialSink:
    """Play a sound once, without positional panning.

    Useful for interface sounds that have no place in the world.

    Args:
        source: Encoded audio to play
        output: Output to render on
        volume: Volume level (0.0 to 1.0)

    Returns:
        The sink playing the sound; call ``stop()`` on it to cut it short

    Raises:
        DecoderError: If ``source`` cannot be decoded.
    """
    stream = decode(source.clone())
    sink = output.create_sink(CancelFlag(), spatial=False)
    sink.set_volume(volume)
    sink.append(stream)
    return sink
