"""Abstract base classes for audio outputs.

This module defines the interface the audio system uses to render voices.
An output owns the device (or a fake one) and hands out sinks: one sink per
voice, each fed with decoded streams and positioned in the world.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sonority.types import Vec3

    from .decoder import DecodedStream
    from .voice import CancelFlag


class SpatialSink(abc.ABC):
    """Abstract base class for a positional playback handle.

    A sink plays the streams appended to it one after another. Its loudness in
    each ear depends on the emitter and ear positions last pushed to it.
    """

    @abc.abstractmethod
    def append(self, stream: DecodedStream) -> None:
        """Queue a decoded stream for playback on this sink.

        Args:
            stream: The decoded audio to play after anything already queued
        """
        ...

    @abc.abstractmethod
    def set_emitter_position(self, position: Vec3) -> None:
        """Move the sound source."""
        ...

    @abc.abstractmethod
    def set_left_ear_position(self, position: Vec3) -> None:
        """Move the listener's left ear."""
        ...

    @abc.abstractmethod
    def set_right_ear_position(self, position: Vec3) -> None:
        """Move the listener's right ear."""
        ...

    @abc.abstractmethod
    def set_volume(self, volume: float) -> None:
        """Update the volume of this sink.

        Args:
            volume: Volume level (0.0 to 1.0)
        """
        ...

    @abc.abstractmethod
    def empty(self) -> bool:
        """Check whether the sink has nothing left to play.

        Returns:
            True if no queued audio remains, False otherwise
        """
        ...

    @abc.abstractmethod
    def stop(self) -> None:
        """Drop all queued audio immediately."""
        ...

    @abc.abstractmethod
    def is_stopped(self) -> bool:
        """Check whether playback was stopped early.

        Returns:
            True once the sink was stopped or observed its cancel flag
        """
        ...


class AudioOutput(abc.ABC):
    """Abstract base class for audio outputs.

    This class defines the interface every output must implement. The audio
    system only talks to outputs through it, so outputs can be swapped
    between a real device and a headless mixer.
    """

    @abc.abstractmethod
    def initialize(self, sample_rate: int = 44100, channels: int = 2) -> None:
        """Initialize the output.

        Args:
            sample_rate: Sample rate in Hz
            channels: Number of output channels (1=mono, 2=stereo)
        """
        ...

    @abc.abstractmethod
    def shutdown(self) -> None:
        """Shut down the output and release resources."""
        ...

    @abc.abstractmethod
    def create_sink(
        self, cancel_flag: CancelFlag, spatial: bool = True
    ) -> SpatialSink:
        """Create a new sink rendered by this output.

        Args:
            cancel_flag: Flag the playback side polls; once set the sink stops
            spatial: Whether to pan by emitter and ear positions

        Returns:
            A new, empty sink
        """
        ...

    @abc.abstractmethod
    def set_master_volume(self, volume: float) -> None:
        """Set the master volume for all audio.

        Args:
            volume: Master volume level (0.0 to 1.0)
        """
        ...

    @abc.abstractmethod
    def update(self) -> None:
        """Update the output.

        This method should be called regularly (e.g., each tick) to
        process deferred output events.
        """
        ...

    @abc.abstractmethod
    def get_active_sink_count(self) -> int:
        """Get the number of sinks currently playing audio.

        Returns:
            Number of active sinks
        """
        ...
