"""Software mixer shared by the device-backed outputs.

MixerOutput keeps every live sink and sums them into one float32 buffer per
device callback. It opens no device itself, so it doubles as a headless
output: call ``mix`` to pull frames. Device outputs subclass it and only add
stream management.
"""

from __future__ import annotations

import logging
import threading
from collections import deque

import numpy as np

from sonority import config
from sonority.sound.audio_backend import AudioOutput, SpatialSink
from sonority.sound.decoder import DecodedStream
from sonority.sound.spatial import ear_gains
from sonority.sound.voice import CancelFlag
from sonority.types import StereoGain, Vec3

logger = logging.getLogger(__name__)


class MixerSink(SpatialSink):
    """Per-voice playback queue mixed by a MixerOutput."""

    def __init__(
        self, output: MixerOutput, cancel_flag: CancelFlag, spatial: bool = True
    ) -> None:
        """Initialize a sink.

        Args:
            output: Parent output that owns sink state and the mixer lock.
            cancel_flag: Flag checked on every mix pass.
            spatial: Whether to pan by emitter and ear positions.
        """
        self._output = output
        self._cancel_flag = cancel_flag
        self._spatial = spatial
        self._queue: deque[np.ndarray] = deque()
        self._position = 0
        self._volume = 1.0
        self._stopped = False
        self._emitter_position: Vec3 = (0.0, 0.0, 0.0)
        self._left_ear: Vec3 = config.DEFAULT_LEFT_EAR
        self._right_ear: Vec3 = config.DEFAULT_RIGHT_EAR
        self._gains: StereoGain = self._compute_gains()

    def append(self, stream: DecodedStream) -> None:
        """Queue a decoded stream after anything already playing."""
        prepared = self._output._prepare_audio_data(stream)
        with self._output._lock:
            if self._stopped or prepared.shape[0] == 0:
                return
            self._queue.append(prepared)
            self._output._track_locked(self)

    def set_emitter_position(self, position: Vec3) -> None:
        with self._output._lock:
            self._emitter_position = position
            self._gains = self._compute_gains()

    def set_left_ear_position(self, position: Vec3) -> None:
        with self._output._lock:
            self._left_ear = position
            self._gains = self._compute_gains()

    def set_right_ear_position(self, position: Vec3) -> None:
        with self._output._lock:
            self._right_ear = position
            self._gains = self._compute_gains()

    def set_volume(self, volume: float) -> None:
        with self._output._lock:
            self._volume = max(0.0, min(1.0, volume))

    def empty(self) -> bool:
        with self._output._lock:
            return not self._queue

    def stop(self) -> None:
        with self._output._lock:
            self._stop_locked()

    def is_stopped(self) -> bool:
        with self._output._lock:
            return self._stopped

    @property
    def gains(self) -> StereoGain:
        """Current (left, right) gain before volume and master volume."""
        with self._output._lock:
            return self._gains

    def mix_into(self, outdata: np.ndarray, master_volume: float) -> None:
        """Mix this sink's audio into an output buffer.

        Called from the audio callback while the output lock is held.

        Args:
            outdata: Output buffer with shape (frames, output_channels).
            master_volume: Output master volume scalar.
        """
        if self._stopped:
            return
        if self._cancel_flag.is_set():
            self._stop_locked()
            return

        remaining = outdata.shape[0]
        out_pos = 0
        gain = self._volume * master_volume
        left_gain, right_gain = self._gains

        while remaining > 0 and self._queue:
            current = self._queue[0]
            available = current.shape[0] - self._position
            chunk = min(remaining, available)

            segment = current[self._position : self._position + chunk]
            if gain > 0.0:
                target = outdata[out_pos : out_pos + chunk]
                if outdata.shape[1] == 1:
                    target[:, 0] += segment * (gain * (left_gain + right_gain) / 2.0)
                else:
                    target[:, 0] += segment * (gain * left_gain)
                    target[:, 1] += segment * (gain * right_gain)

            self._position += chunk
            out_pos += chunk
            remaining -= chunk

            if self._position >= current.shape[0]:
                self._queue.popleft()
                self._position = 0

    def is_finished_locked(self) -> bool:
        """Whether the mixer can forget this sink. Lock must be held."""
        return self._stopped or not self._queue

    def _compute_gains(self) -> StereoGain:
        if not self._spatial:
            return (1.0, 1.0)
        return ear_gains(self._emitter_position, self._left_ear, self._right_ear)

    def _stop_locked(self) -> None:
        """Drop queued audio. The output lock must be held by the caller."""
        self._queue.clear()
        self._position = 0
        self._stopped = True


class MixerOutput(AudioOutput):
    """Output that mixes sinks in software without opening a device.

    Sinks join the mix when audio is first appended and are forgotten once they
    have played everything or been stopped.
    """

    def __init__(self) -> None:
        self._sinks: list[MixerSink] = []
        self._master_volume = config.AUDIO_MASTER_VOLUME
        self._initialized = False
        self._sample_rate = config.AUDIO_SAMPLE_RATE
        self._num_channels = config.AUDIO_OUTPUT_CHANNELS
        self._lock = threading.RLock()

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._num_channels

    def initialize(
        self,
        sample_rate: int = config.AUDIO_SAMPLE_RATE,
        channels: int = config.AUDIO_OUTPUT_CHANNELS,
    ) -> None:
        """Initialize the mixer format."""
        if self._initialized:
            logger.warning("Audio output already initialized")
            return
        if channels not in (1, 2):
            raise ValueError(f"Unsupported output channel count: {channels}")

        self._sample_rate = sample_rate
        self._num_channels = channels
        self._initialized = True
        logger.info(
            "Mixer output initialized: %sHz, %s channels", sample_rate, channels
        )

    def shutdown(self) -> None:
        """Stop every sink and forget them."""
        if not self._initialized:
            return

        self.stop_all_sinks()
        with self._lock:
            self._sinks.clear()
            self._initialized = False

        logger.info("Mixer output shut down")

    def create_sink(
        self, cancel_flag: CancelFlag, spatial: bool = True
    ) -> MixerSink:
        """Create a new sink. It joins the mix once audio is appended to it."""
        return MixerSink(self, cancel_flag, spatial=spatial)

    def stop_all_sinks(self) -> None:
        """Stop all currently playing sinks."""
        with self._lock:
            for sink in self._sinks:
                sink._stop_locked()

    def set_master_volume(self, volume: float) -> None:
        """Set the master volume for all audio."""
        with self._lock:
            self._master_volume = max(0.0, min(1.0, volume))

    def update(self) -> None:
        """Update the output.

        Mixing happens on demand, so there is nothing deferred to process.
        """

    def get_active_sink_count(self) -> int:
        """Get the number of sinks that still have audio to play."""
        with self._lock:
            return sum(1 for sink in self._sinks if not sink.is_finished_locked())

    def mix(self, frames: int) -> np.ndarray:
        """Render the next ``frames`` frames of all sinks.

        Returns:
            Float32 buffer shaped (frames, output_channels), clipped to [-1, 1]
        """
        outdata = np.zeros((frames, self._num_channels), dtype=np.float32)
        with self._lock:
            self._mix_locked(outdata)
        np.clip(outdata, -1.0, 1.0, out=outdata)
        return outdata

    def _track_locked(self, sink: MixerSink) -> None:
        """Add a sink to the mix if it is not already there. Lock must be held."""
        if sink not in self._sinks:
            self._sinks.append(sink)

    def _mix_locked(self, outdata: np.ndarray) -> None:
        """Sum every live sink into ``outdata``. The lock must be held."""
        for sink in self._sinks:
            sink.mix_into(outdata, self._master_volume)
        self._sinks = [sink for sink in self._sinks if not sink.is_finished_locked()]

    def _prepare_audio_data(self, stream: DecodedStream) -> np.ndarray:
        """Convert a stream to mono float32 at the output sample rate."""
        data = stream.data.astype(np.float32, copy=False)

        if data.ndim == 1:
            mono = data
        elif data.ndim == 2:
            mono = data[:, 0] if data.shape[1] == 1 else data.mean(axis=1)
        else:
            raise ValueError(f"Unsupported audio data shape: {data.shape}")

        mono = np.asarray(mono, dtype=np.float32)
        if stream.sample_rate != self._sample_rate:
            mono = self._resample_audio(mono, stream.sample_rate, self._sample_rate)
        return mono

    @staticmethod
    def _resample_audio(
        data: np.ndarray,
        source_sample_rate: int,
        target_sample_rate: int,
    ) -> np.ndarray:
        """Resample mono audio with simple linear interpolation."""
        if source_sample_rate == target_sample_rate:
            return data

        source_frames = data.shape[0]
        if source_frames == 0:
            return data

        ratio = target_sample_rate / source_sample_rate
        target_frames = max(1, round(source_frames * ratio))

        source_indices = np.arange(source_frames, dtype=np.float64)
        target_indices = np.linspace(0, source_frames - 1, target_frames)
        return np.interp(target_indices, source_indices, data).astype(
            np.float32, copy=False
        )
