"""Miniaudio output implementation using a single mixed playback device.

This output uses one miniaudio PlaybackDevice and mixes all live sinks
inside a generator callback.

Miniaudio requires no system-level audio libraries (no PortAudio, no libsndfile).
The C library is compiled into the Python extension at install time.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Any

import miniaudio
import numpy as np

from sonority import config

from .mixer import MixerOutput

logger = logging.getLogger(__name__)


class MiniaudioOutput(MixerOutput):
    """Audio output using miniaudio's PlaybackDevice.

    Uses a generator-based callback to mix all live sinks into the
    output buffer.
    """

    def __init__(self, device_id: Any = None) -> None:
        """Initialize the miniaudio output.

        Args:
            device_id: miniaudio device id to open, or None for the default.
        """
        super().__init__()
        self._device_id = device_id
        self._device: miniaudio.PlaybackDevice | None = None

    def initialize(
        self,
        sample_rate: int = config.AUDIO_SAMPLE_RATE,
        channels: int = config.AUDIO_OUTPUT_CHANNELS,
    ) -> None:
        """Open the playback device and start mixing."""
        if self._initialized:
            logger.warning("Audio output already initialized")
            return
        if channels not in (1, 2):
            raise ValueError(f"Unsupported output channel count: {channels}")

        self._sample_rate = sample_rate
        self._num_channels = channels

        try:
            self._device = miniaudio.PlaybackDevice(
                output_format=miniaudio.SampleFormat.FLOAT32,
                nchannels=channels,
                sample_rate=sample_rate,
                buffersize_msec=0,  # 0 = let miniaudio pick platform default
                device_id=self._device_id,
            )
            # Create and start the callback generator
            generator = self._audio_generator()
            next(generator)  # Prime the generator
            self._device.start(generator)
            self._initialized = True
            logger.info(
                "Miniaudio output initialized: %sHz, %s channels", sample_rate, channels
            )
        except Exception:
            with contextlib.suppress(Exception):
                if self._device is not None:
                    self._device.close()
            self._device = None
            logger.exception("Failed to initialize miniaudio output")
            raise

    def shutdown(self) -> None:
        """Stop all sinks and close the playback device."""
        if not self._initialized:
            return

        self.stop_all_sinks()

        with contextlib.suppress(Exception):
            if self._device is not None:
                self._device.close()

        with self._lock:
            self._device = None
            self._sinks.clear()
            self._initialized = False

        logger.info("Miniaudio output shut down")

    def _audio_generator(self) -> Any:
        """Generator that mixes all live sinks for the PlaybackDevice.

        The device sends the required number of frames via .send(), and
        the generator yields raw bytes (float32 interleaved) for each callback.
        """
        # First yield is a no-op to prime the generator
        required_frames = yield b""

        while True:
            outdata = np.zeros((required_frames, self._num_channels), dtype=np.float32)

            with self._lock:
                if self._master_volume > 0.0:
                    self._mix_locked(outdata)

            np.clip(outdata, -1.0, 1.0, out=outdata)
            required_frames = yield outdata.tobytes()
