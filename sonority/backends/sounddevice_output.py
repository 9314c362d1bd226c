"""SoundDevice output implementation using a single mixed PortAudio stream."""

from __future__ import annotations

import contextlib
import logging
from typing import Any

import numpy as np
import sounddevice as sd

from sonority import config

from .mixer import MixerOutput

logger = logging.getLogger(__name__)


class SoundDeviceOutput(MixerOutput):
    """Audio output using sounddevice's PortAudio output stream."""

    def __init__(self, device: int | str | None = None) -> None:
        """Initialize the sounddevice output.

        Args:
            device: PortAudio device index or name, or None for the default.
        """
        super().__init__()
        self._device = device
        self._stream: sd.OutputStream | None = None
        self._pending_callback_status: sd.CallbackFlags | None = None

    def initialize(
        self,
        sample_rate: int = config.AUDIO_SAMPLE_RATE,
        channels: int = config.AUDIO_OUTPUT_CHANNELS,
    ) -> None:
        """Open the output stream and start mixing."""
        if self._initialized:
            logger.warning("Audio output already initialized")
            return
        if channels not in (1, 2):
            raise ValueError(f"Unsupported output channel count: {channels}")

        self._sample_rate = sample_rate
        self._num_channels = channels

        try:
            self._stream = sd.OutputStream(
                samplerate=sample_rate,
                channels=channels,
                dtype=np.float32,
                device=self._device,
                callback=self._audio_callback,
            )
            self._stream.start()
            self._initialized = True
            logger.info(
                "Sounddevice output initialized: %sHz, %s channels",
                sample_rate,
                channels,
            )
        except Exception:
            with contextlib.suppress(Exception):
                if self._stream is not None:
                    self._stream.close()
            self._stream = None
            logger.exception("Failed to initialize sounddevice output")
            raise

    def shutdown(self) -> None:
        """Stop all sinks and close the output stream."""
        if not self._initialized:
            return

        self.stop_all_sinks()

        with contextlib.suppress(Exception):
            if self._stream is not None:
                self._stream.stop()
        with contextlib.suppress(Exception):
            if self._stream is not None:
                self._stream.close()

        with self._lock:
            self._stream = None
            self._sinks.clear()
            self._initialized = False

        logger.info("Sounddevice output shut down")

    def update(self) -> None:
        """Update the output.

        The stream is callback-driven. This method only reports deferred
        callback status so callback code can stay realtime-safe.
        """
        callback_status: sd.CallbackFlags | None = None
        with self._lock:
            callback_status = self._pending_callback_status
            self._pending_callback_status = None
        if callback_status:
            logger.debug("Sounddevice callback status: %s", callback_status)

    def _audio_callback(
        self,
        outdata: np.ndarray,
        frames: int,
        _time: Any,
        status: sd.CallbackFlags,
    ) -> None:
        """PortAudio callback that mixes all live sinks."""
        outdata.fill(0.0)
        with self._lock:
            # Never log from the realtime callback thread.
            if status:
                self._pending_callback_status = status
            if self._master_volume <= 0.0:
                return

            self._mix_locked(outdata)

        np.clip(outdata, -1.0, 1.0, out=outdata)
