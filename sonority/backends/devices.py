"""Discovery of the audio output devices available on this machine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import sounddevice as sd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputDevice:
    """An audio device able to play sound.

    Attributes:
        index: PortAudio device index, usable as ``SoundDeviceOutput(device=...)``
        name: Human-readable device name
        max_output_channels: Number of output channels the device supports
        default_sample_rate: Device's preferred sample rate in Hz
    """

    index: int
    name: str
    max_output_channels: int
    default_sample_rate: float

    @classmethod
    def from_info(cls, info: dict[str, Any]) -> OutputDevice:
        return cls(
            index=int(info["index"]),
            name=str(info["name"]),
            max_output_channels=int(info["max_output_channels"]),
            default_sample_rate=float(info["default_samplerate"]),
        )


def output_devices() -> list[OutputDevice]:
    """List every device with at least one output channel."""
    return [
        OutputDevice.from_info(info)
        for info in sd.query_devices()
        if info["max_output_channels"] > 0
    ]


def default_output_device() -> OutputDevice | None:
    """Return the system's default output device, or None if there is none."""
    try:
        info = sd.query_devices(kind="output")
    except sd.PortAudioError as e:
        logger.warning(f"No default output device: {e}")
        return None
    return OutputDevice.from_info(info)
