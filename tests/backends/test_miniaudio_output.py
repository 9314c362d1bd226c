"""Unit tests for the miniaudio output."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from sonority.backends.miniaudio_output import MiniaudioOutput
from sonority.sound.decoder import DecodedStream
from sonority.sound.source import Source
from sonority.sound.voice import CancelFlag


def _make_output_for_tests(num_channels: int = 2) -> MiniaudioOutput:
    """Create an output instance without opening audio devices."""
    output = MiniaudioOutput()
    output._num_channels = num_channels
    output._sample_rate = 44100
    return output


def _stream(data: np.ndarray) -> DecodedStream:
    return DecodedStream(
        data=data.astype(np.float32).reshape(-1, 1),
        sample_rate=44100,
        channels=1,
        source=Source(b""),
    )


class TestAudioGenerator:
    """Tests for the _audio_generator mixing path."""

    def test_audio_generator_mixes_sinks_into_bytes(self) -> None:
        """The generator should mix sinks and yield raw float32 bytes."""
        output = _make_output_for_tests(num_channels=2)
        sink = output.create_sink(CancelFlag(), spatial=False)
        sink.append(_stream(np.full(4, 0.5)))

        gen = output._audio_generator()
        next(gen)  # Prime the generator
        result = gen.send(4)

        assert isinstance(result, bytes)
        # 4 frames * 2 channels * 4 bytes (float32) = 32 bytes
        assert len(result) == 32
        samples = np.frombuffer(result, dtype=np.float32).reshape(4, 2)
        np.testing.assert_allclose(samples, np.full((4, 2), 0.5))

    def test_audio_generator_yields_silence_when_nothing_plays(self) -> None:
        """Test the generator yields silence with no live sinks."""
        output = _make_output_for_tests(num_channels=2)

        gen = output._audio_generator()
        next(gen)
        result = gen.send(3)

        samples = np.frombuffer(result, dtype=np.float32).reshape(3, 2)
        np.testing.assert_allclose(samples, np.zeros((3, 2)))

    def test_audio_generator_respects_master_volume(self) -> None:
        """Test the generator output scales with master volume."""
        output = _make_output_for_tests(num_channels=2)
        output.set_master_volume(0.5)
        sink = output.create_sink(CancelFlag(), spatial=False)
        sink.append(_stream(np.ones(2)))

        gen = output._audio_generator()
        next(gen)
        result = gen.send(2)

        samples = np.frombuffer(result, dtype=np.float32).reshape(2, 2)
        np.testing.assert_allclose(samples, np.full((2, 2), 0.5))


class TestMiniaudioLifecycle:
    """Tests for device open/close handling."""

    @patch("sonority.backends.miniaudio_output.miniaudio.PlaybackDevice")
    def test_initialize_starts_device(self, device_cls: MagicMock) -> None:
        """Test initialize opens and starts a playback device."""
        output = MiniaudioOutput()

        output.initialize(sample_rate=48000, channels=2)

        device_cls.assert_called_once()
        assert device_cls.call_args.kwargs["sample_rate"] == 48000
        device_cls.return_value.start.assert_called_once()
        assert output.sample_rate == 48000
        assert output._initialized

    @patch("sonority.backends.miniaudio_output.miniaudio.PlaybackDevice")
    def test_initialize_failure_is_reraised(self, device_cls: MagicMock) -> None:
        """Test a failing device start is logged and re-raised."""
        device_cls.return_value.start.side_effect = RuntimeError("no device")
        output = MiniaudioOutput()

        with pytest.raises(RuntimeError):
            output.initialize()

        device_cls.return_value.close.assert_called_once()
        assert not output._initialized
        assert output._device is None

    @patch("sonority.backends.miniaudio_output.miniaudio.PlaybackDevice")
    def test_shutdown_closes_device_and_stops_sinks(
        self, device_cls: MagicMock
    ) -> None:
        """Test shutdown closes the device and stops every sink."""
        output = MiniaudioOutput()
        output.initialize()
        sink = output.create_sink(CancelFlag())
        sink.append(_stream(np.ones(10)))

        output.shutdown()

        device_cls.return_value.close.assert_called_once()
        assert sink.is_stopped()
        assert output._sinks == []
        assert not output._initialized

    def test_shutdown_on_uninitialized_output_is_safe(self) -> None:
        """Test shutdown is a no-op before initialize."""
        MiniaudioOutput().shutdown()
