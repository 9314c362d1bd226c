from __future__ import annotations

import pytest

from sonority.backends.mixer import MixerOutput
from sonority.sound.system import AudioSystem


@pytest.fixture
def mixer_output() -> MixerOutput:
    """A headless output at 44.1kHz stereo."""
    output = MixerOutput()
    output.initialize(sample_rate=44100, channels=2)
    return output


@pytest.fixture
def audio_system(mixer_output: MixerOutput) -> AudioSystem:
    """An audio system rendering through the headless mixer."""
    return AudioSystem(output=mixer_output)
