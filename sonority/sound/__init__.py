"""Sound emission for Sonority."""

from .audio_backend import AudioOutput, SpatialSink
from .decoder import DecodedStream, DecoderError, decode
from .emitter import AudioEmitter, Picker
from .listener import AudioListener
from .loader import SourceLoader
from .play import play_once
from .source import Source
from .system import AudioSystem
from .voice import CancelFlag, Voice, VoiceState

__all__ = [
    "AudioEmitter",
    "AudioListener",
    "AudioOutput",
    "AudioSystem",
    "CancelFlag",
    "DecodedStream",
    "DecoderError",
    "Picker",
    "Source",
    "SourceLoader",
    "SpatialSink",
    "Voice",
    "VoiceState",
    "decode",
    "play_once",
]
