"""Audio outputs.

The device-backed outputs are imported from their own modules so that
importing the mixer never loads a device library.
"""

from .mixer import MixerOutput, MixerSink

__all__ = ["MixerOutput", "MixerSink"]
