"""Audio emitter component for entities."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeAlias

from sonority.ecs import BTreeStorage, Component
from sonority.types import Vec3

from .decoder import DecodedStream, decode

if TYPE_CHECKING:
    from .source import Source
    from .voice import Voice

Picker: TypeAlias = "Callable[[AudioEmitter], bool]"


class AudioEmitter(Component):
    """An audio source; add this component to anything that emits sound.

    Sounds passed to ``play`` are decoded immediately and wait in
    ``pending_queue`` until the AudioSystem moves them, in order, onto voices.

    An emitter's picker is called by the AudioSystem whenever the emitter runs
    out of sounds to play. During the call the picker is detached from the
    emitter, so it can freely mutate the emitter (including calling ``play``)
    without ever being invoked re-entrantly. If the picker returns True it is
    reattached afterwards; if it returns False it is dropped.

    Attributes:
        voices: Voices started for this emitter, oldest first
        pending_queue: Decoded streams waiting for a voice, in play order
        picker: Refill callback, or None
        position: World position of the emitter
    """

    storage_type = BTreeStorage

    def __init__(self, position: Vec3 = (0.0, 0.0, 0.0)) -> None:
        self.voices: list[Voice] = []
        self.pending_queue: deque[DecodedStream] = deque()
        self.picker: Picker | None = None
        self.position = position

    def play(self, source: Source) -> None:
        """Queue a sound to be played from this emitter.

        Raises:
            DecoderError: If ``source`` cannot be decoded. The queue is left
                untouched.
        """
        self.pending_queue.append(decode(source.clone()))

    def set_picker(self, picker: Picker) -> None:
        """Install ``picker``, replacing any previous one."""
        self.picker = picker

    def clear_picker(self) -> None:
        """Clears the previously set picker."""
        self.picker = None

    def take_picker(self) -> Picker | None:
        """Detach and return the picker, leaving the emitter without one."""
        picker, self.picker = self.picker, None
        return picker

    def set_position(self, position: Vec3) -> None:
        self.position = position

    def is_idle(self) -> bool:
        """True when nothing is playing and nothing is waiting to play."""
        if self.pending_queue:
            return False
        return all(voice.is_done() for voice in self.voices)

    def stop(self) -> None:
        """Request every voice of this emitter to stop early."""
        for voice in self.voices:
            voice.cancel()

    def close(self) -> None:
        """Cancel all voices and drop any queued sounds."""
        self.stop()
        self.pending_queue.clear()

    def on_remove(self) -> None:
        self.close()
