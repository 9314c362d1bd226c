"""System that drives every audio emitter once per tick."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from sonority import config
from sonority.types import DeltaTime

from .emitter import AudioEmitter
from .listener import AudioListener
from .voice import CancelFlag, Voice

if TYPE_CHECKING:
    from sonority.ecs import World

    from .audio_backend import AudioOutput

logger = logging.getLogger(__name__)


class AudioSystem:
    """Moves queued sounds onto voices and keeps voices positioned.

    The AudioSystem is responsible for:
    - Dropping voices that finished or were cancelled
    - Asking an idle emitter's picker for more sounds
    - Starting queued sounds, oldest first, on fresh voices
    - Pushing emitter and listener positions to every live sink
    """

    def __init__(
        self,
        output: AudioOutput | None = None,
        max_voices_per_emitter: int | None = config.MAX_VOICES_PER_EMITTER,
    ) -> None:
        """Initialize the audio system.

        Args:
            output: Output that renders voices. Without one, sounds stay queued.
            max_voices_per_emitter: Voice limit per emitter, None for no limit
        """
        if max_voices_per_emitter is not None and max_voices_per_emitter < 1:
            raise ValueError(
                "max_voices_per_emitter must be at least 1, "
                f"got {max_voices_per_emitter}"
            )
        self.output = output
        self.max_voices_per_emitter = max_voices_per_emitter
        self.listener = AudioListener()
        self.current_time: float = 0.0

    def set_output(self, output: AudioOutput | None) -> None:
        """Set or clear the output used for new voices."""
        self.output = output
        if output is not None:
            logger.info(f"Audio output set: {type(output).__name__}")

    def set_listener(self, listener: AudioListener) -> None:
        self.listener = listener

    def run(self, world: World, delta_time: DeltaTime) -> None:
        """Update every emitter stored in ``world``, in entity order."""
        self.update(world.storage(AudioEmitter).values(), delta_time)

    def update(self, emitters: Iterable[AudioEmitter], delta_time: DeltaTime) -> None:
        """Advance all given emitters by one tick.

        Args:
            emitters: Emitters to process
            delta_time: Time elapsed since last update in seconds
        """
        self.current_time += delta_time

        for emitter in emitters:
            self._update_emitter(emitter)

        if self.output is not None:
            self.output.update()

    def reset(self) -> None:
        """Reset the system's clock and listener."""
        self.current_time = 0.0
        self.listener = AudioListener()
        logger.info("Audio system reset")

    def _update_emitter(self, emitter: AudioEmitter) -> None:
        emitter.voices[:] = [voice for voice in emitter.voices if not voice.is_done()]

        if not emitter.voices and not emitter.pending_queue:
            self._invoke_picker(emitter)

        self._start_queued_sounds(emitter)
        self._sync_positions(emitter)

    def _invoke_picker(self, emitter: AudioEmitter) -> None:
        """Run the emitter's picker detached from the emitter.

        The picker is reattached only if it returns True and did not install
        a replacement while it ran. A picker that raises stays detached.
        """
        picker = emitter.take_picker()
        if picker is None:
            return

        try:
            keep = picker(emitter)
        except Exception:
            logger.exception("Picker raised, detaching it from its emitter")
            return

        if keep and emitter.picker is None:
            emitter.picker = picker
        elif not keep:
            logger.debug("Picker detached itself")

    def _has_voice_capacity(self, emitter: AudioEmitter) -> bool:
        if self.max_voices_per_emitter is None:
            return True
        return len(emitter.voices) < self.max_voices_per_emitter

    def _start_queued_sounds(self, emitter: AudioEmitter) -> None:
        if self.output is None:
            return

        while emitter.pending_queue and self._has_voice_capacity(emitter):
            cancel_flag = CancelFlag()
            voice = Voice(self.output.create_sink(cancel_flag), cancel_flag)
            stream = emitter.pending_queue.popleft()
            voice.bind(stream)
            emitter.voices.append(voice)
            logger.debug(
                f"Started voice: {stream.frame_count} frames at "
                f"{stream.sample_rate}Hz ({len(emitter.pending_queue)} still queued)"
            )

    def _sync_positions(self, emitter: AudioEmitter) -> None:
        for voice in emitter.voices:
            voice.sink.set_emitter_position(emitter.position)
            voice.sink.set_left_ear_position(self.listener.left_ear)
            voice.sink.set_right_ear_position(self.listener.right_ear)
