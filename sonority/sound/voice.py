"""Voices: one playing spatial channel plus its cancellation flag."""

from __future__ import annotations

import threading
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .audio_backend import SpatialSink
    from .decoder import DecodedStream


class CancelFlag:
    """A stop request shared between the tick thread and the audio thread.

    Only the first ``set()`` has an effect; later calls are no-ops.
    """

    __slots__ = ("_event", "_lock")

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()

    def set(self) -> bool:
        """Request cancellation.

        Returns:
            True if this call raised the flag, False if it was already set
        """
        with self._lock:
            if self._event.is_set():
                return False
            self._event.set()
            return True

    def is_set(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancelFlag(set={self.is_set()})"


class VoiceState(Enum):
    """Lifecycle of a voice. FINISHED and CANCELLED are terminal."""

    IDLE = auto()
    PLAYING = auto()
    FINISHED = auto()
    CANCELLED = auto()


TERMINAL_STATES = frozenset({VoiceState.FINISHED, VoiceState.CANCELLED})


class Voice:
    """A single-use pairing of a sink and the flag that can stop it.

    A voice plays exactly one stream. Once it has finished or been cancelled
    it never plays again; the next stream needs a fresh voice.

    Attributes:
        sink: Playback handle owned by the audio output
        cancel_flag: Shared flag polled by the playback side
        stream: The stream bound to this voice, if any
    """

    def __init__(
        self, sink: SpatialSink, cancel_flag: CancelFlag | None = None
    ) -> None:
        self.sink = sink
        self.cancel_flag = cancel_flag if cancel_flag is not None else CancelFlag()
        self.stream: DecodedStream | None = None
        self._state = VoiceState.IDLE

    @property
    def state(self) -> VoiceState:
        """Current lifecycle state, refreshed from the flag and the sink.

        A sink that drained without being stopped played to the end, so a
        cancel request arriving after that does not turn it into CANCELLED.
        """
        if self._state in TERMINAL_STATES:
            return self._state
        playing = self._state is VoiceState.PLAYING
        if playing and self.sink.empty() and not self.sink.is_stopped():
            self._state = VoiceState.FINISHED
        elif self.cancel_flag.is_set():
            self._state = VoiceState.CANCELLED
        elif playing and self.sink.empty():
            # Stopped by the output itself, e.g. on shutdown.
            self._state = VoiceState.FINISHED
        return self._state

    def bind(self, stream: DecodedStream) -> None:
        """Start playing ``stream`` on this voice.

        Raises:
            RuntimeError: If the voice has already been used.
        """
        state = self.state
        if state is not VoiceState.IDLE:
            raise RuntimeError(f"Cannot bind a stream to a {state.name} voice")
        self.stream = stream
        self.sink.append(stream)
        self._state = VoiceState.PLAYING

    def cancel(self) -> bool:
        """Ask the playback side to stop this voice early.

        Returns:
            True if this call raised the cancellation flag
        """
        return self.cancel_flag.set()

    def is_done(self) -> bool:
        """Whether the voice reached a terminal state."""
        return self.state in TERMINAL_STATES

    def __repr__(self) -> str:
        return f"Voice(state={self.state.name})"
