"""Raw encoded audio data shared between emitters and decoders."""

from __future__ import annotations

import io
from pathlib import Path


class Source:
    """An immutable buffer of encoded audio bytes.

    Cloning a Source is cheap: the clone shares the same underlying ``bytes``
    object instead of copying it. The buffer lives as long as any clone, or
    any decoded stream holding one, is still referenced.

    No validation happens here. Whether the bytes are playable audio is
    decided by the decoder.
    """

    __slots__ = ("_data",)

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)

    @classmethod
    def from_file(cls, file_path: Path | str) -> Source:
        """Read a whole file into a new Source."""
        return cls(Path(file_path).read_bytes())

    @property
    def data(self) -> bytes:
        """The encoded bytes."""
        return self._data

    def cursor(self) -> io.BytesIO:
        """Return a fresh readable cursor positioned at the start of the data."""
        return io.BytesIO(self._data)

    def clone(self) -> Source:
        """Return a new Source sharing this one's buffer."""
        clone = Source.__new__(Source)
        clone._data = self._data
        return clone

    def __copy__(self) -> Source:
        return self.clone()

    def __deepcopy__(self, memo: dict[int, object]) -> Source:
        # Immutable, so a deep copy can share the buffer too
        return self.clone()

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Source({len(self._data)} bytes)"
