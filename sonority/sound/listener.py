"""Listener component describing where sounds are heard from."""

from __future__ import annotations

from dataclasses import dataclass

from sonority import config
from sonority.types import Vec3


@dataclass
class AudioListener:
    """The pair of ears every spatial sink is rendered for.

    Attributes:
        left_ear: World position of the left ear
        right_ear: World position of the right ear
    """

    left_ear: Vec3 = config.DEFAULT_LEFT_EAR
    right_ear: Vec3 = config.DEFAULT_RIGHT_EAR

    @classmethod
    def at(
        cls, position: Vec3, ear_offset: float = config.EAR_OFFSET
    ) -> AudioListener:
        """Build a listener centered on ``position`` facing down the -Z axis."""
        x, y, z = position
        return cls(left_ear=(x - ear_offset, y, z), right_ear=(x + ear_offset, y, z))

    def move_to(self, position: Vec3, ear_offset: float = config.EAR_OFFSET) -> None:
        """Recenter both ears on ``position``, keeping them on the X axis."""
        x, y, z = position
        self.left_ear = (x - ear_offset, y, z)
        self.right_ear = (x + ear_offset, y, z)
