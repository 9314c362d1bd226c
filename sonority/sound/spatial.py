"""Per-ear gain computation for positional audio."""

from __future__ import annotations

import math

from sonority.types import StereoGain, Vec3


def _ear_gain(own_distance: float, other_distance: float, ear_span: float) -> float:
    # Inverse square falloff, capped at unity inside one unit of distance
    if own_distance <= 1.0:
        distance_factor = 1.0
    else:
        distance_factor = 1.0 / (own_distance * own_distance)

    if ear_span <= 0.0:
        return distance_factor

    # 1.0 when the source sits on this ear, 0.5 when it sits on the other one
    direction_factor = ((other_distance - own_distance) / ear_span + 1.0) / 4.0 + 0.5
    return distance_factor * max(0.0, min(1.0, direction_factor))


def ear_gains(emitter: Vec3, left_ear: Vec3, right_ear: Vec3) -> StereoGain:
    """Compute the (left, right) gain of a sound heard by two ears.

    Args:
        emitter: Position of the sound source
        left_ear: Position of the listener's left ear
        right_ear: Position of the listener's right ear

    Returns:
        Linear gains (0.0 to 1.0) for the left and right channel
    """
    left_distance = math.dist(emitter, left_ear)
    right_distance = math.dist(emitter, right_ear)
    ear_span = math.dist(left_ear, right_ear)
    return (
        _ear_gain(left_distance, right_distance, ear_span),
        _ear_gain(right_distance, left_distance, ear_span),
    )
