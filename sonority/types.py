from __future__ import annotations

from typing import NewType, TypeAlias

# =============================================================================
# ENTITY TYPES
# =============================================================================

# Opaque entity identifier handed out by the ECS world.
EntityId: TypeAlias = int

# =============================================================================
# SPATIAL TYPES
# =============================================================================

# World-space position in the listener's coordinate system.
Vec3: TypeAlias = tuple[float, float, float]  # Example: (2.0, 0.0, -1.5)

# Left/right linear gain pair applied to a mono signal.
StereoGain: TypeAlias = tuple[float, float]

# =============================================================================
# TIME-RELATED TYPES
# =============================================================================

# Real-world time elapsed between two ticks of the audio system, in seconds.
DeltaTime = NewType("DeltaTime", float)
