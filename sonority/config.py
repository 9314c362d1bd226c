"""
Configuration constants.

Centralizes the tunable values of the audio layer.
Organized by functional area for easy maintenance.
"""

import sys

from sonority.types import Vec3

# =============================================================================
# GENERAL
# =============================================================================

# Test environment detection
IS_TEST_ENVIRONMENT = "pytest" in sys.modules

# =============================================================================
# AUDIO OUTPUT
# =============================================================================

# Device stream format
AUDIO_SAMPLE_RATE = 44100
AUDIO_OUTPUT_CHANNELS = 2  # 1=mono, 2=stereo

# Initial master volume for every output (0.0-1.0)
AUDIO_MASTER_VOLUME = 1.0

# Frames decoded streams are split into when iterated block by block
AUDIO_BLOCK_FRAMES = 1024

# =============================================================================
# EMITTERS
# =============================================================================

# Maximum simultaneous voices per emitter. None means unbounded; sounds that
# do not fit wait in the emitter's queue, nothing is evicted.
MAX_VOICES_PER_EMITTER: int | None = None

# =============================================================================
# LISTENER
# =============================================================================

# Default ear positions, relative to the world origin
DEFAULT_LEFT_EAR: Vec3 = (-1.0, 0.0, 0.0)
DEFAULT_RIGHT_EAR: Vec3 = (1.0, 0.0, 0.0)

# Distance of each ear from the listener's center when built from a position
EAR_OFFSET = 1.0
