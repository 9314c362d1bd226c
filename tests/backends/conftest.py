from __future__ import annotations

# sounddevice loads the PortAudio shared library at import time; Linux wheels
# do not bundle it, so those modules cannot even be collected without it.
try:
    import sounddevice  # noqa: F401
except OSError:
    collect_ignore = ["test_devices.py", "test_sounddevice_output.py"]
