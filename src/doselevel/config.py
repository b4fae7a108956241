"""
doselevel configuration.
Settings via environment variables with sensible defaults.
"""

import os

# --- Level chart ---
PROJECTION_DAYS: int = int(os.getenv("DOSELEVEL_PROJECTION_DAYS", "7"))  # forward projection after "now"

# --- Viewer ---
DEFAULT_WEEKS: int = int(os.getenv("DOSELEVEL_DEFAULT_WEEKS", "8"))  # simulated regimen length

# --- Logging ---
LOG_LEVEL: str = os.getenv("DOSELEVEL_LOG_LEVEL", "WARNING").upper()
